"""Primitive codec, wire types and configuration."""
