"""Text codec and subscription payloads."""
