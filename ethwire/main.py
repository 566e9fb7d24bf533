"""
ethwire: inspect JSON-RPC payloads.

Reads a JSON document from a file or stdin, decodes it as the requested
target and prints the canonical re-encoding.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Optional

from ethwire.common.config import CodecConfig, ProtocolRevision
from ethwire.common.errors import DecodeError
from ethwire.common.types import CALL_VARIANTS, MESSAGE_VARIANTS, Transaction
from ethwire.rpc.codec import TARGETS, decode, encode

logger = logging.getLogger("ethwire")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ethwire",
        description="Decode and canonically re-encode Ethereum JSON-RPC payloads",
    )
    parser.add_argument(
        "input",
        nargs="?",
        default="-",
        help="Path to a JSON file, or - for stdin (default: -)",
    )
    parser.add_argument(
        "--target",
        choices=TARGETS,
        default="transaction",
        help="Type to decode the payload as (default: transaction)",
    )
    parser.add_argument(
        "--protocol-revision",
        choices=[r.value for r in ProtocolRevision],
        default=ProtocolRevision.CURRENT.value,
        help="Subscription vocabulary (default: current)",
    )
    parser.add_argument(
        "--strict-calls",
        action="store_true",
        help="Reject call requests that do not identify their variant",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="WARNING",
        help="Logging level (default: WARNING)",
    )
    return parser


def _describe(value: object) -> str:
    if isinstance(value, Transaction):
        return f"Transaction[{value.message.VARIANT}]"
    if isinstance(value, MESSAGE_VARIANTS + CALL_VARIANTS):
        return f"{type(value).__name__}[{value.VARIANT}]"
    return type(value).__name__


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    config = CodecConfig(
        protocol_revision=ProtocolRevision(args.protocol_revision),
        require_call_discriminator=args.strict_calls,
    )

    if args.input == "-":
        text = sys.stdin.buffer.read()
    else:
        try:
            with open(args.input, "rb") as f:
                text = f.read()
        except OSError as exc:
            logger.error("Cannot read %s: %s", args.input, exc)
            return 1

    try:
        value = decode(text, args.target, config)
    except DecodeError as exc:
        logger.error("Decode failed: %s", exc)
        print(json.dumps(exc.to_rpc_error()), file=sys.stderr)
        return 1

    logger.info("Decoded %s", _describe(value))
    print(encode(value, config))
    return 0


if __name__ == "__main__":
    sys.exit(main())
