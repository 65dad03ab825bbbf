# jolt_sdk/cli.py
# SPDX-License-Identifier: Apache-2.0
"""
Jolt SDK CLI

Lightweight entrypoint to convert between plain JSON and Jolt.

    jolt-sdk encode [--mode M] [--pretty] [FILE]
    jolt-sdk decode [--mode M] [--kind KIND] [--pretty] [FILE]

Input is read from FILE or stdin, output goes to stdout. Codec failures are
printed to stderr as an error envelope.
"""

from __future__ import annotations

import argparse
import datetime
import json
import logging
import os
import sys
from typing import Any, List, Optional, TextIO

from jolt_sdk.core.error_context import attach_context
from jolt_sdk.jolt.codec import JoltCodec
from jolt_sdk.jolt.errors import JoltError, error_envelope
from jolt_sdk.jolt.scalars import encode_binary, encode_duration, encode_instant
from jolt_sdk.jolt.sigil import ValueKind
from jolt_sdk.jolt.types import IsoDuration, Node, Path, Point, Relationship

LOG = logging.getLogger("jolt_sdk.cli")

# Configuration from environment (read when the parser is built)
MODE_ENV = "JOLT_MODE"
LOG_LEVEL_ENV = "JOLT_LOG_LEVEL"

EXIT_OK = 0
EXIT_CODEC_ERROR = 1
EXIT_USAGE = 2


class UsageError(Exception):
    """Input the CLI cannot hand to the codec."""


# --------------------------------------------------------------------------- #
# Internal helpers
# --------------------------------------------------------------------------- #

def _read_input(path: Optional[str], stdin: TextIO) -> str:
    if not path or path == "-":
        return stdin.read()
    with open(path, "r", encoding="utf-8") as fh:
        return fh.read()


def to_plain(value: Any) -> Any:
    """Render a decoded value as plain JSON-compatible data."""
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, (bytes, bytearray, memoryview)):
        return encode_binary(value)
    if isinstance(value, (datetime.date, datetime.time)):
        return encode_instant(value)
    if isinstance(value, (IsoDuration, datetime.timedelta)):
        return encode_duration(value)
    if isinstance(value, Point):
        out = {"srid": value.srid, "x": value.x, "y": value.y}
        if value.is_3d:
            out["z"] = value.z
        return out
    if isinstance(value, Node):
        return {
            "id": value.id,
            "labels": list(value.labels),
            "properties": to_plain(value.properties),
        }
    if isinstance(value, Relationship):
        return {
            "id": value.id,
            "type": value.type,
            "startNodeId": value.start_node_id,
            "endNodeId": value.end_node_id,
            "properties": to_plain(value.properties),
        }
    if isinstance(value, Path):
        return {"elements": [to_plain(e) for e in value.elements]}
    if isinstance(value, (list, tuple)):
        return [to_plain(v) for v in value]
    if isinstance(value, dict):
        return {k: to_plain(v) for k, v in value.items()}
    return str(value)


def _dump(data: Any, pretty: bool) -> str:
    if pretty:
        return json.dumps(data, indent=2, ensure_ascii=False)
    return json.dumps(data, separators=(",", ":"), ensure_ascii=False)


def _run_encode(codec: JoltCodec, text: str, pretty: bool) -> str:
    try:
        value = json.loads(text)
    except ValueError as e:
        raise UsageError(f"input is not valid JSON: {e}") from e
    return codec.encode(value, indent=2 if pretty else None)


def _run_decode(codec: JoltCodec, text: str, kind: Optional[str], pretty: bool) -> str:
    return _dump(to_plain(codec.decode(text, kind)), pretty)


def _usage_error(message: str) -> int:
    print(f"error: {message}", file=sys.stderr)
    return EXIT_USAGE


# --------------------------------------------------------------------------- #
# main
# --------------------------------------------------------------------------- #

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="jolt-sdk",
        description="Jolt SDK CLI - convert between plain JSON and Jolt",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  echo '["A", 21, 42.3]' | jolt-sdk encode --mode strict
  jolt-sdk decode payload.json
  echo '{"T":"P42D"}' | jolt-sdk decode --kind duration

Configuration (environment variables):
  JOLT_MODE=strict        Default mode (default: sparse)
  JOLT_LOG_LEVEL=DEBUG    Log level (default: WARNING)
        """.strip(),
    )
    parser.add_argument(
        "--log-level",
        default=os.environ.get(LOG_LEVEL_ENV, "WARNING"),
        help="Logging level (default: %(default)s)",
    )

    subparsers = parser.add_subparsers(
        dest="command",
        required=True,
        help="command to execute",
        metavar="COMMAND",
    )

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--mode",
        default=os.environ.get(MODE_ENV, "sparse"),
        help="Jolt mode: strict or sparse (default: %(default)s)",
    )
    common.add_argument(
        "--pretty", action="store_true",
        help="Indent the output",
    )
    common.add_argument(
        "file", nargs="?", default=None,
        help="Input file (default: stdin)",
    )

    subparsers.add_parser(
        "encode", parents=[common],
        help="Encode plain JSON as Jolt",
    )
    decode_parser = subparsers.add_parser(
        "decode", parents=[common],
        help="Decode Jolt into plain JSON",
    )
    decode_parser.add_argument(
        "--kind",
        choices=[k.value for k in ValueKind],
        default=None,
        help="Required value kind (default: whatever the sigil says)",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    try:
        args = parser.parse_args(sys.argv[1:] if argv is None else argv)
    except SystemExit as e:
        return e.code

    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.WARNING),
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        text = _read_input(args.file, sys.stdin)
    except OSError as e:
        return _usage_error(f"cannot read {args.file}: {e}")

    codec = JoltCodec(args.mode)
    try:
        if args.command == "encode":
            out = _run_encode(codec, text, args.pretty)
        else:
            out = _run_decode(codec, text, args.kind, args.pretty)
    except UsageError as e:
        return _usage_error(str(e))
    except JoltError as e:
        attach_context(e, "cli", command=args.command)
        LOG.debug("%s failed", args.command, exc_info=True)
        print(_dump(error_envelope(e), pretty=False), file=sys.stderr)
        return EXIT_CODEC_ERROR

    print(out)
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
