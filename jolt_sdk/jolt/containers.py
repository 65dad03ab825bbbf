# jolt_sdk/jolt/containers.py
# SPDX-License-Identifier: Apache-2.0
"""
List and map payloads.

Both are recursive: every element (or entry value) goes back through full
kind dispatch on the codec, so heterogeneous lists and nested maps carry a
sigil per value.

    {"[]": [{"U": "A"}, {"Z": "21"}, {"R": "42.3"}]}
    {"{}": {"age": {"Z": "33"}, "name": {"U": "Alice"}}}

Functions here only read/write the *payload*; the surrounding sigil struct
is handled by the codec.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Mapping, Optional, Type

from .errors import (
    DecodeError,
    PayloadFormatError,
    StructureExpected,
    UnsupportedBareListElement,
    UnsupportedType,
)
from .sigil import ValueKind
from .tokens import JsonToken, Token, TokenReader, TokenWriter

if TYPE_CHECKING:
    from .codec import JoltCodec


def expect_token(
    reader: TokenReader,
    kind: JsonToken,
    message: str,
    *,
    error: Type[DecodeError] = PayloadFormatError,
    **details: Any,
) -> Token:
    """Consume the next token and fail with ``error`` unless it is ``kind``."""
    token = reader.next_token()
    if token is None or token.kind is not kind:
        found = "end of input" if token is None else token.describe()
        raise error(f"{message} (found {found})", details=details or None)
    return token


# =============================================================================
# Lists
# =============================================================================

def write_list_payload(codec: "JoltCodec", writer: TokenWriter, values: Iterable[Any]) -> None:
    writer.write_start_array()
    for value in values:
        codec.write_value(writer, value)
    writer.write_end_array()


def read_list_payload(
    codec: "JoltCodec",
    reader: TokenReader,
    kind: Optional[ValueKind] = None,
) -> List[Any]:
    """
    Read a JSON array of sigil structs.

    ``kind`` restricts every element to one kind (typed arrays); None lets
    each element's sigil decide.
    """
    expect_token(reader, JsonToken.START_ARRAY, "Jolt list type must be expressed as an array")
    result: List[Any] = []
    while True:
        token = reader.peek()
        if token is None:
            raise StructureExpected("unterminated list")
        if token.kind is JsonToken.END_ARRAY:
            reader.next_token()
            return result
        if token.kind is not JsonToken.START_OBJECT and not codec.accepts_bare(token, kind):
            raise UnsupportedBareListElement(
                f"list element {len(result)} is not wrapped in a sigil struct: {token.describe()}",
                details={"index": len(result), "expected_kind": kind.value if kind else None},
            )
        result.append(codec.read_value(reader, kind))


# =============================================================================
# Maps
# =============================================================================

def write_map_payload(codec: "JoltCodec", writer: TokenWriter, entries: Mapping[str, Any]) -> None:
    writer.write_start_object()
    for key, value in (entries or {}).items():
        if not isinstance(key, str):
            raise UnsupportedType(
                f"map keys must be strings, got {type(key).__name__}",
                details={"type": type(key).__name__},
            )
        writer.write_field_name(key)
        codec.write_value(writer, value)
    writer.write_end_object()


def read_map_payload(codec: "JoltCodec", reader: TokenReader) -> Dict[str, Any]:
    expect_token(reader, JsonToken.START_OBJECT, "Jolt map type must be expressed as an object")
    result: Dict[str, Any] = {}
    while True:
        token = reader.next_token()
        if token is None:
            raise StructureExpected("unterminated map")
        if token.kind is JsonToken.END_OBJECT:
            return result
        if token.kind is not JsonToken.FIELD_NAME:
            raise PayloadFormatError(f"expected a map key, found {token.describe()}")
        if token.value in result:
            raise PayloadFormatError(f"duplicate map key {token.value!r}", details={"key": token.value})
        result[token.value] = codec.read_value(reader)


__all__ = [
    "expect_token",
    "write_list_payload",
    "read_list_payload",
    "write_map_payload",
    "read_map_payload",
]
