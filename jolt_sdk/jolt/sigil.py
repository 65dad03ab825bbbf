# jolt_sdk/jolt/sigil.py
# SPDX-License-Identifier: Apache-2.0
"""
Sigil registry: the bidirectional mapping between value kinds and the short
literals ("sigils") used as single keys of Jolt structs.

    {"Z": "42"}        integer
    {"[]": [...]}      list
    {"()": {...}}      node

Kinds form a closed enumeration. Every kind owns exactly one literal, but a
kind may *encode* under another kind's literal: durations are written with
the instant sigil ``T`` and only carry their own literal ``TA`` on input.
Decoding ``T`` therefore starts from the instant candidate and relies on the
ambiguity resolver to reinterpret it (see ``resolver.py``).

The registry is immutable. One default instance is built at import time and
may be shared freely between codecs and threads.
"""

from __future__ import annotations

import datetime
from collections.abc import Mapping as MappingABC
from enum import Enum
from types import MappingProxyType
from typing import Any, Iterable, Mapping, Optional, Tuple

from .errors import UnknownTag, UnsupportedType
from .types import IsoDuration, Node, Path, Point, Relationship, ReversedRelationship


class ValueKind(str, Enum):
    """Closed set of value kinds a Jolt struct can carry."""
    NULL = "null"
    BOOLEAN = "boolean"
    INTEGER = "integer"
    WIDE_NUMBER = "wide_number"
    TEXT = "text"
    BINARY = "binary"
    LIST = "list"
    MAP = "map"
    INSTANT = "instant"
    DURATION = "duration"
    SPATIAL_POINT = "spatial_point"
    NODE = "node"
    RELATIONSHIP = "relationship"
    REVERSED_RELATIONSHIP = "reversed_relationship"
    PATH = "path"


class InstantKind(str, Enum):
    """Temporal profiles sharing the INSTANT kind."""
    DATE = "date"
    OFFSET_TIME = "offset_time"
    LOCAL_TIME = "local_time"
    ZONED_DATE_TIME = "zoned_date_time"
    LOCAL_DATE_TIME = "local_date_time"


# (kind, own literal, literal used when encoding)
DEFAULT_SIGILS: Tuple[Tuple[ValueKind, str, str], ...] = (
    (ValueKind.INTEGER, "Z", "Z"),
    (ValueKind.WIDE_NUMBER, "R", "R"),
    (ValueKind.TEXT, "U", "U"),
    (ValueKind.BINARY, "#", "#"),
    (ValueKind.LIST, "[]", "[]"),
    (ValueKind.MAP, "{}", "{}"),
    (ValueKind.INSTANT, "T", "T"),
    (ValueKind.DURATION, "TA", "T"),
    (ValueKind.SPATIAL_POINT, "@", "@"),
    (ValueKind.NODE, "()", "()"),
    (ValueKind.RELATIONSHIP, "->", "->"),
    (ValueKind.REVERSED_RELATIONSHIP, "<-", "<-"),
    (ValueKind.PATH, "..", ".."),
    (ValueKind.BOOLEAN, "?", "?"),
    (ValueKind.NULL, "", ""),
)


class SigilRegistry:
    """
    Immutable kind <-> sigil table.

    ``tag_for`` answers the literal to *write* for a kind (which may be an
    alias), ``kind_for`` the kind to *read* for a literal, and
    ``literal_for`` the kind's own literal.
    """

    def __init__(self, sigils: Iterable[Tuple[ValueKind, str, str]] = DEFAULT_SIGILS) -> None:
        own = {}
        written = {}
        kinds = {}
        for kind, literal, encoded_as in sigils:
            if literal in kinds:
                raise ValueError(f"duplicate sigil literal {literal!r}")
            own[kind] = literal
            written[kind] = encoded_as
            kinds[literal] = kind
        missing = [k.name for k in ValueKind if k not in own]
        if missing:
            raise ValueError(f"sigil table is missing kinds: {missing}")
        for kind, encoded_as in written.items():
            if encoded_as not in kinds:
                raise ValueError(f"{kind.name} encodes under unknown sigil {encoded_as!r}")

        self._own: Mapping[ValueKind, str] = MappingProxyType(own)
        self._written: Mapping[ValueKind, str] = MappingProxyType(written)
        self._kinds: Mapping[str, ValueKind] = MappingProxyType(kinds)

    def tag_for(self, kind: ValueKind, value: Any = None, policy: Any = None) -> str:
        """
        Sigil to write for ``kind``.

        Integral values do not have a fixed sigil: their effective kind
        depends on the magnitude, which the mode policy decides.
        """
        if policy is not None and kind in (ValueKind.INTEGER, ValueKind.WIDE_NUMBER) and _is_int(value):
            kind = policy.integral_kind(value)
        return self._written[kind]

    def kind_for(self, tag: str) -> ValueKind:
        literal = tag.strip()
        try:
            return self._kinds[literal]
        except KeyError:
            raise UnknownTag(
                f"Jolt does not support a named datatype '{literal}'",
                details={"tag": literal},
            ) from None

    def literal_for(self, kind: ValueKind) -> str:
        return self._own[kind]

    def is_shared(self, tag: str) -> bool:
        """True if more than one kind is written under ``tag``."""
        literal = tag.strip()
        return sum(1 for v in self._written.values() if v == literal) > 1

    def kinds(self) -> Tuple[ValueKind, ...]:
        return tuple(self._own)


DEFAULT_REGISTRY = SigilRegistry()


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def kind_of(value: Any) -> ValueKind:
    """
    Classify a Python value into its Jolt kind.

    All ints classify as INTEGER; whether they are written with the integer
    or the wide-number sigil is up to the mode policy.
    """
    if value is None:
        return ValueKind.NULL
    if isinstance(value, bool):
        return ValueKind.BOOLEAN
    if isinstance(value, int):
        return ValueKind.INTEGER
    if isinstance(value, float):
        return ValueKind.WIDE_NUMBER
    if isinstance(value, str):
        return ValueKind.TEXT
    if isinstance(value, (bytes, bytearray, memoryview)):
        return ValueKind.BINARY
    if isinstance(value, (list, tuple)):
        return ValueKind.LIST
    if isinstance(value, MappingABC):
        return ValueKind.MAP
    if isinstance(value, (datetime.date, datetime.time)):
        return ValueKind.INSTANT
    if isinstance(value, (IsoDuration, datetime.timedelta)):
        return ValueKind.DURATION
    if isinstance(value, Point):
        return ValueKind.SPATIAL_POINT
    if isinstance(value, Node):
        return ValueKind.NODE
    if isinstance(value, Relationship):
        return ValueKind.RELATIONSHIP
    if isinstance(value, ReversedRelationship):
        return ValueKind.REVERSED_RELATIONSHIP
    if isinstance(value, Path):
        return ValueKind.PATH
    raise UnsupportedType(
        f"{type(value).__name__} is not a supported type",
        details={"type": type(value).__name__},
    )


def coerce_kind(kind: Optional[Any]) -> Optional[ValueKind]:
    """Accept a ValueKind, its value string or None."""
    if kind is None or isinstance(kind, ValueKind):
        return kind
    try:
        return ValueKind(str(kind).strip().lower())
    except ValueError:
        raise ValueError(f"unknown value kind {kind!r}") from None


__all__ = [
    "ValueKind",
    "InstantKind",
    "DEFAULT_SIGILS",
    "SigilRegistry",
    "DEFAULT_REGISTRY",
    "kind_of",
    "coerce_kind",
]
