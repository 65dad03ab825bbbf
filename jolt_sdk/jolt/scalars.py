# jolt_sdk/jolt/scalars.py
# SPDX-License-Identifier: Apache-2.0
"""
Scalar conversions between typed values and their canonical payload strings.

Each kind owns a pure ``encode_<kind>(value) -> str`` and
``decode_<kind>(text) -> value`` pair. Nothing here knows about sigils or
tokens; callers wrap failures with tag context.

Payload grammar
---------------

    boolean   true | false
    number    decimal integer, else decimal float (NaN / Infinity allowed)
    binary    upper-case hex, two digits per byte, no separators
    instant   ISO-8601 date / time / date-time, with optional offset and
              bracketed region id for zoned date-times
    duration  ISO-8601 duration, e.g. P1Y2M3DT4H5M6.5S
    point     SRID=<code>;POINT(<x> <y>) | SRID=<code>;POINT Z (<x> <y> <z>)
"""

from __future__ import annotations

import datetime
import math
import re
from typing import Callable, Optional, Tuple, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .errors import (
    MalformedSpatialLiteral,
    NoTemporalProfileMatched,
    NullOrBlankPrimitive,
    OddLengthHexLiteral,
    PayloadFormatError,
)
from .mode import INT32_MAX, INT32_MIN, in_int64_range
from .sigil import InstantKind
from .types import IsoDuration, Point

Number = Union[int, float]
Instant = Union[datetime.date, datetime.time, datetime.datetime]


def _blank_check(text: str, what: str) -> str:
    stripped = (text or "").strip()
    if not stripped:
        raise NullOrBlankPrimitive(
            f"Requested value is {what} but the payload is null or blank",
            details={"payload": text},
        )
    return stripped


# =============================================================================
# Boolean
# =============================================================================

def encode_boolean(value: bool) -> str:
    return "true" if value else "false"


def decode_boolean(text: str) -> bool:
    literal = _blank_check(text, "a boolean").lower()
    if literal == "true":
        return True
    if literal == "false":
        return False
    raise PayloadFormatError(f"'{text}' is not a boolean literal", details={"payload": text})


# =============================================================================
# Numbers
# =============================================================================

_INT_LITERAL = re.compile(r"[+-]?\d+")
_FLOAT_LITERAL = re.compile(r"[+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|NaN|Infinity)")


def encode_number(value: Number) -> str:
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        return repr(value)
    return str(value)


def decode_number(text: str) -> Number:
    """
    Integer parse first, float parse second.

    Integer literals beyond the signed 64-bit range come back as floats, and
    those too long for ``int`` are read as floats directly (so they saturate
    to infinity).
    """
    literal = _blank_check(text, "a number")
    if _INT_LITERAL.fullmatch(literal):
        try:
            value = int(literal)
        except ValueError:
            return float(literal)
        try:
            return value if in_int64_range(value) else float(value)
        except OverflowError:
            return float(literal)
    if _FLOAT_LITERAL.fullmatch(literal):
        return float(literal)
    raise PayloadFormatError(f"'{text}' is not a number", details={"payload": text})


def decode_integer(text: str) -> int:
    """Decode a 32-bit integer payload (full signed range)."""
    literal = _blank_check(text, "an integer")
    if not _INT_LITERAL.fullmatch(literal):
        raise PayloadFormatError(f"'{text}' is not an integer", details={"payload": text})
    try:
        value = int(literal)
    except ValueError as e:
        raise PayloadFormatError(
            f"'{literal[:32]}...' has too many digits for an integer", details={"payload": text}
        ) from e
    if not INT32_MIN <= value <= INT32_MAX:
        raise PayloadFormatError(
            f"{value} does not fit into a 32-bit integer", details={"payload": text}
        )
    return value


# =============================================================================
# Binary
# =============================================================================

_HEX_DIGITS = re.compile(r"[0-9A-Fa-f]*")


def encode_binary(value: Union[bytes, bytearray, memoryview]) -> str:
    return bytes(value).hex().upper()


def decode_binary(text: str) -> bytes:
    literal = (text or "").strip()
    if len(literal) % 2:
        raise OddLengthHexLiteral(
            f"hex literal has an odd number of digits ({len(literal)})",
            details={"payload": text},
        )
    if not _HEX_DIGITS.fullmatch(literal):
        raise PayloadFormatError(f"'{text}' is not a hex literal", details={"payload": text})
    return bytes.fromhex(literal)


# =============================================================================
# Instants
# =============================================================================

_DATE = r"(?P<year>\d{4})-(?P<month>\d{2})-(?P<day>\d{2})"
_TIME = r"(?P<hour>\d{2}):(?P<minute>\d{2})(?::(?P<second>\d{2})(?:[.,](?P<fraction>\d{1,9}))?)?"
_OFFSET = r"(?P<offset>Z|[+-]\d{2}:\d{2}(?::\d{2})?)"

_ZONED_DATE_TIME = re.compile(rf"{_DATE}T{_TIME}{_OFFSET}(?:\[(?P<zone>[^\]]+)\])?")
_LOCAL_DATE_TIME = re.compile(rf"{_DATE}T{_TIME}")
_DATE_ONLY = re.compile(_DATE)
_OFFSET_TIME = re.compile(rf"{_TIME}{_OFFSET}")
_LOCAL_TIME = re.compile(_TIME)


def _date_of(m: "re.Match[str]") -> datetime.date:
    return datetime.date(int(m["year"]), int(m["month"]), int(m["day"]))


def _time_of(m: "re.Match[str]", tzinfo: Optional[datetime.tzinfo] = None) -> datetime.time:
    # Sub-microsecond digits are truncated.
    micros = int((m["fraction"] or "0").ljust(6, "0")[:6])
    return datetime.time(
        int(m["hour"]), int(m["minute"]), int(m["second"] or 0), micros, tzinfo=tzinfo
    )


def _offset_of(literal: str) -> datetime.timezone:
    if literal == "Z":
        return datetime.timezone.utc
    sign = -1 if literal[0] == "-" else 1
    parts = [int(p) for p in literal[1:].split(":")]
    hours, minutes = parts[0], parts[1]
    seconds = parts[2] if len(parts) > 2 else 0
    return datetime.timezone(sign * datetime.timedelta(hours=hours, minutes=minutes, seconds=seconds))


def _parse_zoned(m: "re.Match[str]") -> datetime.datetime:
    offset = _offset_of(m["offset"])
    naive = datetime.datetime.combine(_date_of(m), _time_of(m))
    if not m["zone"]:
        return naive.replace(tzinfo=offset)
    try:
        zone = ZoneInfo(m["zone"])
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ValueError(f"unknown time zone {m['zone']!r}") from e
    # The offset fixes the instant; the zone only decides how it is displayed.
    return naive.replace(tzinfo=offset).astimezone(zone)


def _parse_local_date_time(m: "re.Match[str]") -> datetime.datetime:
    return datetime.datetime.combine(_date_of(m), _time_of(m))


def _parse_offset_time(m: "re.Match[str]") -> datetime.time:
    return _time_of(m, _offset_of(m["offset"]))


TEMPORAL_PROFILES: Tuple[Tuple[InstantKind, "re.Pattern[str]", Callable[["re.Match[str]"], Instant]], ...] = (
    (InstantKind.ZONED_DATE_TIME, _ZONED_DATE_TIME, _parse_zoned),
    (InstantKind.LOCAL_DATE_TIME, _LOCAL_DATE_TIME, _parse_local_date_time),
    (InstantKind.DATE, _DATE_ONLY, _date_of),
    (InstantKind.OFFSET_TIME, _OFFSET_TIME, _parse_offset_time),
    (InstantKind.LOCAL_TIME, _LOCAL_TIME, _time_of),
)


def instant_kind_of(value: Instant) -> InstantKind:
    if isinstance(value, datetime.datetime):
        if value.utcoffset() is None:
            return InstantKind.LOCAL_DATE_TIME
        return InstantKind.ZONED_DATE_TIME
    if isinstance(value, datetime.date):
        return InstantKind.DATE
    if value.utcoffset() is None:
        return InstantKind.LOCAL_TIME
    return InstantKind.OFFSET_TIME


def encode_instant(value: Instant) -> str:
    kind = instant_kind_of(value)
    if kind is InstantKind.ZONED_DATE_TIME:
        text = value.isoformat()
        key = getattr(value.tzinfo, "key", None)
        return f"{text}[{key}]" if key else text
    if kind is InstantKind.LOCAL_TIME:
        return value.replace(tzinfo=None).isoformat()
    return value.isoformat()


def decode_instant(text: str) -> Instant:
    """Try each temporal profile in priority order."""
    literal = (text or "").strip()
    for _kind, pattern, parse in TEMPORAL_PROFILES:
        m = pattern.fullmatch(literal)
        if m is None:
            continue
        try:
            return parse(m)
        except ValueError:
            continue
    raise NoTemporalProfileMatched(
        f"'{text}' matches no temporal profile", details={"payload": text}
    )


# =============================================================================
# Durations
# =============================================================================

_DURATION = re.compile(
    r"(?P<sign>[-+])?P"
    r"(?:(?P<years>[-+]?\d+)Y)?"
    r"(?:(?P<months>[-+]?\d+)M)?"
    r"(?:(?P<weeks>[-+]?\d+)W)?"
    r"(?:(?P<days>[-+]?\d+)D)?"
    r"(?:T"
    r"(?:(?P<hours>[-+]?\d+)H)?"
    r"(?:(?P<minutes>[-+]?\d+)M)?"
    r"(?:(?P<seconds>[-+]?\d+)(?:[.,](?P<fraction>\d{1,9}))?S)?"
    r")?",
    re.IGNORECASE,
)
_DATE_PARTS = ("years", "months", "weeks", "days")
_TIME_PARTS = ("hours", "minutes", "seconds")


def _trunc_divmod(value: int, divisor: int) -> Tuple[int, int]:
    sign = -1 if value < 0 else 1
    q, r = divmod(abs(value), divisor)
    return sign * q, sign * r


def _format_seconds(seconds: int, nanos: int) -> str:
    sign = "-" if seconds < 0 or nanos < 0 else ""
    if not nanos:
        return f"{sign}{abs(seconds)}"
    fraction = f"{abs(nanos):09d}".rstrip("0")
    return f"{sign}{abs(seconds)}.{fraction}"


def encode_duration(value: Union[IsoDuration, datetime.timedelta]) -> str:
    if isinstance(value, datetime.timedelta):
        value = IsoDuration.from_timedelta(value)
    if value.is_zero:
        return "PT0S"
    parts = ["P"]
    years, months = _trunc_divmod(value.months, 12)
    if years:
        parts.append(f"{years}Y")
    if months:
        parts.append(f"{months}M")
    if value.days:
        parts.append(f"{value.days}D")
    if value.seconds or value.nanoseconds:
        parts.append("T")
        hours, rest = _trunc_divmod(value.seconds, 3600)
        minutes, seconds = _trunc_divmod(rest, 60)
        if hours:
            parts.append(f"{hours}H")
        if minutes:
            parts.append(f"{minutes}M")
        if seconds or value.nanoseconds:
            parts.append(f"{_format_seconds(seconds, value.nanoseconds)}S")
    return "".join(parts)


def decode_duration(text: str) -> IsoDuration:
    literal = (text or "").strip()
    m = _DURATION.fullmatch(literal)
    has_time = "T" in literal.upper()
    if (
        m is None
        or not any(m[p] is not None for p in _DATE_PARTS + _TIME_PARTS)
        or (has_time and not any(m[p] is not None for p in _TIME_PARTS))
    ):
        raise PayloadFormatError(f"'{text}' is not an ISO-8601 duration", details={"payload": text})

    def part(name: str) -> int:
        return int(m[name]) if m[name] is not None else 0

    nanos = 0
    if m["fraction"]:
        nanos = int(m["fraction"].ljust(9, "0"))
        if m["seconds"].startswith("-"):
            nanos = -nanos
    sign = -1 if m["sign"] == "-" else 1
    return IsoDuration(
        months=sign * (part("years") * 12 + part("months")),
        days=sign * (part("weeks") * 7 + part("days")),
        seconds=sign * (part("hours") * 3600 + part("minutes") * 60 + part("seconds")),
        nanoseconds=sign * nanos,
    )


# =============================================================================
# Spatial points
# =============================================================================

_WKT_POINT = re.compile(
    r"SRID=(?P<srid>\d+);\s*POINT(?P<z>\s*Z\s*)?"
    r"\(\s*(?P<x>[^\s()]+)\s+(?P<y>[^\s()]+)(?:\s+(?P<zc>[^\s()]+))?\s*\)"
)


def encode_point(value: Point) -> str:
    coordinates = " ".join(encode_number(float(c)) for c in value.coordinates)
    marker = " Z " if value.is_3d else ""
    return f"SRID={value.srid};POINT{marker}({coordinates})"


def decode_point(text: str) -> Point:
    literal = (text or "").strip()
    m = _WKT_POINT.fullmatch(literal)
    if m is None or (m["z"] is None) != (m["zc"] is None):
        raise MalformedSpatialLiteral(f"Illegal spatial value: {text}", details={"payload": text})
    literals = [m[g] for g in ("x", "y", "zc") if m[g] is not None]
    try:
        if any("_" in c for c in literals):
            raise ValueError("underscore in coordinate")
        coordinates = [float(c) for c in literals]
    except ValueError as e:
        raise MalformedSpatialLiteral(
            f"Illegal spatial value: {text}", details={"payload": text}
        ) from e
    return Point(int(m["srid"]), *coordinates)


__all__ = [
    "TEMPORAL_PROFILES",
    "encode_boolean",
    "decode_boolean",
    "encode_number",
    "decode_number",
    "decode_integer",
    "encode_binary",
    "decode_binary",
    "instant_kind_of",
    "encode_instant",
    "decode_instant",
    "encode_duration",
    "decode_duration",
    "encode_point",
    "decode_point",
]
