# jolt_sdk/jolt/errors.py
# SPDX-License-Identifier: Apache-2.0
"""
Normalized errors for the Jolt codec.

Every error carries a human-readable message, a machine-readable
UPPER_SNAKE_CASE code and a SIEM-safe ``details`` mapping. Decode failures
record the offending tag, the requested kind and the raw payload text where
they are known, so callers can build precise messages without parsing
strings.

Hierarchy
---------

    JoltError
    ├── DecodeError
    │   ├── StructureExpected
    │   │   └── UnsupportedBareListElement
    │   ├── UnknownTag
    │   ├── TagKindMismatch
    │   ├── PayloadFormatError
    │   │   ├── MalformedSpatialLiteral
    │   │   ├── NoTemporalProfileMatched
    │   │   └── OddLengthHexLiteral
    │   ├── NullOrBlankPrimitive
    │   ├── TrailingDataError
    │   └── AmbiguousTagResolutionFailure
    ├── EncodeError
    │   └── UnsupportedType
    └── InvalidValue
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional


class JoltError(Exception):
    """
    Base exception for Jolt codec errors.

    Attributes:
        message: Human-readable description.
        code: Machine-readable, UPPER_SNAKE_CASE error code.
        details: Additional machine context (tag, expected kind, payload).
    """
    def __init__(
        self,
        message: str = "",
        *,
        code: Optional[str] = None,
        details: Optional[Mapping[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = dict(details or {})

    def __str__(self) -> str:
        base = self.message or self.__class__.__name__
        if self.code:
            base += f" [code={self.code}]"
        if self.details:
            base += f" details={self.details}"
        return base

    @property
    def tag(self) -> Optional[str]:
        return self.details.get("tag")

    @property
    def expected_kind(self) -> Optional[str]:
        return self.details.get("expected_kind")

    @property
    def payload(self) -> Optional[str]:
        return self.details.get("payload")


# =============================================================================
# Decode taxonomy
# =============================================================================

class DecodeError(JoltError):
    """Base class for every failure raised while decoding Jolt input."""
    def __init__(self, message: str, **kw: Any):
        kw.setdefault("code", "DECODE_ERROR")
        super().__init__(message, **kw)


class StructureExpected(DecodeError):
    """The token at a struct position is not a struct start."""
    def __init__(self, message: str, **kw: Any):
        kw.setdefault("code", "STRUCTURE_EXPECTED")
        super().__init__(message, **kw)


class UnsupportedBareListElement(StructureExpected):
    """A list element was not wrapped in a sigil struct."""
    def __init__(self, message: str, **kw: Any):
        kw.setdefault("code", "UNSUPPORTED_BARE_LIST_ELEMENT")
        super().__init__(message, **kw)


class UnknownTag(DecodeError):
    """The field name of a struct is not a registered sigil."""
    def __init__(self, message: str, **kw: Any):
        kw.setdefault("code", "UNKNOWN_TAG")
        super().__init__(message, **kw)


class TagKindMismatch(DecodeError):
    """The sigil resolves to a kind other than the one requested by the caller."""
    def __init__(self, message: str, **kw: Any):
        kw.setdefault("code", "TAG_KIND_MISMATCH")
        super().__init__(message, **kw)


class PayloadFormatError(DecodeError):
    """The payload token does not have the shape the kind requires."""
    def __init__(self, message: str, **kw: Any):
        kw.setdefault("code", "PAYLOAD_FORMAT")
        super().__init__(message, **kw)


class MalformedSpatialLiteral(PayloadFormatError):
    """A spatial payload does not follow the SRID=<code>;POINT(...) grammar."""
    def __init__(self, message: str, **kw: Any):
        kw.setdefault("code", "MALFORMED_SPATIAL_LITERAL")
        super().__init__(message, **kw)


class NoTemporalProfileMatched(PayloadFormatError):
    """No ISO-8601 temporal profile accepted the payload."""
    def __init__(self, message: str, **kw: Any):
        kw.setdefault("code", "NO_TEMPORAL_PROFILE_MATCHED")
        super().__init__(message, **kw)


class OddLengthHexLiteral(PayloadFormatError):
    """A binary payload has an odd number of hex digits."""
    def __init__(self, message: str, **kw: Any):
        kw.setdefault("code", "ODD_LENGTH_HEX_LITERAL")
        super().__init__(message, **kw)


class NullOrBlankPrimitive(DecodeError):
    """A non-nullable scalar received an empty or blank payload."""
    def __init__(self, message: str, **kw: Any):
        kw.setdefault("code", "NULL_OR_BLANK_PRIMITIVE")
        super().__init__(message, **kw)


class TrailingDataError(DecodeError):
    """A struct did not close right after its single payload."""
    def __init__(self, message: str, **kw: Any):
        kw.setdefault("code", "TRAILING_DATA")
        super().__init__(message, **kw)


class AmbiguousTagResolutionFailure(DecodeError):
    """
    Both interpretations of a shared sigil failed.

    ``primary`` is the error of the first interpretation and is also the
    ``__cause__`` of this exception; ``retry`` is the error of the second.
    """
    def __init__(
        self,
        message: str,
        *,
        primary: Optional[DecodeError] = None,
        retry: Optional[DecodeError] = None,
        **kw: Any,
    ):
        kw.setdefault("code", "AMBIGUOUS_TAG_RESOLUTION_FAILURE")
        super().__init__(message, **kw)
        self.primary = primary
        self.retry = retry


# =============================================================================
# Encode / value errors
# =============================================================================

class EncodeError(JoltError):
    """A value cannot be written in the Jolt format."""
    def __init__(self, message: str, **kw: Any):
        kw.setdefault("code", "ENCODE_ERROR")
        super().__init__(message, **kw)


class UnsupportedType(EncodeError, TypeError):
    """The value's Python type has no Jolt kind."""
    def __init__(self, message: str, **kw: Any):
        kw.setdefault("code", "UNSUPPORTED_TYPE")
        super().__init__(message, **kw)


class InvalidValue(JoltError, ValueError):
    """A graph or spatial value object is ill-formed."""
    def __init__(self, message: str, **kw: Any):
        kw.setdefault("code", "INVALID_VALUE")
        super().__init__(message, **kw)


def error_envelope(e: Exception) -> Dict[str, Any]:
    """
    Map a JoltError (or unexpected Exception) to the canonical error envelope.
    """
    if isinstance(e, JoltError):
        return {
            "ok": False,
            "code": e.code or type(e).__name__.upper(),
            "error": type(e).__name__,
            "message": e.message,
            "details": e.details or None,
        }
    return {
        "ok": False,
        "code": "INTERNAL",
        "error": type(e).__name__,
        "message": str(e) or "internal error",
        "details": None,
    }


__all__ = [
    "JoltError",
    "DecodeError",
    "StructureExpected",
    "UnsupportedBareListElement",
    "UnknownTag",
    "TagKindMismatch",
    "PayloadFormatError",
    "MalformedSpatialLiteral",
    "NoTemporalProfileMatched",
    "OddLengthHexLiteral",
    "NullOrBlankPrimitive",
    "TrailingDataError",
    "AmbiguousTagResolutionFailure",
    "EncodeError",
    "UnsupportedType",
    "InvalidValue",
    "error_envelope",
]
