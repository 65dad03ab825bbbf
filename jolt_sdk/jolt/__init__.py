# jolt_sdk/jolt/__init__.py
# SPDX-License-Identifier: Apache-2.0

"""
Jolt - Public API

Tagged-JSON codec for property-graph values. All public types, errors and the
codec are re-exported here for clean imports.
"""

from jolt_sdk.jolt.codec import (
    JoltCodec,
    MetricsSink,
    NoopMetrics,
    accepts_kind,
)
from jolt_sdk.jolt.errors import (
    AmbiguousTagResolutionFailure,
    DecodeError,
    EncodeError,
    InvalidValue,
    JoltError,
    MalformedSpatialLiteral,
    NoTemporalProfileMatched,
    NullOrBlankPrimitive,
    OddLengthHexLiteral,
    PayloadFormatError,
    StructureExpected,
    TagKindMismatch,
    TrailingDataError,
    UnknownTag,
    UnsupportedBareListElement,
    UnsupportedType,
    error_envelope,
)
from jolt_sdk.jolt.mode import (
    SPARSE,
    STRICT,
    ModePolicy,
    RelationshipProfile,
)
from jolt_sdk.jolt.sigil import (
    DEFAULT_REGISTRY,
    InstantKind,
    SigilRegistry,
    ValueKind,
    kind_of,
)
from jolt_sdk.jolt.tokens import TokenReader, TokenWriter
from jolt_sdk.jolt.types import (
    IsoDuration,
    Node,
    Path,
    Point,
    Relationship,
    ReversedRelationship,
)

__all__ = [
    # Codec
    "JoltCodec",
    "MetricsSink",
    "NoopMetrics",
    "accepts_kind",
    # Modes
    "STRICT",
    "SPARSE",
    "ModePolicy",
    "RelationshipProfile",
    # Sigils
    "ValueKind",
    "InstantKind",
    "SigilRegistry",
    "DEFAULT_REGISTRY",
    "kind_of",
    # Tokens
    "TokenReader",
    "TokenWriter",
    # Value types
    "Point",
    "IsoDuration",
    "Node",
    "Relationship",
    "ReversedRelationship",
    "Path",
    # Errors
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
