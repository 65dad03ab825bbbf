# jolt_sdk/jolt/mode.py
# SPDX-License-Identifier: Apache-2.0
"""
Representation modes.

mode: "sparse" (default)
    - Integral values inside the int32 window are written as bare JSON
      numbers, without sigil or string coercion.
    - Larger integrals and all floats keep the wide-number sigil ``R``.
    - Relationships use the named (object) profile.
    - Decoding accepts bare integer literals wherever an integral is expected.

mode: "strict"
    - Every scalar is wrapped in its sigil and carries a string payload.
    - Integrals inside the int32 window get ``Z``, all others ``R``.
    - Relationships use the positional (array) profile.

Non-numeric kinds are tagged the same way in both modes.

The int32 window is ``[-2**31, 2**31 - 1)``: the upper bound is exclusive,
so ``2**31 - 1`` itself is written as a wide number. This mirrors the
long-valued check of the original Jolt writer and is kept for wire
compatibility.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from .sigil import ValueKind

LOG = logging.getLogger(__name__)

INT32_MIN = -(2 ** 31)
INT32_MAX = 2 ** 31 - 1
INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1

STRICT = "strict"
SPARSE = "sparse"


def in_int32_range(value: int) -> bool:
    return INT32_MIN <= value < INT32_MAX


def in_int64_range(value: int) -> bool:
    return INT64_MIN <= value <= INT64_MAX


class RelationshipProfile(str, Enum):
    POSITIONAL = "positional"
    NAMED = "named"


@dataclass(frozen=True)
class ModePolicy:
    """
    Per-codec representation policy.

    Attributes:
        strict: True for the verbose, always-tagged mode.
    """
    strict: bool = False

    @classmethod
    def from_name(cls, mode: Optional[str]) -> "ModePolicy":
        m = (mode or SPARSE).strip().lower()
        if m not in {STRICT, SPARSE}:
            LOG.warning("Unknown Jolt mode %r, falling back to %r", mode, SPARSE)
            m = SPARSE
        return cls(strict=(m == STRICT))

    @property
    def name(self) -> str:
        return STRICT if self.strict else SPARSE

    def integral_kind(self, value: int) -> ValueKind:
        """Kind whose sigil an integral value is written with."""
        if in_int32_range(value):
            return ValueKind.INTEGER
        return ValueKind.WIDE_NUMBER

    def emits_bare(self, value: Any) -> bool:
        """True if ``value`` is written as a bare JSON number."""
        if self.strict or isinstance(value, bool) or not isinstance(value, int):
            return False
        return in_int32_range(value)

    @property
    def accepts_bare_integrals(self) -> bool:
        return not self.strict

    @property
    def relationship_profile(self) -> RelationshipProfile:
        if self.strict:
            return RelationshipProfile.POSITIONAL
        return RelationshipProfile.NAMED


STRICT_POLICY = ModePolicy(strict=True)
SPARSE_POLICY = ModePolicy(strict=False)


__all__ = [
    "INT32_MIN",
    "INT32_MAX",
    "INT64_MIN",
    "INT64_MAX",
    "STRICT",
    "SPARSE",
    "in_int32_range",
    "in_int64_range",
    "RelationshipProfile",
    "ModePolicy",
    "STRICT_POLICY",
    "SPARSE_POLICY",
]
