# jolt_sdk/jolt/resolver.py
# SPDX-License-Identifier: Apache-2.0
"""
Speculative decoding of the shared temporal sigil.

Instants and durations are both written under ``T``. A ``T`` struct is
therefore read in two phases:

Primary
    Decode with the instant candidate while recording every consumed token.

Retry
    Entered when the primary attempt fails in a retry-eligible way:

    - the caller requested DURATION, so the instant candidate is a kind
      mismatch; or
    - the caller requested nothing (list elements, map values, top level) and
      no temporal profile accepted the payload.

    The stream is re-synthesized as struct start, the duration's own sigil
    ``TA``, the recorded tokens after the tag and then the live remainder, and
    decoded once more as DURATION.

A typed INSTANT request with a malformed payload is never retried. If the
retry fails too, ``AmbiguousTagResolutionFailure`` is raised from the primary
error.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from .errors import (
    AmbiguousTagResolutionFailure,
    DecodeError,
    NoTemporalProfileMatched,
    TagKindMismatch,
)
from .sigil import SigilRegistry, ValueKind
from .tokens import START_OBJECT, JsonToken, TokenReader, field_name

LOG = logging.getLogger(__name__)

ReadStruct = Callable[[TokenReader, Optional[ValueKind]], Any]


class AmbiguityResolver:
    """
    Primary/Retry reader for structs tagged with a shared sigil.

    Args:
        registry: Sigil registry that decides which literals are shared.
        on_retry: Optional callback invoked with the tag each time the Retry
            phase is entered (used for metrics).
    """

    def __init__(
        self,
        registry: SigilRegistry,
        *,
        on_retry: Optional[Callable[[str], None]] = None,
    ) -> None:
        self._registry = registry
        self._on_retry = on_retry

    def applies(self, reader: TokenReader) -> bool:
        """True if the next struct is tagged with a shared sigil."""
        first, second = reader.peek(0), reader.peek(1)
        return (
            first is not None
            and first.kind is JsonToken.START_OBJECT
            and second is not None
            and second.kind is JsonToken.FIELD_NAME
            and self._registry.is_shared(second.value)
        )

    @staticmethod
    def _retry_eligible(error: DecodeError, requested: Optional[ValueKind]) -> bool:
        if isinstance(error, TagKindMismatch):
            return requested is ValueKind.DURATION
        if isinstance(error, NoTemporalProfileMatched):
            return requested is None
        return False

    def read(self, reader: TokenReader, requested: Optional[ValueKind], read_struct: ReadStruct) -> Any:
        with reader.recording() as consumed:
            try:
                return read_struct(reader, requested)
            except (TagKindMismatch, NoTemporalProfileMatched) as e:
                if not self._retry_eligible(e, requested):
                    raise
                primary = e

        tag = consumed[1].value.strip()
        LOG.debug(
            "Sigil %r did not decode as %s (%s), retrying as %s",
            tag,
            ValueKind.INSTANT.value,
            primary.code,
            ValueKind.DURATION.value,
        )
        if self._on_retry is not None:
            self._on_retry(tag)

        replay = [START_OBJECT, field_name(self._registry.literal_for(ValueKind.DURATION))]
        replay.extend(consumed[2:])
        reader.prepend(replay)
        try:
            return read_struct(reader, ValueKind.DURATION)
        except DecodeError as e:
            raise AmbiguousTagResolutionFailure(
                f"Sigil {tag!r} is neither a valid {ValueKind.INSTANT.value} "
                f"nor a valid {ValueKind.DURATION.value}",
                primary=primary,
                retry=e,
                details={"tag": tag, "expected_kind": requested.value if requested else None},
            ) from primary


__all__ = ["AmbiguityResolver"]
