# SPDX-License-Identifier: Apache-2.0
"""
Jolt — shared temporal sigil resolution.

Asserts:
  • durations are written under T and decode back via retry
  • a typed DURATION request retries after the instant kind mismatch
  • untyped decoding retries when no temporal profile matches
  • a typed INSTANT request with a malformed payload is never retried
  • a failed retry raises AmbiguousTagResolutionFailure chained from the
    primary error, keeping both errors
  • retries are logged at debug level and counted in metrics
"""

import datetime
import logging

import pytest

from jolt_sdk.jolt.errors import (
    AmbiguousTagResolutionFailure,
    NoTemporalProfileMatched,
    PayloadFormatError,
    TagKindMismatch,
)
from jolt_sdk.jolt.resolver import AmbiguityResolver
from jolt_sdk.jolt.sigil import DEFAULT_REGISTRY, ValueKind
from jolt_sdk.jolt.tokens import TokenReader
from jolt_sdk.jolt.types import IsoDuration


def test_duration_written_under_instant_sigil(codec):
    assert codec.encode(IsoDuration(days=42)) == '{"T":"P42D"}'
    assert codec.encode(datetime.timedelta(hours=23, minutes=21)) == '{"T":"PT23H21M"}'


def test_typed_duration_retries_after_kind_mismatch(codec):
    assert codec.decode('{"T":"P42D"}', kind=ValueKind.DURATION) == IsoDuration(days=42)
    assert codec.decode('{"T":"PT23H21M"}', kind="duration") == IsoDuration(seconds=84060)


def test_untyped_retries_when_no_profile_matches(codec):
    assert codec.decode('{"T":"P42D"}') == IsoDuration(days=42)


def test_own_duration_sigil_needs_no_retry(codec):
    assert codec.decode('{"TA":"P42D"}') == IsoDuration(days=42)
    assert codec.decode('{"TA":"P42D"}', kind="duration") == IsoDuration(days=42)


def test_instants_are_not_retried(codec):
    assert codec.decode('{"T":"2020-12-14"}') == datetime.date(2020, 12, 14)
    assert codec.decode('{"T":"2020-12-14"}', kind="instant") == datetime.date(2020, 12, 14)


def test_mixed_temporal_list(codec):
    decoded = codec.decode('{"[]":[{"T":"P42D"},{"T":"2020-12-14"},{"T":"21:21:00"}]}')
    assert decoded == [IsoDuration(days=42), datetime.date(2020, 12, 14), datetime.time(21, 21)]


def test_retry_keeps_following_values_intact(strict_codec):
    decoded = strict_codec.decode('{"{}":{"a":{"T":"P1D"},"b":{"U":"after"}}}')
    assert decoded == {"a": IsoDuration(days=1), "b": "after"}


def test_typed_instant_with_malformed_payload_is_not_retried(codec):
    with pytest.raises(NoTemporalProfileMatched):
        codec.decode('{"T":"P42D"}', kind="instant")


def test_other_requested_kinds_are_not_retried(codec):
    with pytest.raises(TagKindMismatch):
        codec.decode('{"T":"P42D"}', kind="text")


def test_failed_typed_retry_chains_primary_error(codec):
    with pytest.raises(AmbiguousTagResolutionFailure) as ei:
        codec.decode('{"T":"garbage"}', kind="duration")
    err = ei.value
    assert isinstance(err.primary, TagKindMismatch)
    assert isinstance(err.retry, PayloadFormatError)
    assert err.__cause__ is err.primary
    assert err.tag == "T"
    assert err.expected_kind == "duration"


def test_failed_untyped_retry_chains_primary_error(codec):
    with pytest.raises(AmbiguousTagResolutionFailure) as ei:
        codec.decode('{"T":"garbage"}')
    assert isinstance(ei.value.primary, NoTemporalProfileMatched)
    assert ei.value.__cause__ is ei.value.primary


def test_non_string_payload_is_not_retried(codec):
    with pytest.raises(PayloadFormatError) as ei:
        codec.decode('{"T":42}')
    assert not isinstance(ei.value, AmbiguousTagResolutionFailure)


def test_retry_counted_in_metrics(metered_codec, metrics):
    metered_codec.decode('{"T":"P42D"}')
    assert metrics.counters == [
        {"component": "jolt", "name": "sigil_retry", "value": 1, "extra": {"tag": "T"}}
    ]


def test_retry_logged_at_debug(codec, caplog):
    with caplog.at_level(logging.DEBUG, logger="jolt_sdk.jolt.resolver"):
        codec.decode('{"T":"P42D"}', kind="duration")
    assert any("retrying" in r.getMessage() for r in caplog.records)


def test_applies_only_to_shared_sigils():
    resolver = AmbiguityResolver(DEFAULT_REGISTRY)
    assert resolver.applies(TokenReader.from_json('{"T":"P42D"}'))
    assert not resolver.applies(TokenReader.from_json('{"TA":"P42D"}'))
    assert not resolver.applies(TokenReader.from_json('{"U":"T"}'))
    assert not resolver.applies(TokenReader.from_json('"T"'))
    assert not resolver.applies(TokenReader.from_json("{}"))
