# jolt_sdk/jolt/codec.py
# SPDX-License-Identifier: Apache-2.0
"""
Jolt codec: encode property-graph values as tagged JSON and decode them back.

Every value is a single-key JSON object whose key (the sigil) names the kind
and whose value (the payload) carries the data:

    {"Z": "42"}  {"U": "Alice"}  {"[]": [{"Z": "1"}, {"U": "x"}]}

In sparse mode small integers are written bare (``42``) and ``None`` is always
written as a bare ``null``.

Design
------
- Writers and readers are closed tables keyed by ``ValueKind``; adding a kind
  without a handler fails at construction time.
- The codec writes and reads the sigil struct; handlers only deal with the
  payload. Containers and graph entities recurse through ``write_value`` /
  ``read_value``.
- Structs tagged with the shared temporal sigil go through the
  ``AmbiguityResolver``; every other struct follows a single pass:
  struct start, tag, kind check, payload, struct end.
- Public calls record one metrics observation each and attach debugging
  context to escaping errors. Metrics failures never reach the caller.

Thread-safety: a codec holds no per-call state and can be shared.
"""

from __future__ import annotations

import json
import logging
import time
from functools import partial
from typing import (
    Any,
    Callable,
    Dict,
    Iterable,
    List,
    Mapping,
    Optional,
    Protocol,
    Union,
)

from ..core.error_context import attach_context
from .containers import (
    expect_token,
    read_list_payload,
    read_map_payload,
    write_list_payload,
    write_map_payload,
)
from .entities import (
    read_node_payload,
    read_path_payload,
    read_relationship_payload,
    read_reversed_relationship_payload,
    write_node_payload,
    write_path_payload,
    write_relationship_payload,
)
from .errors import (
    DecodeError,
    EncodeError,
    JoltError,
    PayloadFormatError,
    StructureExpected,
    TagKindMismatch,
    TrailingDataError,
    UnsupportedType,
)
from .mode import INT32_MAX, INT32_MIN, ModePolicy, in_int64_range
from .resolver import AmbiguityResolver
from .scalars import (
    decode_binary,
    decode_boolean,
    decode_duration,
    decode_instant,
    decode_integer,
    decode_number,
    decode_point,
    encode_binary,
    encode_boolean,
    encode_duration,
    encode_instant,
    encode_number,
    encode_point,
)
from .sigil import DEFAULT_REGISTRY, SigilRegistry, ValueKind, coerce_kind, kind_of
from .tokens import JsonToken, Token, TokenReader, TokenWriter

LOG = logging.getLogger(__name__)

KindLike = Union[ValueKind, str, None]
Source = Union[str, bytes, bytearray, TokenReader]

PayloadWriter = Callable[[TokenWriter, Any], None]
PayloadReader = Callable[[TokenReader, str, Optional[ValueKind]], Any]


# =============================================================================
# Metrics
# =============================================================================

class MetricsSink(Protocol):
    """
    Metrics collection protocol (low-cardinality; SIEM-safe).
    """
    def observe(
        self,
        *,
        component: str,
        op: str,
        ms: float,
        ok: bool,
        code: str = "OK",
        extra: Optional[Mapping[str, Any]] = None,
    ) -> None:
        ...

    def counter(
        self,
        *,
        component: str,
        name: str,
        value: int = 1,
        extra: Optional[Mapping[str, Any]] = None,
    ) -> None:
        ...


class NoopMetrics:
    def observe(self, **_: Any) -> None:
        ...
    def counter(self, **_: Any) -> None:
        ...


# =============================================================================
# Kind acceptance
# =============================================================================

# Requested kind -> additional tag kinds it accepts.
_ALSO_ACCEPTS: Dict[ValueKind, frozenset] = {
    ValueKind.WIDE_NUMBER: frozenset({ValueKind.INTEGER}),
    ValueKind.RELATIONSHIP: frozenset({ValueKind.REVERSED_RELATIONSHIP}),
}

_INTEGRAL_KINDS = frozenset({ValueKind.INTEGER, ValueKind.WIDE_NUMBER})

# Kinds sharing one family for homogeneous top-level arrays.
_ARRAY_FAMILY: Dict[ValueKind, ValueKind] = {
    ValueKind.INTEGER: ValueKind.WIDE_NUMBER,
    ValueKind.REVERSED_RELATIONSHIP: ValueKind.RELATIONSHIP,
}


def accepts_kind(requested: Optional[ValueKind], actual: ValueKind) -> bool:
    """True if a struct tagged as ``actual`` satisfies a request for ``requested``."""
    if requested is None or requested is actual or actual is ValueKind.NULL:
        return True
    return actual in _ALSO_ACCEPTS.get(requested, frozenset())


# =============================================================================
# Codec
# =============================================================================

class JoltCodec:
    """
    Tagged-JSON codec.

    Args:
        mode: ``"sparse"`` (default) or ``"strict"``; unknown names fall back
            to sparse with a warning.
        strict: Boolean shorthand for ``mode``; wins when given.
        registry: Sigil registry; defaults to the shared immutable instance.
        metrics: Metrics sink; defaults to ``NoopMetrics``.
    """

    _component = "jolt"

    def __init__(
        self,
        mode: Optional[str] = None,
        *,
        strict: Optional[bool] = None,
        registry: Optional[SigilRegistry] = None,
        metrics: Optional[MetricsSink] = None,
    ) -> None:
        if strict is not None:
            self._policy = ModePolicy(strict=bool(strict))
        else:
            self._policy = ModePolicy.from_name(mode)
        self._registry = registry or DEFAULT_REGISTRY
        self._metrics: MetricsSink = metrics or NoopMetrics()
        self._resolver = AmbiguityResolver(self._registry, on_retry=self._count_retry)

        self._writers: Dict[ValueKind, PayloadWriter] = {
            ValueKind.NULL: lambda writer, _: writer.write_null(),
            ValueKind.BOOLEAN: partial(self._write_scalar, encode_boolean),
            ValueKind.INTEGER: partial(self._write_scalar, str),
            ValueKind.WIDE_NUMBER: partial(self._write_scalar, encode_number),
            ValueKind.TEXT: partial(self._write_scalar, str),
            ValueKind.BINARY: partial(self._write_scalar, encode_binary),
            ValueKind.LIST: partial(write_list_payload, self),
            ValueKind.MAP: partial(write_map_payload, self),
            ValueKind.INSTANT: partial(self._write_scalar, encode_instant),
            ValueKind.DURATION: partial(self._write_scalar, encode_duration),
            ValueKind.SPATIAL_POINT: partial(self._write_scalar, encode_point),
            ValueKind.NODE: partial(write_node_payload, self),
            ValueKind.RELATIONSHIP: partial(write_relationship_payload, self),
            ValueKind.REVERSED_RELATIONSHIP: partial(write_relationship_payload, self),
            ValueKind.PATH: partial(write_path_payload, self),
        }
        self._readers: Dict[ValueKind, PayloadReader] = {
            ValueKind.NULL: self._read_null,
            ValueKind.BOOLEAN: partial(self._read_scalar, decode_boolean),
            ValueKind.INTEGER: self._read_integral,
            ValueKind.WIDE_NUMBER: partial(self._read_scalar, decode_number),
            ValueKind.TEXT: partial(self._read_scalar, str),
            ValueKind.BINARY: partial(self._read_scalar, decode_binary),
            ValueKind.LIST: lambda reader, tag, requested: read_list_payload(self, reader),
            ValueKind.MAP: lambda reader, tag, requested: read_map_payload(self, reader),
            ValueKind.INSTANT: partial(self._read_scalar, decode_instant),
            ValueKind.DURATION: partial(self._read_scalar, decode_duration),
            ValueKind.SPATIAL_POINT: partial(self._read_scalar, decode_point),
            ValueKind.NODE: lambda reader, tag, requested: read_node_payload(self, reader),
            ValueKind.RELATIONSHIP: lambda reader, tag, requested: read_relationship_payload(self, reader),
            ValueKind.REVERSED_RELATIONSHIP: (
                lambda reader, tag, requested: read_reversed_relationship_payload(self, reader)
            ),
            ValueKind.PATH: lambda reader, tag, requested: read_path_payload(self, reader),
        }
        for table in (self._writers, self._readers):
            missing = [k.name for k in self._registry.kinds() if k not in table]
            if missing:
                raise ValueError(f"no handler for kinds {missing}")

    # ------------------------------------------------------------------ #
    # Properties
    # ------------------------------------------------------------------ #

    @property
    def mode(self) -> str:
        return self._policy.name

    @property
    def policy(self) -> ModePolicy:
        return self._policy

    @property
    def registry(self) -> SigilRegistry:
        return self._registry

    def __repr__(self) -> str:
        return f"{type(self).__name__}(mode={self.mode!r})"

    # ------------------------------------------------------------------ #
    # Metrics helpers
    # ------------------------------------------------------------------ #

    def _record(self, op: str, t0: float, ok: bool, *, code: str = "OK", **extra: Any) -> None:
        try:
            ms = (time.monotonic() - t0) * 1000.0
            x = dict(extra or {})
            x.setdefault("mode", self.mode)
            self._metrics.observe(
                component=self._component,
                op=op,
                ms=ms,
                ok=ok,
                code=code,
                extra=x,
            )
        except Exception:
            # never let metrics break caller
            pass

    def _count_retry(self, tag: str) -> None:
        try:
            self._metrics.counter(component=self._component, name="sigil_retry", extra={"tag": tag})
        except Exception:
            pass

    def _fail(self, e: JoltError, op: str, t0: float, requested: Optional[ValueKind] = None) -> None:
        attach_context(
            e,
            "codec",
            operation=op,
            mode=self.mode,
            requested_kind=requested.value if requested else None,
        )
        self._record(op, t0, False, code=e.code or type(e).__name__)

    # ------------------------------------------------------------------ #
    # Writing
    # ------------------------------------------------------------------ #

    @staticmethod
    def _write_scalar(encode: Callable[[Any], str], writer: TokenWriter, value: Any) -> None:
        writer.write_string(encode(value))

    def write_value(self, writer: TokenWriter, value: Any) -> None:
        """Write one value (recursively) to ``writer``."""
        kind = kind_of(value)
        if kind is ValueKind.NULL:
            writer.write_null()
            return
        if kind is ValueKind.INTEGER:
            if not in_int64_range(value):
                raise UnsupportedType(
                    f"integer {value} does not fit in 64 bits",
                    details={"type": "int"},
                )
            if self._policy.emits_bare(value):
                writer.write_number(value)
                return
        tag = self._registry.tag_for(kind, value, self._policy)
        writer.write_start_object()
        writer.write_field_name(tag)
        self._writers[kind](writer, value)
        writer.write_end_object()

    def to_jolt(self, value: Any) -> Any:
        """Encode to a JSON-compatible Python structure."""
        t0 = time.monotonic()
        writer = TokenWriter()
        try:
            self.write_value(writer, value)
        except JoltError as e:
            self._fail(e, "encode", t0)
            raise
        self._record("encode", t0, True)
        return writer.to_python()

    def encode(self, value: Any, *, indent: Optional[int] = None) -> str:
        """Encode to compact JSON text (or indented when ``indent`` is given)."""
        document = self.to_jolt(value)
        separators = (",", ":") if indent is None else None
        return json.dumps(document, indent=indent, separators=separators, ensure_ascii=False)

    def encode_array(self, values: Iterable[Any], *, indent: Optional[int] = None) -> str:
        """
        Encode a homogeneous sequence as a plain JSON array of tagged values.

        Integers and floats count as one family, as do relationships and
        reversed relationships. ``None`` elements are allowed anywhere.
        """
        t0 = time.monotonic()
        items = list(values)
        writer = TokenWriter()
        try:
            families = set()
            for item in items:
                kind = kind_of(item)
                if kind is not ValueKind.NULL:
                    families.add(_ARRAY_FAMILY.get(kind, kind))
            if len(families) > 1:
                raise EncodeError(
                    "top-level arrays must be homogeneous",
                    details={"kinds": sorted(k.value for k in families)},
                )
            writer.write_start_array()
            for item in items:
                self.write_value(writer, item)
            writer.write_end_array()
        except JoltError as e:
            self._fail(e, "encode_array", t0)
            raise
        self._record("encode_array", t0, True)
        separators = (",", ":") if indent is None else None
        return json.dumps(writer.to_python(), indent=indent, separators=separators, ensure_ascii=False)

    # ------------------------------------------------------------------ #
    # Reading
    # ------------------------------------------------------------------ #

    def accepts_bare(self, token: Token, kind: Optional[ValueKind] = None) -> bool:
        """True if ``token`` is a valid unwrapped value where ``kind`` is expected."""
        if token.kind is JsonToken.VALUE_NULL:
            return True
        return (
            token.kind is JsonToken.VALUE_NUMBER_INT
            and self._policy.accepts_bare_integrals
            and (kind is None or kind in _INTEGRAL_KINDS)
        )

    def _read_scalar(
        self,
        decode: Callable[[str], Any],
        reader: TokenReader,
        tag: str,
        requested: Optional[ValueKind],
    ) -> Any:
        kind = self._registry.kind_for(tag)
        token = expect_token(
            reader,
            JsonToken.VALUE_STRING,
            "Only String values will be parsed",
            tag=tag,
            expected_kind=kind.value,
        )
        try:
            return decode(token.value)
        except DecodeError as e:
            e.details.setdefault("tag", tag)
            e.details.setdefault("expected_kind", kind.value)
            e.details.setdefault("payload", token.value)
            raise

    def _read_integral(self, reader: TokenReader, tag: str, requested: Optional[ValueKind]) -> Any:
        decode = decode_integer if requested is ValueKind.INTEGER else decode_number
        return self._read_scalar(decode, reader, tag, requested)

    def _read_null(self, reader: TokenReader, tag: str, requested: Optional[ValueKind]) -> None:
        token = reader.next_token()
        if token is not None and token.kind is JsonToken.VALUE_NULL:
            return None
        if token is not None and token.kind is JsonToken.VALUE_STRING and not token.value.strip():
            return None
        found = "end of input" if token is None else token.describe()
        raise PayloadFormatError(f"null payload must be null or empty (found {found})", details={"tag": tag})

    def _bare_integral(self, value: int, requested: Optional[ValueKind]) -> int:
        if requested is ValueKind.INTEGER and not INT32_MIN <= value <= INT32_MAX:
            raise PayloadFormatError(
                f"{value} does not fit in a 32-bit integer",
                details={"expected_kind": requested.value, "payload": str(value)},
            )
        return value

    def _read_struct(self, reader: TokenReader, requested: Optional[ValueKind]) -> Any:
        expected = requested.value if requested else None

        token = reader.next_token()
        if token is None or token.kind is not JsonToken.START_OBJECT:
            found = "end of input" if token is None else token.describe()
            raise StructureExpected(
                f"The provided value is not compatible with Jolt (found {found})",
                details={"expected_kind": expected},
            )

        name = reader.next_token()
        if name is None or name.kind is not JsonToken.FIELD_NAME:
            raise StructureExpected(
                "A Jolt struct must carry exactly one sigil field",
                details={"expected_kind": expected},
            )

        tag = name.value.strip()
        try:
            kind = self._registry.kind_for(tag)
        except DecodeError as e:
            e.details.setdefault("expected_kind", expected)
            raise
        if not accepts_kind(requested, kind):
            raise TagKindMismatch(
                f"Cannot read sigil {tag!r} ({kind.value}) as {expected}",
                details={"tag": tag, "expected_kind": expected, "actual_kind": kind.value},
            )

        value = self._readers[kind](reader, tag, requested)

        end = reader.next_token()
        if end is None or end.kind is not JsonToken.END_OBJECT:
            raise TrailingDataError(
                "Dangling object data in Jolt struct",
                details={"tag": tag, "expected_kind": expected},
            )
        return value

    def read_value(self, reader: TokenReader, kind: KindLike = None) -> Any:
        """Read one value from ``reader``; ``kind`` restricts what is acceptable."""
        requested = coerce_kind(kind)
        token = reader.peek()
        if token is None:
            raise StructureExpected(
                "Unexpected end of input, expected a Jolt value",
                details={"expected_kind": requested.value if requested else None},
            )
        if self.accepts_bare(token, requested):
            reader.next_token()
            if token.kind is JsonToken.VALUE_NULL:
                return None
            return self._bare_integral(token.value, requested)
        if self._resolver.applies(reader):
            return self._resolver.read(reader, requested, self._read_struct)
        return self._read_struct(reader, requested)

    @staticmethod
    def _reader_for(source: Source) -> TokenReader:
        if isinstance(source, TokenReader):
            return source
        try:
            return TokenReader.from_json(source)
        except ValueError as e:
            raise PayloadFormatError(f"invalid JSON: {e}") from e

    @staticmethod
    def _ensure_drained(reader: TokenReader) -> None:
        token = reader.peek()
        if token is not None:
            raise TrailingDataError(f"Unexpected data after the Jolt value: {token.describe()}")

    def decode(self, source: Source, kind: KindLike = None) -> Any:
        """
        Decode JSON text/bytes (or a ``TokenReader``) into a value.

        ``kind`` (a ``ValueKind`` or its name) restricts the accepted tag;
        None decodes whatever the sigil says.
        """
        t0 = time.monotonic()
        requested = coerce_kind(kind)
        try:
            reader = self._reader_for(source)
            value = self.read_value(reader, requested)
            self._ensure_drained(reader)
        except JoltError as e:
            self._fail(e, "decode", t0, requested)
            raise
        self._record("decode", t0, True)
        return value

    def from_jolt(self, obj: Any, kind: KindLike = None) -> Any:
        """Decode an already parsed JSON structure."""
        return self.decode(TokenReader.from_python(obj), kind)

    def decode_array(self, source: Source, kind: KindLike = None) -> List[Any]:
        """Decode a plain JSON array of tagged values, optionally restricted to ``kind``."""
        t0 = time.monotonic()
        requested = coerce_kind(kind)
        try:
            reader = self._reader_for(source)
            token = reader.peek()
            if token is None or token.kind is not JsonToken.START_ARRAY:
                found = "end of input" if token is None else token.describe()
                raise StructureExpected(
                    f"expected a JSON array (found {found})",
                    details={"expected_kind": requested.value if requested else None},
                )
            values = read_list_payload(self, reader, requested)
            self._ensure_drained(reader)
        except JoltError as e:
            self._fail(e, "decode_array", t0, requested)
            raise
        self._record("decode_array", t0, True)
        return values


__all__ = [
    "MetricsSink",
    "NoopMetrics",
    "accepts_kind",
    "JoltCodec",
]
