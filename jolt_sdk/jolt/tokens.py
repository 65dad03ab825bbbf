# jolt_sdk/jolt/tokens.py
# SPDX-License-Identifier: Apache-2.0
"""
Streaming token primitive.

The codec reads and writes JSON as a flat stream of tokens (struct markers,
field names, scalars) rather than as nested Python objects. This keeps
encode/decode single-pass and lets the ambiguity resolver replay a prefix of
the input.

- ``iter_tokens`` walks a document produced by ``json.loads``. Objects parsed
  from text are kept as ``ObjectPairs`` so repeated keys reach the codec.
- ``TokenReader`` adds look-ahead, push-back and recording on top of any
  token iterable.
- ``TokenWriter`` collects tokens and renders them through ``json.dumps``.
"""

from __future__ import annotations

import json
from collections import deque
from contextlib import contextmanager
from enum import Enum
from typing import Any, Deque, Iterable, Iterator, List, NamedTuple, Optional, Union


class JsonToken(Enum):
    START_OBJECT = "{"
    END_OBJECT = "}"
    START_ARRAY = "["
    END_ARRAY = "]"
    FIELD_NAME = "field"
    VALUE_STRING = "string"
    VALUE_NUMBER_INT = "int"
    VALUE_NUMBER_FLOAT = "float"
    VALUE_TRUE = "true"
    VALUE_FALSE = "false"
    VALUE_NULL = "null"

    @property
    def is_struct_start(self) -> bool:
        return self in (JsonToken.START_OBJECT, JsonToken.START_ARRAY)

    @property
    def is_struct_end(self) -> bool:
        return self in (JsonToken.END_OBJECT, JsonToken.END_ARRAY)

    @property
    def is_scalar_value(self) -> bool:
        return not (self.is_struct_start or self.is_struct_end or self is JsonToken.FIELD_NAME)


class Token(NamedTuple):
    kind: JsonToken
    value: Any = None

    def describe(self) -> str:
        if self.value is None:
            return self.kind.name
        return f"{self.kind.name}({self.value!r})"


START_OBJECT = Token(JsonToken.START_OBJECT)
END_OBJECT = Token(JsonToken.END_OBJECT)
START_ARRAY = Token(JsonToken.START_ARRAY)
END_ARRAY = Token(JsonToken.END_ARRAY)


def field_name(name: str) -> Token:
    return Token(JsonToken.FIELD_NAME, name)


class ObjectPairs(list):
    """Key/value pairs of a parsed JSON object in document order, repeats included."""


def iter_tokens(obj: Any) -> Iterator[Token]:
    """Yield the token stream of a JSON-compatible Python structure."""
    if obj is None:
        yield Token(JsonToken.VALUE_NULL)
    elif obj is True:
        yield Token(JsonToken.VALUE_TRUE, True)
    elif obj is False:
        yield Token(JsonToken.VALUE_FALSE, False)
    elif isinstance(obj, int):
        yield Token(JsonToken.VALUE_NUMBER_INT, obj)
    elif isinstance(obj, float):
        yield Token(JsonToken.VALUE_NUMBER_FLOAT, obj)
    elif isinstance(obj, str):
        yield Token(JsonToken.VALUE_STRING, obj)
    elif isinstance(obj, ObjectPairs):
        yield START_OBJECT
        for key, value in obj:
            yield field_name(key)
            yield from iter_tokens(value)
        yield END_OBJECT
    elif isinstance(obj, dict):
        yield START_OBJECT
        for key, value in obj.items():
            yield field_name(str(key))
            yield from iter_tokens(value)
        yield END_OBJECT
    elif isinstance(obj, (list, tuple)):
        yield START_ARRAY
        for value in obj:
            yield from iter_tokens(value)
        yield END_ARRAY
    else:
        raise TypeError(f"{type(obj).__name__} is not JSON-compatible")


class TokenReader:
    """
    Pull-style token source.

    Tokens pushed back with ``prepend`` are served before the live stream.
    While a ``recording()`` block is active every consumed token is also
    appended to the block's buffer.
    """

    def __init__(self, tokens: Iterable[Token]) -> None:
        self._live: Iterator[Token] = iter(tokens)
        self._pending: Deque[Token] = deque()
        self._recorders: List[List[Token]] = []
        self.current: Optional[Token] = None

    @classmethod
    def from_python(cls, obj: Any) -> "TokenReader":
        return cls(iter_tokens(obj))

    @classmethod
    def from_json(cls, text: Union[str, bytes, bytearray]) -> "TokenReader":
        """Parse a JSON document; raises ``ValueError`` on invalid JSON."""
        return cls.from_python(json.loads(text, object_pairs_hook=ObjectPairs))

    def _fill(self, n: int) -> bool:
        while len(self._pending) < n:
            try:
                self._pending.append(next(self._live))
            except StopIteration:
                return False
        return True

    def next_token(self) -> Optional[Token]:
        """Consume and return the next token, or None at the end."""
        if not self._fill(1):
            self.current = None
            return None
        token = self._pending.popleft()
        for buffer in self._recorders:
            buffer.append(token)
        self.current = token
        return token

    def peek(self, offset: int = 0) -> Optional[Token]:
        """Look ``offset`` tokens ahead without consuming anything."""
        if not self._fill(offset + 1):
            return None
        return self._pending[offset]

    def prepend(self, tokens: Iterable[Token]) -> None:
        self._pending.extendleft(reversed(list(tokens)))

    def at_end(self) -> bool:
        return self.peek() is None

    @contextmanager
    def recording(self) -> Iterator[List[Token]]:
        buffer: List[Token] = []
        self._recorders.append(buffer)
        try:
            yield buffer
        finally:
            self._recorders.remove(buffer)


class TokenWriter:
    """
    Token sink that materializes the written document.

    Field names, scalars and struct markers must be written in a valid JSON
    order; ``to_python`` raises ``ValueError`` otherwise.
    """

    def __init__(self) -> None:
        self.tokens: List[Token] = []

    def write_start_object(self) -> None:
        self.tokens.append(START_OBJECT)

    def write_end_object(self) -> None:
        self.tokens.append(END_OBJECT)

    def write_start_array(self) -> None:
        self.tokens.append(START_ARRAY)

    def write_end_array(self) -> None:
        self.tokens.append(END_ARRAY)

    def write_field_name(self, name: str) -> None:
        self.tokens.append(field_name(name))

    def write_string(self, value: str) -> None:
        self.tokens.append(Token(JsonToken.VALUE_STRING, value))

    def write_number(self, value: Union[int, float]) -> None:
        if isinstance(value, int):
            self.tokens.append(Token(JsonToken.VALUE_NUMBER_INT, value))
        else:
            self.tokens.append(Token(JsonToken.VALUE_NUMBER_FLOAT, value))

    def write_boolean(self, value: bool) -> None:
        self.tokens.append(Token(JsonToken.VALUE_TRUE if value else JsonToken.VALUE_FALSE, value))

    def write_null(self) -> None:
        self.tokens.append(Token(JsonToken.VALUE_NULL))

    def to_python(self) -> Any:
        return build(self.tokens)

    def to_json(self, *, indent: Optional[int] = None) -> str:
        separators = (",", ":") if indent is None else None
        return json.dumps(self.to_python(), indent=indent, separators=separators, ensure_ascii=False)


_ROOT = object()


def build(tokens: Iterable[Token]) -> Any:
    """Assemble a single JSON-compatible value from a token stream."""
    stack: List[Any] = []
    names: List[Any] = []
    result: Any = _ROOT

    def attach(value: Any) -> None:
        nonlocal result
        if not stack:
            if result is not _ROOT:
                raise ValueError("more than one top-level value")
            result = value
        elif isinstance(stack[-1], dict):
            if names[-1] is None:
                raise ValueError("object member without a field name")
            stack[-1][names[-1]] = value
            names[-1] = None
        else:
            stack[-1].append(value)

    for token in tokens:
        kind = token.kind
        if kind is JsonToken.START_OBJECT or kind is JsonToken.START_ARRAY:
            container: Any = {} if kind is JsonToken.START_OBJECT else []
            attach(container)
            stack.append(container)
            names.append(None)
        elif kind is JsonToken.END_OBJECT or kind is JsonToken.END_ARRAY:
            expected = dict if kind is JsonToken.END_OBJECT else list
            if not stack or not isinstance(stack[-1], expected):
                raise ValueError(f"unbalanced {token.describe()}")
            stack.pop()
            names.pop()
        elif kind is JsonToken.FIELD_NAME:
            if not stack or not isinstance(stack[-1], dict) or names[-1] is not None:
                raise ValueError(f"unexpected {token.describe()}")
            names[-1] = token.value
        elif kind is JsonToken.VALUE_NULL:
            attach(None)
        else:
            attach(token.value)

    if stack:
        raise ValueError("unterminated structure")
    if result is _ROOT:
        raise ValueError("no value written")
    return result


__all__ = [
    "JsonToken",
    "Token",
    "START_OBJECT",
    "END_OBJECT",
    "START_ARRAY",
    "END_ARRAY",
    "field_name",
    "ObjectPairs",
    "iter_tokens",
    "TokenReader",
    "TokenWriter",
    "build",
]
