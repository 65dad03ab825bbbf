# SPDX-License-Identifier: Apache-2.0
"""
Jolt — streaming token primitive.

Asserts:
  • iter_tokens walks parsed JSON in document order
  • JSON text keeps repeated object keys as separate fields
  • TokenReader supports look-ahead, push-back and recording
  • TokenWriter output is compact JSON; malformed token orders are rejected
"""

import pytest

from jolt_sdk.jolt.tokens import (
    END_OBJECT,
    START_OBJECT,
    JsonToken,
    ObjectPairs,
    Token,
    TokenReader,
    TokenWriter,
    build,
    field_name,
    iter_tokens,
)


def test_iter_tokens_document_order():
    kinds = [t.kind for t in iter_tokens({"a": [1, 2.5, "x", True, None]})]
    assert kinds == [
        JsonToken.START_OBJECT,
        JsonToken.FIELD_NAME,
        JsonToken.START_ARRAY,
        JsonToken.VALUE_NUMBER_INT,
        JsonToken.VALUE_NUMBER_FLOAT,
        JsonToken.VALUE_STRING,
        JsonToken.VALUE_TRUE,
        JsonToken.VALUE_NULL,
        JsonToken.END_ARRAY,
        JsonToken.END_OBJECT,
    ]


def test_from_json_keeps_repeated_keys():
    reader = TokenReader.from_json('{"a":1,"a":2}')
    tokens = []
    while not reader.at_end():
        tokens.append(reader.next_token())
    assert tokens == [
        START_OBJECT,
        field_name("a"),
        Token(JsonToken.VALUE_NUMBER_INT, 1),
        field_name("a"),
        Token(JsonToken.VALUE_NUMBER_INT, 2),
        END_OBJECT,
    ]


def test_object_pairs_walk_in_order():
    pairs = ObjectPairs([("b", "x"), ("a", None)])
    assert [t.value for t in iter_tokens(pairs) if t.kind is JsonToken.FIELD_NAME] == ["b", "a"]


def test_iter_tokens_rejects_non_json():
    with pytest.raises(TypeError):
        list(iter_tokens({1, 2}))


def test_peek_does_not_consume():
    reader = TokenReader.from_json('{"Z":"1"}')
    assert reader.peek(1) == field_name("Z")
    assert reader.next_token() == START_OBJECT
    assert reader.current == START_OBJECT
    assert reader.next_token() == field_name("Z")


def test_prepend_is_served_first():
    reader = TokenReader.from_json('"live"')
    reader.prepend([START_OBJECT, END_OBJECT])
    assert [reader.next_token() for _ in range(3)] == [
        START_OBJECT,
        END_OBJECT,
        Token(JsonToken.VALUE_STRING, "live"),
    ]
    assert reader.at_end()
    assert reader.next_token() is None


def test_recording_captures_consumed_tokens_only():
    reader = TokenReader.from_json('{"T":"P42D"}')
    reader.peek(2)
    with reader.recording() as consumed:
        reader.next_token()
        reader.next_token()
    reader.next_token()
    assert consumed == [START_OBJECT, field_name("T")]


def test_invalid_json_raises_value_error():
    with pytest.raises(ValueError):
        TokenReader.from_json("{not json")


def test_writer_compact_json():
    writer = TokenWriter()
    writer.write_start_object()
    writer.write_field_name("[]")
    writer.write_start_array()
    writer.write_number(1)
    writer.write_number(2.5)
    writer.write_string("ü")
    writer.write_boolean(False)
    writer.write_null()
    writer.write_end_array()
    writer.write_end_object()
    assert writer.to_json() == '{"[]":[1,2.5,"ü",false,null]}'
    assert writer.to_python() == {"[]": [1, 2.5, "ü", False, None]}


def test_writer_indent():
    writer = TokenWriter()
    writer.write_start_array()
    writer.write_number(1)
    writer.write_end_array()
    assert writer.to_json(indent=2) == "[\n  1\n]"


@pytest.mark.parametrize(
    "tokens",
    [
        [],
        [START_OBJECT],
        [START_OBJECT, Token(JsonToken.VALUE_STRING, "x"), END_OBJECT],
        [Token(JsonToken.VALUE_NULL), Token(JsonToken.VALUE_NULL)],
        [START_OBJECT, Token(JsonToken.END_ARRAY)],
    ],
)
def test_build_rejects_malformed_streams(tokens):
    with pytest.raises(ValueError):
        build(tokens)
