# SPDX-License-Identifier: Apache-2.0
"""
Jolt — graph entities.

Asserts:
  • nodes write id, labels, properties in that order; empty labels and
    properties are an empty list and an empty map, never null
  • relationships use the positional profile in strict mode and the named
    profile in sparse mode; decoding accepts both
  • paths write relationships traversed against their direction under <-
    and decoding restores the stored direction
  • malformed entity payloads raise PayloadFormatError
"""

import pytest

from jolt_sdk.jolt import JoltCodec
from jolt_sdk.jolt.errors import InvalidValue, PayloadFormatError, TagKindMismatch
from jolt_sdk.jolt.types import Node, Path, Relationship, ReversedRelationship


# ---------------------------------------------------------------------------
# Nodes
# ---------------------------------------------------------------------------

def test_node_strict(strict_codec, node_a):
    assert strict_codec.encode(node_a) == (
        '{"()":{"id":{"Z":"1"},"labels":{"[]":[{"U":"Person"}]},'
        '"properties":{"{}":{"name":{"U":"A"}}}}}'
    )


def test_node_sparse(sparse_codec, node_a):
    assert sparse_codec.encode(node_a) == (
        '{"()":{"id":1,"labels":{"[]":[{"U":"Person"}]},'
        '"properties":{"{}":{"name":{"U":"A"}}}}}'
    )


def test_node_without_labels_or_properties(strict_codec):
    assert strict_codec.encode(Node(5)) == '{"()":{"id":{"Z":"5"},"labels":{"[]":[]},"properties":{"{}":{}}}}'


def test_node_round_trip(codec, node_c):
    decoded = codec.decode(codec.encode(node_c))
    assert decoded == node_c
    assert decoded.labels == ("Person", "Admin")


def test_node_with_wide_id(codec):
    node = Node(2 ** 40, ("X",))
    assert codec.decode(codec.encode(node)) == node


def test_node_equality_ignores_label_order():
    assert Node(1, ("A", "B")) == Node(1, ("B", "A"))
    assert Node(1, ("A",)) != Node(1, ("B",))


def test_node_fields_in_any_order(strict_codec):
    text = '{"()":{"properties":{"{}":{}},"labels":{"[]":[]},"id":{"Z":"7"}}}'
    assert strict_codec.decode(text) == Node(7)


@pytest.mark.parametrize(
    "payload",
    [
        '{"id":{"Z":"7"},"labels":{"[]":[]}}',
        '{"id":{"Z":"7"},"labels":{"[]":[]},"properties":{"{}":{}},"extra":{"U":"x"}}',
        '{"id":{"R":"7.5"},"labels":{"[]":[]},"properties":{"{}":{}}}',
        '{"id":{"Z":"7"},"labels":{"[]":[{"Z":"1"}]},"properties":{"{}":{}}}',
        '{"id":{"Z":"7"},"id":{"Z":"8"},"labels":{"[]":[]},"properties":{"{}":{}}}',
        '[]',
    ],
)
def test_malformed_node(strict_codec, payload):
    with pytest.raises(PayloadFormatError):
        strict_codec.decode('{"()":%s}' % payload)


def test_node_labels_must_be_a_list(strict_codec):
    with pytest.raises(TagKindMismatch):
        strict_codec.decode('{"()":{"id":{"Z":"7"},"labels":{"U":"x"},"properties":{"{}":{}}}}')


def test_node_rejects_non_string_labels():
    with pytest.raises(InvalidValue):
        Node(1, (1,))


# ---------------------------------------------------------------------------
# Relationships
# ---------------------------------------------------------------------------

REL = Relationship(10, 1, 2, "REL", {"since": 2020})


def test_relationship_positional_in_strict(strict_codec):
    assert strict_codec.encode(REL) == '{"->":[10,1,"REL",2,{"since":{"Z":"2020"}}]}'


def test_relationship_named_in_sparse(sparse_codec):
    assert sparse_codec.encode(REL) == (
        '{"->":{"id":10,"type":{"U":"REL"},"startNodeId":1,"endNodeId":2,'
        '"properties":{"{}":{"since":2020}}}}'
    )


def test_relationship_round_trip(codec):
    assert codec.decode(codec.encode(REL)) == REL


NAMED_TAGGED = (
    '{"->":{"id":{"Z":"10"},"type":{"U":"REL"},"startNodeId":{"Z":"1"},"endNodeId":{"Z":"2"},'
    '"properties":{"{}":{"since":{"Z":"2020"}}}}}'
)


def test_decode_accepts_both_profiles(codec):
    assert codec.decode(JoltCodec("strict").encode(REL)) == REL
    assert codec.decode(NAMED_TAGGED) == REL


def test_sparse_decodes_named_profile_with_bare_ids(sparse_codec):
    assert sparse_codec.decode(sparse_codec.encode(REL)) == REL


def test_relationship_with_wide_ids(codec):
    rel = Relationship(2 ** 40, 2 ** 41, 3, "BIG")
    assert codec.decode(codec.encode(rel)) == rel


def test_reversed_relationship_swaps_endpoints(strict_codec):
    rev = ReversedRelationship(Relationship(11, 3, 2, "REL2"))
    assert rev.start_node_id == 2 and rev.end_node_id == 3
    assert strict_codec.encode(rev) == '{"<-":[11,2,"REL2",3,{}]}'


def test_reversed_relationship_decodes_to_stored_direction(strict_codec):
    decoded = strict_codec.decode('{"<-":[11,2,"REL2",3,{}]}')
    assert decoded == Relationship(11, 3, 2, "REL2")


def test_requested_relationship_accepts_reversed(strict_codec):
    decoded = strict_codec.decode('{"<-":[11,2,"REL2",3,{}]}', kind="relationship")
    assert isinstance(decoded, Relationship)


@pytest.mark.parametrize(
    "payload",
    [
        '[10,1,"REL",2]',
        '[10,1,"REL",2,{},5]',
        '["10",1,"REL",2,{}]',
        '[10,1,{"U":"REL"},2,{}]',
        '{"id":10,"type":{"U":"REL"},"startNodeId":1,"properties":{"{}":{}}}',
        '{"id":10,"type":null,"startNodeId":1,"endNodeId":2,"properties":{"{}":{}}}',
        '"REL"',
    ],
)
def test_malformed_relationship(sparse_codec, payload):
    with pytest.raises(PayloadFormatError):
        sparse_codec.decode('{"->":%s}' % payload)


# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------

def test_path_writes_reversed_relationship(strict_codec, forward_and_back_path):
    text = strict_codec.encode(forward_and_back_path)
    assert text.startswith('{"..":[{"()":')
    assert '{"->":[10,1,"REL",2,{"since":{"Z":"2020"}}]}' in text
    assert '{"<-":[11,2,"REL2",3,{}]}' in text
    assert '"->":[11' not in text


def test_path_round_trip(codec, forward_and_back_path):
    decoded = codec.decode(codec.encode(forward_and_back_path))
    assert isinstance(decoded, Path)
    assert decoded == forward_and_back_path
    assert decoded.relationships[1].start_node_id == 3
    assert decoded.length == 2


def test_single_node_path(codec, node_a):
    path = Path((node_a,))
    decoded = codec.decode(codec.encode(path))
    assert decoded == path
    assert decoded.length == 0
    assert decoded.start == decoded.end == node_a


def test_path_shape_is_validated(strict_codec, node_a, node_b):
    node_text = strict_codec.encode(node_a)
    with pytest.raises(PayloadFormatError):
        strict_codec.decode('{"..":[%s,%s]}' % (node_text, strict_codec.encode(node_b)))
    with pytest.raises(PayloadFormatError):
        strict_codec.decode('{"..":[]}')


def test_path_elements_must_be_entities(strict_codec, node_a):
    with pytest.raises(PayloadFormatError):
        strict_codec.decode('{"..":[{"U":"x"}]}')


def test_path_relationship_must_connect_neighbours(node_a, node_b):
    with pytest.raises(InvalidValue):
        Path((node_a, Relationship(99, 1, 42, "X"), node_b))
