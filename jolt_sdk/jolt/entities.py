# jolt_sdk/jolt/entities.py
# SPDX-License-Identifier: Apache-2.0
"""
Graph entity payloads: nodes, relationships and paths.

Node
    {"()": {"id": <v>, "labels": <v>, "properties": <v>}}

Relationship, positional profile (strict mode)
    {"->": [id, startId, "TYPE", endId, {"key": <v>, ...}]}

Relationship, named profile (sparse mode)
    {"->": {"id": <v>, "type": <v>, "startNodeId": <v>,
            "endNodeId": <v>, "properties": <v>}}

Path
    {"..": [<node>, <rel>, <node>, ...]}

``<v>`` is any value dispatched back through the codec. A relationship that a
path traverses against its direction is written under ``<-`` with start and
end swapped; decoding restores the stored direction.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, Dict, List, Mapping, Tuple, Union

from .containers import expect_token, read_map_payload, write_map_payload
from .errors import InvalidValue, PayloadFormatError, StructureExpected
from .mode import RelationshipProfile
from .sigil import ValueKind
from .tokens import JsonToken, TokenReader, TokenWriter
from .types import Node, Path, Relationship, ReversedRelationship

if TYPE_CHECKING:
    from .codec import JoltCodec

AnyRelationship = Union[Relationship, ReversedRelationship]

NODE_FIELDS: Dict[str, ValueKind] = {
    "id": ValueKind.WIDE_NUMBER,
    "labels": ValueKind.LIST,
    "properties": ValueKind.MAP,
}

RELATIONSHIP_FIELDS: Dict[str, ValueKind] = {
    "id": ValueKind.WIDE_NUMBER,
    "type": ValueKind.TEXT,
    "startNodeId": ValueKind.WIDE_NUMBER,
    "endNodeId": ValueKind.WIDE_NUMBER,
    "properties": ValueKind.MAP,
}


# =============================================================================
# Helpers
# =============================================================================

def _read_fields(
    codec: "JoltCodec",
    reader: TokenReader,
    fields: Mapping[str, ValueKind],
    entity: str,
) -> Dict[str, Any]:
    expect_token(reader, JsonToken.START_OBJECT, f"{entity} must be expressed as an object")
    values: Dict[str, Any] = {}
    while True:
        token = reader.next_token()
        if token is None:
            raise StructureExpected(f"unterminated {entity}")
        if token.kind is JsonToken.END_OBJECT:
            break
        name = token.value
        if name not in fields:
            raise PayloadFormatError(f"unknown {entity} field {name!r}", details={"field": name})
        if name in values:
            raise PayloadFormatError(f"duplicate {entity} field {name!r}", details={"field": name})
        values[name] = codec.read_value(reader, fields[name])

    missing = [name for name in fields if name not in values]
    if missing:
        raise PayloadFormatError(f"{entity} is missing fields {missing}", details={"missing": missing})
    return values


def _as_id(value: Any, field: str) -> int:
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if isinstance(value, bool) or not isinstance(value, int):
        raise PayloadFormatError(f"{field} must be an integral id, got {value!r}", details={"field": field})
    return value


def _read_bare_id(reader: TokenReader, field: str) -> int:
    token = expect_token(reader, JsonToken.VALUE_NUMBER_INT, f"{field} must be a bare integer", field=field)
    return token.value


def _build(factory: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
    try:
        return factory(*args, **kwargs)
    except InvalidValue as e:
        raise PayloadFormatError(e.message, details=e.details or None) from e


# =============================================================================
# Node
# =============================================================================

def write_node_payload(codec: "JoltCodec", writer: TokenWriter, node: Node) -> None:
    writer.write_start_object()
    writer.write_field_name("id")
    codec.write_value(writer, node.id)
    writer.write_field_name("labels")
    codec.write_value(writer, list(node.labels))
    writer.write_field_name("properties")
    codec.write_value(writer, dict(node.properties))
    writer.write_end_object()


def read_node_payload(codec: "JoltCodec", reader: TokenReader, requested: Any = None) -> Node:
    fields = _read_fields(codec, reader, NODE_FIELDS, "node")
    labels = fields["labels"] or []
    return _build(
        Node,
        _as_id(fields["id"], "id"),
        tuple(labels),
        fields["properties"] or {},
    )


# =============================================================================
# Relationship
# =============================================================================

def write_relationship_positional(codec: "JoltCodec", writer: TokenWriter, rel: AnyRelationship) -> None:
    writer.write_start_array()
    writer.write_number(rel.id)
    writer.write_number(rel.start_node_id)
    writer.write_string(rel.type)
    writer.write_number(rel.end_node_id)
    write_map_payload(codec, writer, rel.properties)
    writer.write_end_array()


def write_relationship_named(codec: "JoltCodec", writer: TokenWriter, rel: AnyRelationship) -> None:
    writer.write_start_object()
    writer.write_field_name("id")
    codec.write_value(writer, rel.id)
    writer.write_field_name("type")
    codec.write_value(writer, rel.type)
    writer.write_field_name("startNodeId")
    codec.write_value(writer, rel.start_node_id)
    writer.write_field_name("endNodeId")
    codec.write_value(writer, rel.end_node_id)
    writer.write_field_name("properties")
    codec.write_value(writer, dict(rel.properties))
    writer.write_end_object()


RELATIONSHIP_WRITERS: Dict[RelationshipProfile, Callable[["JoltCodec", TokenWriter, AnyRelationship], None]] = {
    RelationshipProfile.POSITIONAL: write_relationship_positional,
    RelationshipProfile.NAMED: write_relationship_named,
}


def write_relationship_payload(codec: "JoltCodec", writer: TokenWriter, rel: AnyRelationship) -> None:
    RELATIONSHIP_WRITERS[codec.policy.relationship_profile](codec, writer, rel)


def _read_positional(codec: "JoltCodec", reader: TokenReader) -> Tuple[int, int, str, int, Dict[str, Any]]:
    expect_token(reader, JsonToken.START_ARRAY, "positional relationship must be an array")
    rel_id = _read_bare_id(reader, "id")
    start = _read_bare_id(reader, "start")
    rel_type = expect_token(reader, JsonToken.VALUE_STRING, "type must be a bare string", field="type").value
    end = _read_bare_id(reader, "end")
    properties = read_map_payload(codec, reader)
    expect_token(reader, JsonToken.END_ARRAY, "positional relationship must have exactly five elements")
    return rel_id, start, rel_type, end, properties


def _read_named(codec: "JoltCodec", reader: TokenReader) -> Tuple[int, int, str, int, Dict[str, Any]]:
    fields = _read_fields(codec, reader, RELATIONSHIP_FIELDS, "relationship")
    return (
        _as_id(fields["id"], "id"),
        _as_id(fields["startNodeId"], "startNodeId"),
        fields["type"],
        _as_id(fields["endNodeId"], "endNodeId"),
        fields["properties"] or {},
    )


def _read_relationship_fields(codec: "JoltCodec", reader: TokenReader) -> Tuple[int, int, str, int, Dict[str, Any]]:
    token = reader.peek()
    if token is not None and token.kind is JsonToken.START_ARRAY:
        return _read_positional(codec, reader)
    if token is not None and token.kind is JsonToken.START_OBJECT:
        return _read_named(codec, reader)
    found = "end of input" if token is None else token.describe()
    raise PayloadFormatError(f"relationship must be an array or an object (found {found})")


def read_relationship_payload(codec: "JoltCodec", reader: TokenReader, requested: Any = None) -> Relationship:
    rel_id, start, rel_type, end, properties = _read_relationship_fields(codec, reader)
    return _build(Relationship, rel_id, start, end, rel_type, properties)


def read_reversed_relationship_payload(codec: "JoltCodec", reader: TokenReader, requested: Any = None) -> Relationship:
    """Read a ``<-`` payload and return the relationship in its stored direction."""
    rel_id, start, rel_type, end, properties = _read_relationship_fields(codec, reader)
    return _build(Relationship, rel_id, end, start, rel_type, properties)


# =============================================================================
# Path
# =============================================================================

def write_path_payload(codec: "JoltCodec", writer: TokenWriter, path: Path) -> None:
    writer.write_start_array()
    last_node_id = None
    for element in path.elements:
        if isinstance(element, Node):
            last_node_id = element.id
            codec.write_value(writer, element)
        elif element.start_node_id == last_node_id:
            codec.write_value(writer, element)
        else:
            codec.write_value(writer, ReversedRelationship(element))
    writer.write_end_array()


def read_path_payload(codec: "JoltCodec", reader: TokenReader, requested: Any = None) -> Path:
    expect_token(reader, JsonToken.START_ARRAY, "Jolt path type must be expressed as an array")
    elements: List[Any] = []
    while True:
        token = reader.peek()
        if token is None:
            raise StructureExpected("unterminated path")
        if token.kind is JsonToken.END_ARRAY:
            reader.next_token()
            break
        element = codec.read_value(reader)
        if not isinstance(element, (Node, Relationship)):
            raise PayloadFormatError(
                f"path element {len(elements)} is not a node or relationship",
                details={"index": len(elements)},
            )
        elements.append(element)
    return _build(Path, tuple(elements))


__all__ = [
    "NODE_FIELDS",
    "RELATIONSHIP_FIELDS",
    "write_node_payload",
    "read_node_payload",
    "write_relationship_positional",
    "write_relationship_named",
    "RELATIONSHIP_WRITERS",
    "write_relationship_payload",
    "read_relationship_payload",
    "read_reversed_relationship_payload",
    "write_path_payload",
    "read_path_payload",
]
