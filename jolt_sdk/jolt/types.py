# jolt_sdk/jolt/types.py
# SPDX-License-Identifier: Apache-2.0
"""
Value types of the property-graph data model that have no native Python
counterpart: spatial points, ISO-8601 durations, and the graph entities
(nodes, relationships, reversed relationships and paths).

All types are immutable snapshots. Graph entities are produced once by a
query engine, encoded in a single pass and discarded; decoding produces
equal snapshots.
"""

from __future__ import annotations

import datetime
from dataclasses import dataclass
from typing import Any, Iterator, Mapping, Optional, Tuple, Union

from .errors import InvalidValue

NANOS_PER_SECOND = 1_000_000_000


# =============================================================================
# Scalar value types
# =============================================================================

@dataclass(frozen=True)
class Point:
    """
    Spatial point in a coordinate reference system.

    Attributes:
        srid: Numeric code of the coordinate reference system (e.g. 4326).
        x: First coordinate (longitude for geographic systems).
        y: Second coordinate (latitude for geographic systems).
        z: Optional third coordinate; present only for 3-D points.
    """
    srid: int
    x: float
    y: float
    z: Optional[float] = None

    def __post_init__(self) -> None:
        if isinstance(self.srid, bool) or not isinstance(self.srid, int) or self.srid < 0:
            raise InvalidValue(f"srid must be a non-negative int, got {self.srid!r}")
        for name in ("x", "y", "z"):
            value = getattr(self, name)
            if value is None:
                continue
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise InvalidValue(f"{name} must be a number, got {type(value).__name__}")
            object.__setattr__(self, name, float(value))

    @property
    def is_3d(self) -> bool:
        return self.z is not None

    @property
    def coordinates(self) -> Tuple[float, ...]:
        if self.z is None:
            return (self.x, self.y)
        return (self.x, self.y, self.z)


@dataclass(frozen=True)
class IsoDuration:
    """
    Calendar-aware amount of time (ISO-8601 duration).

    Months and days are kept apart from the clock part because their length
    depends on the instant they are applied to. Seconds and nanoseconds are
    normalized so that they share a sign and ``abs(nanoseconds) < 1e9``.
    """
    months: int = 0
    days: int = 0
    seconds: int = 0
    nanoseconds: int = 0

    def __post_init__(self) -> None:
        for name in ("months", "days", "seconds", "nanoseconds"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidValue(f"{name} must be an int, got {type(value).__name__}")
        total = self.seconds * NANOS_PER_SECOND + self.nanoseconds
        sign = -1 if total < 0 else 1
        secs, nanos = divmod(abs(total), NANOS_PER_SECOND)
        object.__setattr__(self, "seconds", sign * secs)
        object.__setattr__(self, "nanoseconds", sign * nanos)

    @classmethod
    def from_timedelta(cls, delta: datetime.timedelta) -> "IsoDuration":
        return cls(
            days=delta.days,
            seconds=delta.seconds,
            nanoseconds=delta.microseconds * 1000,
        )

    def to_timedelta(self) -> datetime.timedelta:
        """Convert to a timedelta; only possible without a month component."""
        if self.months:
            raise InvalidValue("durations with months have no fixed length")
        return datetime.timedelta(
            days=self.days,
            seconds=self.seconds,
            microseconds=int(self.nanoseconds / 1000),
        )

    @property
    def is_zero(self) -> bool:
        return not (self.months or self.days or self.seconds or self.nanoseconds)


# =============================================================================
# Graph entities
# =============================================================================

def _require_id(value: Any, name: str) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidValue(f"{name} must be an int, got {type(value).__name__}")


@dataclass(frozen=True, eq=False)
class Node:
    """
    Graph node snapshot.

    Attributes:
        id: Node identifier (64-bit integer).
        labels: Labels in source order. Equality ignores the order, encoding
            preserves it.
        properties: Property map; values are any encodable value.
    """
    id: int
    labels: Tuple[str, ...] = ()
    properties: Mapping[str, Any] = None

    def __post_init__(self) -> None:
        _require_id(self.id, "id")
        if self.properties is None:
            object.__setattr__(self, "properties", {})
        labels = tuple(self.labels or ())
        for i, label in enumerate(labels):
            if not isinstance(label, str):
                raise InvalidValue(
                    f"labels[{i}] must be a string, got {type(label).__name__}"
                )
        object.__setattr__(self, "labels", labels)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Node):
            return NotImplemented
        return (
            self.id == other.id
            and frozenset(self.labels) == frozenset(other.labels)
            and dict(self.properties) == dict(other.properties)
        )

    def __hash__(self) -> int:
        return hash(("node", self.id))


@dataclass(frozen=True)
class Relationship:
    """
    Graph relationship snapshot.

    Start and end ids refer to nodes elsewhere in the same result; they are
    carried as plain ids and never checked against actual nodes.
    """
    id: int
    start_node_id: int
    end_node_id: int
    type: str
    properties: Mapping[str, Any] = None

    def __post_init__(self) -> None:
        _require_id(self.id, "id")
        _require_id(self.start_node_id, "start_node_id")
        _require_id(self.end_node_id, "end_node_id")
        if not isinstance(self.type, str):
            raise InvalidValue(f"type must be a string, got {type(self.type).__name__}")
        if self.properties is None:
            object.__setattr__(self, "properties", {})

    def __hash__(self) -> int:
        return hash(("relationship", self.id))


@dataclass(frozen=True)
class ReversedRelationship:
    """
    Read-only view of a relationship with start and end swapped.

    Only used to present a relationship that a path traverses against its
    direction; decoding never produces one.
    """
    relationship: Relationship

    @property
    def id(self) -> int:
        return self.relationship.id

    @property
    def start_node_id(self) -> int:
        return self.relationship.end_node_id

    @property
    def end_node_id(self) -> int:
        return self.relationship.start_node_id

    @property
    def type(self) -> str:
        return self.relationship.type

    @property
    def properties(self) -> Mapping[str, Any]:
        return self.relationship.properties


PathElement = Union[Node, Relationship]


@dataclass(frozen=True)
class Path:
    """
    Alternating node/relationship sequence produced by a traversal.

    Starts and ends on a node. Each relationship connects its two neighbouring
    nodes in either direction.
    """
    elements: Tuple[PathElement, ...]

    def __post_init__(self) -> None:
        elements = tuple(self.elements)
        if not elements or len(elements) % 2 == 0:
            raise InvalidValue(
                "a path needs an odd number of elements, starting and ending on a node"
            )
        for i, element in enumerate(elements):
            expected = Node if i % 2 == 0 else Relationship
            if not isinstance(element, expected):
                raise InvalidValue(
                    f"elements[{i}] must be a {expected.__name__}, got {type(element).__name__}"
                )
        for i in range(1, len(elements), 2):
            rel = elements[i]
            ends = {elements[i - 1].id, elements[i + 1].id}
            if {rel.start_node_id, rel.end_node_id} != ends:
                raise InvalidValue(
                    f"relationship {rel.id} does not connect nodes {sorted(ends)}",
                    details={"index": i},
                )
        object.__setattr__(self, "elements", elements)

    @property
    def nodes(self) -> Tuple[Node, ...]:
        return self.elements[0::2]

    @property
    def relationships(self) -> Tuple[Relationship, ...]:
        return self.elements[1::2]

    @property
    def start(self) -> Node:
        return self.elements[0]

    @property
    def end(self) -> Node:
        return self.elements[-1]

    @property
    def length(self) -> int:
        """Number of relationships traversed."""
        return len(self.relationships)

    def __iter__(self) -> Iterator[PathElement]:
        return iter(self.elements)

    def __hash__(self) -> int:
        return hash(tuple(e.id for e in self.elements))


__all__ = [
    "NANOS_PER_SECOND",
    "Point",
    "IsoDuration",
    "Node",
    "Relationship",
    "ReversedRelationship",
    "PathElement",
    "Path",
]
