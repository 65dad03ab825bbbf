# SPDX-License-Identifier: Apache-2.0
"""
Shared fixtures for the Jolt test-suite.

- ``strict_codec`` / ``sparse_codec``: one codec per mode
- ``codec``: parametrized over both modes
- ``metrics``: capturing MetricsSink wired into ``metered_codec``
- graph fixtures for the (A)-[:REL]->(B)<-[:REL2]-(C) path
"""

from __future__ import annotations

from typing import Any, List, Mapping, Optional

import pytest

from jolt_sdk.jolt import JoltCodec, MetricsSink, Node, Path, Relationship


class CaptureMetrics(MetricsSink):
    def __init__(self) -> None:
        self.observations: List[dict] = []
        self.counters: List[dict] = []

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
        self.observations.append(
            {"component": component, "op": op, "ok": ok, "code": code, "extra": dict(extra or {})}
        )

    def counter(
        self,
        *,
        component: str,
        name: str,
        value: int = 1,
        extra: Optional[Mapping[str, Any]] = None,
    ) -> None:
        self.counters.append(
            {"component": component, "name": name, "value": value, "extra": dict(extra or {})}
        )


@pytest.fixture
def strict_codec() -> JoltCodec:
    return JoltCodec("strict")


@pytest.fixture
def sparse_codec() -> JoltCodec:
    return JoltCodec("sparse")


@pytest.fixture(params=["strict", "sparse"])
def codec(request) -> JoltCodec:
    return JoltCodec(request.param)


@pytest.fixture
def metrics() -> CaptureMetrics:
    return CaptureMetrics()


@pytest.fixture
def metered_codec(metrics: CaptureMetrics) -> JoltCodec:
    return JoltCodec("strict", metrics=metrics)


@pytest.fixture
def node_a() -> Node:
    return Node(1, ("Person",), {"name": "A"})


@pytest.fixture
def node_b() -> Node:
    return Node(2, ("Person",), {"name": "B"})


@pytest.fixture
def node_c() -> Node:
    return Node(3, ("Person", "Admin"), {"name": "C"})


@pytest.fixture
def forward_and_back_path(node_a: Node, node_b: Node, node_c: Node) -> Path:
    """(A)-[:REL]->(B)<-[:REL2]-(C)"""
    rel = Relationship(10, 1, 2, "REL", {"since": 2020})
    rel2 = Relationship(11, 3, 2, "REL2")
    return Path((node_a, rel, node_b, rel2, node_c))
