"""Shared topology fixtures.

Diagrams show link costs as ``forward/reverse`` and capacities in brackets.
"""

from __future__ import annotations

from typing import Callable, Iterable, Tuple

import pytest

from netpaths.graph.build import build_graph
from netpaths.model.network import Link, Node, Topology

LinkSpec = Tuple[str, str, str, float, float, float]


def _make_topology(nodes: Iterable[str], links: Iterable[LinkSpec]) -> Topology:
    topo = Topology()
    for node_id in nodes:
        topo.add_node(Node(node_id))
    for link_id, source, target, fwd, rev, cap in links:
        topo.add_link(
            Link(
                link_id,
                source,
                target,
                forward_cost=fwd,
                reverse_cost=rev,
                capacity=cap,
            )
        )
    return topo


@pytest.fixture
def topology_factory() -> Callable[..., Topology]:
    """Build a Topology from node ids and (id, src, dst, fwd, rev, cap) tuples."""
    return _make_topology


@pytest.fixture
def square_topology() -> Topology:
    #        10/10 [100]
    #     A ─────────── B
    #     │             │
    # 5/5 │[100]   10/10│[50]
    #     │             │
    #     C ─────────── D
    #         5/5 [100]
    return _make_topology(
        "ABCD",
        [
            ("ab", "A", "B", 10, 10, 100),
            ("bd", "B", "D", 10, 10, 50),
            ("ac", "A", "C", 5, 5, 100),
            ("cd", "C", "D", 5, 5, 100),
        ],
    )


@pytest.fixture
def square_graph(square_topology):
    return build_graph(square_topology)


@pytest.fixture
def single_link_topology() -> Topology:
    #     7/3 [40]
    #  A ────────── B
    return _make_topology("AB", [("ab", "A", "B", 7, 3, 40)])


@pytest.fixture
def disconnected_topology() -> Topology:
    #  A ── B     C ── D
    return _make_topology(
        "ABCD",
        [("ab", "A", "B", 1, 1, 10), ("cd", "C", "D", 1, 1, 10)],
    )


@pytest.fixture
def shared_link_topology() -> Topology:
    # The cheapest backup from S to T reuses S-A; the cheapest link-disjoint
    # backup goes S-B-T.
    #
    #        1        1
    #   S ────── A ────── T
    #   │        │1       │
    #   │5       │        │1
    #   └─────── B ───────┘
    return _make_topology(
        "SABT",
        [
            ("sa", "S", "A", 1, 1, 10),
            ("at", "A", "T", 1, 1, 10),
            ("ab", "A", "B", 1, 1, 10),
            ("bt", "B", "T", 1, 1, 10),
            ("sb", "S", "B", 5, 5, 10),
        ],
    )


@pytest.fixture
def weighted_mesh_topology() -> Topology:
    # Symmetric costs are distinct powers of two, so every simple path has a
    # unique cost and rankings can be compared with other implementations.
    return _make_topology(
        "ABCDE",
        [
            ("ab", "A", "B", 1, 1, 10),
            ("ac", "A", "C", 2, 2, 20),
            ("bc", "B", "C", 4, 4, 30),
            ("bd", "B", "D", 8, 8, 40),
            ("cd", "C", "D", 16, 16, 50),
            ("ce", "C", "E", 32, 32, 60),
            ("de", "D", "E", 64, 64, 70),
            ("ae", "A", "E", 128, 128, 80),
        ],
    )
