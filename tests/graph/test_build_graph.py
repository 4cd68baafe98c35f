import math

import pytest

from netpaths.errors import InvalidMetric, InvalidTopology
from netpaths.graph.build import build_graph
from netpaths.graph.strict_multidigraph import StrictMultiDiGraph
from netpaths.model.network import Link, Node, Topology
from netpaths.types.dto import EdgeRef


def _topology(*links):
    return Topology(
        nodes={n: Node(n) for n in "ABC"},
        links={link.id: link for link in links},
    )


def test_each_link_becomes_two_arcs(single_link_topology):
    graph = build_graph(single_link_topology)
    assert isinstance(graph, StrictMultiDiGraph)
    assert set(graph.nodes) == {"A", "B"}
    assert graph.number_of_edges() == 2

    fwd = graph.get_edge_attr(EdgeRef("ab", "fwd"))
    rev = graph.get_edge_attr(EdgeRef("ab", "rev"))
    assert (fwd["cost"], fwd["reverse_cost"], fwd["capacity"]) == (7, 3, 40)
    assert (rev["cost"], rev["reverse_cost"], rev["capacity"]) == (3, 7, 40)
    assert fwd["link_id"] == rev["link_id"] == "ab"
    assert [(v, key) for v, key, _ in graph.out_arcs("A")] == [("B", EdgeRef("ab", "fwd"))]
    assert [(v, key) for v, key, _ in graph.out_arcs("B")] == [("A", EdgeRef("ab", "rev"))]


def test_interfaces_follow_direction():
    topo = _topology(
        Link("ab", "A", "B", cost=1, source_interface="a0", target_interface="b0")
    )
    graph = build_graph(topo)
    assert graph.get_edge_attr(EdgeRef("ab", "fwd"))["interface"] == "a0"
    assert graph.get_edge_attr(EdgeRef("ab", "rev"))["interface"] == "b0"


def test_node_names_are_attributes():
    topo = Topology(nodes={"A": Node("A", name="Amsterdam"), "B": Node("B")})
    graph = build_graph(topo)
    assert graph.nodes["A"]["name"] == "Amsterdam"
    assert graph.nodes["B"]["name"] == "B"


def test_arc_enumeration_follows_link_insertion_order():
    topo = _topology(
        Link("second", "A", "C", cost=1),
        Link("first", "A", "B", cost=1),
        Link("parallel", "A", "B", cost=1),
    )
    graph = build_graph(topo)
    assert [key for _, key, _ in graph.out_arcs("A")] == [
        EdgeRef("second", "fwd"),
        EdgeRef("first", "fwd"),
        EdgeRef("parallel", "fwd"),
    ]


def test_unknown_endpoint_is_invalid_topology():
    topo = _topology(Link("az", "A", "Z", cost=1))
    with pytest.raises(InvalidTopology, match="unknown node 'Z'"):
        build_graph(topo)


def test_self_loop_is_invalid_topology():
    topo = _topology(Link("aa", "A", "A", cost=1))
    with pytest.raises(InvalidTopology, match="self-loop"):
        build_graph(topo)


@pytest.mark.parametrize(
    "link",
    [
        Link("ab", "A", "B", forward_cost=-1, reverse_cost=1),
        Link("ab", "A", "B", forward_cost=1, reverse_cost=-0.5),
        Link("ab", "A", "B", cost=math.nan),
        Link("ab", "A", "B"),
        Link("ab", "A", "B", forward_cost=1),
        Link("ab", "A", "B", cost=1, capacity=-10),
        Link("ab", "A", "B", cost=1, capacity=math.nan),
        Link("ab", "A", "B", cost=1, capacity=10, utilization=101),
        Link("ab", "A", "B", cost=1, capacity=10, utilization=-5),
        Link("ab", "A", "B", cost=1, capacity=10, utilization=math.nan),
    ],
)
def test_bad_metrics_are_rejected(link):
    with pytest.raises(InvalidMetric):
        build_graph(_topology(link))


def test_zero_cost_and_zero_capacity_are_allowed():
    graph = build_graph(_topology(Link("ab", "A", "B", cost=0, capacity=0)))
    assert graph.get_edge_attr(EdgeRef("ab", "fwd"))["cost"] == 0


def test_topology_is_not_modified(square_topology):
    before = square_topology.to_dict()
    build_graph(square_topology)
    assert square_topology.to_dict() == before


class TestStrictMultiDiGraph:
    def test_add_edge_requires_existing_nodes(self):
        g = StrictMultiDiGraph()
        g.add_node("A")
        with pytest.raises(ValueError, match="Target node 'B' does not exist"):
            g.add_edge("A", "B", EdgeRef("ab", "fwd"), cost=1)
        with pytest.raises(ValueError, match="Source node 'B' does not exist"):
            g.add_edge("B", "A", EdgeRef("ab", "rev"), cost=1)

    def test_duplicate_node_and_key_rejected(self):
        g = StrictMultiDiGraph()
        g.add_node("A")
        g.add_node("B")
        with pytest.raises(ValueError, match="already exists"):
            g.add_node("A")
        key = g.add_edge("A", "B", EdgeRef("ab", "fwd"), cost=1)
        assert key == EdgeRef("ab", "fwd")
        with pytest.raises(ValueError, match="already exists"):
            g.add_edge("A", "B", EdgeRef("ab", "fwd"), cost=2)

    def test_lookup_helpers(self):
        g = StrictMultiDiGraph()
        g.add_node("A")
        g.add_node("B")
        g.add_edge("A", "B", EdgeRef("ab", "fwd"), cost=1)
        assert EdgeRef("ab", "fwd") in g.get_edges()
        assert EdgeRef("ab", "rev") not in g.get_edges()
        assert list(g.out_arcs("B")) == []
        assert g.get_edges()[EdgeRef("ab", "fwd")][:2] == ("A", "B")
        with pytest.raises(ValueError, match="not found"):
            g.get_edge_attr(EdgeRef("zz", "fwd"))


def test_utilization_is_carried_on_both_arcs():
    graph = build_graph(
        _topology(Link("ab", "A", "B", cost=1, capacity=10, utilization=40))
    )
    assert graph.get_edge_attr(EdgeRef("ab", "fwd"))["utilization"] == 40
    assert graph.get_edge_attr(EdgeRef("ab", "rev"))["utilization"] == 40
