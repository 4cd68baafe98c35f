from itertools import islice

import networkx as nx
import pytest

from netpaths.algorithms.spf import Route, disjoint_paths, ksp, path_cost, spf
from netpaths.graph.build import build_graph
from netpaths.graph.strict_multidigraph import StrictMultiDiGraph
from netpaths.types.dto import EdgeRef


def _fwd(link_id):
    return EdgeRef(link_id, "fwd")


class TestSPF:
    def test_spf_from_source(self, square_graph):
        routes = spf(square_graph, "A")
        assert {n: r.cost for n, r in routes.items()} == {"A": 0, "B": 10, "C": 5, "D": 10}
        assert routes["D"].nodes == ("A", "C", "D")
        assert routes["D"].edges == (_fwd("ac"), _fwd("cd"))
        assert routes["A"] == Route(0, ("A",), ())

    def test_spf_uses_directional_costs(self, single_link_topology):
        graph = build_graph(single_link_topology)
        assert spf(graph, "A")["B"].cost == 7
        assert spf(graph, "B")["A"].cost == 3
        assert spf(graph, "B")["A"].edges == (EdgeRef("ab", "rev"),)

    def test_spf_missing_source_raises(self, square_graph):
        with pytest.raises(KeyError):
            spf(square_graph, "Z")

    def test_spf_early_exit_settles_destination(self, square_graph):
        routes = spf(square_graph, "A", dst_node="C")
        assert routes["C"].cost == 5
        assert "D" not in routes

    def test_spf_exclusions(self, square_graph):
        routes = spf(square_graph, "A", excluded_nodes={"C"})
        assert routes["D"].nodes == ("A", "B", "D")
        routes = spf(square_graph, "A", excluded_edges={_fwd("cd")})
        assert routes["D"].nodes == ("A", "B", "D")
        assert routes["D"].cost == 20

    def test_equal_cost_tie_broken_by_node_sequence(self, topology_factory):
        # C-side links are inserted first; the B-side still wins on node order.
        topo = topology_factory(
            "ABCD",
            [
                ("ac", "A", "C", 1, 1, 1),
                ("cd", "C", "D", 1, 1, 1),
                ("ab", "A", "B", 1, 1, 1),
                ("bd", "B", "D", 1, 1, 1),
            ],
        )
        assert spf(build_graph(topo), "A")["D"].nodes == ("A", "B", "D")

    def test_equal_cost_tie_broken_by_hops_first(self, topology_factory):
        topo = topology_factory(
            "ABD",
            [
                ("ab", "A", "B", 1, 1, 1),
                ("bd", "B", "D", 1, 1, 1),
                ("ad", "A", "D", 2, 2, 1),
            ],
        )
        assert spf(build_graph(topo), "A")["D"].nodes == ("A", "D")

    def test_parallel_links_pick_cheapest_then_first(self, topology_factory):
        topo = topology_factory(
            "AB",
            [
                ("slow", "A", "B", 9, 9, 1),
                ("l1", "A", "B", 5, 5, 1),
                ("l2", "A", "B", 5, 5, 1),
            ],
        )
        assert spf(build_graph(topo), "A")["B"].edges == (_fwd("l1"),)

    def test_zero_cost_arcs(self, topology_factory):
        topo = topology_factory(
            "ABC",
            [("ab", "A", "B", 0, 0, 1), ("bc", "B", "C", 0, 0, 1), ("ac", "A", "C", 0, 0, 1)],
        )
        route = spf(build_graph(topo), "A")["C"]
        assert route.cost == 0
        assert route.nodes == ("A", "C")

    def test_path_cost(self, square_graph):
        assert path_cost(square_graph, [_fwd("ac"), _fwd("cd")]) == 10
        assert path_cost(square_graph, []) == 0


class TestKSP:
    def test_ksp_primary_and_backup(self, square_graph):
        routes = list(ksp(square_graph, "A", "D", max_k=2))
        assert [r.nodes for r in routes] == [("A", "C", "D"), ("A", "B", "D")]
        assert [r.cost for r in routes] == [10, 20]

    def test_ksp_exhausts_simple_paths(self, square_graph):
        assert len(list(ksp(square_graph, "A", "D"))) == 2

    def test_ksp_no_path(self, disconnected_topology):
        graph = build_graph(disconnected_topology)
        assert list(ksp(graph, "A", "D", max_k=3)) == []

    def test_ksp_backup_may_share_links(self, shared_link_topology):
        graph = build_graph(shared_link_topology)
        routes = list(ksp(graph, "S", "T", max_k=3))
        assert [r.nodes for r in routes] == [
            ("S", "A", "T"),
            ("S", "A", "B", "T"),
            ("S", "B", "T"),
        ]
        assert [r.cost for r in routes] == [2, 3, 6]

    def test_ksp_parallel_links_are_distinct_paths(self, topology_factory):
        topo = topology_factory(
            "AB", [("l1", "A", "B", 5, 5, 10), ("l2", "A", "B", 5, 5, 100)]
        )
        routes = list(ksp(build_graph(topo), "A", "B", max_k=3))
        assert [r.edges for r in routes] == [(_fwd("l1"),), (_fwd("l2"),)]

    def test_ksp_results_are_loop_free_and_ordered(self, weighted_mesh_topology):
        graph = build_graph(weighted_mesh_topology)
        routes = list(ksp(graph, "A", "E"))
        keys = [r.key() for r in routes]
        assert keys == sorted(keys)
        assert len({r.edges for r in routes}) == len(routes)
        for r in routes:
            assert len(set(r.nodes)) == len(r.nodes)
            assert r.cost == path_cost(graph, r.edges)

    def test_ksp_matches_networkx_simple_paths(self, weighted_mesh_topology):
        graph = build_graph(weighted_mesh_topology)
        reference = nx.DiGraph()
        for u, v, _, attr in graph.get_edges().values():
            reference.add_edge(u, v, weight=attr["cost"])

        for src, dst in [("A", "E"), ("B", "E"), ("D", "A")]:
            expected = [
                tuple(p)
                for p in islice(nx.shortest_simple_paths(reference, src, dst, weight="weight"), 6)
            ]
            ours = [r.nodes for r in ksp(graph, src, dst, max_k=6)]
            assert ours == expected

    def test_ksp_is_deterministic(self, weighted_mesh_topology):
        graph = build_graph(weighted_mesh_topology)
        first = list(ksp(graph, "A", "E", max_k=5))
        for _ in range(3):
            assert list(ksp(graph, "A", "E", max_k=5)) == first

    def test_ksp_global_exclusions(self, square_graph):
        routes = list(ksp(square_graph, "A", "D", excluded_nodes={"C"}))
        assert [r.nodes for r in routes] == [("A", "B", "D")]


class TestDisjointPaths:
    def test_disjoint_backup_avoids_primary_links(self, shared_link_topology):
        graph = build_graph(shared_link_topology)
        routes = list(disjoint_paths(graph, "S", "T", max_k=3))
        assert [r.nodes for r in routes] == [("S", "A", "T"), ("S", "B", "T")]
        links = [{e.link_id for e in r.edges} for r in routes]
        assert links[0].isdisjoint(links[1])

    def test_disjoint_costs_non_decreasing(self, weighted_mesh_topology):
        graph = build_graph(weighted_mesh_topology)
        routes = list(disjoint_paths(graph, "A", "E"))
        assert len(routes) >= 2
        costs = [r.cost for r in routes]
        assert costs == sorted(costs)

    def test_disjoint_no_path(self, disconnected_topology):
        graph = build_graph(disconnected_topology)
        assert list(disjoint_paths(graph, "A", "C")) == []


def test_spf_breaks_parallel_ties_in_out_arcs_order():
    class ReversedArcs(StrictMultiDiGraph):
        def out_arcs(self, u):
            return reversed(list(super().out_arcs(u)))

    graph = ReversedArcs()
    graph.add_node("A")
    graph.add_node("B")
    graph.add_edge("A", "B", _fwd("l1"), cost=5)
    graph.add_edge("A", "B", _fwd("l2"), cost=5)

    assert spf(graph, "A")["B"].edges == (_fwd("l2"),)
