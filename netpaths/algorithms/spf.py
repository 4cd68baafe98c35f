"""Shortest-path-first (SPF) and K-shortest loopless path search.

Implements a Dijkstra SPF whose labels are ranked by the total order
``(cost, hops, node sequence, arc sequence)`` and a Yen generator built on it.
Because the order is preserved when a path is extended by one arc, the label
settled for every node is the best path to it under that order, so results
are reproducible for an unchanged graph.

Notes:
    Arc costs must be non-negative; graphs produced by
    ``netpaths.graph.build.build_graph`` guarantee this.

    One SPF run is O((V + E) log V) plus the cost of copying node/arc
    sequences into labels. Yen reruns SPF from up to V spur nodes for each of
    the k paths, so ``ksp`` is O(k·V·(V + E) log V).
"""

from __future__ import annotations

from heapq import heappop, heappush
from typing import (
    Dict,
    Iterable,
    Iterator,
    List,
    NamedTuple,
    Optional,
    Set,
    Tuple,
)

from netpaths.graph.strict_multidigraph import EdgeID, NodeID, StrictMultiDiGraph
from netpaths.types.base import Cost

RouteKey = Tuple[Cost, int, Tuple[NodeID, ...], Tuple[EdgeID, ...]]


class Route(NamedTuple):
    """A concrete path found by SPF: nodes, arcs taken and total cost."""

    cost: Cost
    nodes: Tuple[NodeID, ...]
    edges: Tuple[EdgeID, ...]

    @property
    def hops(self) -> int:
        return len(self.edges)

    def key(self) -> RouteKey:
        return (self.cost, len(self.edges), self.nodes, self.edges)


def spf(
    graph: StrictMultiDiGraph,
    src_node: NodeID,
    excluded_edges: Optional[Set[EdgeID]] = None,
    excluded_nodes: Optional[Set[NodeID]] = None,
    dst_node: Optional[NodeID] = None,
) -> Dict[NodeID, Route]:
    """Compute best routes from a source node.

    Among parallel arcs to the same neighbor, the cheapest non-excluded arc is
    used; on equal cost the first in enumeration order wins.

    Args:
        graph: The directed graph.
        src_node: Node to search from. Never treated as excluded.
        excluded_edges: Arc keys to ignore.
        excluded_nodes: Nodes to ignore.
        dst_node: Optional destination. When given, the search stops as soon
            as the destination is settled.

    Returns:
        Mapping from every settled node to its best route from ``src_node``.
        With ``dst_node`` set, only nodes settled before the stop are present.

    Raises:
        KeyError: If src_node does not exist in graph.
    """
    if src_node not in graph:
        raise KeyError(f"Source node '{src_node}' is not in the graph.")

    excluded_edges = excluded_edges or set()
    excluded_nodes = excluded_nodes or set()

    start = Route(0, (src_node,), ())
    labels: Dict[NodeID, Route] = {src_node: start}
    settled: Dict[NodeID, Route] = {}
    min_pq: List[Tuple[RouteKey, Route]] = [(start.key(), start)]

    while min_pq:
        _, route = heappop(min_pq)
        node_id = route.nodes[-1]
        if node_id in settled:
            continue
        settled[node_id] = route
        if node_id == dst_node:
            break

        # Cheapest usable arc per neighbor; strict < keeps the first on ties
        best_arcs: Dict[NodeID, Tuple[Cost, EdgeID]] = {}
        for neighbor_id, e_id, e_attr in graph.out_arcs(node_id):
            if (
                neighbor_id in settled
                or neighbor_id in excluded_nodes
                or e_id in excluded_edges
            ):
                continue
            known_arc = best_arcs.get(neighbor_id)
            if known_arc is None or e_attr["cost"] < known_arc[0]:
                best_arcs[neighbor_id] = (e_attr["cost"], e_id)

        for neighbor_id, (edge_cost, selected_edge) in best_arcs.items():
            candidate = Route(
                route.cost + edge_cost,
                route.nodes + (neighbor_id,),
                route.edges + (selected_edge,),
            )
            known = labels.get(neighbor_id)
            if known is None or candidate.key() < known.key():
                labels[neighbor_id] = candidate
                heappush(min_pq, (candidate.key(), candidate))

    return settled


def path_cost(graph: StrictMultiDiGraph, edges: Iterable[EdgeID]) -> Cost:
    """Sum arc costs in travel order."""
    total: Cost = 0
    for e_id in edges:
        total += graph.get_edge_attr(e_id)["cost"]
    return total


def ksp(
    graph: StrictMultiDiGraph,
    src_node: NodeID,
    dst_node: NodeID,
    max_k: Optional[int] = None,
    excluded_edges: Optional[Set[EdgeID]] = None,
    excluded_nodes: Optional[Set[NodeID]] = None,
) -> Iterator[Route]:
    """Yield loop-free routes from src_node to dst_node in ranking order (Yen).

    For every spur node of the last accepted route, the next arc of every
    accepted route sharing the same root prefix is excluded together with the
    root prefix nodes, SPF is rerun from the spur node, and root + spur is
    offered as a candidate. The best unseen candidate is accepted next.

    Consecutive routes may share arcs; see ``disjoint_paths`` for a variant
    that never reuses a link.

    Args:
        graph: The directed graph.
        src_node: The source node.
        dst_node: The destination node.
        max_k: If set, yield at most this many routes.
        excluded_edges: Arc keys excluded globally.
        excluded_nodes: Nodes excluded globally.

    Yields:
        Route objects, best first.
    """
    excluded_edges = set(excluded_edges or ())
    excluded_nodes = set(excluded_nodes or ())

    first = spf(graph, src_node, excluded_edges, excluded_nodes, dst_node=dst_node)
    if dst_node not in first:
        return

    accepted: List[Route] = [first[dst_node]]
    yield accepted[0]

    candidates: List[Tuple[RouteKey, Route]] = []
    visited = {accepted[0].edges}

    while max_k is None or len(accepted) < max_k:
        last = accepted[-1]
        for idx in range(len(last.nodes) - 1):
            spur_node = last.nodes[idx]
            root_nodes = last.nodes[: idx + 1]
            root_edges = last.edges[:idx]

            excl_e = set(excluded_edges)
            for prior in accepted:
                if prior.nodes[: idx + 1] == root_nodes and prior.edges[:idx] == root_edges:
                    # Force a different arc out of the spur node
                    excl_e.add(prior.edges[idx])
            excl_n = set(excluded_nodes)
            excl_n.update(root_nodes[:-1])

            spur = spf(graph, spur_node, excl_e, excl_n, dst_node=dst_node)
            if dst_node not in spur:
                continue

            spur_route = spur[dst_node]
            edges = root_edges + spur_route.edges
            if edges in visited:
                continue
            visited.add(edges)
            total = Route(
                path_cost(graph, edges), root_nodes[:-1] + spur_route.nodes, edges
            )
            heappush(candidates, (total.key(), total))

        if not candidates:
            break

        _, best = heappop(candidates)
        accepted.append(best)
        yield best


def disjoint_paths(
    graph: StrictMultiDiGraph,
    src_node: NodeID,
    dst_node: NodeID,
    max_k: Optional[int] = None,
    excluded_edges: Optional[Set[EdgeID]] = None,
    excluded_nodes: Optional[Set[NodeID]] = None,
) -> Iterator[Route]:
    """Yield pairwise link-disjoint routes, each the best on the remaining graph.

    After a route is accepted, both arcs of every link it traverses are
    excluded before the next SPF from ``src_node``. This is a greedy method:
    it guarantees disjointness, not the maximum number of disjoint routes.

    Args:
        graph: The directed graph. Arc keys must be ``EdgeRef`` values.
        src_node: The source node.
        dst_node: The destination node.
        max_k: If set, yield at most this many routes.
        excluded_edges: Arc keys excluded globally.
        excluded_nodes: Nodes excluded globally.

    Yields:
        Route objects in the order they were found (non-decreasing cost).
    """
    excl_e = set(excluded_edges or ())
    excl_n = set(excluded_nodes or ())

    found = 0
    while max_k is None or found < max_k:
        routes = spf(graph, src_node, excl_e, excl_n, dst_node=dst_node)
        if dst_node not in routes:
            return
        route = routes[dst_node]
        yield route
        found += 1
        if not route.edges:
            return
        for e_id in route.edges:
            excl_e.add(e_id)
            excl_e.add(e_id.reverse)
