"""Single-pair path engine bound to the graph model.

Turns SPF routes into ``PathResult`` values (hop details, reverse cost,
bottleneck) and exposes the K-shortest-paths entry point used by the bulk
driver. Functions are pure: they only read the graph, so they are safe to
call concurrently on a shared graph.

Note:
    Asking for paths from a node to itself, or between nodes that are not in
    the graph, is not an error; the result is simply empty.
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Set

from netpaths.algorithms.spf import Route, disjoint_paths, ksp
from netpaths.graph.strict_multidigraph import EdgeID, StrictMultiDiGraph
from netpaths.logging import get_logger
from netpaths.model.path import HopDetail, PathResult
from netpaths.types.base import DiversityPolicy
from netpaths.types.dto import EdgeRef

LOGGER = get_logger(__name__)


def k_shortest_paths(
    graph: StrictMultiDiGraph,
    source: str,
    target: str,
    k: int = 2,
    *,
    diversity: DiversityPolicy = DiversityPolicy.LOOPLESS,
    excluded_links: Optional[Iterable[str]] = None,
    excluded_nodes: Optional[Iterable[str]] = None,
    required_bandwidth: Optional[float] = None,
) -> List[PathResult]:
    """Return up to ``k`` best loop-free paths from ``source`` to ``target``.

    Paths are ranked by ascending cost, then hop count, then lexicographic
    node sequence. With ``DiversityPolicy.LOOPLESS`` (default) the second and
    later paths are the next-cheapest loop-free paths and may share links with
    earlier ones. With ``DiversityPolicy.LINK_DISJOINT`` no two returned paths
    share a link.

    Args:
        graph: Graph built by ``build_graph``.
        source: Source node id.
        target: Target node id.
        k: Maximum number of paths.
        diversity: Policy for alternative paths.
        excluded_links: Link ids to treat as failed (both directions).
        excluded_nodes: Node ids to treat as failed.
        required_bandwidth: When positive, links whose available bandwidth
            (capacity left after utilization) is below this value are
            treated as failed. Links with unknown capacity are kept.

    Returns:
        At most ``k`` paths, best first. Empty when ``source == target``, when
        either node is missing, when ``k < 1``, or when no path exists.
    """
    if k < 1 or source == target:
        return []
    if source not in graph or target not in graph:
        LOGGER.debug("Skipping %s -> %s: node not in graph", source, target)
        return []

    excl_n: Set[str] = set(excluded_nodes or ())
    if source in excl_n or target in excl_n:
        return []
    excl_e = _link_arcs(excluded_links)
    if required_bandwidth:
        excl_e.update(arcs_below_bandwidth(graph, required_bandwidth))

    if diversity == DiversityPolicy.LINK_DISJOINT:
        routes = disjoint_paths(graph, source, target, k, excl_e, excl_n)
    else:
        routes = ksp(graph, source, target, k, excl_e, excl_n)

    results = [route_to_path(graph, route) for route in routes]
    LOGGER.debug(
        "%s -> %s: %d path(s) [%s]",
        source,
        target,
        len(results),
        diversity.name.lower(),
    )
    return results


def shortest_path(
    graph: StrictMultiDiGraph, source: str, target: str
) -> Optional[PathResult]:
    """Return the single best path, or None when there is none."""
    paths = k_shortest_paths(graph, source, target, 1)
    return paths[0] if paths else None


def route_to_path(graph: StrictMultiDiGraph, route: Route) -> PathResult:
    """Materialize an SPF route as a ``PathResult`` with per-hop details."""
    hops: List[HopDetail] = []
    for e_id in route.edges:
        src, dst, _, attr = graph.get_edges()[e_id]
        hops.append(
            HopDetail(
                src=src,
                dst=dst,
                link_id=attr["link_id"],
                direction=e_id.direction,
                cost=attr["cost"],
                reverse_cost=attr["reverse_cost"],
                capacity=attr["capacity"],
                interface=attr.get("interface"),
                utilization=attr.get("utilization"),
            )
        )
    return PathResult(nodes=tuple(route.nodes), hop_details=tuple(hops), cost=route.cost)


def arcs_below_bandwidth(
    graph: StrictMultiDiGraph, required_bandwidth: float
) -> Set[EdgeID]:
    """Arcs whose link cannot carry ``required_bandwidth`` more traffic."""
    arcs: Set[EdgeID] = set()
    for e_id, (_, _, _, attr) in graph.get_edges().items():
        capacity = attr["capacity"]
        if capacity is None:
            continue
        available = capacity * (1 - (attr.get("utilization") or 0) / 100)
        if available < required_bandwidth:
            arcs.add(e_id)
    return arcs


def _link_arcs(link_ids: Optional[Iterable[str]]) -> Set[EdgeID]:
    arcs: Set[EdgeID] = set()
    for link_id in link_ids or ():
        arcs.add(EdgeRef(link_id, "fwd"))
        arcs.add(EdgeRef(link_id, "rev"))
    return arcs
