"""Bandwidth-aware path ranking.

Links that cannot carry the requested bandwidth are removed, up to ``k``
pairwise link-disjoint paths are found in cost order, and the paths are then
re-ranked by a score that blends normalized cost with the bandwidth left on
each path's tightest link. Lower scores are better.

Normalization is global to the graph: path cost is divided by
``max arc cost * len(path.nodes)``, and available bandwidth by the largest
known link capacity. Paths whose links all lack capacity are treated as
unconstrained (bandwidth term 0).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from netpaths.config import ANALYSIS_CONFIG
from netpaths.graph.strict_multidigraph import StrictMultiDiGraph
from netpaths.logging import get_logger
from netpaths.model.path import PathResult
from netpaths.solver.paths import k_shortest_paths
from netpaths.types.base import DiversityPolicy

LOGGER = get_logger(__name__)


@dataclass(frozen=True)
class ScoredPath:
    """A path with its blended cost/bandwidth score."""

    path: PathResult
    score: float

    @property
    def available_bandwidth(self) -> Optional[float]:
        return self.path.available_bandwidth

    def to_dict(self) -> Dict[str, Any]:
        data = self.path.to_dict()
        data["score"] = self.score
        return data


def bandwidth_aware_paths(
    graph: StrictMultiDiGraph,
    source: str,
    target: str,
    required_bandwidth: float = 0.0,
    cost_weight: Optional[float] = None,
    k: Optional[int] = None,
) -> List[ScoredPath]:
    """Rank link-disjoint paths by cost and available bandwidth.

    Args:
        graph: Graph built by ``build_graph``.
        source: Source node id.
        target: Target node id.
        required_bandwidth: Links with less available bandwidth are skipped.
        cost_weight: Share of the score taken by normalized cost, in [0, 1];
            the rest is the normalized bandwidth shortfall. Defaults to
            ``ANALYSIS_CONFIG.cost_weight``.
        k: Maximum number of paths; defaults to ``ANALYSIS_CONFIG.bandwidth_k``.

    Returns:
        Scored paths by ascending score. Equal scores keep cost order.

    Raises:
        ValueError: If ``cost_weight`` is outside [0, 1].
    """
    cost_weight = ANALYSIS_CONFIG.cost_weight if cost_weight is None else cost_weight
    k = ANALYSIS_CONFIG.bandwidth_k if k is None else k
    if not 0 <= cost_weight <= 1:
        raise ValueError(f"cost_weight must be within [0, 1], got {cost_weight}")

    paths = k_shortest_paths(
        graph,
        source,
        target,
        k,
        diversity=DiversityPolicy.LINK_DISJOINT,
        required_bandwidth=required_bandwidth,
    )
    max_cost, max_capacity = _normalizers(graph)
    scored = [
        ScoredPath(path, _score(path, max_cost, max_capacity, cost_weight))
        for path in paths
    ]
    scored.sort(key=lambda item: item.score)
    LOGGER.debug(
        "%s -> %s: %d bandwidth-aware path(s) (required=%s, cost_weight=%s)",
        source,
        target,
        len(scored),
        required_bandwidth,
        cost_weight,
    )
    return scored


def _normalizers(graph: StrictMultiDiGraph) -> Tuple[float, Optional[float]]:
    max_cost = 0.0
    max_capacity: Optional[float] = None
    for _, _, _, attr in graph.get_edges().values():
        max_cost = max(max_cost, attr["cost"])
        capacity = attr["capacity"]
        if capacity is not None and (max_capacity is None or capacity > max_capacity):
            max_capacity = capacity
    return max_cost, max_capacity


def _score(
    path: PathResult,
    max_cost: float,
    max_capacity: Optional[float],
    cost_weight: float,
) -> float:
    norm_cost = path.cost / (max_cost * len(path.nodes)) if max_cost > 0 else 0.0
    available = path.available_bandwidth
    if available is None or not max_capacity:
        norm_shortfall = 0.0
    else:
        norm_shortfall = 1 - available / max_capacity
    return cost_weight * norm_cost + (1 - cost_weight) * norm_shortfall
