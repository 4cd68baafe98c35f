"""Per-country aggregation of primary paths and link load.

Countries come from ``Node.country``; nodes without one are ignored. Country
pairs are unordered and follow the order in which countries first appear in
the topology. For a pair ``(c1, c2)`` every node of ``c1`` is paired with
every node of ``c2`` and the primary path is taken in that direction.
"""

from __future__ import annotations

from dataclasses import dataclass
from statistics import fmean
from typing import Any, Dict, List, Mapping, Optional, Tuple

from netpaths.graph.build import build_graph
from netpaths.graph.strict_multidigraph import StrictMultiDiGraph
from netpaths.model.network import Topology
from netpaths.model.path import PathResult
from netpaths.solver.paths import shortest_path


@dataclass(frozen=True)
class CountryPairPaths:
    """Primary paths between the nodes of two countries."""

    source_country: str
    target_country: str
    paths: Tuple[PathResult, ...]

    @property
    def total_paths(self) -> int:
        return len(self.paths)

    @property
    def best(self) -> Optional[PathResult]:
        """Cheapest path; the first found on equal cost."""
        return min(self.paths, key=lambda p: p.cost) if self.paths else None

    @property
    def avg_cost(self) -> Optional[float]:
        return fmean(p.cost for p in self.paths) if self.paths else None

    def to_dict(self, names: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
        names = names or {}

        def _path(path: PathResult) -> Dict[str, Any]:
            return {
                "source": names.get(path.source, path.source),
                "target": names.get(path.target, path.target),
                "path": [names.get(n, n) for n in path.nodes],
                "cost": path.cost,
                "hops": path.hops,
            }

        best = self.best
        return {
            "source_country": self.source_country,
            "target_country": self.target_country,
            "total_paths": self.total_paths,
            "avg_cost": self.avg_cost,
            "best_path": None if best is None else _path(best),
            "paths": [_path(p) for p in self.paths],
        }


@dataclass(frozen=True)
class CountryConnectivity:
    """Node count, attached links and mean link utilization of one country.

    A link counts when either endpoint is in the country; links without a
    measured utilization count as 0%.
    """

    country: str
    nodes: int
    links: int
    avg_utilization: float


def countries(topology: Topology) -> List[str]:
    """Distinct node countries in first-appearance order."""
    seen: Dict[str, None] = {}
    for node in topology.nodes.values():
        if node.country:
            seen.setdefault(node.country, None)
    return list(seen)


def _members(topology: Topology) -> Dict[str, List[str]]:
    members: Dict[str, List[str]] = {}
    for node_id, node in topology.nodes.items():
        if node.country:
            members.setdefault(node.country, []).append(node_id)
    return members


def country_paths(
    topology: Topology, graph: Optional[StrictMultiDiGraph] = None
) -> List[CountryPairPaths]:
    """Primary paths for every unordered country pair.

    Args:
        topology: Topology whose nodes carry countries.
        graph: Graph built from ``topology``; built on demand when omitted.
    """
    graph = build_graph(topology) if graph is None else graph
    members = _members(topology)
    names = countries(topology)
    results: List[CountryPairPaths] = []
    for i, source_country in enumerate(names):
        for target_country in names[i + 1 :]:
            paths: List[PathResult] = []
            for source in members[source_country]:
                for target in members[target_country]:
                    path = shortest_path(graph, source, target)
                    if path is not None:
                        paths.append(path)
            results.append(CountryPairPaths(source_country, target_country, tuple(paths)))
    return results


def country_connectivity(topology: Topology) -> Dict[str, CountryConnectivity]:
    """Per-country node and link counts with mean link utilization."""
    result: Dict[str, CountryConnectivity] = {}
    for country, node_ids in _members(topology).items():
        inside = set(node_ids)
        links = [
            link
            for link in topology.links.values()
            if link.source in inside or link.target in inside
        ]
        avg_util = fmean(link.utilization or 0 for link in links) if links else 0.0
        result[country] = CountryConnectivity(
            country=country,
            nodes=len(node_ids),
            links=len(links),
            avg_utilization=avg_util,
        )
    return result


def build_country_report(
    topology: Topology, graph: Optional[StrictMultiDiGraph] = None
) -> Dict[str, Any]:
    """JSON-serializable country paths and connectivity."""
    names = topology.display_names()
    return {
        "countries": countries(topology),
        "country_paths": [
            pair.to_dict(names) for pair in country_paths(topology, graph)
        ],
        "country_connectivity": {
            country: {
                "nodes": conn.nodes,
                "links": conn.links,
                "avg_utilization": conn.avg_utilization,
            }
            for country, conn in country_connectivity(topology).items()
        },
    }
