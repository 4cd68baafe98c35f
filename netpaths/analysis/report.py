"""Aggregation and reporting over bulk results.

Computes summary statistics and link usage, groups primary paths into
per-router routing tables, and shapes results into the flat, structured and
routing-table forms consumed by exporters. No file I/O happens here.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import asdict, dataclass
from statistics import fmean
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

import pandas as pd

from netpaths.analysis.bulk import BulkResultSet, PairResult
from netpaths.config import ANALYSIS_CONFIG
from netpaths.model.network import Topology
from netpaths.types.base import Cost

#: Column order of the flat tabular form.
ROW_COLUMNS: Tuple[str, ...] = (
    "source",
    "target",
    "primary_path",
    "backup_path",
    "cost",
    "hops",
    "min_capacity",
    "has_redundancy",
)


@dataclass(frozen=True)
class Summary:
    """Aggregate statistics over the primary paths of a bulk run."""

    total_pairs: int
    with_redundancy: int
    without_redundancy: int
    avg_cost: float
    avg_hops: float
    min_cost: Cost
    max_cost: Cost
    min_hops: int
    max_hops: int

    @property
    def redundancy_ratio(self) -> float:
        """Share of pairs with a backup path, in [0, 1]."""
        return self.with_redundancy / self.total_pairs

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["redundancy_ratio"] = self.redundancy_ratio
        return data


@dataclass(frozen=True)
class RouteEntry:
    """One route of a router's table."""

    destination: str
    next_hop: str
    cost: Cost
    path: Tuple[str, ...]
    interface: str = "auto"


@dataclass(frozen=True)
class RoutingTable:
    """Routes originating at ``router``, ordered by ascending cost."""

    router: str
    routes: Tuple[RouteEntry, ...]


def summarize(results: Iterable[PairResult]) -> Optional[Summary]:
    """Summarize primary-path metrics.

    Args:
        results: A BulkResultSet or any iterable of PairResult.

    Returns:
        Summary, or None when there are no results.
    """
    pairs = list(results)
    if not pairs:
        return None
    costs = [pair.cost for pair in pairs]
    hops = [pair.hops for pair in pairs]
    with_backup = sum(1 for pair in pairs if pair.has_redundancy)
    return Summary(
        total_pairs=len(pairs),
        with_redundancy=with_backup,
        without_redundancy=len(pairs) - with_backup,
        avg_cost=fmean(costs),
        avg_hops=fmean(hops),
        min_cost=min(costs),
        max_cost=max(costs),
        min_hops=min(hops),
        max_hops=max(hops),
    )


def to_routing_tables(results: Iterable[PairResult]) -> Dict[str, RoutingTable]:
    """Group primary paths by source into routing tables.

    Next hop is the second node of the primary path, or the destination for
    a path with fewer than two nodes. Routes are sorted by ascending cost;
    equal-cost routes keep bulk order. Tables appear in the order their
    router first appears in ``results``.
    """
    grouped: Dict[str, List[RouteEntry]] = {}
    for pair in results:
        primary = pair.primary
        grouped.setdefault(pair.source, []).append(
            RouteEntry(
                destination=pair.target,
                next_hop=primary.next_hop,
                cost=primary.cost,
                path=primary.nodes,
            )
        )
    return {
        router: RoutingTable(router, tuple(sorted(routes, key=lambda r: r.cost)))
        for router, routes in grouped.items()
    }


def link_usage(
    results: Iterable[PairResult], top: Optional[int] = None
) -> List[Tuple[str, int]]:
    """Count how many primary paths traverse each link.

    Returns:
        ``(link_id, count)`` sorted by descending count, then link id;
        truncated to ``top`` entries when given.
    """
    counts: Counter = Counter()
    for pair in results:
        counts.update(pair.primary.link_ids)
    ranked = sorted(counts.items(), key=lambda item: (-item[1], item[0]))
    return ranked if top is None else ranked[:top]


def to_rows(
    results: Iterable[PairResult], names: Optional[Mapping[str, str]] = None
) -> List[Dict[str, Any]]:
    """Flat tabular form: one row per pair, columns as in ``ROW_COLUMNS``.

    Missing backup renders as "None"; unknown bottleneck capacity as 0.
    """
    names = names or {}
    rows: List[Dict[str, Any]] = []
    for pair in results:
        backup = pair.backup
        rows.append(
            {
                "source": names.get(pair.source, pair.source),
                "target": names.get(pair.target, pair.target),
                "primary_path": pair.primary.describe(names),
                "backup_path": "None" if backup is None else backup.describe(names),
                "cost": pair.cost,
                "hops": pair.hops,
                "min_capacity": pair.min_capacity or 0,
                "has_redundancy": pair.has_redundancy,
            }
        )
    return rows


def to_dataframe(
    results: Iterable[PairResult], names: Optional[Mapping[str, str]] = None
) -> pd.DataFrame:
    """Flat tabular form as a pandas DataFrame (columns ``ROW_COLUMNS``)."""
    return pd.DataFrame(to_rows(results, names), columns=list(ROW_COLUMNS))


def build_report(
    results: BulkResultSet,
    topology: Optional[Topology] = None,
    names: Optional[Mapping[str, str]] = None,
    critical_links_top: Optional[int] = None,
) -> Dict[str, Any]:
    """Structured report: summary, most-used links and the full path list.

    Args:
        results: Bulk results to report.
        topology: Optional topology; adds node/link counts and, when
            ``names`` is not given, supplies display names.
        names: Node id -> display name.
        critical_links_top: Number of most-used links to list; defaults to
            ``ANALYSIS_CONFIG.critical_links_top``.

    Returns:
        JSON-serializable dictionary. ``summary`` is None for empty results.
    """
    if names is None and topology is not None:
        names = topology.display_names()
    names = names or {}
    if critical_links_top is None:
        critical_links_top = ANALYSIS_CONFIG.critical_links_top

    summary = summarize(results)
    report: Dict[str, Any] = {
        "analysis": {
            "pairs_total": results.pairs_total,
            "cancelled": results.cancelled,
        },
        "summary": None if summary is None else summary.to_dict(),
        "critical_links": [
            {"link_id": link_id, "paths": count}
            for link_id, count in link_usage(results, critical_links_top)
        ],
        "paths": [
            {
                "source": names.get(pair.source, pair.source),
                "target": names.get(pair.target, pair.target),
                "primary_path": [names.get(n, n) for n in pair.primary.nodes],
                "backup_path": (
                    None
                    if pair.backup is None
                    else [names.get(n, n) for n in pair.backup.nodes]
                ),
                "cost": pair.cost,
                "hops": pair.hops,
                "min_capacity": pair.min_capacity or 0,
                "has_redundancy": pair.has_redundancy,
            }
            for pair in results
        ],
    }
    if topology is not None:
        report["topology"] = {
            "name": topology.name,
            "nodes": len(topology.nodes),
            "links": len(topology.links),
        }
    return report


def routing_tables_to_dict(
    tables: Mapping[str, RoutingTable], names: Optional[Mapping[str, str]] = None
) -> Dict[str, Any]:
    """Routing tables as a JSON-serializable document."""
    names = names or {}
    sep = " → "
    return {
        "routing_tables": [
            {
                "router": names.get(table.router, table.router),
                "routes": [
                    {
                        "destination": names.get(route.destination, route.destination),
                        "next_hop": names.get(route.next_hop, route.next_hop),
                        "cost": route.cost,
                        "interface": route.interface,
                        "path": sep.join(names.get(n, n) for n in route.path),
                    }
                    for route in table.routes
                ],
            }
            for table in tables.values()
        ]
    }
