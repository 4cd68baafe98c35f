"""What-if analysis: impact of re-costing one link.

``blast_radius`` compares the primary path of every pair before and after a
link's cost changes and reports the pairs whose path or cost moved, together
with the nodes on their new paths. Both runs go through the bulk driver, so
they share its ordering, parallelism and cancellation behavior.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, replace
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from netpaths.analysis.bulk import analyze_all
from netpaths.config import ANALYSIS_CONFIG, AnalysisConfig
from netpaths.errors import InvalidTopology
from netpaths.graph.build import build_graph
from netpaths.logging import get_logger
from netpaths.model.network import Topology
from netpaths.types.base import Cost

logger = get_logger(__name__)


@dataclass(frozen=True)
class AffectedPair:
    """A pair whose primary path or cost differs after the change.

    ``path_changed`` compares arc sequences, so a move to a parallel link
    between the same nodes counts as a change.
    """

    source: str
    target: str
    old_cost: Cost
    new_cost: Cost
    old_path: Tuple[str, ...]
    new_path: Tuple[str, ...]
    path_changed: bool


@dataclass(frozen=True)
class BlastRadius:
    """Outcome of re-costing one link.

    Attributes:
        link_id: The re-costed link.
        affected: Changed pairs in natural pair order.
        affected_nodes: Nodes on any changed pair's new path, in topology order.
        pairs_total: Pairs evaluated per run.
        cancelled: True if either run stopped early.
    """

    link_id: str
    affected: Tuple[AffectedPair, ...] = ()
    affected_nodes: Tuple[str, ...] = ()
    pairs_total: int = 0
    cancelled: bool = False

    def to_dict(self, names: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
        names = names or {}
        return {
            "link_id": self.link_id,
            "pairs_total": self.pairs_total,
            "cancelled": self.cancelled,
            "affected_paths": [
                {
                    "source": names.get(p.source, p.source),
                    "target": names.get(p.target, p.target),
                    "old_cost": p.old_cost,
                    "new_cost": p.new_cost,
                    "old_path": [names.get(n, n) for n in p.old_path],
                    "new_path": [names.get(n, n) for n in p.new_path],
                    "path_changed": p.path_changed,
                }
                for p in self.affected
            ],
            "affected_nodes": [names.get(n, n) for n in self.affected_nodes],
        }


def with_link_cost(
    topology: Topology,
    link_id: str,
    forward_cost: Cost,
    reverse_cost: Optional[Cost] = None,
) -> Topology:
    """Return a copy of ``topology`` with one link re-costed.

    ``reverse_cost`` defaults to ``forward_cost``. The input is not modified.

    Raises:
        InvalidTopology: If ``link_id`` is not in the topology.
    """
    link = topology.links.get(link_id)
    if link is None:
        raise InvalidTopology(f"Link '{link_id}' is not in the topology.")
    links = dict(topology.links)
    links[link_id] = replace(
        link,
        cost=None,
        forward_cost=forward_cost,
        reverse_cost=forward_cost if reverse_cost is None else reverse_cost,
    )
    return Topology(nodes=dict(topology.nodes), links=links, name=topology.name)


def blast_radius(
    topology: Topology,
    link_id: str,
    new_cost: Cost,
    reverse_cost: Optional[Cost] = None,
    node_subset: Optional[Iterable[str]] = None,
    *,
    parallelism: Optional[int] = None,
    timeout: Optional[float] = None,
    cancel_event: Optional[threading.Event] = None,
    config: AnalysisConfig = ANALYSIS_CONFIG,
) -> BlastRadius:
    """Compare primary paths before and after re-costing ``link_id``.

    Pairs unreachable in either run are not reported; a cost change alone
    never alters reachability.

    Raises:
        InvalidTopology: If ``link_id`` is unknown.
        InvalidMetric: If the new cost is negative or NaN.
    """
    changed = with_link_cost(topology, link_id, new_cost, reverse_cost)
    before_graph = build_graph(topology)
    after_graph = build_graph(changed)

    def primaries(graph):
        return analyze_all(
            graph,
            node_subset,
            k=1,
            parallelism=parallelism,
            timeout=timeout,
            cancel_event=cancel_event,
            config=config,
        )

    logger.info("Re-costing link '%s' to %s", link_id, new_cost)
    before = primaries(before_graph)
    after = primaries(after_graph)

    old_primaries = {(r.source, r.target): r.primary for r in before}
    affected: List[AffectedPair] = []
    touched = set()
    for pair in after:
        old = old_primaries.get((pair.source, pair.target))
        if old is None:
            continue
        new = pair.primary
        path_changed = old.edges != new.edges
        if not path_changed and old.cost == new.cost:
            continue
        affected.append(
            AffectedPair(
                source=pair.source,
                target=pair.target,
                old_cost=old.cost,
                new_cost=new.cost,
                old_path=old.nodes,
                new_path=new.nodes,
                path_changed=path_changed,
            )
        )
        touched.update(new.nodes)

    logger.info(
        "Link '%s': %d of %d pair(s) affected", link_id, len(affected), after.pairs_total
    )
    return BlastRadius(
        link_id=link_id,
        affected=tuple(affected),
        affected_nodes=tuple(n for n in topology.nodes if n in touched),
        pairs_total=after.pairs_total,
        cancelled=before.cancelled or after.cancelled,
    )
