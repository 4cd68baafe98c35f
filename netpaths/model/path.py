"""Path result values produced by the path engine.

A ``PathResult`` is an immutable, loop-free node sequence together with the
arcs it traverses and its aggregate metrics: total cost, hop count and
bottleneck. Ordering helpers implement the engine's ranking
``(cost, hops, node sequence)``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, FrozenSet, Mapping, Optional, Tuple

from netpaths.types.base import Capacity, Cost
from netpaths.types.dto import EdgeDir, EdgeRef

#: Ranking key shared by candidate selection and result ordering.
PathKey = Tuple[Cost, int, Tuple[str, ...]]


@dataclass(frozen=True)
class Bottleneck:
    """The lowest-capacity link on a path."""

    link_id: str
    capacity: Capacity


@dataclass(frozen=True)
class HopDetail:
    """One traversed arc of a path.

    Attributes:
        src: Node the hop leaves.
        dst: Node the hop enters.
        link_id: Link traversed.
        direction: 'fwd' if traversed source->target as declared on the link.
        cost: Cost in the direction of travel.
        reverse_cost: Cost of the same link in the opposite direction.
        capacity: Link capacity, None when unknown.
        interface: Egress interface name at ``src``, if declared.
        utilization: Link load in percent of capacity, None when unknown.
    """

    src: str
    dst: str
    link_id: str
    direction: EdgeDir
    cost: Cost
    reverse_cost: Cost
    capacity: Optional[Capacity] = None
    interface: Optional[str] = None
    utilization: Optional[float] = None

    @property
    def edge(self) -> EdgeRef:
        return EdgeRef(self.link_id, self.direction)

    @property
    def available_bandwidth(self) -> Optional[float]:
        if self.capacity is None:
            return None
        return self.capacity * (1 - (self.utilization or 0) / 100)


@dataclass(frozen=True)
class PathResult:
    """A single loop-free path with its metrics.

    Attributes:
        nodes: Node ids from source to target, inclusive.
        hop_details: One entry per traversed arc, in travel order.
        cost: Sum of directed costs along the path.
    """

    nodes: Tuple[str, ...]
    hop_details: Tuple[HopDetail, ...]
    cost: Cost

    def __post_init__(self) -> None:
        if not self.nodes:
            raise ValueError("A path must contain at least one node.")
        if len(self.hop_details) != len(self.nodes) - 1:
            raise ValueError(
                f"Path with {len(self.nodes)} nodes needs {len(self.nodes) - 1} hops, "
                f"got {len(self.hop_details)}."
            )
        if len(set(self.nodes)) != len(self.nodes):
            raise ValueError(f"Path {self.nodes} revisits a node.")

    @property
    def source(self) -> str:
        return self.nodes[0]

    @property
    def target(self) -> str:
        return self.nodes[-1]

    @property
    def hops(self) -> int:
        return len(self.nodes) - 1

    @property
    def edges(self) -> Tuple[EdgeRef, ...]:
        """Traversed arcs in order."""
        return tuple(hop.edge for hop in self.hop_details)

    @property
    def link_ids(self) -> FrozenSet[str]:
        """Physical links used, regardless of direction."""
        return frozenset(hop.link_id for hop in self.hop_details)

    @property
    def reverse_cost(self) -> Cost:
        """Cost of the same links traversed target->source."""
        return sum(hop.reverse_cost for hop in self.hop_details)

    @property
    def bottleneck(self) -> Optional[Bottleneck]:
        """Minimum-capacity link; the first one along the path on ties.

        Hops with unknown capacity are ignored. None for zero-hop paths or
        when no traversed link declares a capacity.
        """
        best: Optional[HopDetail] = None
        for hop in self.hop_details:
            if hop.capacity is None:
                continue
            if best is None or hop.capacity < best.capacity:  # type: ignore[operator]
                best = hop
        if best is None:
            return None
        return Bottleneck(best.link_id, best.capacity)  # type: ignore[arg-type]

    @property
    def bandwidth_bottleneck(self) -> Optional[Bottleneck]:
        """Link with the least available bandwidth; first one on ties.

        Same rules as ``bottleneck`` but on capacity left after utilization.
        ``Bottleneck.capacity`` holds that available bandwidth.
        """
        best: Optional[Bottleneck] = None
        for hop in self.hop_details:
            available = hop.available_bandwidth
            if available is None:
                continue
            if best is None or available < best.capacity:
                best = Bottleneck(hop.link_id, available)
        return best

    @property
    def available_bandwidth(self) -> Optional[float]:
        bottleneck = self.bandwidth_bottleneck
        return None if bottleneck is None else bottleneck.capacity

    @property
    def next_hop(self) -> str:
        """Second node of the path, or the target for a path of one node."""
        return self.nodes[1] if len(self.nodes) >= 2 else self.target

    def sort_key(self) -> PathKey:
        return (self.cost, self.hops, self.nodes)

    def shares_links_with(self, other: PathResult) -> bool:
        """True if both paths traverse at least one common link."""
        return not self.link_ids.isdisjoint(other.link_ids)

    def describe(
        self, names: Optional[Mapping[str, str]] = None, sep: str = " → "
    ) -> str:
        """Render the node sequence, optionally through a display-name map."""
        if names is None:
            return sep.join(self.nodes)
        return sep.join(names.get(n, n) for n in self.nodes)

    def to_dict(self) -> Dict[str, Any]:
        bottleneck = self.bottleneck
        return {
            "path": list(self.nodes),
            "cost": self.cost,
            "reverse_cost": self.reverse_cost,
            "hops": self.hops,
            "bottleneck": (
                None
                if bottleneck is None
                else {"link_id": bottleneck.link_id, "capacity": bottleneck.capacity}
            ),
            "available_bandwidth": self.available_bandwidth,
            "hop_details": [
                {
                    "from": hop.src,
                    "to": hop.dst,
                    "link_id": hop.link_id,
                    "direction": hop.direction,
                    "cost": hop.cost,
                    "reverse_cost": hop.reverse_cost,
                    "capacity": hop.capacity,
                    "interface": hop.interface,
                    "utilization": hop.utilization,
                }
                for hop in self.hop_details
            ],
        }

    def __lt__(self, other: Any) -> bool:
        if not isinstance(other, PathResult):
            return NotImplemented
        return self.sort_key() < other.sort_key()

    def __repr__(self) -> str:
        return f"PathResult({'->'.join(self.nodes)}, cost={self.cost})"
