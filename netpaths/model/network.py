"""Topology model: Node, Link and Topology.

These are plain value containers supplied by the caller. The analysis layer
never mutates them; a changed topology is simply passed in again.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from netpaths.errors import InvalidTopology
from netpaths.logging import get_logger

LOGGER = get_logger(__name__)


@dataclass(frozen=True)
class Node:
    """A router or site in the topology.

    Attributes:
        id (str): Unique identifier, used as the graph node key.
        name (str): Display name. Falls back to ``id`` when empty.
        country (Optional[str]): Optional country code or name.
        type (Optional[str]): Optional node role (e.g. "core", "edge").
    """

    id: str
    name: str = ""
    country: Optional[str] = None
    type: Optional[str] = None

    @property
    def display_name(self) -> str:
        return self.name or self.id


@dataclass(frozen=True)
class Link:
    """A bidirectional link with asymmetric costs.

    Traversing ``source -> target`` uses ``forward_cost``; ``target -> source``
    uses ``reverse_cost``. When only ``cost`` is given, both directions use it.

    Attributes:
        id (str): Unique identifier shared by both directed arcs.
        source (str): Source node id.
        target (str): Target node id.
        forward_cost (Optional[float]): Cost for source->target.
        reverse_cost (Optional[float]): Cost for target->source.
        capacity (Optional[float]): Link capacity; None when unknown.
        cost (Optional[float]): Symmetric fallback for either directional cost.
        source_interface (Optional[str]): Interface name on the source side.
        target_interface (Optional[str]): Interface name on the target side.
        utilization (Optional[float]): Current load in percent of capacity
            (0-100); None when not measured.
    """

    id: str
    source: str
    target: str
    forward_cost: Optional[float] = None
    reverse_cost: Optional[float] = None
    capacity: Optional[float] = None
    cost: Optional[float] = None
    source_interface: Optional[str] = None
    target_interface: Optional[str] = None
    utilization: Optional[float] = None

    def __post_init__(self) -> None:
        """Fill directional costs from the symmetric ``cost`` when omitted."""
        if self.forward_cost is None and self.cost is not None:
            object.__setattr__(self, "forward_cost", self.cost)
        if self.reverse_cost is None and self.cost is not None:
            object.__setattr__(self, "reverse_cost", self.cost)

    @property
    def is_asymmetric(self) -> bool:
        return self.forward_cost != self.reverse_cost

    @property
    def available_bandwidth(self) -> Optional[float]:
        """Capacity left after current utilization; None when capacity is unknown."""
        if self.capacity is None:
            return None
        return self.capacity * (1 - (self.utilization or 0) / 100)


@dataclass
class Topology:
    """A node set plus a link set.

    Nodes and links keep insertion order, which determines arc enumeration
    order in the built graph and therefore tie-breaking between parallel links.

    Attributes:
        nodes (Dict[str, Node]): Mapping from node id -> Node.
        links (Dict[str, Link]): Mapping from link id -> Link.
        name (Optional[str]): Optional topology name.
    """

    nodes: Dict[str, Node] = field(default_factory=dict)
    links: Dict[str, Link] = field(default_factory=dict)
    name: Optional[str] = None

    def add_node(self, node: Node) -> None:
        """Add a node keyed by ``node.id``.

        Raises:
            InvalidTopology: If a node with the same id already exists.
        """
        if node.id in self.nodes:
            raise InvalidTopology(f"Node '{node.id}' already exists in the topology.")
        self.nodes[node.id] = node

    def add_link(self, link: Link) -> None:
        """Add a link keyed by ``link.id``.

        Raises:
            InvalidTopology: If the id is taken or an endpoint is unknown.
        """
        if link.id in self.links:
            raise InvalidTopology(f"Link '{link.id}' already exists in the topology.")
        if link.source not in self.nodes:
            raise InvalidTopology(
                f"Link '{link.id}' references unknown source node '{link.source}'."
            )
        if link.target not in self.nodes:
            raise InvalidTopology(
                f"Link '{link.id}' references unknown target node '{link.target}'."
            )
        self.links[link.id] = link

    def display_names(self) -> Dict[str, str]:
        """Map node id -> display name."""
        return {node_id: node.display_name for node_id, node in self.nodes.items()}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Topology:
        """Build a topology from the node-list / link-list interchange form.

        Links without an ``id`` get ``"{source}-{target}"``, suffixed with a
        counter if that id is already used.

        Args:
            data: Mapping with ``nodes`` and ``links`` lists and optional ``name``.

        Returns:
            A populated Topology.

        Raises:
            InvalidTopology: On duplicate ids or dangling link endpoints.
        """
        topo = cls(name=data.get("name"))
        for entry in data.get("nodes", []):
            topo.add_node(
                Node(
                    id=str(entry["id"]),
                    name=entry.get("name") or "",
                    country=entry.get("country"),
                    type=entry.get("type"),
                )
            )
        for entry in data.get("links", []):
            source, target = str(entry["source"]), str(entry["target"])
            link_id = entry.get("id")
            if link_id is None:
                link_id = _unique_link_id(f"{source}-{target}", topo.links)
            topo.add_link(
                Link(
                    id=str(link_id),
                    source=source,
                    target=target,
                    forward_cost=entry.get("forward_cost"),
                    reverse_cost=entry.get("reverse_cost"),
                    capacity=entry.get("capacity"),
                    cost=entry.get("cost"),
                    source_interface=entry.get("source_interface"),
                    target_interface=entry.get("target_interface"),
                    utilization=entry.get("utilization"),
                )
            )
        LOGGER.debug(
            "Loaded topology %r: %d nodes, %d links",
            topo.name,
            len(topo.nodes),
            len(topo.links),
        )
        return topo

    def to_dict(self) -> Dict[str, Any]:
        """Inverse of ``from_dict``; omits unset optional fields."""
        nodes: List[Dict[str, Any]] = []
        for node in self.nodes.values():
            entry: Dict[str, Any] = {"id": node.id}
            if node.name:
                entry["name"] = node.name
            if node.country is not None:
                entry["country"] = node.country
            if node.type is not None:
                entry["type"] = node.type
            nodes.append(entry)
        links: List[Dict[str, Any]] = []
        for link in self.links.values():
            entry = {
                "id": link.id,
                "source": link.source,
                "target": link.target,
                "forward_cost": link.forward_cost,
                "reverse_cost": link.reverse_cost,
            }
            for key in (
                "capacity",
                "source_interface",
                "target_interface",
                "utilization",
            ):
                value = getattr(link, key)
                if value is not None:
                    entry[key] = value
            links.append(entry)
        data: Dict[str, Any] = {"nodes": nodes, "links": links}
        if self.name is not None:
            data["name"] = self.name
        return data


def _unique_link_id(base: str, taken: Iterable[str]) -> str:
    taken = set(taken)
    if base not in taken:
        return base
    suffix = 2
    while f"{base}#{suffix}" in taken:
        suffix += 1
    return f"{base}#{suffix}"
