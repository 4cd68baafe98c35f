"""Strict multi-directed graph keyed by arc references.

`StrictMultiDiGraph` extends `networkx.MultiDiGraph` so that nodes are never
created implicitly, every arc carries an explicit unique key, and missing
nodes or arcs raise instead of being silently ignored.
"""

from __future__ import annotations

from typing import Any, Dict, Hashable, Iterator, Tuple

import networkx as nx

from netpaths.types.dto import EdgeRef

NodeID = Hashable
EdgeID = EdgeRef
AttrDict = Dict[str, Any]
EdgeTuple = Tuple[NodeID, NodeID, EdgeID, AttrDict]


class StrictMultiDiGraph(nx.MultiDiGraph):
    """A multi-directed graph with strict rules and unique arc keys.

    This class enforces:
      - No automatic creation of missing nodes when adding an arc.
      - No duplicate nodes (raises ValueError on duplicates).
      - Every arc has an explicit key, and keys are unique graph-wide.

    Neighbor and arc iteration order is insertion order, which the path
    search relies on for deterministic tie-breaking.

    Inherits from:
        networkx.MultiDiGraph
    """

    def __init__(self, *args, **kwargs) -> None:
        """Initialize a StrictMultiDiGraph.

        Attributes:
            _edges: Map arc key to ``(source_node, target_node, key, attribute_dict)``.
        """
        super().__init__(*args, **kwargs)
        self._edges: Dict[EdgeID, EdgeTuple] = {}

    def add_node(self, node_for_adding: NodeID, **attr: Any) -> None:
        """Add a single node, disallowing duplicates.

        Raises:
            ValueError: If the node already exists in the graph.
        """
        if node_for_adding in self:
            raise ValueError(f"Node '{node_for_adding}' already exists in this graph.")
        super().add_node(node_for_adding, **attr)

    def add_edge(  # pyright: ignore[reportIncompatibleMethodOverride]
        self,
        u_for_edge: NodeID,
        v_for_edge: NodeID,
        key: EdgeID,
        **attr: Any,
    ) -> EdgeID:
        """Add a directed arc from u_for_edge to v_for_edge.

        Args:
            u_for_edge: The source node. Must exist in the graph.
            v_for_edge: The target node. Must exist in the graph.
            key: Unique arc key.
            **attr: Arc attributes.

        Returns:
            EdgeID: The key of the new arc.

        Raises:
            ValueError: If either node does not exist, or if the key is already in use.
        """
        if u_for_edge not in self:
            raise ValueError(f"Source node '{u_for_edge}' does not exist.")
        if v_for_edge not in self:
            raise ValueError(f"Target node '{v_for_edge}' does not exist.")
        if key in self._edges:
            raise ValueError(f"Edge with id '{key}' already exists.")

        super().add_edge(u_for_edge, v_for_edge, key=key, **attr)
        self._edges[key] = (
            u_for_edge,
            v_for_edge,
            key,
            self[u_for_edge][v_for_edge][key],  # pyright: ignore[reportArgumentType]
        )
        return key

    def get_edges(self) -> Dict[EdgeID, EdgeTuple]:
        """Return all arcs as ``key -> (source, target, key, attributes)``."""
        return self._edges

    def get_edge_attr(self, key: EdgeID) -> AttrDict:
        """Return the attribute dictionary of a specific arc.

        Raises:
            ValueError: If no arc with this key is found.
        """
        if key not in self._edges:
            raise ValueError(f"Edge with id='{key}' not found.")
        return self._edges[key][3]

    def out_arcs(self, u: NodeID) -> Iterator[Tuple[NodeID, EdgeID, AttrDict]]:
        """Yield ``(neighbor, key, attributes)`` for every arc leaving u.

        Order is deterministic: neighbors by first arc insertion, then
        parallel arcs by insertion. ``spf`` walks arcs through this method,
        so this order decides ties between equal-cost parallel arcs.
        """
        for neighbor, arcs in self._adj[u].items():  # type: ignore[attr-defined]
            for key, attr in arcs.items():
                yield neighbor, key, attr
