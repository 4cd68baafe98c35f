"""Build the directed analysis graph from a Topology.

Every link expands into two arcs that share the link's identity:
``EdgeRef(link.id, "fwd")`` for source->target with the forward cost and
``EdgeRef(link.id, "rev")`` for target->source with the reverse cost. Both
carry the link capacity. Arcs are added in link insertion order.
"""

from __future__ import annotations

import math
from typing import Optional

from netpaths.errors import InvalidMetric, InvalidTopology
from netpaths.graph.strict_multidigraph import StrictMultiDiGraph
from netpaths.logging import get_logger
from netpaths.model.network import Link, Topology
from netpaths.types.dto import EdgeRef

LOGGER = get_logger(__name__)


def build_graph(topology: Topology) -> StrictMultiDiGraph:
    """Normalize a topology into a ``StrictMultiDiGraph``.

    Node attributes: ``name``. Arc attributes: ``cost``, ``reverse_cost``
    (cost of the same link in the other direction), ``capacity`` (None when
    unknown), ``utilization`` (percent, None when unknown), ``link_id`` and
    ``interface`` (egress interface at the arc's tail, if declared).

    Args:
        topology: Topology to convert. Not modified.

    Returns:
        A new graph owned by the caller.

    Raises:
        InvalidTopology: A link references an unknown node or is a self-loop.
        InvalidMetric: A cost is missing, negative or NaN, or a capacity is
            negative or NaN, or a utilization is outside 0-100.
    """
    graph = StrictMultiDiGraph()
    for node_id, node in topology.nodes.items():
        graph.add_node(node_id, name=node.display_name)

    for link in topology.links.values():
        _validate_link(link, topology)
        graph.add_edge(
            link.source,
            link.target,
            EdgeRef(link.id, "fwd"),
            cost=link.forward_cost,
            reverse_cost=link.reverse_cost,
            capacity=link.capacity,
            utilization=link.utilization,
            link_id=link.id,
            interface=link.source_interface,
        )
        graph.add_edge(
            link.target,
            link.source,
            EdgeRef(link.id, "rev"),
            cost=link.reverse_cost,
            reverse_cost=link.forward_cost,
            capacity=link.capacity,
            utilization=link.utilization,
            link_id=link.id,
            interface=link.target_interface,
        )

    LOGGER.debug(
        "Built graph with %d nodes and %d arcs",
        graph.number_of_nodes(),
        graph.number_of_edges(),
    )
    return graph


def _validate_link(link: Link, topology: Topology) -> None:
    for endpoint in (link.source, link.target):
        if endpoint not in topology.nodes:
            raise InvalidTopology(
                f"Link '{link.id}' references unknown node '{endpoint}'."
            )
    if link.source == link.target:
        raise InvalidTopology(f"Link '{link.id}' is a self-loop on '{link.source}'.")

    _check_cost(link, "forward_cost", link.forward_cost)
    _check_cost(link, "reverse_cost", link.reverse_cost)
    if link.capacity is not None and not _non_negative(link.capacity):
        raise InvalidMetric(
            f"Link '{link.id}' has invalid capacity {link.capacity!r}; "
            "capacity must be non-negative."
        )
    if link.utilization is not None and not (
        _non_negative(link.utilization) and link.utilization <= 100
    ):
        raise InvalidMetric(
            f"Link '{link.id}' has invalid utilization {link.utilization!r}; "
            "utilization is a percentage between 0 and 100."
        )


def _check_cost(link: Link, label: str, value: Optional[float]) -> None:
    if value is None:
        raise InvalidMetric(f"Link '{link.id}' has no {label} and no cost.")
    if not _non_negative(value):
        raise InvalidMetric(
            f"Link '{link.id}' has invalid {label} {value!r}; "
            "costs must be non-negative."
        )


def _non_negative(value: float) -> bool:
    try:
        return not math.isnan(value) and value >= 0
    except TypeError:
        return False
