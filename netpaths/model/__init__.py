"""Topology and path value types."""

from netpaths.model.network import Link, Node, Topology
from netpaths.model.path import Bottleneck, HopDetail, PathResult

__all__ = ["Bottleneck", "HopDetail", "Link", "Node", "PathResult", "Topology"]
