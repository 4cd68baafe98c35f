"""Topology document loading."""

from netpaths.dsl.loader import load_topology, load_topology_yaml, parse_topology_yaml

__all__ = ["load_topology", "load_topology_yaml", "parse_topology_yaml"]
