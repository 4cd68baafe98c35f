"""Graph primitives.

This package provides the strict multi-directed graph type `StrictMultiDiGraph`
and `build_graph`, which expands a Topology into per-direction arcs.
"""

from netpaths.graph.build import build_graph
from netpaths.graph.strict_multidigraph import StrictMultiDiGraph

__all__ = ["StrictMultiDiGraph", "build_graph"]
