"""netpaths: path computation and redundancy analysis for network topologies.

Given a topology of nodes and asymmetric-cost links, netpaths ranks
alternative routes between node pairs, reports their cost, hop count and
bottleneck capacity, and scales this across node sets to build routing
tables and redundancy reports.

Primary API:
    build_graph() - Expand a Topology into a directed graph
    k_shortest_paths() - Ranked loop-free paths for one pair
    analyze_all() - Primary and backup paths for every pair of a node subset
    summarize(), to_routing_tables() - Aggregate bulk results
    bandwidth_aware_paths() - Paths ranked by cost and spare bandwidth
    blast_radius() - Pairs whose primary path moves when a link is re-costed

Example:
    from netpaths import Link, Node, Topology, build_graph, k_shortest_paths

    topo = Topology()
    topo.add_node(Node("A"))
    topo.add_node(Node("B"))
    topo.add_link(Link("ab", "A", "B", forward_cost=7, reverse_cost=3, capacity=40))

    paths = k_shortest_paths(build_graph(topo), "A", "B", k=2)
"""

from __future__ import annotations

from netpaths import logging
from netpaths._version import __version__
from netpaths.analysis.bulk import BulkResultSet, PairResult, analyze_all, analyze_pair
from netpaths.analysis.countries import country_connectivity, country_paths
from netpaths.analysis.report import (
    RoutingTable,
    Summary,
    build_report,
    summarize,
    to_routing_tables,
)
from netpaths.analysis.whatif import BlastRadius, blast_radius
from netpaths.config import ANALYSIS_CONFIG, AnalysisConfig
from netpaths.dsl.loader import load_topology, load_topology_yaml
from netpaths.errors import InvalidMetric, InvalidTopology, NetPathsError
from netpaths.graph.build import build_graph
from netpaths.graph.strict_multidigraph import StrictMultiDiGraph
from netpaths.model.network import Link, Node, Topology
from netpaths.model.path import Bottleneck, PathResult
from netpaths.solver.bandwidth import ScoredPath, bandwidth_aware_paths
from netpaths.solver.paths import k_shortest_paths, shortest_path
from netpaths.types.base import DiversityPolicy
from netpaths.types.dto import EdgeRef

__all__ = [
    # Version
    "__version__",
    # Model
    "Node",
    "Link",
    "Topology",
    "PathResult",
    "Bottleneck",
    "EdgeRef",
    # Graph
    "StrictMultiDiGraph",
    "build_graph",
    # Path engine
    "k_shortest_paths",
    "shortest_path",
    "DiversityPolicy",
    "bandwidth_aware_paths",
    "ScoredPath",
    # Bulk analysis
    "analyze_all",
    "analyze_pair",
    "BulkResultSet",
    "PairResult",
    "summarize",
    "to_routing_tables",
    "build_report",
    "Summary",
    "RoutingTable",
    # What-if and per-country analysis
    "blast_radius",
    "BlastRadius",
    "country_paths",
    "country_connectivity",
    # Loading
    "load_topology",
    "load_topology_yaml",
    # Config and errors
    "AnalysisConfig",
    "ANALYSIS_CONFIG",
    "NetPathsError",
    "InvalidTopology",
    "InvalidMetric",
    # Utilities
    "logging",
]
