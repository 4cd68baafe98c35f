"""Path engine wrappers returning PathResult values."""

from netpaths.solver.bandwidth import ScoredPath, bandwidth_aware_paths
from netpaths.solver.paths import (
    arcs_below_bandwidth,
    k_shortest_paths,
    route_to_path,
    shortest_path,
)

__all__ = [
    "ScoredPath",
    "arcs_below_bandwidth",
    "bandwidth_aware_paths",
    "k_shortest_paths",
    "route_to_path",
    "shortest_path",
]
