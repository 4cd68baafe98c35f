"""Graph search algorithms: SPF, Yen K-shortest paths, link-disjoint paths."""

from netpaths.algorithms.spf import Route, disjoint_paths, ksp, path_cost, spf

__all__ = ["Route", "disjoint_paths", "ksp", "path_cost", "spf"]
