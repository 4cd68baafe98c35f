"""Shared types: numeric aliases, policies and arc references."""

from netpaths.types.base import Capacity, Cost, DiversityPolicy
from netpaths.types.dto import EdgeDir, EdgeRef

__all__ = ["Capacity", "Cost", "DiversityPolicy", "EdgeDir", "EdgeRef"]
