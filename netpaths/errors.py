"""Exception types raised by netpaths.

Only construction-time problems are errors. A missing route between two
nodes is a normal, empty result and never raises.
"""

from __future__ import annotations


class NetPathsError(Exception):
    """Base class for all netpaths errors."""


class InvalidTopology(NetPathsError, ValueError):
    """A topology is structurally invalid.

    Raised for duplicate node or link identifiers, links whose endpoints do
    not reference known nodes, and self-loop links.
    """


class InvalidMetric(NetPathsError, ValueError):
    """A link carries a negative, NaN or missing cost, or a negative capacity."""
