"""Bulk pair analysis, reporting and what-if studies.

``analyze_all`` evaluates every unordered pair of a node subset; the
``report`` helpers summarize the outcome and build routing tables.
``blast_radius`` measures the impact of re-costing one link and the
``countries`` helpers aggregate paths and link load per node country.
"""

from netpaths.analysis.bulk import (
    BulkResultSet,
    PairResult,
    analyze_all,
    analyze_pair,
    iter_pairs,
)
from netpaths.analysis.countries import (
    CountryConnectivity,
    CountryPairPaths,
    build_country_report,
    countries,
    country_connectivity,
    country_paths,
)
from netpaths.analysis.report import (
    RouteEntry,
    RoutingTable,
    Summary,
    build_report,
    link_usage,
    routing_tables_to_dict,
    summarize,
    to_dataframe,
    to_routing_tables,
    to_rows,
)
from netpaths.analysis.whatif import (
    AffectedPair,
    BlastRadius,
    blast_radius,
    with_link_cost,
)

__all__ = [
    "BulkResultSet",
    "PairResult",
    "analyze_all",
    "analyze_pair",
    "iter_pairs",
    "CountryConnectivity",
    "CountryPairPaths",
    "build_country_report",
    "countries",
    "country_connectivity",
    "country_paths",
    "RouteEntry",
    "RoutingTable",
    "Summary",
    "build_report",
    "link_usage",
    "routing_tables_to_dict",
    "summarize",
    "to_dataframe",
    "to_routing_tables",
    "to_rows",
    "AffectedPair",
    "BlastRadius",
    "blast_radius",
    "with_link_cost",
]
