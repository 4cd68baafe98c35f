"""Command-line interface for netpaths."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from time import perf_counter
from typing import Any, Dict, List, Optional

from netpaths.analysis.bulk import analyze_all
from netpaths.analysis.countries import build_country_report
from netpaths.analysis.report import (
    build_report,
    routing_tables_to_dict,
    to_routing_tables,
)
from netpaths.analysis.whatif import blast_radius
from netpaths.config import ANALYSIS_CONFIG
from netpaths.dsl.loader import load_topology
from netpaths.graph.build import build_graph
from netpaths.logging import configure_cli_logging, get_logger
from netpaths.solver.bandwidth import bandwidth_aware_paths
from netpaths.solver.paths import k_shortest_paths
from netpaths.types.base import DiversityPolicy

logger = get_logger(__name__)


def _format_table(
    headers: List[str],
    rows: List[List[Any]],
    min_width: int = 6,
) -> str:
    """Format data as a simple ASCII table.

    Args:
        headers: Column headers
        rows: Data rows
        min_width: Minimum column width

    Returns:
        Formatted table string
    """
    if not rows:
        return ""

    all_data = [headers] + [[str(item) for item in row] for row in rows]
    col_widths = []
    for col_idx in range(len(headers)):
        max_width = max(len(str(row[col_idx])) for row in all_data)
        col_widths.append(max(max_width, min_width))

    def format_row(row_data: List[str]) -> str:
        return "   " + " | ".join(
            f"{str(item):<{col_widths[i]}}" for i, item in enumerate(row_data)
        )

    lines = [format_row(all_data[0])]
    lines.append("   " + "-+-".join("-" * width for width in col_widths))
    for row in all_data[1:]:
        lines.append(format_row(row))
    return "\n".join(lines)


def _format_cost(value: Any) -> str:
    """Return cost with up to three decimals, trailing zeros trimmed.

    Examples:
        10.0 -> "10"; 12.5 -> "12.5"; 1234.567 -> "1,234.567".
    """
    try:
        v = float(value)
    except (TypeError, ValueError):
        return str(value)

    s = f"{v:,.3f}"
    if "." in s:
        s = s.rstrip("0").rstrip(".")
    return s


def _run_paths(
    topology_path: Path,
    source: str,
    target: str,
    k: int,
    diversity: DiversityPolicy,
    as_json: bool,
    required_bandwidth: Optional[float] = None,
) -> None:
    topology = load_topology(topology_path)
    graph = build_graph(topology)
    paths = k_shortest_paths(
        graph,
        source,
        target,
        k,
        diversity=diversity,
        required_bandwidth=required_bandwidth,
    )

    if as_json:
        payload = {
            "source": source,
            "target": target,
            "k": k,
            "diversity": diversity.name.lower(),
            "required_bandwidth": required_bandwidth,
            "paths": [path.to_dict() for path in paths],
        }
        print(json.dumps(payload, indent=2))
        return

    if not paths:
        print(f"No path from {source} to {target}")
        return

    names = topology.display_names()
    rows = []
    for rank, path in enumerate(paths, start=1):
        bottleneck = path.bottleneck
        rows.append(
            [
                rank,
                path.describe(names, sep=" -> "),
                _format_cost(path.cost),
                _format_cost(path.reverse_cost),
                path.hops,
                "-" if bottleneck is None else _format_cost(bottleneck.capacity),
            ]
        )
    print(f"Paths {source} -> {target} ({diversity.name.lower()}):")
    print(
        _format_table(
            ["#", "Path", "Cost", "Reverse", "Hops", "Bottleneck"],
            rows,
        )
    )


def _run_bulk(
    topology_path: Path,
    nodes: Optional[List[str]],
    k: int,
    diversity: DiversityPolicy,
    parallelism: int,
    timeout: Optional[float],
    results_path: Optional[Path],
    stdout: bool,
    routing_tables: bool,
) -> None:
    topology = load_topology(topology_path)
    graph = build_graph(topology)
    names = topology.display_names()

    start = perf_counter()
    results = analyze_all(
        graph,
        nodes,
        k=k,
        diversity=diversity,
        parallelism=parallelism,
        timeout=timeout,
    )
    logger.info("Analysis took %.3f s", perf_counter() - start)

    payload: Dict[str, Any] = build_report(results, topology=topology, names=names)
    if routing_tables:
        payload.update(routing_tables_to_dict(to_routing_tables(results), names))

    json_str = json.dumps(payload, indent=2)
    if results_path is not None:
        results_path.parent.mkdir(parents=True, exist_ok=True)
        results_path.write_text(json_str)
        logger.info("Results written to: %s", results_path)
    if stdout or results_path is None:
        print(json_str)


def _run_bandwidth(
    topology_path: Path,
    source: str,
    target: str,
    required: float,
    cost_weight: Optional[float],
    k: Optional[int],
) -> None:
    topology = load_topology(topology_path)
    graph = build_graph(topology)
    scored = bandwidth_aware_paths(
        graph, source, target, required, cost_weight=cost_weight, k=k
    )
    payload = {
        "source": source,
        "target": target,
        "required_bandwidth": required,
        "cost_weight": (
            ANALYSIS_CONFIG.cost_weight if cost_weight is None else cost_weight
        ),
        "paths": [item.to_dict() for item in scored],
    }
    print(json.dumps(payload, indent=2))


def _run_blast_radius(
    topology_path: Path,
    link_id: str,
    cost: float,
    reverse_cost: Optional[float],
    nodes: Optional[List[str]],
    parallelism: int,
    timeout: Optional[float],
) -> None:
    topology = load_topology(topology_path)
    start = perf_counter()
    result = blast_radius(
        topology,
        link_id,
        cost,
        reverse_cost,
        nodes,
        parallelism=parallelism,
        timeout=timeout,
    )
    logger.info("Analysis took %.3f s", perf_counter() - start)
    print(json.dumps(result.to_dict(topology.display_names()), indent=2))


def _run_countries(topology_path: Path) -> None:
    topology = load_topology(topology_path)
    print(json.dumps(build_country_report(topology), indent=2))


def main(
argv: Optional[List[str]] = None) -> None:
    """Entry point for the ``netpaths`` command.

    Args:
        argv: Optional list of command-line arguments. If ``None``, ``sys.argv``
            is used.
    """
    parser = argparse.ArgumentParser(
        prog="netpaths",
        description="Compute ranked paths and redundancy reports for a topology.",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable debug logging"
    )
    parser.add_argument(
        "--quiet", action="store_true", help="Only log warnings and errors"
    )

    subparsers = parser.add_subparsers(
        dest="command",
        required=True,
        title="Available commands",
        metavar="{paths,bulk,bandwidth,blast-radius,countries}",
        help="Available commands",
    )

    paths_parser = subparsers.add_parser("paths", help="Rank paths for one node pair")
    paths_parser.add_argument("topology", type=Path, help="Topology YAML/JSON file")
    paths_parser.add_argument("source", help="Source node id")
    paths_parser.add_argument("target", help="Target node id")
    paths_parser.add_argument(
        "--json", action="store_true", help="Print paths as JSON instead of a table"
    )
    paths_parser.add_argument(
        "--required-bandwidth",
        type=float,
        default=None,
        help="Skip links with less available bandwidth than this",
    )

    bulk_parser = subparsers.add_parser(
        "bulk", help="Analyze every node pair and report redundancy"
    )
    bulk_parser.add_argument("topology", type=Path, help="Topology YAML/JSON file")

    bandwidth_parser = subparsers.add_parser(
        "bandwidth", help="Rank link-disjoint paths by cost and spare bandwidth"
    )
    bandwidth_parser.add_argument("topology", type=Path, help="Topology YAML/JSON file")
    bandwidth_parser.add_argument("source", help="Source node id")
    bandwidth_parser.add_argument("target", help="Target node id")
    bandwidth_parser.add_argument(
        "--required",
        type=float,
        default=0.0,
        help="Bandwidth each link must still have available (default: %(default)s)",
    )
    bandwidth_parser.add_argument(
        "--cost-weight",
        type=float,
        default=None,
        help="Weight of cost against bandwidth, 0..1 "
        f"(default: {ANALYSIS_CONFIG.cost_weight})",
    )
    bandwidth_parser.add_argument(
        "-k",
        type=int,
        default=None,
        help=f"Maximum paths (default: {ANALYSIS_CONFIG.bandwidth_k})",
    )

    blast_parser = subparsers.add_parser(
        "blast-radius", help="Report pairs whose primary path moves when a link is re-costed"
    )
    blast_parser.add_argument("topology", type=Path, help="Topology YAML/JSON file")
    blast_parser.add_argument("link", help="Link id to re-cost")
    blast_parser.add_argument("cost", type=float, help="New forward cost")
    blast_parser.add_argument(
        "--reverse-cost",
        type=float,
        default=None,
        help="New reverse cost (default: same as the forward cost)",
    )

    countries_parser = subparsers.add_parser(
        "countries", help="Aggregate primary paths and link load per country"
    )
    countries_parser.add_argument("topology", type=Path, help="Topology YAML/JSON file")

    for p in (bulk_parser, blast_parser):
        p.add_argument(
            "--nodes",
            "-n",
            nargs="+",
            default=None,
            help="Node ids to analyze (default: all nodes)",
        )
        p.add_argument(
            "--parallelism",
            "-p",
            type=int,
            default=ANALYSIS_CONFIG.parallelism,
            help="Worker threads (default: %(default)s)",
        )
        p.add_argument(
            "--timeout",
            type=float,
            default=ANALYSIS_CONFIG.timeout,
            help="Stop after this many seconds and report partial results",
        )
    bulk_parser.add_argument(
        "--results",
        "-r",
        type=Path,
        default=None,
        help="Write the JSON report to this file instead of stdout",
    )
    bulk_parser.add_argument(
        "--stdout",
        action="store_true",
        help="Also print the report when --results is given",
    )
    bulk_parser.add_argument(
        "--routing-tables",
        action="store_true",
        help="Include per-router routing tables in the report",
    )

    for p in (paths_parser, bulk_parser):
        p.add_argument(
            "-k",
            type=int,
            default=ANALYSIS_CONFIG.default_k,
            help="Paths per pair (default: %(default)s)",
        )
        p.add_argument(
            "--diversity",
            type=DiversityPolicy.from_string,
            default=ANALYSIS_CONFIG.diversity,
            help="Backup policy: loopless (default) or link_disjoint",
        )

    effective_args = sys.argv[1:] if argv is None else argv
    if not effective_args:
        parser.print_help()
        raise SystemExit(0)

    args = parser.parse_args(effective_args)

    # Logs go to stderr; stdout carries the tables and JSON
    configure_cli_logging(verbose=args.verbose, quiet=args.quiet)
    logger.debug("Debug logging enabled")

    try:
        if args.command == "paths":
            _run_paths(
                args.topology,
                args.source,
                args.target,
                args.k,
                args.diversity,
                args.json,
                args.required_bandwidth,
            )
        elif args.command == "bulk":
            _run_bulk(
                args.topology,
                args.nodes,
                args.k,
                args.diversity,
                args.parallelism,
                args.timeout,
                args.results,
                args.stdout,
                args.routing_tables,
            )
        elif args.command == "bandwidth":
            _run_bandwidth(
                args.topology,
                args.source,
                args.target,
                args.required,
                args.cost_weight,
                args.k,
            )
        elif args.command == "blast-radius":
            _run_blast_radius(
                args.topology,
                args.link,
                args.cost,
                args.reverse_cost,
                args.nodes,
                args.parallelism,
                args.timeout,
            )
        elif args.command == "countries":
            _run_countries(args.topology)
    except FileNotFoundError:
        logger.error("Topology file not found: %s", args.topology)
        print(f"ERROR: Topology file not found: {args.topology}")
        sys.exit(1)
    except Exception as e:
        logger.error("Failed to run %s: %s: %s", args.command, type(e).__name__, e)
        print(f"ERROR: {type(e).__name__}: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
