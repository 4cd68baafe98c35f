import json
import logging
import runpy
from pathlib import Path

import pytest

from netpaths import cli
from netpaths.logging import reset_logging, setup_root_logger

TOPOLOGY = """
name: square
nodes:
  - {id: A, name: Amsterdam}
  - {id: B, name: Berlin}
  - {id: C, name: Copenhagen}
  - {id: D, name: Dublin}
links:
  - {id: ab, source: A, target: B, cost: 10, capacity: 100}
  - {id: bd, source: B, target: D, cost: 10, capacity: 50}
  - {id: ac, source: A, target: C, cost: 5, capacity: 100}
  - {id: cd, source: C, target: D, cost: 5, capacity: 100}
"""

BANDWIDTH_TOPOLOGY = """
nodes: [{id: S}, {id: A}, {id: B}, {id: T}]
links:
  - {id: sa, source: S, target: A, cost: 1, capacity: 100, utilization: 90}
  - {id: at, source: A, target: T, cost: 1, capacity: 100, utilization: 0}
  - {id: sb, source: S, target: B, cost: 2, capacity: 100, utilization: 0}
  - {id: bt, source: B, target: T, cost: 2, capacity: 100, utilization: 50}
"""

COUNTRY_TOPOLOGY = """
nodes:
  - {id: A, country: NL}
  - {id: B, country: DE}
  - {id: C, country: NL}
  - {id: D, country: FR}
links:
  - {id: ab, source: A, target: B, cost: 10, capacity: 100, utilization: 50}
  - {id: bd, source: B, target: D, cost: 10, capacity: 50}
  - {id: ac, source: A, target: C, cost: 5, capacity: 100, utilization: 10}
  - {id: cd, source: C, target: D, cost: 5, capacity: 100}
"""


@pytest.fixture(autouse=True)
def restore_logging():
    # main() points the package handler at the captured stderr
    yield
    reset_logging()
    setup_root_logger()


@pytest.fixture
def topology_file(tmp_path: Path) -> Path:
    path = tmp_path / "square.yaml"
    path.write_text(TOPOLOGY)
    return path


def test_paths_table(topology_file: Path, capsys) -> None:
    cli.main(["--quiet", "paths", str(topology_file), "A", "D"])
    out = capsys.readouterr().out
    assert "Paths A -> D (loopless):" in out
    assert "Amsterdam -> Copenhagen -> Dublin" in out
    assert "Amsterdam -> Berlin -> Dublin" in out
    assert out.index("Copenhagen") < out.index("Berlin")


def test_paths_json(topology_file: Path, capsys) -> None:
    cli.main(["--quiet", "paths", str(topology_file), "A", "D", "--json", "-k", "1"])
    data = json.loads(capsys.readouterr().out)
    assert data["k"] == 1
    assert data["diversity"] == "loopless"
    assert len(data["paths"]) == 1
    assert data["paths"][0]["path"] == ["A", "C", "D"]
    assert data["paths"][0]["bottleneck"] == {"link_id": "ac", "capacity": 100}


def test_paths_diversity_option(topology_file: Path, capsys) -> None:
    cli.main(
        [
            "--quiet",
            "paths",
            str(topology_file),
            "A",
            "D",
            "--json",
            "--diversity",
            "link-disjoint",
        ]
    )
    data = json.loads(capsys.readouterr().out)
    assert data["diversity"] == "link_disjoint"
    assert [p["path"] for p in data["paths"]] == [["A", "C", "D"], ["A", "B", "D"]]


def test_paths_no_route(tmp_path: Path, capsys) -> None:
    path = tmp_path / "split.yaml"
    path.write_text("nodes: [{id: A}, {id: B}]\nlinks: []\n")
    cli.main(["--quiet", "paths", str(path), "A", "B"])
    assert "No path from A to B" in capsys.readouterr().out


def test_bulk_stdout(topology_file: Path, capsys) -> None:
    cli.main(["--quiet", "bulk", str(topology_file)])
    data = json.loads(capsys.readouterr().out)
    assert data["analysis"] == {"pairs_total": 6, "cancelled": False}
    assert data["summary"]["with_redundancy"] == 6
    assert data["topology"]["name"] == "square"
    assert data["paths"][0]["source"] == "Amsterdam"
    assert "routing_tables" not in data


def test_bulk_results_file(topology_file: Path, tmp_path: Path, capsys) -> None:
    out_file = tmp_path / "out" / "report.json"
    cli.main(
        [
            "--quiet",
            "bulk",
            str(topology_file),
            "--nodes",
            "A",
            "D",
            "--results",
            str(out_file),
            "--routing-tables",
        ]
    )
    assert out_file.is_file()
    assert "{" not in capsys.readouterr().out
    data = json.loads(out_file.read_text())
    assert data["analysis"]["pairs_total"] == 1
    assert data["routing_tables"][0]["router"] == "Amsterdam"
    assert data["routing_tables"][0]["routes"][0]["next_hop"] == "Copenhagen"


def test_bulk_results_file_and_stdout(topology_file: Path, tmp_path: Path, capsys) -> None:
    out_file = tmp_path / "report.json"
    cli.main(
        [
            "--quiet",
            "bulk",
            str(topology_file),
            "-p",
            "2",
            "--results",
            str(out_file),
            "--stdout",
        ]
    )
    printed = json.loads(capsys.readouterr().out)
    assert printed == json.loads(out_file.read_text())


def test_bulk_timeout_reports_partial(topology_file: Path, capsys) -> None:
    cli.main(["--quiet", "bulk", str(topology_file), "--timeout", "0"])
    data = json.loads(capsys.readouterr().out)
    assert data["analysis"]["cancelled"] is True
    assert data["summary"] is None


def test_missing_topology_file(tmp_path: Path, capsys) -> None:
    with pytest.raises(SystemExit) as exc_info:
        cli.main(["--quiet", "paths", str(tmp_path / "missing.yaml"), "A", "B"])
    assert exc_info.value.code == 1
    assert "ERROR: Topology file not found" in capsys.readouterr().out


def test_invalid_topology_exits_with_error(tmp_path: Path, capsys) -> None:
    path = tmp_path / "bad.yaml"
    path.write_text("nodes: [{id: A}, {id: B}]\nlinks: [{source: A, target: B, cost: -4}]\n")
    with pytest.raises(SystemExit) as exc_info:
        cli.main(["--quiet", "bulk", str(path)])
    assert exc_info.value.code == 1
    assert "ERROR: InvalidMetric" in capsys.readouterr().out


def test_invalid_parallelism_exits_with_error(topology_file: Path, capsys) -> None:
    with pytest.raises(SystemExit) as exc_info:
        cli.main(["--quiet", "bulk", str(topology_file), "-p", "0"])
    assert exc_info.value.code == 1
    assert "parallelism must be >= 1" in capsys.readouterr().out


def test_invalid_diversity_is_a_usage_error(topology_file: Path) -> None:
    with pytest.raises(SystemExit) as exc_info:
        cli.main(["paths", str(topology_file), "A", "D", "--diversity", "node"])
    assert exc_info.value.code == 2


def test_no_arguments_prints_help(capsys) -> None:
    with pytest.raises(SystemExit) as exc_info:
        cli.main([])
    assert exc_info.value.code == 0
    assert "usage: netpaths" in capsys.readouterr().out


def test_module_entrypoint(monkeypatch) -> None:
    monkeypatch.setattr("sys.argv", ["netpaths", "--help"])
    with pytest.raises(SystemExit) as exc_info:
        runpy.run_module("netpaths", run_name="__main__")
    assert exc_info.value.code == 0


def test_verbose_and_quiet_levels(topology_file: Path) -> None:
    cli.main(["--verbose", "paths", str(topology_file), "A", "D", "--json"])
    assert logging.getLogger("netpaths").level == logging.DEBUG
    cli.main(["--quiet", "paths", str(topology_file), "A", "D", "--json"])
    assert logging.getLogger("netpaths").level == logging.WARNING


def test_logs_go_to_stderr_and_stdout_stays_json(topology_file: Path, capsys) -> None:
    cli.main(["bulk", str(topology_file)])
    captured = capsys.readouterr()
    data = json.loads(captured.out)
    assert data["analysis"]["pairs_total"] == 6
    assert "Analyzing" in captured.err


def test_paths_required_bandwidth(tmp_path: Path, capsys) -> None:
    path = tmp_path / "bw.yaml"
    path.write_text(BANDWIDTH_TOPOLOGY)
    cli.main(
        ["--quiet", "paths", str(path), "S", "T", "--json", "--required-bandwidth", "20"]
    )
    data = json.loads(capsys.readouterr().out)
    assert data["required_bandwidth"] == 20
    assert [p["path"] for p in data["paths"]] == [["S", "B", "T"]]
    assert data["paths"][0]["available_bandwidth"] == 50


def test_bandwidth_command_ranks_by_score(tmp_path: Path, capsys) -> None:
    path = tmp_path / "bw.yaml"
    path.write_text(BANDWIDTH_TOPOLOGY)
    cli.main(["--quiet", "bandwidth", str(path), "S", "T"])
    data = json.loads(capsys.readouterr().out)
    assert data["cost_weight"] == 0.5
    assert [p["path"] for p in data["paths"]] == [["S", "B", "T"], ["S", "A", "T"]]
    assert data["paths"][0]["score"] < data["paths"][1]["score"]

    cli.main(["--quiet", "bandwidth", str(path), "S", "T", "--cost-weight", "1"])
    data = json.loads(capsys.readouterr().out)
    assert [p["path"] for p in data["paths"]] == [["S", "A", "T"], ["S", "B", "T"]]


def test_bandwidth_command_rejects_bad_weight(tmp_path: Path, capsys) -> None:
    path = tmp_path / "bw.yaml"
    path.write_text(BANDWIDTH_TOPOLOGY)
    with pytest.raises(SystemExit) as exc_info:
        cli.main(["--quiet", "bandwidth", str(path), "S", "T", "--cost-weight", "2"])
    assert exc_info.value.code == 1
    assert "ERROR: ValueError" in capsys.readouterr().out


def test_blast_radius_command(topology_file: Path, capsys) -> None:
    cli.main(["--quiet", "blast-radius", str(topology_file), "ac", "20"])
    data = json.loads(capsys.readouterr().out)
    assert data["link_id"] == "ac"
    assert data["pairs_total"] == 6
    assert [(p["source"], p["target"]) for p in data["affected_paths"]] == [
        ("Amsterdam", "Copenhagen"),
        ("Amsterdam", "Dublin"),
        ("Berlin", "Copenhagen"),
    ]
    assert data["affected_paths"][1]["new_path"] == ["Amsterdam", "Berlin", "Dublin"]
    assert data["affected_nodes"] == ["Amsterdam", "Berlin", "Copenhagen", "Dublin"]


def test_blast_radius_unknown_link(topology_file: Path, capsys) -> None:
    with pytest.raises(SystemExit) as exc_info:
        cli.main(["--quiet", "blast-radius", str(topology_file), "zz", "1"])
    assert exc_info.value.code == 1
    assert "ERROR: InvalidTopology" in capsys.readouterr().out


def test_countries_command(tmp_path: Path, capsys) -> None:
    path = tmp_path / "countries.yaml"
    path.write_text(COUNTRY_TOPOLOGY)
    cli.main(["--quiet", "countries", str(path)])
    data = json.loads(capsys.readouterr().out)
    assert data["countries"] == ["NL", "DE", "FR"]
    nl_fr = data["country_paths"][1]
    assert (nl_fr["source_country"], nl_fr["target_country"]) == ("NL", "FR")
    assert nl_fr["best_path"]["path"] == ["C", "D"]
    assert nl_fr["avg_cost"] == 7.5
    assert data["country_connectivity"]["NL"] == {
        "nodes": 2,
        "links": 3,
        "avg_utilization": 20,
    }
