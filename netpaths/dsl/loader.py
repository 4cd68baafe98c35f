"""YAML/JSON loader + schema validation for topology documents.

JSON is a subset of YAML, so both formats go through ``yaml.safe_load``. The
parsed document is validated against the packaged JSON schema before it is
turned into a ``Topology``. Metric checks (negative costs and the like) are
left to graph construction.
"""

from __future__ import annotations

import json
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any, Dict, Union

import jsonschema
import yaml

from netpaths.logging import get_logger
from netpaths.model.network import Topology

logger = get_logger(__name__)


@lru_cache(maxsize=1)
def _topology_schema() -> Dict[str, Any]:
    try:
        with (
            resources.files("netpaths.schemas")
            .joinpath("topology.json")
            .open("r", encoding="utf-8")
        ) as f:  # type: ignore[attr-defined]
            return json.load(f)
    except Exception as exc:  # pragma: no cover
        raise RuntimeError(
            "Failed to locate packaged topology schema 'netpaths/schemas/topology.json'."
        ) from exc


def parse_topology_yaml(yaml_str: str) -> Dict[str, Any]:
    """Parse and validate a topology document, returning the raw mapping.

    Raises:
        ValueError: If the document is not a mapping at top level.
        jsonschema.ValidationError: If the document does not match the schema.
    """
    data = yaml.safe_load(yaml_str)
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValueError("The provided topology must map to a dictionary at top-level.")

    jsonschema.validate(data, _topology_schema())
    return data


def load_topology_yaml(yaml_str: str) -> Topology:
    """Parse, validate and build a Topology from YAML or JSON text."""
    return Topology.from_dict(parse_topology_yaml(yaml_str))


def load_topology(path: Union[str, Path]) -> Topology:
    """Load a topology file (``.yaml``, ``.yml`` or ``.json``).

    Raises:
        FileNotFoundError: If the file does not exist.
    """
    path = Path(path)
    logger.debug("Loading topology from %s", path)
    topology = load_topology_yaml(path.read_text(encoding="utf-8"))
    if topology.name is None:
        topology.name = path.stem
    return topology
