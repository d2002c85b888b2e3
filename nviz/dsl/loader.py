"""YAML/JSON topology loader with schema validation.

Parses a topology document, normalizes YAML key quirks, validates it against
the packaged JSON schema, and builds the GraphStore (plus the optional nested
tree description) that a session starts from. JSON input is accepted as-is
since it is valid YAML.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import Any, Dict, Optional, Union

import jsonschema
import yaml

from nviz.logging import get_logger
from nviz.model.network import GraphStore, NetworkNode
from nviz.utils.yaml_utils import normalize_yaml_dict_keys

logger = get_logger(__name__)

__all__ = [
    "Topology",
    "build_topology",
    "load_topology",
    "load_topology_yaml",
    "topology_schema",
]


@dataclass
class Topology:
    """Static session input.

    Attributes:
        store: Node and link records, indices in document order.
        tree: Nested tree description, or None to derive it from node names.
    """

    store: GraphStore
    tree: Optional[Dict[str, Any]] = None


def topology_schema() -> Dict[str, Any]:
    """Return the packaged topology JSON schema."""
    with (
        resources.files("nviz.schemas")
        .joinpath("topology.json")
        .open("r", encoding="utf-8")
    ) as f:
        return json.load(f)


def load_topology_yaml(yaml_str: str) -> Dict[str, Any]:
    """Load, normalize, and validate a topology document.

    Raises:
        ValueError: If the document is not a mapping.
        jsonschema.ValidationError: If the document violates the schema.
    """
    data = yaml.safe_load(yaml_str)
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValueError("The provided topology must map to a dictionary at top-level.")

    for section in ("nodes", "links"):
        entries = data.get(section)
        if not isinstance(entries, list):
            continue
        for entry in entries:
            if isinstance(entry, dict) and isinstance(entry.get("attrs"), dict):
                entry["attrs"] = normalize_yaml_dict_keys(entry["attrs"])

    jsonschema.validate(data, topology_schema())
    return data


def _resolve_endpoint(store: GraphStore, endpoint: Union[str, int]) -> int:
    if isinstance(endpoint, int):
        if not 0 <= endpoint < store.num_nodes:
            raise ValueError(f"Link endpoint index {endpoint} is out of range.")
        return endpoint
    if not store.has_node(endpoint):
        raise ValueError(f"Link endpoint '{endpoint}' is not a defined node.")
    return store.node_by_name(endpoint).index


def build_topology(data: Dict[str, Any]) -> Topology:
    """Build the GraphStore from a validated topology mapping.

    Raises:
        ValueError: On duplicate node names or unknown link endpoints.
    """
    store = GraphStore()
    for entry in data.get("nodes", []):
        store.add_node(
            NetworkNode(
                name=entry["name"],
                layer=entry["layer"],
                attrs=dict(entry.get("attrs") or {}),
            )
        )

    bidirectional = data.get("bidirectional", True)
    for entry in data.get("links", []):
        source = _resolve_endpoint(store, entry["source"])
        target = _resolve_endpoint(store, entry["target"])
        if source == target:
            raise ValueError(f"Link from '{entry['source']}' to itself is not allowed.")
        store.connect(source, target, entry.get("attrs"), bidirectional=bidirectional)

    return Topology(store=store, tree=data.get("tree"))


def load_topology(path: Union[str, Path]) -> Topology:
    """Read a topology file (YAML or JSON) and build it."""
    path = Path(path)
    data = load_topology_yaml(path.read_text(encoding="utf-8"))
    topology = build_topology(data)
    logger.info(
        "Loaded topology %s: %d nodes, %d links",
        path.name,
        topology.store.num_nodes,
        topology.store.num_links,
    )
    return topology
