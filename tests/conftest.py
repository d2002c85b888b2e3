"""Global pytest configuration and shared topology fixtures.

The sample topology has two metros with PoPs and routers below them:

    A (0)                       B (6)
    ├── A1 (1)  region=west     └── B1 (7)  region=west
    │   ├── r1 (2)  util=2          └── r4 (8)  (no utilization)
    │   └── r2 (3)  util=8
    └── A2 (4)  region=east
        └── r3 (5)  util=4

Links are bidirectional, so each entry below creates two records:

    0/1   A  - B    metro
    2/3   A1 - B1   pop
    4/5   r1 - r4   router  utilization=3
    6/7   r2 - r4   router  utilization=9
    8/9   A2 - B1   pop
    10/11 r3 - r4   router  utilization=7
"""

from __future__ import annotations

import copy
from pathlib import Path
from typing import Any, Dict

import pytest
import yaml

from nviz.dsl.loader import build_topology
from nviz.filters.registry import FilterRegistry
from nviz.model.hierarchy import NodeHierarchy
from nviz.model.network import GraphStore
from nviz.session import Session

SAMPLE_TOPOLOGY: Dict[str, Any] = {
    "nodes": [
        {"name": "A", "layer": "metro"},
        {"name": "A_A1", "layer": "pop", "attrs": {"region": "west"}},
        {"name": "A_A1_r1", "layer": "router", "attrs": {"utilization": 2}},
        {"name": "A_A1_r2", "layer": "router", "attrs": {"utilization": 8}},
        {"name": "A_A2", "layer": "pop", "attrs": {"region": "east"}},
        {"name": "A_A2_r3", "layer": "router", "attrs": {"utilization": 4}},
        {"name": "B", "layer": "metro"},
        {"name": "B_B1", "layer": "pop", "attrs": {"region": "west"}},
        {"name": "B_B1_r4", "layer": "router"},
    ],
    "links": [
        {"source": "A", "target": "B"},
        {"source": "A_A1", "target": "B_B1"},
        {"source": "A_A1_r1", "target": "B_B1_r4", "attrs": {"utilization": 3}},
        {"source": "A_A1_r2", "target": "B_B1_r4", "attrs": {"utilization": 9}},
        {"source": "A_A2", "target": "B_B1"},
        {"source": "A_A2_r3", "target": "B_B1_r4", "attrs": {"utilization": 7}},
    ],
}


@pytest.fixture
def topology_data() -> Dict[str, Any]:
    """A fresh copy of the sample topology mapping."""
    return copy.deepcopy(SAMPLE_TOPOLOGY)


@pytest.fixture
def topology_file(tmp_path: Path, topology_data: Dict[str, Any]) -> Path:
    """The sample topology written as YAML."""
    path = tmp_path / "topology.yaml"
    path.write_text(yaml.safe_dump(topology_data, sort_keys=False))
    return path


@pytest.fixture
def store(topology_data: Dict[str, Any]) -> GraphStore:
    return build_topology(topology_data).store


@pytest.fixture
def hierarchy(store: GraphStore) -> NodeHierarchy:
    return NodeHierarchy.from_store(store)


@pytest.fixture
def registry(store: GraphStore, hierarchy: NodeHierarchy) -> FilterRegistry:
    """A registry with no filters installed."""
    return FilterRegistry(store, hierarchy)


@pytest.fixture
def session(store: GraphStore, hierarchy: NodeHierarchy) -> Session:
    """A session with the default filters, showing the metro layer."""
    return Session(store, hierarchy)
