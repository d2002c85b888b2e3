"""nviz: hierarchical filtering and layer explosion for multi-layer networks.

nviz models a network at three resolutions (routers, points-of-presence and
metros) and keeps the state a renderer needs while a user filters elements
and explodes aggregate nodes into their constituents.

Primary API:
    Session - Wires store, hierarchy, filters, explosion engine and view
    GraphStore, NetworkNode, NetworkLink - Flat node and link records
    NodeHierarchy, Node - Tree over aggregated nodes
    FilterRegistry, RangeFilter, PatternFilter - Ownership-labeled filters
    LayerExplosionEngine - Node explosion and crosslink materialization

Example:
    from nviz import Session

    session = Session.from_file("topology.yaml")
    session.apply_filter("router_utilization", "0;5")
    session.explode("SEA")
    visible = session.visible_links()
"""

from __future__ import annotations

from nviz import cli, logging
from nviz._version import __version__
from nviz.config import VIEW_CONFIG, FilterDefinition, ViewConfig
from nviz.dsl.loader import Topology, build_topology, load_topology
from nviz.explode import LayerExplosionEngine
from nviz.filters import (
    Filter,
    FilterPassResult,
    FilterRegistry,
    PatternError,
    PatternFilter,
    RangeFilter,
)
from nviz.model import (
    GraphStore,
    HierarchyLookupError,
    NetworkLink,
    NetworkNode,
    Node,
    NodeHierarchy,
)
from nviz.session import Session, SessionState
from nviz.types.base import FilterElement, FilterKind
from nviz.view import LayerView

__all__ = [
    # Version
    "__version__",
    # Model
    "GraphStore",
    "NetworkNode",
    "NetworkLink",
    "Node",
    "NodeHierarchy",
    "HierarchyLookupError",
    # Filters
    "Filter",
    "FilterPassResult",
    "FilterRegistry",
    "RangeFilter",
    "PatternFilter",
    "PatternError",
    "FilterElement",
    "FilterKind",
    # Explosion and view
    "LayerExplosionEngine",
    "LayerView",
    # Session
    "Session",
    "SessionState",
    # Input and configuration
    "Topology",
    "build_topology",
    "load_topology",
    "FilterDefinition",
    "ViewConfig",
    "VIEW_CONFIG",
    # Utilities
    "cli",
    "logging",
]
