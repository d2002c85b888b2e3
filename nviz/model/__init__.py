"""Network model: flat records, the graph store, layers, and the hierarchy."""

from nviz.model.hierarchy import HierarchyLookupError, Node, NodeHierarchy
from nviz.model.layers import LAYER_ORDER, LAYERS, layer_order, link_type
from nviz.model.network import GraphStore, NetworkLink, NetworkNode

__all__ = [
    "GraphStore",
    "HierarchyLookupError",
    "LAYER_ORDER",
    "LAYERS",
    "NetworkLink",
    "NetworkNode",
    "Node",
    "NodeHierarchy",
    "layer_order",
    "link_type",
]
