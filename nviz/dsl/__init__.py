"""Input loading for topology documents."""

from nviz.dsl.loader import Topology, build_topology, load_topology, load_topology_yaml

__all__ = [
    "Topology",
    "build_topology",
    "load_topology",
    "load_topology_yaml",
]
