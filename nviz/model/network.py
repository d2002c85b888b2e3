"""Flat node and link records plus the GraphStore that owns them.

The store is the single owner of every ``NetworkNode`` and ``NetworkLink`` in
a session. Records are addressed by integer index (their position in the
store). Links are only ever appended: crosslinks created by node explosion
grow the link list, and ``links_version`` advances with every append so that
layer-sorted snapshots can detect staleness.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Tuple

from nviz.logging import get_logger
from nviz.model.layers import link_type, validate_layer

LOGGER = get_logger(__name__)

# Record fields reachable through ``NetworkNode.get`` in addition to attrs
_NODE_FIELDS = ("name", "index", "layer")


@dataclass
class NetworkNode:
    """One physical or aggregate entity (router, PoP or metro).

    Attributes:
        name: Hierarchical identifier of 1-3 segments, e.g. "SEA_SEA1_br1".
        layer: One of "router", "pop", "metro".
        attrs: Additional attributes (utilization, region, ...).
        index: Position in the GraphStore, assigned on insertion.
        neighbors: Adjacent node index -> index of the link leading there.
        show: Whether the node is currently displayed.
        exploded: Whether visibility is forced independent of the current layer.
        filtered: Whether the node is hidden by filtering.
        filtered_by: Label of the filter that owns ``filtered``, or None.
    """

    name: str
    layer: str
    attrs: Dict[str, Any] = field(default_factory=dict)
    index: int = field(init=False, default=-1)
    neighbors: Dict[int, int] = field(default_factory=dict)
    show: bool = False
    exploded: bool = False
    filtered: bool = False
    filtered_by: Optional[str] = None

    @property
    def type(self) -> str:
        """Type tag used for layer ordering (the node's layer)."""
        return self.layer

    def get(self, attribute: str) -> Any:
        """Return a record field or attribute value, None when absent."""
        if attribute in _NODE_FIELDS:
            return getattr(self, attribute)
        return self.attrs.get(attribute)


@dataclass
class NetworkLink:
    """One directed link between two node records.

    Attributes:
        source: Index of the source node.
        target: Index of the target node.
        type: Layer-pair tag, e.g. "router" or "pop_metro".
        attrs: Additional attributes (utilization, capacity, ...).
        crosslink: True for links synthesized by node explosion.
        index: Position in the GraphStore, assigned on insertion.
        filtered: Whether the link is hidden by filtering.
        filtered_by: Label of the filter that owns ``filtered``, or None.
    """

    source: int
    target: int
    type: str
    attrs: Dict[str, Any] = field(default_factory=dict)
    crosslink: bool = False
    index: int = field(init=False, default=-1)
    filtered: bool = False
    filtered_by: Optional[str] = None

    def get(self, attribute: str) -> Any:
        """Return an attribute value, None when absent."""
        return self.attrs.get(attribute)


@dataclass
class GraphStore:
    """Owner of all node and link records of a session.

    Attributes:
        nodes: Node records; list position equals ``NetworkNode.index``.
        links: Link records; list position equals ``NetworkLink.index``.
        crosslinks: Identity cache (source index, target index) -> crosslink.
        links_version: Incremented on every link append.
    """

    nodes: List[NetworkNode] = field(default_factory=list)
    links: List[NetworkLink] = field(default_factory=list)
    crosslinks: Dict[Tuple[int, int], NetworkLink] = field(default_factory=dict)
    links_version: int = 0
    _names: Dict[str, int] = field(default_factory=dict, init=False, repr=False)

    @property
    def num_nodes(self) -> int:
        return len(self.nodes)

    @property
    def num_links(self) -> int:
        """Total number of links, crosslinks included."""
        return len(self.links)

    def add_node(self, node: NetworkNode) -> NetworkNode:
        """Append a node record and assign its index.

        Raises:
            ValueError: If the name is already taken or the layer is unknown.
        """
        validate_layer(node.layer)
        if node.name in self._names:
            raise ValueError(f"Node '{node.name}' already exists in the store.")
        node.index = len(self.nodes)
        self.nodes.append(node)
        self._names[node.name] = node.index
        return node

    def add_link(self, link: NetworkLink) -> NetworkLink:
        """Append a link record and register it in the source's neighbor map.

        Raises:
            ValueError: If either endpoint index is not in the store.
        """
        for end in (link.source, link.target):
            if not 0 <= end < len(self.nodes):
                raise ValueError(f"Link endpoint {end} not found in store.")
        link.index = len(self.links)
        self.links.append(link)
        self.nodes[link.source].neighbors[link.target] = link.index
        self.links_version += 1
        return link

    def connect(
        self,
        source: int,
        target: int,
        attrs: Optional[Dict[str, Any]] = None,
        bidirectional: bool = True,
    ) -> List[NetworkLink]:
        """Add a link (and by default its reverse) with a derived type tag.

        Both directions receive their own copy of ``attrs``.
        """
        src_layer = self.node(source).layer
        tgt_layer = self.node(target).layer
        created = [
            self.add_link(
                NetworkLink(
                    source=source,
                    target=target,
                    type=link_type(src_layer, tgt_layer),
                    attrs=dict(attrs or {}),
                )
            )
        ]
        if bidirectional:
            created.append(
                self.add_link(
                    NetworkLink(
                        source=target,
                        target=source,
                        type=link_type(tgt_layer, src_layer),
                        attrs=dict(attrs or {}),
                    )
                )
            )
        return created

    def node(self, index: int) -> NetworkNode:
        """Return the node record at ``index``.

        Raises:
            IndexError: If no such node exists.
        """
        if not 0 <= index < len(self.nodes):
            raise IndexError(f"Node index {index} out of range.")
        return self.nodes[index]

    def node_by_name(self, name: str) -> NetworkNode:
        """Return the node record with the given full name.

        Raises:
            KeyError: If no node has that name.
        """
        try:
            return self.nodes[self._names[name]]
        except KeyError:
            raise KeyError(f"Node '{name}' not found in store.") from None

    def has_node(self, name: str) -> bool:
        return name in self._names

    def neighbor_links(self, index: int) -> Iterator[Tuple[int, NetworkLink]]:
        """Yield (neighbor index, link) pairs for a node's outgoing links."""
        for neighbor, link_index in self.nodes[index].neighbors.items():
            yield neighbor, self.links[link_index]

    def has_crosslink(self, source: int, target: int) -> bool:
        return (source, target) in self.crosslinks

    def add_crosslink(self, link: NetworkLink) -> NetworkLink:
        """Append a crosslink and record it in the identity cache."""
        link.crosslink = True
        self.add_link(link)
        self.crosslinks[(link.source, link.target)] = link
        LOGGER.debug(
            "Crosslink %d: %s -> %s (%s)",
            link.index,
            self.nodes[link.source].name,
            self.nodes[link.target].name,
            link.type,
        )
        return link
