"""Layer explosion: reveal a node's children and keep the graph connected.

Exploding an aggregate node hides it and shows its direct children. The
links the aggregate held no longer have a visible endpoint, so for every
child and every former neighbor the engine synthesizes crosslinks between
nodes of different layers:

* upward: from the child to the neighbor, then to the neighbor's parent,
  and so on until the root or an existing crosslink is reached;
* downward: from the child to the neighbor if it is visible, otherwise to
  whichever of the neighbor's descendants are visible.

Each ordered pair gets at most one crosslink. Pairs are memoized in the
store's identity cache and never removed.
"""

from __future__ import annotations

from typing import List

from nviz.logging import get_logger
from nviz.model.hierarchy import NodeHierarchy
from nviz.model.layers import link_type
from nviz.model.network import GraphStore, NetworkLink

logger = get_logger(__name__)

__all__ = ["LayerExplosionEngine"]


class LayerExplosionEngine:
    """Explodes nodes and materializes the crosslinks they require."""

    def __init__(self, store: GraphStore, hierarchy: NodeHierarchy) -> None:
        self.store = store
        self.hierarchy = hierarchy

    def explode(self, node_index: int) -> List[NetworkLink]:
        """Hide a node, reveal its children, and build the needed crosslinks.

        A node without children is left unchanged. Exploding a node again
        re-reveals its children but creates no further crosslinks.

        Args:
            node_index: Index of the node record to explode.

        Returns:
            Crosslinks created by this call, in creation order.
        """
        node = self.hierarchy.by_index(node_index)
        if not node.has_children():
            logger.debug("Node %s has no children; nothing to explode", node.record.name)
            return []

        first_new = self.store.num_links
        record = node.record
        record.show = False
        record.exploded = True

        neighbors = list(record.neighbors)
        for child in node.children.values():
            child.record.show = True
            child.record.exploded = True
            for neighbor in neighbors:
                self.build_up(child.index, neighbor)
                self.build_down(child.index, neighbor)

        created = self.store.links[first_new:]
        logger.debug(
            "Exploded %s into %d children, %d new crosslinks",
            record.name,
            node.num_children,
            len(created),
        )
        return created

    def _same_layer(self, a: int, b: int) -> bool:
        return self.store.nodes[a].layer == self.store.nodes[b].layer

    def build_up(self, main: int, neighbor: int) -> None:
        """Link ``main`` to ``neighbor`` and then to each of its ancestors.

        Stops at the root, at a same-layer neighbor, or at a pair that
        already has a crosslink.
        """
        if self.store.has_crosslink(main, neighbor) or self._same_layer(main, neighbor):
            return
        self.create_crosslink_pair(main, neighbor)
        parent = self.hierarchy.by_index(neighbor).parent
        if parent is not None and parent.index is not None:
            self.build_up(main, parent.index)

    def build_down(self, main: int, neighbor: int) -> None:
        """Link ``main`` to ``neighbor`` if visible, else to its visible descendants."""
        neighbor_record = self.store.nodes[neighbor]
        if neighbor_record.show:
            if not self.store.has_crosslink(main, neighbor) and not self._same_layer(
                main, neighbor
            ):
                self.create_crosslink_pair(main, neighbor)
            return
        for child in self.hierarchy.by_index(neighbor).children.values():
            self.build_down(main, child.index)

    def create_crosslink_pair(self, a: int, b: int) -> List[NetworkLink]:
        """Create the two directed crosslinks a -> b and b -> a.

        Both directions are registered in the neighbor maps and the identity
        cache; the store's link count grows by two.
        """
        layer_a = self.store.nodes[a].layer
        layer_b = self.store.nodes[b].layer
        forward = self.store.add_crosslink(
            NetworkLink(source=a, target=b, type=link_type(layer_a, layer_b))
        )
        backward = self.store.add_crosslink(
            NetworkLink(source=b, target=a, type=link_type(layer_b, layer_a))
        )
        return [forward, backward]

    def crosslinks(self) -> List[NetworkLink]:
        """Return every crosslink created so far, in creation order."""
        return [link for link in self.store.links if link.crosslink]
