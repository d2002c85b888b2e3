"""Layer selection and the derived ``show`` flags consumed by renderers.

A node is displayed when it is not filtered and either belongs to the
current layer or has been exploded into view. A link is displayed when both
endpoints are displayed and the link itself is not filtered.
"""

from __future__ import annotations

from typing import List

from nviz.model.layers import validate_layer
from nviz.model.network import GraphStore, NetworkLink, NetworkNode


class LayerView:
    """Tracks the current layer and keeps node ``show`` flags up to date."""

    def __init__(self, store: GraphStore, current_layer: str) -> None:
        self.store = store
        self.current_layer = validate_layer(current_layer)

    def set_current_layer(self, layer: str) -> None:
        """Display ``layer`` and collapse every exploded node."""
        self.current_layer = validate_layer(layer)
        self.refresh_nodes(reset_explosions=True)

    def refresh_nodes(self, reset_explosions: bool = False) -> None:
        """Recompute ``show`` for every node from filter and explosion state.

        Exploded nodes that are not filtered keep their current ``show``.
        """
        for record in self.store.nodes:
            if reset_explosions:
                record.exploded = False
            if record.filtered:
                record.show = False
            elif not record.exploded:
                record.show = record.layer == self.current_layer

    def visible_nodes(self) -> List[NetworkNode]:
        return [record for record in self.store.nodes if record.show]

    def visible_links(self) -> List[NetworkLink]:
        nodes = self.store.nodes
        return [
            link
            for link in self.store.links
            if nodes[link.source].show and nodes[link.target].show and not link.filtered
        ]
