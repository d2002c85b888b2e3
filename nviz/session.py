"""Interactive session: wires the core components and serializes their state.

A ``Session`` owns one GraphStore, its NodeHierarchy, a FilterRegistry
populated from configuration, a LayerExplosionEngine and a LayerView. Every
user-facing operation runs to completion and leaves ``show`` and
``filtered`` flags current for rendering.

The session state string records the current layer and the input of every
filter, e.g. ``?current_layer=metro&router_utilization=0;5&router_name=br1``.
Loading it restores the layer and re-applies every filter.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Union
from urllib.parse import parse_qsl, urlencode

from nviz.config import VIEW_CONFIG, ViewConfig
from nviz.dsl.loader import Topology, load_topology
from nviz.explode import LayerExplosionEngine
from nviz.filters.base import FilterPassResult
from nviz.filters.pattern import PatternFilter
from nviz.filters.registry import FilterRegistry
from nviz.logging import get_logger
from nviz.model.hierarchy import Node, NodeHierarchy
from nviz.model.network import GraphStore, NetworkLink, NetworkNode
from nviz.view import LayerView

logger = get_logger(__name__)

LAYER_KEY = "current_layer"

NodeRef = Union[int, str]


@dataclass
class SessionState:
    """Serializable session state.

    Attributes:
        current_layer: Displayed layer.
        filters: Filter label -> input text, in registration order.
    """

    current_layer: str
    filters: Dict[str, str] = field(default_factory=dict)

    def to_string(self) -> str:
        pairs = [(LAYER_KEY, self.current_layer)]
        pairs.extend(self.filters.items())
        return "?" + urlencode(pairs, safe=";")

    @classmethod
    def parse(cls, text: str) -> SessionState:
        """Parse a state string produced by :meth:`to_string`.

        Raises:
            ValueError: If the current layer is missing.
        """
        pairs = parse_qsl(text.lstrip("?"), keep_blank_values=True)
        values = dict(pairs)
        if LAYER_KEY not in values:
            raise ValueError(f"Session state is missing '{LAYER_KEY}': '{text}'")
        layer = values.pop(LAYER_KEY)
        return cls(current_layer=layer, filters=values)


class Session:
    """One user's in-memory view of a topology."""

    def __init__(
        self,
        store: GraphStore,
        hierarchy: NodeHierarchy,
        config: ViewConfig = VIEW_CONFIG,
    ) -> None:
        self.store = store
        self.hierarchy = hierarchy
        self.config = config

        self.registry = FilterRegistry(store, hierarchy)
        for definition in config.filters:
            self.registry.install(definition)

        self.engine = LayerExplosionEngine(store, hierarchy)
        self.view = LayerView(store, config.initial_layer)
        self.view.set_current_layer(config.initial_layer)

    @classmethod
    def from_topology(
        cls, topology: Topology, config: ViewConfig = VIEW_CONFIG
    ) -> Session:
        if topology.tree is not None:
            hierarchy = NodeHierarchy.from_tree(topology.tree, topology.store, config)
        else:
            hierarchy = NodeHierarchy.from_store(topology.store, config)
        return cls(topology.store, hierarchy, config)

    @classmethod
    def from_file(
        cls, path: Union[str, Path], config: ViewConfig = VIEW_CONFIG
    ) -> Session:
        return cls.from_topology(load_topology(path), config)

    @property
    def current_layer(self) -> str:
        return self.view.current_layer

    def resolve(self, name: str) -> Node:
        return self.hierarchy.resolve(name)

    def node_index(self, ref: NodeRef) -> int:
        """Return the record index for a node index or full node name."""
        if isinstance(ref, int):
            return self.hierarchy.by_index(ref).index
        return self.hierarchy.resolve(ref).index

    def set_current_layer(self, layer: str) -> None:
        self.view.set_current_layer(layer)

    def apply_filter(self, label: str, text: str) -> FilterPassResult:
        """Update and run one filter, then refresh node visibility."""
        result = self.registry.apply_filter(label, text)
        self.view.refresh_nodes()
        return result

    def apply_all_filters(
        self, inputs: Optional[Mapping[str, str]] = None
    ) -> List[FilterPassResult]:
        """Run every registered filter.

        Args:
            inputs: Label -> input text. Filters not named keep their
                current input.

        Raises:
            KeyError: If a label names no filter.
            ValueError: If any input is malformed. No filter runs in that case.
        """
        inputs = dict(inputs or {})
        for label in inputs:
            self.registry.get_filter(label)

        texts = {}
        for _element, flt in self.registry.filters():
            text = inputs.get(flt.label, flt.current_input())
            flt.validate_input(text)
            texts[flt.label] = text

        results = [self.registry.apply_filter(label, text) for label, text in texts.items()]
        self.view.refresh_nodes()
        return results

    def toggle_include_neighbors(self, label: str, include: bool) -> None:
        """Switch a pattern filter between own-value and neighbor-aware matching.

        Raises:
            ValueError: If the labeled filter is not a pattern filter.
        """
        flt = self.registry.get_filter(label)
        if not isinstance(flt, PatternFilter):
            raise ValueError(f"Filter '{label}' is not a pattern filter.")
        flt.toggle_include_neighbors(include)

    def explode(self, ref: NodeRef) -> List[NetworkLink]:
        """Explode a node given by index or name; return the new crosslinks.

        Children that are filtered out stay hidden.
        """
        created = self.engine.explode(self.node_index(ref))
        self.view.refresh_nodes()
        return created

    def visible_nodes(self) -> List[NetworkNode]:
        return self.view.visible_nodes()

    def visible_links(self) -> List[NetworkLink]:
        return self.view.visible_links()

    def state(self) -> SessionState:
        return SessionState(
            current_layer=self.current_layer,
            filters={flt.label: flt.current_input() for _, flt in self.registry.filters()},
        )

    def save_state(self) -> str:
        return self.state().to_string()

    def load_state(self, text: str) -> None:
        """Restore the layer and every filter input from a state string."""
        state = SessionState.parse(text)
        self.view.set_current_layer(state.current_layer)
        self.apply_all_filters(state.filters)
        logger.debug("Restored session state %s", text)
