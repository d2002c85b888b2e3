"""FilterRegistry: owns every filter and the layer-ordered element snapshots."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterator, List, Sequence, Tuple, TypeVar

from nviz.config import FilterDefinition
from nviz.filters.base import Filter, FilterPassResult
from nviz.filters.pattern import PatternFilter
from nviz.filters.range import RangeFilter
from nviz.logging import get_logger
from nviz.model.hierarchy import NodeHierarchy
from nviz.model.layers import layer_order
from nviz.model.network import GraphStore, NetworkLink, NetworkNode
from nviz.types.base import FilterElement, FilterKind

logger = get_logger(__name__)

T = TypeVar("T", NetworkNode, NetworkLink)
FilterKey = Tuple[str, str]


@dataclass
class FilterEntry:
    """A registered filter and its advisory activity flag."""

    filter: Filter
    active: bool = False


def create_filter(definition: FilterDefinition) -> Filter:
    """Instantiate the filter described by ``definition``."""
    if definition.kind == FilterKind.RANGE:
        return RangeFilter(
            definition.layer,
            definition.attribute,
            lower=definition.lower,
            upper=definition.upper,
            units=definition.units,
            display_name=definition.display_name,
        )
    return PatternFilter(
        definition.layer,
        definition.attribute,
        display_name=definition.display_name,
    )


def sort_by_layer(items: Sequence[T]) -> List[T]:
    """Return ``items`` stably sorted from finest to coarsest layer."""
    return sorted(items, key=lambda item: layer_order(item.type))


def window_from(snapshot: Sequence[T], layer: str) -> List[T]:
    """Return the tail of ``snapshot`` starting at the first element of ``layer``.

    Returns an empty list if no element has that exact type.
    """
    for i, item in enumerate(snapshot):
        if item.type == layer:
            return list(snapshot[i:])
    return []


class FilterRegistry:
    """Filters keyed by (layer, attribute), one mapping for nodes and one for links.

    Node and link snapshots are sorted by layer order once. The link snapshot
    is rebuilt whenever the store's link version has moved on, which happens
    when node explosion appends crosslinks.
    """

    def __init__(self, store: GraphStore, hierarchy: NodeHierarchy) -> None:
        self.store = store
        self.hierarchy = hierarchy
        self.node_filters: Dict[FilterKey, FilterEntry] = {}
        self.link_filters: Dict[FilterKey, FilterEntry] = {}
        self._labels: Dict[str, Tuple[FilterElement, Filter]] = {}

        self.layer_sorted_nodes: List[NetworkNode] = sort_by_layer(store.nodes)
        self.layer_sorted_links: List[NetworkLink] = sort_by_layer(store.links)
        self._links_version = store.links_version

    def _register(
        self,
        mapping: Dict[FilterKey, FilterEntry],
        element: FilterElement,
        flt: Filter,
    ) -> Filter:
        key = (flt.layer, flt.attribute)
        if key in mapping or flt.label in self._labels:
            raise ValueError(f"Filter '{flt.label}' is already registered.")
        mapping[key] = FilterEntry(filter=flt)
        self._labels[flt.label] = (element, flt)
        return flt

    def add_node_filter(self, flt: Filter) -> Filter:
        """Register a node filter.

        Raises:
            ValueError: If a filter with the same label exists.
        """
        return self._register(self.node_filters, FilterElement.NODE, flt)

    def add_link_filter(self, flt: Filter) -> Filter:
        """Register a link filter.

        Raises:
            ValueError: If a filter with the same label exists.
        """
        return self._register(self.link_filters, FilterElement.LINK, flt)

    def install(self, definition: FilterDefinition) -> Filter:
        """Create and register a filter from its definition."""
        flt = create_filter(definition)
        if definition.element == FilterElement.NODE:
            return self.add_node_filter(flt)
        return self.add_link_filter(flt)

    def get_node_filter(self, layer: str, attribute: str) -> Filter:
        try:
            return self.node_filters[(layer, attribute)].filter
        except KeyError:
            raise KeyError(f"No node filter for {layer}/{attribute}") from None

    def get_link_filter(self, layer: str, attribute: str) -> Filter:
        try:
            return self.link_filters[(layer, attribute)].filter
        except KeyError:
            raise KeyError(f"No link filter for {layer}/{attribute}") from None

    def get_filter(self, label: str) -> Filter:
        """Return the node or link filter registered under ``label``."""
        return self._lookup(label)[1]

    def _lookup(self, label: str) -> Tuple[FilterElement, Filter]:
        try:
            return self._labels[label]
        except KeyError:
            raise KeyError(f"No filter labeled '{label}'") from None

    def filters(self) -> Iterator[Tuple[FilterElement, Filter]]:
        """Yield (element, filter) pairs in registration order."""
        yield from self._labels.values()

    def set_node_filter_active(self, layer: str, attribute: str, active: bool) -> None:
        self.node_filters[(layer, attribute)].active = active

    def set_link_filter_active(self, layer: str, attribute: str, active: bool) -> None:
        self.link_filters[(layer, attribute)].active = active

    def is_node_filter_active(self, layer: str, attribute: str) -> bool:
        return self.node_filters[(layer, attribute)].active

    def is_link_filter_active(self, layer: str, attribute: str) -> bool:
        return self.link_filters[(layer, attribute)].active

    def sorted_nodes_window(self, layer: str) -> List[NetworkNode]:
        return window_from(self.layer_sorted_nodes, layer)

    def sorted_links_window(self, layer: str) -> List[NetworkLink]:
        if self.store.links_version != self._links_version:
            self.layer_sorted_links = sort_by_layer(self.store.links)
            self._links_version = self.store.links_version
            logger.debug(
                "Re-sorted %d links after crosslink growth", len(self.layer_sorted_links)
            )
        return window_from(self.layer_sorted_links, layer)

    def apply_node_filter(
        self, layer: str, attribute: str, text: str
    ) -> FilterPassResult:
        """Update a node filter from input text and run it.

        The ``active`` flag is advisory; the filter always runs.

        Raises:
            KeyError: If no node filter is registered for (layer, attribute).
            ValueError: If range input is malformed.
        """
        flt = self.get_node_filter(layer, attribute)
        flt.update(text)
        return flt.apply_to_nodes(self.sorted_nodes_window(layer), self.hierarchy)

    def apply_link_filter(
        self, layer: str, attribute: str, text: str
    ) -> FilterPassResult:
        """Update a link filter from input text and run it.

        Raises:
            KeyError: If no link filter is registered for (layer, attribute).
            ValueError: If range input is malformed.
        """
        flt = self.get_link_filter(layer, attribute)
        flt.update(text)
        return flt.apply_to_links(self.sorted_links_window(layer), self.hierarchy)

    def apply_filter(self, label: str, text: str) -> FilterPassResult:
        """Dispatch to :meth:`apply_node_filter` or :meth:`apply_link_filter` by label."""
        element, flt = self._lookup(label)
        if element == FilterElement.NODE:
            return self.apply_node_filter(flt.layer, flt.attribute, text)
        return self.apply_link_filter(flt.layer, flt.attribute, text)
