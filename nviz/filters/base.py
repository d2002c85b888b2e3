"""Filter base class and the ownership-labeled filtering algorithm.

A filter targets one attribute on one layer. Applying it walks the
layer-ordered window of elements starting at its layer:

* Elements on the target layer are tested with the filter's predicate. An
  element that fails is filtered out and labeled with the filter's label,
  but only if no filter owns it yet. An element that passes is filtered back
  in only if this filter owns it. Node changes propagate down the subtree
  with the same ownership rules.
* Elements on coarser layers are derived from their children. They are
  filtered out when every child is filtered out and filtered in otherwise,
  without ownership checks.

The label therefore acts as a mutual-exclusion token: two filters never
contend over the same element.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, ClassVar, Iterable

from nviz.logging import get_logger
from nviz.model.layers import validate_layer
from nviz.types.base import FilterKind

if TYPE_CHECKING:
    from nviz.model.hierarchy import NodeHierarchy
    from nviz.model.network import GraphStore, NetworkLink, NetworkNode

logger = get_logger(__name__)


@dataclass
class FilterPassResult:
    """Counts of state changes made by one filter pass.

    Attributes:
        label: Label of the filter that ran.
        filtered_out: Elements in the window newly filtered out.
        filtered_in: Elements in the window newly filtered in.
        skipped: True if the pass made no changes because the filter could
            not be evaluated (e.g. an invalid pattern).
    """

    label: str
    filtered_out: int = 0
    filtered_in: int = 0
    skipped: bool = False


class Filter(ABC):
    """One filtering rule over one attribute at one layer."""

    kind: ClassVar[FilterKind]

    def __init__(self, layer: str, attribute: str, display_name: str = "") -> None:
        self.layer = validate_layer(layer)
        self.attribute = attribute
        self.display_name = display_name or self.label

    @property
    def label(self) -> str:
        """Ownership label, unique per (layer, attribute)."""
        return f"{self.layer}_{self.attribute}"

    def __repr__(self) -> str:
        return f"{type(self).__name__}(label={self.label!r}, input={self.current_input()!r})"

    @abstractmethod
    def inbound(self, value: Any) -> bool:
        """Return True if ``value`` satisfies the filter's predicate."""

    @abstractmethod
    def update(self, text: str) -> None:
        """Update the filter from user input text."""

    def validate_input(self, text: str) -> None:
        """Raise ValueError if ``text`` would be rejected by :meth:`update`."""

    @abstractmethod
    def current_input(self) -> str:
        """Return the input text that reproduces the filter's current setting."""

    def ready(self) -> bool:
        """Return False if the filter cannot be evaluated this pass."""
        return True

    def is_node_inbound(self, node: NetworkNode, store: GraphStore) -> bool:
        return self.inbound(node.get(self.attribute))

    def is_link_inbound(self, link: NetworkLink) -> bool:
        return self.inbound(link.get(self.attribute))

    def apply_to_nodes(
        self, window: Iterable[NetworkNode], hierarchy: NodeHierarchy
    ) -> FilterPassResult:
        """Run one filter pass over a layer-ordered window of node records."""
        result = FilterPassResult(label=self.label)
        if not self.ready():
            result.skipped = True
            return result

        for record in window:
            node = hierarchy.by_index(record.index)

            if record.layer == self.layer:
                if (
                    not node.filtered
                    and node.filtered_by is None
                    and not self.is_node_inbound(record, hierarchy.store)
                ):
                    node.filter_out()
                    node.mark_filtered(self.label)
                    result.filtered_out += 1
                    if node.has_children():
                        hierarchy.propagate_filter_out(node, self.label)
                elif (
                    node.filtered
                    and node.filtered_by == self.label
                    and self.is_node_inbound(record, hierarchy.store)
                ):
                    node.filter_in()
                    node.unmark()
                    result.filtered_in += 1
                    if node.has_children():
                        hierarchy.propagate_filter_in(node, self.label)
            else:
                all_filtered = node.children_all_filtered()
                if not node.filtered and all_filtered:
                    node.filter_out()
                    node.mark_filtered(self.label)
                    result.filtered_out += 1
                elif node.filtered and not all_filtered:
                    node.filter_in()
                    node.unmark()
                    result.filtered_in += 1

        logger.debug(
            "Node filter %s: %d out, %d in",
            self.label,
            result.filtered_out,
            result.filtered_in,
        )
        return result

    def apply_to_links(
        self, window: Iterable[NetworkLink], hierarchy: NodeHierarchy
    ) -> FilterPassResult:
        """Run one filter pass over a layer-ordered window of links.

        Coarser links are derived from the links they aggregate, see
        :meth:`NodeHierarchy.link_children`.
        """
        result = FilterPassResult(label=self.label)
        if not self.ready():
            result.skipped = True
            return result

        for link in window:
            if link.type == self.layer:
                if (
                    not link.filtered
                    and link.filtered_by is None
                    and not self.is_link_inbound(link)
                ):
                    link.filtered = True
                    link.filtered_by = self.label
                    result.filtered_out += 1
                elif (
                    link.filtered
                    and link.filtered_by == self.label
                    and self.is_link_inbound(link)
                ):
                    link.filtered = False
                    link.filtered_by = None
                    result.filtered_in += 1
            else:
                all_filtered = hierarchy.link_children_all_filtered(link)
                if not link.filtered and all_filtered:
                    link.filtered = True
                    link.filtered_by = self.label
                    result.filtered_out += 1
                elif link.filtered and not all_filtered:
                    link.filtered = False
                    link.filtered_by = None
                    result.filtered_in += 1

        logger.debug(
            "Link filter %s: %d out, %d in",
            self.label,
            result.filtered_out,
            result.filtered_in,
        )
        return result
