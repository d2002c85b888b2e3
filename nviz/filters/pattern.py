"""Pattern filter: keeps elements whose attribute matches a regular expression."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any, Optional

from nviz.filters.base import Filter
from nviz.logging import get_logger
from nviz.types.base import FilterKind

if TYPE_CHECKING:
    from nviz.model.network import GraphStore, NetworkNode

logger = get_logger(__name__)


class PatternError(ValueError):
    """Raised when a filter pattern is not a valid regular expression."""


class PatternFilter(Filter):
    """Inbound iff the attribute's text contains a match for the pattern.

    The pattern is compiled on demand and cached until it changes. With
    ``include_neighbors`` set, a node is also inbound when any neighbor's
    attribute matches.
    """

    kind = FilterKind.PATTERN

    def __init__(
        self,
        layer: str,
        attribute: str,
        pattern: str = "",
        include_neighbors: bool = False,
        display_name: str = "",
    ) -> None:
        super().__init__(layer, attribute, display_name)
        self.pattern = pattern
        self.include_neighbors = include_neighbors
        self._compiled: Optional[re.Pattern[str]] = None
        self._compiled_from: Optional[str] = None

    def compile(self) -> re.Pattern[str]:
        """Return the compiled pattern.

        Raises:
            PatternError: If the pattern is not a valid regular expression.
        """
        if self._compiled is None or self._compiled_from != self.pattern:
            try:
                self._compiled = re.compile(self.pattern)
            except re.error as exc:
                raise PatternError(f"Invalid pattern '{self.pattern}': {exc}") from exc
            self._compiled_from = self.pattern
        return self._compiled

    def ready(self) -> bool:
        try:
            self.compile()
        except PatternError as exc:
            logger.error("Filter %s not applied: %s", self.label, exc)
            return False
        return True

    def inbound(self, value: Any) -> bool:
        try:
            regex = self.compile()
        except PatternError:
            return False
        text = "" if value is None else str(value)
        return regex.search(text) is not None

    def is_node_inbound(self, node: NetworkNode, store: GraphStore) -> bool:
        if self.inbound(node.get(self.attribute)):
            return True
        if not self.include_neighbors:
            return False
        return any(
            self.inbound(store.nodes[neighbor].get(self.attribute))
            for neighbor in node.neighbors
        )

    def update_pattern(self, pattern: str) -> None:
        self.pattern = pattern

    def update(self, text: str) -> None:
        self.update_pattern(text)

    def toggle_include_neighbors(self, include: bool) -> None:
        self.include_neighbors = bool(include)

    def current_input(self) -> str:
        return self.pattern
