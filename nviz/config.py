"""Configuration classes for nviz components."""

from dataclasses import dataclass, field
from typing import List, Optional

from nviz.types.base import FilterElement, FilterKind


@dataclass
class FilterDefinition:
    """Declarative description of one filter created at session start.

    Attributes:
        element: Whether the filter acts on nodes or links.
        kind: Range or pattern filter.
        layer: Layer the filter targets ("router", "pop" or "metro").
        attribute: Attribute name read from each element.
        lower: Initial lower bound (range filters only).
        upper: Initial upper bound (range filters only).
        units: Free-form unit label for display.
        display_name: Human-readable name.
    """

    element: FilterElement
    kind: FilterKind
    layer: str
    attribute: str
    lower: Optional[float] = None
    upper: Optional[float] = None
    units: str = ""
    display_name: str = ""

    @property
    def label(self) -> str:
        return f"{self.layer}_{self.attribute}"


def _default_filters() -> List[FilterDefinition]:
    return [
        FilterDefinition(
            element=FilterElement.LINK,
            kind=FilterKind.RANGE,
            layer="router",
            attribute="utilization",
            lower=0.0,
            upper=10.0,
            units="bps",
            display_name="Router Link Utilization",
        ),
        FilterDefinition(
            element=FilterElement.LINK,
            kind=FilterKind.RANGE,
            layer="router",
            attribute="capacity",
            lower=0.0,
            upper=10.0,
            units="bps",
            display_name="Router Link Capacity",
        ),
        FilterDefinition(
            element=FilterElement.NODE,
            kind=FilterKind.PATTERN,
            layer="router",
            attribute="name",
            display_name="Router Hostname",
        ),
    ]


@dataclass
class ViewConfig:
    """Configuration for hierarchy naming and the initial session view."""

    # Separator between hierarchy segments in node names ("SEA_SEA1_br1")
    name_separator: str = "_"

    # Deepest supported name: metro, pop, router
    max_depth: int = 3

    # Layer displayed when a session starts
    initial_layer: str = "metro"

    # Filters installed into every new session
    filters: List[FilterDefinition] = field(default_factory=_default_filters)

    def split_name(self, name: str) -> List[str]:
        """Split a hierarchical node name into its segments."""
        return name.split(self.name_separator)

    def join_name(self, segments: List[str]) -> str:
        """Join segments back into a hierarchical node name."""
        return self.name_separator.join(segments)


# Global configuration instance
VIEW_CONFIG = ViewConfig()
