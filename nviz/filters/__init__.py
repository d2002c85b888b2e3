"""Node and link filters with ownership-labeled conflict resolution."""

from nviz.filters.base import Filter, FilterPassResult
from nviz.filters.pattern import PatternError, PatternFilter
from nviz.filters.range import RangeFilter, parse_range_input
from nviz.filters.registry import (
    FilterEntry,
    FilterRegistry,
    create_filter,
    sort_by_layer,
    window_from,
)

__all__ = [
    "Filter",
    "FilterEntry",
    "FilterPassResult",
    "FilterRegistry",
    "PatternError",
    "PatternFilter",
    "RangeFilter",
    "create_filter",
    "parse_range_input",
    "sort_by_layer",
    "window_from",
]
