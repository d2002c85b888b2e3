"""Shared enums for nviz.

Centralizes the small vocabulary used across the filters and configuration.
"""

from nviz.types.base import FilterElement, FilterKind

__all__ = [
    "FilterElement",
    "FilterKind",
]
