"""Base enums shared by filters and configuration."""

from __future__ import annotations

from enum import IntEnum


class FilterKind(IntEnum):
    """How a filter decides whether an element is inbound."""

    #: Numeric range membership, inclusive at both ends.
    RANGE = 1
    #: Regular-expression search over the attribute's text.
    PATTERN = 2


class FilterElement(IntEnum):
    """Which collection a filter acts on."""

    NODE = 1
    LINK = 2
