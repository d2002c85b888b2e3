"""Range filter: keeps elements whose attribute lies within inclusive bounds."""

from __future__ import annotations

import math
from typing import Any, Optional, Tuple

from nviz.filters.base import Filter
from nviz.types.base import FilterKind

RANGE_SEPARATOR = ";"


def parse_range_input(text: str) -> Tuple[float, float]:
    """Parse ``"lower;upper"`` into a pair of floats.

    Raises:
        ValueError: If the text does not hold exactly two numbers.
    """
    parts = str(text).split(RANGE_SEPARATOR)
    if len(parts) != 2:
        raise ValueError(
            f"Range input must be 'lower{RANGE_SEPARATOR}upper', got '{text}'"
        )
    try:
        lower, upper = (float(p.strip()) for p in parts)
    except ValueError:
        raise ValueError(f"Range bounds must be numbers, got '{text}'") from None
    if math.isnan(lower) or math.isnan(upper):
        raise ValueError(f"Range bounds must not be NaN, got '{text}'")
    return lower, upper


def _format_bound(value: float) -> str:
    """Format a bound so that parsing it back yields the same float."""
    if value.is_integer():
        return str(int(value))
    return repr(value)


class RangeFilter(Filter):
    """Inbound iff ``lower <= value <= upper``.

    Elements without the attribute count as inbound; values that are not
    numbers do not.
    """

    kind = FilterKind.RANGE

    def __init__(
        self,
        layer: str,
        attribute: str,
        lower: Optional[float] = None,
        upper: Optional[float] = None,
        units: str = "",
        display_name: str = "",
    ) -> None:
        super().__init__(layer, attribute, display_name)
        self.lower = -math.inf if lower is None else float(lower)
        self.upper = math.inf if upper is None else float(upper)
        self.units = units

    def inbound(self, value: Any) -> bool:
        if value is None:
            return True
        if isinstance(value, bool):
            value = int(value)
        try:
            number = float(value)
        except (TypeError, ValueError):
            return False
        return self.lower <= number <= self.upper

    def update_bounds(self, lower: float, upper: float) -> None:
        self.lower = float(lower)
        self.upper = float(upper)

    def validate_input(self, text: str) -> None:
        parse_range_input(text)

    def update(self, text: str) -> None:
        self.update_bounds(*parse_range_input(text))

    def current_input(self) -> str:
        return f"{_format_bound(self.lower)}{RANGE_SEPARATOR}{_format_bound(self.upper)}"
