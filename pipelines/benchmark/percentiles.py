"""
Percentile Calculator.

Responsibilities:
- Compute the 25th, 50th and 75th percentile of an ascending salary list.

Non-Responsibilities:
- No sorting guarantees beyond the input contract.
- No handling of empty matches (callers special-case count 0).

Invariant:
For any non-empty ascending input, lower <= median <= upper.
"""

import math
from decimal import Decimal, ROUND_HALF_UP
from typing import Sequence, Union

from .models import Percentiles

Number = Union[int, float, Decimal]


def _round_half_up(value: Number) -> int:
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def calculate_percentile(sorted_values: Sequence[Number], percentile: float) -> int:
    """
    Percentile by linear interpolation between closest ranks.

    index = (n - 1) * percentile; an integral index returns that element,
    otherwise the floor and ceiling neighbours are blended by the
    fractional part. The result is rounded half-up to a whole unit.

    Args:
        sorted_values: Ascending values, at least one
        percentile: Fraction between 0 and 1

    Returns:
        Percentile rounded to the nearest whole currency unit

    Raises:
        ValueError: If sorted_values is empty or percentile is out of range
    """
    if not sorted_values:
        raise ValueError("Cannot compute a percentile of an empty sequence")
    if not 0 <= percentile <= 1:
        raise ValueError(f"Percentile must be between 0 and 1, got {percentile}")

    index = Decimal(len(sorted_values) - 1) * Decimal(str(percentile))
    floor = math.floor(index)
    ceil = math.ceil(index)

    if floor == ceil:
        return _round_half_up(sorted_values[floor])

    d0 = Decimal(str(sorted_values[floor]))
    d1 = Decimal(str(sorted_values[ceil]))
    return _round_half_up(d0 + (d1 - d0) * (index - floor))


def calculate_percentiles(sorted_values: Sequence[Number]) -> Percentiles:
    """Return the 25th / 50th / 75th percentiles of an ascending sequence."""
    return Percentiles(
        lower=calculate_percentile(sorted_values, 0.25),
        median=calculate_percentile(sorted_values, 0.50),
        upper=calculate_percentile(sorted_values, 0.75),
    )
