# distribution_dashboard/utils/math_utils.py
import math
from typing import Iterable, Optional


def safe_divide(numerator: float, denominator: float, default: float = 0.0) -> float:
    """Divide, returning a fallback when the denominator is zero or missing.

    Args:
        numerator: Dividend
        denominator: Divisor
        default: Value returned when the division is undefined

    Returns:
        Quotient or default
    """
    if not denominator:
        return default

    return numerator / denominator


def percentage(part: float, whole: float, default: float = 0.0) -> float:
    """Calculate part / whole * 100 with a zero-safe fallback."""
    if not whole:
        return default

    return part / whole * 100.0


def sum_values(values: Iterable[Optional[float]]) -> float:
    """Sum values, treating None as zero."""
    return sum((value or 0) for value in values)


def is_number(value) -> bool:
    """Check whether a value is a finite-or-NaN real number (bools excluded)."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def ceil_int(value: float) -> int:
    """Round up to the next integer."""
    return int(math.ceil(value))
