"""Whole-dollar arithmetic and AUD formatting."""

import math
from typing import Union


def round_half_up(value: Union[int, float]) -> int:
    """Round to the nearest integer, halves towards positive infinity.

    Python's built-in round() uses banker's rounding (round(20.5) == 20);
    quote totals always round 20.5 up to 21. Integers are returned as-is.
    """
    if isinstance(value, int):
        return value
    return int(math.floor(value + 0.5))


def format_currency(amount: Union[int, float]) -> str:
    """Format an amount as Australian dollars without cents.

    >>> format_currency(1234)
    '$1,234'
    >>> format_currency(0)
    '$0'
    """
    # en-AU rounds half away from zero
    whole = int(math.floor(abs(amount) + 0.5))
    sign = "-" if amount < 0 and whole else ""
    return f"${sign}{whole:,}"
