"""Currency rounding helpers.

Payroll amounts are carried as floats and rounded half-up to the cent at
each reported field. The float product is scaled and rounded as-is, the
same way the remote calculation service rounds, so local and remote pay
runs agree to the cent.
"""

import math


def round_cents(amount: float) -> float:
    """Round to 2 decimal places, halves rounding up.

    Works on the float as stored: 2237.5 * 0.062 is held just below 138.725
    and rounds to 138.72.

    Example: 2884.6153846 -> 2884.62
    """
    return math.floor(amount * 100 + 0.5) / 100


def round_whole(amount: float) -> int:
    """Round to the nearest integer, halves rounding up."""
    return math.floor(amount + 0.5)
