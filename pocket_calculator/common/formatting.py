"""Render numbers the way the calculator display shows them."""
from decimal import ROUND_HALF_EVEN, Context, Decimal
import math

# Large enough to hold every finite float with 20 fraction digits
_CONTEXT = Context(prec=400, rounding=ROUND_HALF_EVEN)


def format_number(value: float, max_fraction_digits: int = 10) -> str:
    """
    Format a float with at most ``max_fraction_digits`` fraction digits.

    Rounds half-even, strips trailing zeros, never uses exponent notation.

    Examples:
        - 14.0 -> "14"
        - 0.1 + 0.2 -> "0.3"
        - 2 / 3 -> "0.6666666667"

    :param float value: Number to format
    :param int max_fraction_digits: Maximum digits after the decimal point

    :return: Display text
    :rtype: str
    """
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"

    # repr() gives the shortest text that round-trips, avoiding binary noise like 0.30000000000000004
    quantum = Decimal(1).scaleb(-max_fraction_digits)
    rounded = Decimal(repr(value)).quantize(quantum, context=_CONTEXT)
    if rounded.is_zero():
        return "0"

    return format(rounded.normalize(context=_CONTEXT), "f")
