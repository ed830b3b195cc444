"""Display formatting of numeric results."""
from decimal import Decimal
import math


ERROR_TEXT = "Error"
SIGNIFICANT_DIGITS = 12

# Plain notation for 1e-7 <= |x| < 1e21, exponent notation outside
_MIN_PLAIN_EXPONENT = -6
_MAX_PLAIN_EXPONENT = 21


def _shortest_repr(value: float) -> str:
    """
    Render a finite, non-zero float with the fewest digits that round-trip.

    :param float value: Number to render

    :return: Decimal or exponent notation without trailing zeros
    :rtype: str
    """
    sign, digit_tuple, exponent = Decimal(repr(value)).normalize().as_tuple()
    digits = "".join(map(str, digit_tuple))
    # Position of the decimal point relative to the first digit
    point = exponent + len(digits)
    prefix = "-" if sign else ""

    if len(digits) <= point <= _MAX_PLAIN_EXPONENT:
        return prefix + digits + "0" * (point - len(digits))
    if 0 < point <= _MAX_PLAIN_EXPONENT:
        return prefix + digits[:point] + "." + digits[point:]
    if _MIN_PLAIN_EXPONENT < point <= 0:
        return prefix + "0." + "0" * -point + digits

    exp = point - 1
    exp_text = f"e+{exp}" if exp >= 0 else f"e-{-exp}"
    mantissa = digits if len(digits) == 1 else digits[0] + "." + digits[1:]
    return prefix + mantissa + exp_text


def format_number(value: float) -> str:
    """
    Format a result for display.

    Non-finite values become ``"Error"``, negative zero becomes ``0`` and the
    value is rounded to 12 significant digits without trailing zeros.

    :param float value: Result of an evaluation

    :return: Display string
    :rtype: str
    """
    if not math.isfinite(value):
        return ERROR_TEXT
    rounded = float(f"{value:.{SIGNIFICANT_DIGITS}g}")
    if rounded == 0:
        return "0"
    return _shortest_repr(rounded)
