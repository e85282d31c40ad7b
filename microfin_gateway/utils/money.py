"""Monetary helpers - Decimal conversion and 2-place half-up rounding"""

from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from microfin_gateway.domain.exceptions import InvalidArgumentError

CENT = Decimal("0.01")
ZERO = Decimal("0")


def to_decimal(value, field: str = "amount") -> Decimal:
    """
    Convert an already-parsed number to Decimal.

    Floats go through str() so 0.1 becomes Decimal("0.1") rather than its
    binary expansion. Strings are not parsed here; that is the caller's job.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        raise InvalidArgumentError(f"{field} must be a number, got {type(value).__name__}", field)

    try:
        result = value if isinstance(value, Decimal) else Decimal(str(value))
    except InvalidOperation:
        raise InvalidArgumentError(f"{field} is not a valid number", field)

    if not result.is_finite():
        raise InvalidArgumentError(f"{field} must be finite", field)

    return result


def round2(value, field: str = "amount") -> Decimal:
    """Round to exactly 2 decimal places, half-up"""
    try:
        return to_decimal(value, field).quantize(CENT, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        # more digits than the decimal context can hold at cent precision
        raise InvalidArgumentError(f"{field} is out of range", field)


def is_zero(value) -> bool:
    """True when the amount rounds to 0.00"""
    return round2(value) == ZERO
