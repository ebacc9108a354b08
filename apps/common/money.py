"""
Fixed-point currency helpers.

All amounts are ``Decimal`` rounded half-up to two places; gateway amounts
are integers in the smallest currency unit (paise for INR).
"""
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation

ZERO = Decimal('0.00')
CENT = Decimal('0.01')
HUNDRED = Decimal('100')


def to_decimal(value) -> Decimal:
    """Convert ints, strings and floats to Decimal without binary float drift"""
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value))
    except InvalidOperation:
        raise ValueError(f"Invalid monetary amount: {value!r}")


def quantize_money(value) -> Decimal:
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def to_minor_units(amount) -> int:
    """Major units (rupees) to an integer count of minor units (paise)"""
    return int((quantize_money(amount) * HUNDRED).to_integral_value(rounding=ROUND_HALF_UP))


def from_minor_units(amount: int) -> Decimal:
    return quantize_money(Decimal(int(amount)) / HUNDRED)


def percentage_of(amount, percent) -> Decimal:
    return to_decimal(amount) * to_decimal(percent) / HUNDRED
