"""
Flat shipping fee by destination state.
"""
from decimal import Decimal

SHIPPING_RATES = {
    'tamil nadu': Decimal('80.00'),
    'kerala': Decimal('100.00'),
    'karnataka': Decimal('100.00'),
    'andhra pradesh': Decimal('100.00'),
    'telangana': Decimal('100.00'),
}
DEFAULT_SHIPPING_RATE = Decimal('200.00')


def normalize_state(state) -> str:
    return str(state or '').strip().casefold()


def calculate_shipping_cost(state) -> Decimal:
    """Never fails; unknown or empty states pay the default rate"""
    return SHIPPING_RATES.get(normalize_state(state), DEFAULT_SHIPPING_RATE)
