"""
Common validators module.
"""
from .address_validators import validate_phone, validate_pincode
from .price_validators import validate_money_amount, validate_quantity, validate_percentage

__all__ = [
    'validate_phone',
    'validate_pincode',
    'validate_money_amount',
    'validate_quantity',
    'validate_percentage',
]
