"""
Discount models module.
"""
from .discount import Discount
from .discount_usage import DiscountUsage

__all__ = [
    'Discount',
    'DiscountUsage',
]
