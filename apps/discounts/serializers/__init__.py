"""
Discount serializers module.
"""
from .discount_serializers import DiscountSerializer, DiscountUsageSerializer, DiscountToggleSerializer
from .cart_serializers import CartItemSerializer, CartCalculationSerializer, AvailableDiscountsSerializer

__all__ = [
    'DiscountSerializer',
    'DiscountUsageSerializer',
    'DiscountToggleSerializer',
    'CartItemSerializer',
    'CartCalculationSerializer',
    'AvailableDiscountsSerializer',
]
