"""
Discount views module.
"""
from .public_views import (
    ValidateCouponView, CalculateCartView, AvailableDiscountsView, ProductDiscountView, ApplyDiscountView,
)
from .admin_views import DiscountListCreateView, DiscountDetailView, DiscountToggleView, DiscountStatsView

__all__ = [
    'ValidateCouponView',
    'CalculateCartView',
    'AvailableDiscountsView',
    'ProductDiscountView',
    'ApplyDiscountView',
    'DiscountListCreateView',
    'DiscountDetailView',
    'DiscountToggleView',
    'DiscountStatsView',
]
