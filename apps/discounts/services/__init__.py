"""
Discount services module.
"""
from .calculations import (
    compute_coupon_amount, compute_line_amount, select_best_discount, UnknownDiscountTypeError,
)
from .resolution_service import DiscountResolver
from .coupon_service import CouponValidator
from .cart_service import CartDiscountCalculator
from .usage_service import UsageRecorder
from .application_service import DiscountApplicationService
from .admin_service import DiscountAdminService

__all__ = [
    'compute_coupon_amount',
    'compute_line_amount',
    'select_best_discount',
    'UnknownDiscountTypeError',
    'DiscountResolver',
    'CouponValidator',
    'CartDiscountCalculator',
    'UsageRecorder',
    'DiscountApplicationService',
    'DiscountAdminService',
]
