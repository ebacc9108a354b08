"""
Coupon validation: a discount entered by name or id, checked as a single
order-level reduction. Read only; safe to call any number of times.
"""
from typing import Optional
import logging

from django.utils import timezone

from apps.common.money import to_decimal, quantize_money
from ..models import Discount
from ..types import CouponValidation
from .calculations import compute_coupon_amount

logger = logging.getLogger(__name__)

MSG_INVALID_CODE = 'Invalid discount code'
MSG_INACTIVE = 'Discount is not active'
MSG_NOT_YET_VALID = 'Discount not yet valid'
MSG_EXPIRED = 'Discount has expired'
MSG_USAGE_LIMIT = 'Discount usage limit reached'
MSG_PER_USER_LIMIT = 'You have reached the usage limit for this discount'
MSG_NOT_ELIGIBLE = 'You are not eligible for this discount'


def minimum_amount_message(min_order_amount) -> str:
    return f"Minimum order amount of ₹{quantize_money(min_order_amount)} required"


class CouponValidator:

    def find_coupon(self, code) -> Optional[Discount]:
        """Exact name match first, then the discount id"""
        code = str(code or '').strip()
        if not code:
            return None
        discount = Discount.objects.filter(name=code).first()
        if discount is None and code.isdigit():
            discount = Discount.objects.filter(id=int(code)).first()
        return discount

    def validate_coupon(self, code, user=None, order_amount=0, now=None) -> CouponValidation:
        now = now or timezone.now()
        order_amount = to_decimal(order_amount)
        if user is not None and not getattr(user, 'is_authenticated', False):
            user = None

        discount = self.find_coupon(code)
        failure = self._first_failure(discount, user, order_amount, now)
        if failure:
            logger.info(f"Coupon {code!r} rejected: {failure}")
            return CouponValidation(is_valid=False, message=failure, discount=discount)

        amount, max_reached = compute_coupon_amount(discount, order_amount)
        return CouponValidation(
            is_valid=True,
            message='Discount code is valid',
            discount=discount,
            discount_amount=amount,
            max_discount_reached=max_reached,
        )

    def _first_failure(self, discount, user, order_amount, now) -> str:
        if discount is None:
            return MSG_INVALID_CODE
        if not discount.is_active:
            return MSG_INACTIVE
        if now < discount.valid_from:
            return MSG_NOT_YET_VALID
        if now > discount.valid_until:
            return MSG_EXPIRED
        if discount.usage_limit_reached:
            return MSG_USAGE_LIMIT
        if user is not None and discount.per_user_limit > 0:
            if discount.usages.filter(user=user).count() >= discount.per_user_limit:
                return MSG_PER_USER_LIMIT
        if order_amount < to_decimal(discount.min_order_amount):
            return minimum_amount_message(discount.min_order_amount)
        return ''
