"""
Cart discount calculator.

Two mutually exclusive modes: with a coupon code only that coupon is
considered; without one the best eligible product discount is chosen for
each line independently.
"""
from decimal import Decimal
from typing import Iterable, Optional
import logging

from django.utils import timezone

from apps.common.exceptions import PricingValidationError
from apps.common.money import ZERO, quantize_money
from ..types import (
    AppliedDiscount, CartDiscountResult, CartLine, CouponApplied,
    DiscountLevel, NoDiscount, ProductDiscountsApplied,
)
from .calculations import select_best_discount

logger = logging.getLogger(__name__)


class CartDiscountCalculator:

    def __init__(self, resolver, coupons):
        self.resolver = resolver
        self.coupons = coupons

    def calculate_cart_discounts(self, lines: Iterable[CartLine], user=None,
                                 coupon_code: Optional[str] = None, now=None) -> CartDiscountResult:
        lines = list(lines)
        if not lines:
            raise PricingValidationError('Cart items are required')
        for line in lines:
            if line.product_id is None or not line.quantity or line.quantity <= 0:
                raise PricingValidationError('Invalid cart item: productId and quantity are required')

        now = now or timezone.now()
        subtotal = quantize_money(sum((line.total for line in lines), ZERO))

        coupon_code = (coupon_code or '').strip() or None
        if coupon_code:
            return self._apply_coupon(subtotal, coupon_code, user, now)
        return self._apply_best_product_discounts(subtotal, lines, user, now)

    def _apply_coupon(self, subtotal: Decimal, code: str, user, now) -> CartDiscountResult:
        validation = self.coupons.validate_coupon(code, user=user, order_amount=subtotal, now=now)
        if not validation.is_valid:
            return NoDiscount(subtotal=subtotal, code=code, messages=(validation.message,))

        discount = validation.discount
        logger.info(f"Coupon {discount.name} applied: {validation.discount_amount} off {subtotal}")
        return CouponApplied(
            subtotal=subtotal,
            code=code,
            discount=AppliedDiscount(
                level=DiscountLevel.ORDER_LEVEL,
                discount_id=discount.id,
                name=discount.name,
                discount_type=discount.discount_type,
                discount_value=discount.discount_value,
                amount=validation.discount_amount,
                description='User applied coupon',
                code=code,
                max_discount_reached=validation.max_discount_reached,
            ),
        )

    def _apply_best_product_discounts(self, subtotal: Decimal, lines, user, now) -> CartDiscountResult:
        applied = []
        for line in lines:
            eligible = self.resolver.resolve_for_scope(
                product_id=line.product_id,
                category_id=line.category_id,
                subcategory_id=line.subcategory_id,
                user=user,
                now=now,
            )
            best = select_best_discount(eligible, line)
            if best is None:
                continue
            discount = best.discount
            applied.append(AppliedDiscount(
                level=DiscountLevel.PRODUCT_LEVEL,
                discount_id=discount.id,
                name=discount.name,
                discount_type=discount.discount_type,
                discount_value=discount.discount_value,
                amount=best.amount,
                description='Automatic best offer applied',
                product_id=line.product_id,
                product_name=line.product_name,
            ))

        if not applied:
            return NoDiscount(subtotal=subtotal)
        logger.info(f"Auto-applied {len(applied)} product discount(s) to cart of {subtotal}")
        return ProductDiscountsApplied(subtotal=subtotal, discounts=tuple(applied))
