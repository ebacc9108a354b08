"""
Explicit "apply this discount to this order" action.

Unlike checkout, every ineligibility here is a hard failure.
"""
import logging

from django.db import transaction
from django.utils import timezone

from apps.common.exceptions import IneligibilityError, NotFoundError
from apps.common.money import ZERO, quantize_money, to_decimal
from ..models import Discount, DiscountUsage
from ..types import AppliedDiscount, DiscountLevel
from .calculations import compute_coupon_amount
from .coupon_service import (
    MSG_INACTIVE, MSG_NOT_ELIGIBLE, MSG_PER_USER_LIMIT, MSG_USAGE_LIMIT, minimum_amount_message,
)
from .usage_service import MSG_ALREADY_APPLIED

logger = logging.getLogger(__name__)


class DiscountApplicationService:

    def __init__(self, usage_recorder):
        self.usage_recorder = usage_recorder

    @transaction.atomic
    def apply_discount(self, order_id, discount_id, user, now=None) -> DiscountUsage:
        from apps.orders.models import Order

        now = now or timezone.now()
        try:
            discount = Discount.objects.get(id=discount_id)
        except (Discount.DoesNotExist, ValueError, TypeError):
            raise NotFoundError('Discount not found')

        if not discount.is_active:
            raise IneligibilityError(MSG_INACTIVE, reason='inactive')
        if not discount.is_valid_at(now):
            raise IneligibilityError('Discount is not valid at this time', reason='outside_window')
        if discount.usage_limit_reached:
            raise IneligibilityError(MSG_USAGE_LIMIT, reason='usage_limit')
        if discount.per_user_limit > 0 and discount.usages.filter(user=user).count() >= discount.per_user_limit:
            raise IneligibilityError(MSG_PER_USER_LIMIT, reason='per_user_limit')

        try:
            order = Order.objects.select_for_update().select_related('user').get(id=order_id)
        except (Order.DoesNotExist, ValueError, TypeError):
            raise NotFoundError('Order not found')
        if order.user_id != user.id and not getattr(user, 'is_admin_role', False):
            raise NotFoundError('Order not found')

        if DiscountUsage.objects.filter(discount=discount, order=order).exists():
            raise IneligibilityError(MSG_ALREADY_APPLIED, reason='already_applied')
        if order.payment_status != Order.PaymentStatus.PENDING:
            raise IneligibilityError('Discount cannot be applied to a settled order', reason='order_settled')
        if discount.restricts_user_type and order.user.role != discount.user_type:
            raise IneligibilityError(MSG_NOT_ELIGIBLE, reason='user_type')
        if to_decimal(order.subtotal) < to_decimal(discount.min_order_amount):
            raise IneligibilityError(
                f"{minimum_amount_message(discount.min_order_amount)} for this discount",
                reason='min_order_amount',
            )

        amount, max_reached = compute_coupon_amount(discount, order.subtotal)
        # Never discount below zero merchandise value
        amount = min(amount, max(ZERO, quantize_money(order.subtotal - order.discount)))

        order.discount = quantize_money(order.discount + amount)
        order.total_amount = quantize_money(order.subtotal - order.discount + order.shipping_cost)
        order.applied_discounts = list(order.applied_discounts or []) + [AppliedDiscount(
            level=DiscountLevel.ORDER_LEVEL,
            discount_id=discount.id,
            name=discount.name,
            discount_type=discount.discount_type,
            discount_value=discount.discount_value,
            amount=amount,
            description='Applied by request',
            code=discount.name,
            max_discount_reached=max_reached,
        ).to_dict()]
        order.save(update_fields=['discount', 'total_amount', 'applied_discounts', 'updated_at'])

        usage = self.usage_recorder.record_usage(discount.id, user, order, amount)
        logger.info(f"Discount applied: {discount.id} to order: {order.order_number}, Amount: {amount}")
        return usage
