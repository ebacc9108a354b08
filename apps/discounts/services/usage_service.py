"""
Usage recording: the only write path for discount counters.
"""
import logging

from django.db import IntegrityError, transaction
from django.db.models import F, Q

from apps.common.exceptions import DiscountConflictError, NotFoundError
from apps.common.money import quantize_money
from ..models import Discount, DiscountUsage
from .coupon_service import MSG_PER_USER_LIMIT, MSG_USAGE_LIMIT

logger = logging.getLogger(__name__)

MSG_ALREADY_APPLIED = 'Discount has already been applied to this order'


class UsageRecorder:
    """
    Records one redemption of a discount against an order.

    The usage row and the counter increment are written in one atomic block:
    either both happen or neither does. A lost race on the usage cap, the
    per-user cap or the one-usage-per-order rule raises
    ``DiscountConflictError``; callers must not retry blindly.
    """

    @transaction.atomic
    def record_usage(self, discount_id, user, order, amount) -> DiscountUsage:
        amount = quantize_money(amount)
        try:
            discount = Discount.objects.select_for_update().get(id=discount_id)
        except Discount.DoesNotExist:
            raise NotFoundError(f"Discount not found: {discount_id}")

        if DiscountUsage.objects.filter(discount=discount, order=order).exists():
            raise DiscountConflictError(MSG_ALREADY_APPLIED)

        if user is not None and discount.per_user_limit > 0:
            used_by_user = DiscountUsage.objects.filter(discount=discount, user=user).count()
            if used_by_user >= discount.per_user_limit:
                raise DiscountConflictError(MSG_PER_USER_LIMIT)

        # Bounded increment; zero rows means another checkout took the last use
        updated = Discount.objects.filter(
            Q(usage_limit__isnull=True) | Q(used_count__lt=F('usage_limit')),
            id=discount.id,
        ).update(
            used_count=F('used_count') + 1,
            total_discounts=F('total_discounts') + amount,
        )
        if not updated:
            logger.warning(f"Usage limit reached for discount {discount.id} on order {order.pk}")
            raise DiscountConflictError(MSG_USAGE_LIMIT)

        try:
            with transaction.atomic():
                usage = DiscountUsage.objects.create(
                    discount=discount,
                    user=user,
                    order=order,
                    discount_amount=amount,
                )
        except IntegrityError:
            raise DiscountConflictError(MSG_ALREADY_APPLIED)

        logger.info(f"DISCOUNT_USED discount={discount.id} order={order.pk} user={getattr(user, 'pk', None)} amount={amount}")
        return usage
