"""
Pure discount arithmetic shared by coupon validation, best-offer selection
and explicit discount application.
"""
from decimal import Decimal
from typing import Iterable, Optional, Tuple

from apps.common.money import ZERO, quantize_money, percentage_of, to_decimal
from ..models import Discount
from ..types import CartLine, DiscountCandidate

DiscountType = Discount.DiscountType


def percentage_cap(discount) -> Optional[Decimal]:
    """``max_discount`` as a cap; unset or zero means uncapped"""
    if not discount.max_discount:
        return None
    return to_decimal(discount.max_discount)


class UnknownDiscountTypeError(ValueError):
    pass


def compute_coupon_amount(discount, order_amount) -> Tuple[Decimal, bool]:
    """
    Order-level amount for a coupon.

    Returns ``(amount, max_discount_reached)``. Percentage coupons are capped
    at ``max_discount``; fixed amounts are returned verbatim, capping to the
    order total happens during assembly.
    """
    discount_type = discount.discount_type
    value = to_decimal(discount.discount_value)
    if discount_type == DiscountType.PERCENTAGE:
        raw = percentage_of(order_amount, value)
        cap = percentage_cap(discount)
        if cap is not None and raw > cap:
            return quantize_money(cap), True
        return quantize_money(raw), False
    elif discount_type == DiscountType.FIXED_AMOUNT:
        return quantize_money(value), False
    elif discount_type == DiscountType.BUY_X_GET_Y:
        return quantize_money(value), False
    raise UnknownDiscountTypeError(f"Unsupported discount type: {discount_type}")


def compute_line_amount(discount, line_total, quantity: int) -> Decimal:
    """Amount a discount takes off a single cart line"""
    discount_type = discount.discount_type
    value = to_decimal(discount.discount_value)
    line_total = to_decimal(line_total)
    if discount_type == DiscountType.PERCENTAGE:
        amount = percentage_of(line_total, value)
        cap = percentage_cap(discount)
        if cap is not None:
            amount = min(amount, cap)
        return quantize_money(amount)
    elif discount_type == DiscountType.FIXED_AMOUNT:
        return quantize_money(min(value, line_total))
    elif discount_type == DiscountType.BUY_X_GET_Y:
        if quantity >= (discount.min_quantity or 0):
            return quantize_money(value)
        return ZERO
    raise UnknownDiscountTypeError(f"Unsupported discount type: {discount_type}")


def select_best_discount(discounts: Iterable, line: CartLine) -> Optional[DiscountCandidate]:
    """
    Pick the discount giving the largest reduction on ``line``.

    Candidates whose ``min_quantity`` exceeds the line quantity are skipped.
    Only a strictly greater amount replaces the current best, so ties keep
    the first candidate in the given order.
    """
    best = None
    line_total = line.total
    for discount in discounts:
        if discount.min_quantity is not None and discount.min_quantity > line.quantity:
            continue
        amount = compute_line_amount(discount, line_total, line.quantity)
        if amount <= ZERO:
            continue
        if best is None or amount > best.amount:
            best = DiscountCandidate(discount=discount, amount=amount)
    return best
