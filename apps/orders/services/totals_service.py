"""
Order total assembly shared by quotes, COD checkout and online payment
confirmation.

Given the same items, coupon, state, user and evaluation time the result is
identical; callers pass ``now`` explicitly to reproduce a quote.
"""
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Dict, Iterable, List, Mapping, Optional, Tuple
import logging

from django.utils import timezone

from apps.common.exceptions import IneligibilityError, OutOfStockError, PricingValidationError
from apps.common.money import ZERO, quantize_money, to_minor_units
from apps.discounts.types import AppliedDiscount, CartLine, NoDiscount
from .quantity_pricing import QuantityPriceResult
from .shipping import calculate_shipping_cost

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PricedLine:
    product_id: int
    product_name: str
    variant_id: Optional[int]
    quantity: int
    unit_price: Decimal
    category_id: Optional[int]
    subcategory_id: Optional[int]
    quantity_pricing: QuantityPriceResult

    @property
    def line_total(self) -> Decimal:
        return self.quantity_pricing.final_total

    @property
    def savings(self) -> Decimal:
        return self.quantity_pricing.savings

    def to_cart_line(self) -> CartLine:
        return CartLine(
            product_id=self.product_id,
            quantity=self.quantity,
            unit_price=self.unit_price,
            category_id=self.category_id,
            subcategory_id=self.subcategory_id,
            product_name=self.product_name,
            line_total=self.line_total,
        )

    def to_dict(self):
        return {
            'productId': self.product_id,
            'productName': self.product_name,
            'variantId': self.variant_id,
            'quantity': self.quantity,
            'basePrice': self.unit_price,
            'itemTotal': self.line_total,
            'itemSavings': self.savings,
            'quantityPricing': self.quantity_pricing.to_dict(),
        }


@dataclass(frozen=True)
class OrderTotals:
    subtotal: Decimal
    quantity_savings: Decimal
    discount_amount: Decimal
    shipping_cost: Decimal
    total_amount: Decimal
    evaluated_at: datetime
    lines: Tuple[PricedLine, ...] = ()
    applied_discounts: Tuple[AppliedDiscount, ...] = ()
    shipping_state: Optional[str] = None
    discount_code: Optional[str] = None
    discount_error: Optional[str] = None

    @property
    def total_minor_units(self) -> int:
        return to_minor_units(self.total_amount)

    def usage_amounts(self) -> Dict[int, Decimal]:
        """
        Amount to record per discount id.

        Several lines may pick the same sitewide discount; their amounts are
        summed. When the discount was capped at the subtotal the recorded
        amounts add up to the capped figure.
        """
        remaining = self.discount_amount
        amounts: Dict[int, Decimal] = {}
        for applied in self.applied_discounts:
            amount = min(applied.amount, remaining)
            remaining -= amount
            if amount <= ZERO:
                continue
            amounts[applied.discount_id] = amounts.get(applied.discount_id, ZERO) + amount
        return amounts

    def to_dict(self):
        return {
            'subtotal': self.subtotal,
            'quantitySavings': self.quantity_savings,
            'discountAmount': self.discount_amount,
            'appliedDiscounts': [d.to_dict() for d in self.applied_discounts],
            'shippingCost': self.shipping_cost,
            'shippingState': self.shipping_state,
            'totalAmount': self.total_amount,
            'totalAmountMinor': self.total_minor_units,
            'items': [line.to_dict() for line in self.lines],
            'hasQuantityDiscounts': self.quantity_savings > ZERO,
            'discountCode': self.discount_code,
            'discountError': self.discount_error,
            'evaluatedAt': self.evaluated_at.isoformat(),
        }


def _item_field(item, *names):
    for name in names:
        if isinstance(item, Mapping):
            if item.get(name) is not None:
                return item[name]
        elif getattr(item, name, None) is not None:
            return getattr(item, name)
    return None


class OrderTotalsAssembler:

    def __init__(self, catalog, quantity_pricing, cart_calculator,
                 auto_product_discounts=True, strict_coupons=False):
        self.catalog = catalog
        self.quantity_pricing = quantity_pricing
        self.cart_calculator = cart_calculator
        self.auto_product_discounts = auto_product_discounts
        self.strict_coupons = strict_coupons

    def price_lines(self, items: Iterable) -> List[PricedLine]:
        items = list(items or [])
        if not items:
            raise PricingValidationError('Order items are required and must be a non-empty list')

        lines = []
        for item in items:
            product_id = _item_field(item, 'product_id', 'productId')
            variant_id = _item_field(item, 'variant_id', 'productVariantId')
            quantity = _item_field(item, 'quantity')
            try:
                quantity = int(quantity)
            except (TypeError, ValueError):
                quantity = 0
            if product_id is None or quantity <= 0:
                raise PricingValidationError('Invalid order item: productId and quantity are required')

            product = self.catalog.get_purchasable_product(product_id)
            variant = None
            if variant_id is not None:
                variant = self.catalog.get_variant(variant_id, product)
                if variant.stock < quantity:
                    raise OutOfStockError(
                        f"Insufficient stock for variant {variant.id}. "
                        f"Available: {variant.stock}, Requested: {quantity}"
                    )

            unit_price = quantize_money(self.catalog.resolve_unit_price(product, variant))
            lines.append(PricedLine(
                product_id=product.id,
                product_name=product.name,
                variant_id=getattr(variant, 'id', None),
                quantity=quantity,
                unit_price=unit_price,
                category_id=product.category_id,
                subcategory_id=product.subcategory_id,
                quantity_pricing=self.quantity_pricing.price_item(
                    product.id, product.subcategory_id, unit_price, quantity
                ),
            ))
        return lines

    def assemble_totals(self, items: Iterable, *, coupon_code: Optional[str] = None,
                        shipping_state: Optional[str] = None, user=None, now=None) -> OrderTotals:
        now = now or timezone.now()
        lines = self.price_lines(items)
        subtotal = quantize_money(sum((line.line_total for line in lines), ZERO))
        quantity_savings = quantize_money(sum((line.savings for line in lines), ZERO))

        coupon_code = (coupon_code or '').strip() or None
        cart_lines = [line.to_cart_line() for line in lines]
        if coupon_code:
            result = self.cart_calculator.calculate_cart_discounts(cart_lines, user, coupon_code, now)
        elif self.auto_product_discounts:
            result = self.cart_calculator.calculate_cart_discounts(cart_lines, user, None, now)
        else:
            result = NoDiscount(subtotal=subtotal)

        discount_error = '; '.join(result.errors) or None
        if discount_error:
            if self.strict_coupons:
                raise IneligibilityError(discount_error, reason='coupon')
            logger.warning(f"Coupon {coupon_code!r} not applied: {discount_error}")

        discount_amount = min(result.total_discount, subtotal)
        shipping_cost = quantize_money(calculate_shipping_cost(shipping_state))
        total_amount = max(ZERO, quantize_money(subtotal - discount_amount + shipping_cost))

        return OrderTotals(
            subtotal=subtotal,
            quantity_savings=quantity_savings,
            discount_amount=discount_amount,
            shipping_cost=shipping_cost,
            total_amount=total_amount,
            evaluated_at=now,
            lines=tuple(lines),
            applied_discounts=result.applied_discounts,
            shipping_state=shipping_state or None,
            discount_code=coupon_code,
            discount_error=discount_error,
        )
