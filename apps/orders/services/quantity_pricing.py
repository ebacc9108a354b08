"""
Quantity-tier pricing for a single line item.
"""
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Optional
import logging

from apps.common.money import ZERO, quantize_money, percentage_of, to_decimal
from apps.products.models import SubcategoryQuantityPrice

logger = logging.getLogger(__name__)

PriceType = SubcategoryQuantityPrice.PriceType


@dataclass(frozen=True)
class QuantityPriceResult:
    original_total: Decimal
    final_total: Decimal
    savings: Decimal
    effective_unit_price: Decimal
    applied_rule_id: Optional[int] = None

    @property
    def has_savings(self):
        return self.savings > ZERO

    def to_dict(self):
        return {
            'originalTotal': self.original_total,
            'finalTotal': self.final_total,
            'savings': self.savings,
            'effectivePricePerUnit': self.effective_unit_price,
            'appliedRuleId': self.applied_rule_id,
        }


def rule_total(rule, unit_price, quantity: int) -> Decimal:
    value = to_decimal(rule.value)
    if rule.price_type == PriceType.PERCENTAGE:
        line = to_decimal(unit_price) * quantity
        return quantize_money(line - percentage_of(line, value))
    elif rule.price_type == PriceType.FIXED_AMOUNT:
        # Fixed amount is the whole line total, not a per-unit price
        return quantize_money(value)
    raise ValueError(f"Unsupported quantity price type: {rule.price_type}")


def select_quantity_price(unit_price, quantity: int, rules: Iterable) -> QuantityPriceResult:
    """
    Cheapest total among the baseline and every qualifying rule.

    Rules qualify when active with a threshold at most ``quantity``; they are
    scanned highest threshold first and the lowest total wins.
    """
    baseline = quantize_money(to_decimal(unit_price) * quantity)
    qualifying = sorted(
        (rule for rule in rules if rule.is_active and rule.quantity <= quantity),
        key=lambda rule: rule.quantity,
        reverse=True,
    )

    best_total = baseline
    best_rule = None
    for rule in qualifying:
        total = rule_total(rule, unit_price, quantity)
        if total < best_total:
            best_total = total
            best_rule = rule

    return QuantityPriceResult(
        original_total=baseline,
        final_total=best_total,
        savings=quantize_money(baseline - best_total),
        effective_unit_price=quantize_money(best_total / quantity) if quantity else ZERO,
        applied_rule_id=getattr(best_rule, 'id', None),
    )


class QuantityPricingService:

    def get_rules(self, subcategory_id, quantity: int):
        return list(
            SubcategoryQuantityPrice.objects.filter(
                subcategory_id=subcategory_id,
                is_active=True,
                quantity__lte=quantity,
            ).order_by('-quantity', 'id')
        )

    def price_item(self, product_id, subcategory_id, unit_price, quantity: int) -> QuantityPriceResult:
        if subcategory_id is None:
            return select_quantity_price(unit_price, quantity, [])
        result = select_quantity_price(unit_price, quantity, self.get_rules(subcategory_id, quantity))
        if result.applied_rule_id is not None:
            logger.debug(
                f"Quantity rule {result.applied_rule_id} priced product {product_id} x{quantity}: "
                f"{result.original_total} -> {result.final_total}"
            )
        return result
