"""
Tests for quantity-tier pricing.
"""
from decimal import Decimal
from types import SimpleNamespace

import pytest
from hypothesis import given, settings, strategies as st

from apps.orders.services.quantity_pricing import QuantityPricingService, select_quantity_price
from tests.factories import QuantityPriceFactory, SubcategoryFactory


def rule(quantity, price_type, value, is_active=True, rule_id=None):
    return SimpleNamespace(
        id=rule_id, quantity=quantity, price_type=price_type, value=Decimal(value), is_active=is_active
    )


class TestSelectQuantityPrice:

    def test_percentage_tier_at_threshold(self):
        result = select_quantity_price(Decimal('500'), 5, [rule(5, 'PERCENTAGE', '20', rule_id=1)])

        assert result.original_total == Decimal('2500.00')
        assert result.final_total == Decimal('2000.00')
        assert result.savings == Decimal('500.00')
        assert result.effective_unit_price == Decimal('400.00')
        assert result.applied_rule_id == 1

    def test_no_rules_returns_baseline(self):
        result = select_quantity_price(Decimal('99.99'), 3, [])

        assert result.final_total == result.original_total == Decimal('299.97')
        assert result.savings == Decimal('0.00')
        assert result.applied_rule_id is None
        assert not result.has_savings

    def test_fixed_amount_is_whole_line_total(self):
        result = select_quantity_price(Decimal('100'), 10, [rule(10, 'FIXED_AMOUNT', '850', rule_id=7)])

        assert result.final_total == Decimal('850.00')
        assert result.effective_unit_price == Decimal('85.00')

    def test_threshold_above_quantity_is_ignored(self):
        result = select_quantity_price(Decimal('500'), 4, [rule(5, 'PERCENTAGE', '20')])
        assert result.final_total == Decimal('2000.00')
        assert result.applied_rule_id is None

    def test_inactive_rule_is_ignored(self):
        result = select_quantity_price(Decimal('500'), 5, [rule(5, 'PERCENTAGE', '20', is_active=False)])
        assert result.savings == Decimal('0.00')

    def test_lowest_total_wins_over_highest_threshold(self):
        rules = [
            rule(10, 'PERCENTAGE', '5', rule_id=10),
            rule(5, 'PERCENTAGE', '20', rule_id=5),
        ]
        result = select_quantity_price(Decimal('100'), 10, rules)

        assert result.applied_rule_id == 5
        assert result.final_total == Decimal('800.00')

    def test_fixed_total_above_baseline_is_not_applied(self):
        result = select_quantity_price(Decimal('10'), 5, [rule(5, 'FIXED_AMOUNT', '75')])
        assert result.final_total == Decimal('50.00')
        assert result.applied_rule_id is None

    @given(
        unit_price=st.decimals(min_value=Decimal('0.01'), max_value=Decimal('10000'), places=2),
        quantity=st.integers(min_value=1, max_value=500),
        thresholds=st.lists(st.integers(min_value=1, max_value=500), max_size=5),
        percent=st.decimals(min_value=Decimal('0'), max_value=Decimal('100'), places=2),
    )
    @settings(max_examples=100, deadline=None)
    def test_tier_never_increases_line_total(self, unit_price, quantity, thresholds, percent):
        rules = [rule(threshold, 'PERCENTAGE', percent) for threshold in thresholds]
        result = select_quantity_price(unit_price, quantity, rules)

        assert result.final_total <= result.original_total
        assert result.savings == result.original_total - result.final_total
        assert result.final_total >= Decimal('0')


@pytest.mark.django_db
class TestQuantityPricingService:

    def test_price_item_uses_subcategory_rules(self):
        subcategory = SubcategoryFactory()
        tier = QuantityPriceFactory(subcategory=subcategory, quantity=5, price_type='PERCENTAGE', value=Decimal('20'))
        QuantityPriceFactory(subcategory=subcategory, quantity=50, price_type='PERCENTAGE', value=Decimal('40'))

        result = QuantityPricingService().price_item(1, subcategory.id, Decimal('500'), 5)

        assert result.applied_rule_id == tier.id
        assert result.final_total == Decimal('2000.00')

    def test_other_subcategory_rules_do_not_apply(self):
        QuantityPriceFactory(quantity=1, value=Decimal('50'))
        result = QuantityPricingService().price_item(1, SubcategoryFactory().id, Decimal('100'), 2)
        assert result.final_total == Decimal('200.00')

    def test_product_without_subcategory_pays_baseline(self):
        result = QuantityPricingService().price_item(1, None, Decimal('100'), 20)
        assert result.final_total == Decimal('2000.00')
