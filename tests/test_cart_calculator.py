"""
Tests for the cart discount calculator.
"""
from decimal import Decimal

import pytest
from django.utils import timezone
from hypothesis import given, settings, strategies as st
from hypothesis.extra.django import TestCase

from apps.common.exceptions import PricingValidationError
from apps.discounts.models import Discount, DiscountUsage
from apps.discounts.types import CartLine, CouponApplied, DiscountLevel, NoDiscount, ProductDiscountsApplied
from apps.orders.engine import build_pricing_engine
from tests.factories import DiscountFactory, ProductFactory

pytestmark = pytest.mark.django_db


def line_for(product, quantity):
    return CartLine(
        product_id=product.id,
        quantity=quantity,
        unit_price=product.selling_price,
        category_id=product.category_id,
        subcategory_id=product.subcategory_id,
        product_name=product.name,
    )


def test_sitewide_percentage_without_coupon(engine, product):
    DiscountFactory(discount_value=Decimal('10'))

    result = engine.cart_calculator.calculate_cart_discounts([line_for(product, 2)])

    assert isinstance(result, ProductDiscountsApplied)
    assert result.subtotal == Decimal('1000.00')
    assert result.total_discount == Decimal('100.00')
    assert result.final_total == Decimal('900.00')
    assert result.applied_discounts[0].level is DiscountLevel.PRODUCT_LEVEL


def test_each_line_gets_its_own_best_discount(engine, product):
    other = ProductFactory(normal_price=Decimal('200'))
    DiscountFactory(discount_value=Decimal('10'))
    special = DiscountFactory(product=other, discount_type='FIXED_AMOUNT', discount_value=Decimal('90'))

    result = engine.cart_calculator.calculate_cart_discounts([line_for(product, 1), line_for(other, 1)])

    by_product = {d.product_id: d for d in result.applied_discounts}
    assert by_product[product.id].amount == Decimal('50.00')
    assert by_product[other.id].discount_id == special.id
    assert result.total_discount == Decimal('140.00')


def test_coupon_excludes_product_discounts(engine, product):
    DiscountFactory(product=product, discount_value=Decimal('50'))
    DiscountFactory(name='FLAT100', discount_type='FIXED_AMOUNT', discount_value=Decimal('100'))

    result = engine.cart_calculator.calculate_cart_discounts([line_for(product, 2)], coupon_code='FLAT100')

    assert isinstance(result, CouponApplied)
    assert [d.level for d in result.applied_discounts] == [DiscountLevel.ORDER_LEVEL]
    assert result.total_discount == Decimal('100.00')
    assert result.discount_code == 'FLAT100'


def test_invalid_coupon_gives_advisory_and_no_discount(engine, product):
    DiscountFactory(product=product, discount_value=Decimal('50'))

    result = engine.cart_calculator.calculate_cart_discounts([line_for(product, 2)], coupon_code='NOPE')

    assert isinstance(result, NoDiscount)
    assert result.total_discount == Decimal('0.00')
    assert result.final_total == Decimal('1000.00')
    assert result.errors == ('Invalid discount code',)


def test_empty_cart_is_rejected(engine):
    with pytest.raises(PricingValidationError):
        engine.cart_calculator.calculate_cart_discounts([])


def test_non_positive_quantity_is_rejected(engine, product):
    with pytest.raises(PricingValidationError):
        engine.cart_calculator.calculate_cart_discounts([line_for(product, 0)])


def test_calculation_does_not_mutate(engine, product):
    discount = DiscountFactory(name='TEN', usage_limit=5)
    lines = [line_for(product, 3)]
    now = timezone.now()

    first = engine.cart_calculator.calculate_cart_discounts(lines, coupon_code='TEN', now=now)
    second = engine.cart_calculator.calculate_cart_discounts(lines, coupon_code='TEN', now=now)

    assert first == second
    assert first.to_dict() == second.to_dict()
    discount.refresh_from_db()
    assert discount.used_count == 0
    assert not DiscountUsage.objects.exists()


class TestCouponModeExclusivity(TestCase):
    """With a coupon code no product-level discount is ever reported."""

    def setUp(self):
        self.engine = build_pricing_engine()
        self.product = ProductFactory()
        DiscountFactory(product=self.product, discount_value=Decimal('30'))
        DiscountFactory(category=self.product.category, discount_type='FIXED_AMOUNT', discount_value=Decimal('40'))
        DiscountFactory(name='COUPON', discount_value=Decimal('15'), min_order_amount=Decimal('1500'))

    @given(
        quantity=st.integers(min_value=1, max_value=10),
        code=st.sampled_from(['COUPON', 'UNKNOWN', ' COUPON ']),
    )
    @settings(max_examples=30, deadline=None)
    def test_no_product_level_descriptors(self, quantity, code):
        result = self.engine.cart_calculator.calculate_cart_discounts(
            [line_for(self.product, quantity)], coupon_code=code
        )

        levels = {d.level for d in result.applied_discounts}
        assert DiscountLevel.PRODUCT_LEVEL not in levels
        assert result.final_total == max(Decimal('0'), result.subtotal - result.total_discount)
        if quantity * 500 < 1500 or code == 'UNKNOWN':
            assert result.total_discount == Decimal('0.00')
            assert Discount.objects.get(name='COUPON').used_count == 0
