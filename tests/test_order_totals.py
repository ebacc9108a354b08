"""
Tests for order total assembly.
"""
from datetime import timedelta
from decimal import Decimal

import pytest
from django.utils import timezone

from apps.common.exceptions import (
    IneligibilityError, NotFoundError, OutOfStockError, PricingValidationError,
)
from apps.orders.engine import build_pricing_engine
from tests.factories import (
    DiscountFactory, ProductFactory, ProductVariantFactory, QuantityPriceFactory,
)

pytestmark = pytest.mark.django_db


def test_totals_balance_with_product_discount_and_shipping(engine, product):
    DiscountFactory(discount_value=Decimal('10'))

    totals = engine.assembler.assemble_totals(
        [{'product_id': product.id, 'quantity': 2}], shipping_state='Kerala'
    )

    assert totals.subtotal == Decimal('1000.00')
    assert totals.discount_amount == Decimal('100.00')
    assert totals.shipping_cost == Decimal('100.00')
    assert totals.total_amount == Decimal('1000.00')
    assert totals.total_amount == totals.subtotal - totals.discount_amount + totals.shipping_cost
    assert totals.total_minor_units == 100000


def test_quantity_tier_feeds_subtotal(engine, product):
    QuantityPriceFactory(subcategory=product.subcategory, quantity=5, value=Decimal('20'))

    totals = engine.assembler.assemble_totals([{'product_id': product.id, 'quantity': 5}], shipping_state='Tamil Nadu')

    assert totals.subtotal == Decimal('2000.00')
    assert totals.quantity_savings == Decimal('500.00')
    assert totals.total_amount == Decimal('2080.00')
    assert totals.to_dict()['hasQuantityDiscounts'] is True


def test_variant_price_overrides_product_price(engine, product):
    variant = ProductVariantFactory(product=product, price=Decimal('650'))

    totals = engine.assembler.assemble_totals(
        [{'product_id': product.id, 'variant_id': variant.id, 'quantity': 1}], shipping_state='Tamil Nadu'
    )

    assert totals.lines[0].unit_price == Decimal('650.00')
    assert totals.subtotal == Decimal('650.00')


def test_camel_case_item_keys_are_accepted(engine, product):
    totals = engine.assembler.assemble_totals([{'productId': product.id, 'quantity': 1}])
    assert totals.subtotal == Decimal('500.00')
    assert totals.shipping_cost == Decimal('200.00')


def test_fixed_coupon_is_capped_at_subtotal(engine, product):
    DiscountFactory(name='HUGE', discount_type='FIXED_AMOUNT', discount_value=Decimal('5000'))

    totals = engine.assembler.assemble_totals(
        [{'product_id': product.id, 'quantity': 1}], coupon_code='HUGE', shipping_state='Tamil Nadu'
    )

    assert totals.discount_amount == Decimal('500.00')
    assert totals.total_amount == Decimal('80.00')
    assert totals.usage_amounts() == {totals.applied_discounts[0].discount_id: Decimal('500.00')}


def test_sitewide_discount_on_several_lines_is_recorded_once(engine, product):
    sitewide = DiscountFactory(discount_value=Decimal('10'))
    other = ProductFactory(normal_price=Decimal('300'))

    totals = engine.assembler.assemble_totals([
        {'product_id': product.id, 'quantity': 1},
        {'product_id': other.id, 'quantity': 1},
    ])

    assert len(totals.applied_discounts) == 2
    assert totals.usage_amounts() == {sitewide.id: Decimal('80.00')}


def test_failed_coupon_is_advisory_by_default(engine, product):
    DiscountFactory(name='MIN5K', min_order_amount=Decimal('5000'))

    totals = engine.assembler.assemble_totals(
        [{'product_id': product.id, 'quantity': 1}], coupon_code='MIN5K', shipping_state='Tamil Nadu'
    )

    assert totals.discount_amount == Decimal('0.00')
    assert totals.total_amount == Decimal('580.00')
    assert totals.discount_error == 'Minimum order amount of ₹5000.00 required'


def test_failed_coupon_raises_in_strict_mode(product):
    strict = build_pricing_engine(strict_coupons=True)
    DiscountFactory(name='MIN5K', min_order_amount=Decimal('5000'))

    with pytest.raises(IneligibilityError) as excinfo:
        strict.assembler.assemble_totals([{'product_id': product.id, 'quantity': 1}], coupon_code='MIN5K')

    assert excinfo.value.reason == 'coupon'


def test_product_discounts_can_be_disabled(product):
    DiscountFactory(discount_value=Decimal('10'))
    plain = build_pricing_engine(auto_product_discounts=False)

    totals = plain.assembler.assemble_totals([{'product_id': product.id, 'quantity': 2}])

    assert totals.discount_amount == Decimal('0.00')
    assert totals.applied_discounts == ()


def test_insufficient_stock(engine, product):
    variant = ProductVariantFactory(product=product, stock=1)

    with pytest.raises(OutOfStockError):
        engine.assembler.assemble_totals([{'product_id': product.id, 'variant_id': variant.id, 'quantity': 2}])


def test_inactive_product(engine):
    product = ProductFactory(status='INACTIVE')
    with pytest.raises(PricingValidationError):
        engine.assembler.assemble_totals([{'product_id': product.id, 'quantity': 1}])


def test_unknown_product(engine):
    with pytest.raises(NotFoundError):
        engine.assembler.assemble_totals([{'product_id': 424242, 'quantity': 1}])


def test_pricing_options_are_keyword_only(engine, product):
    with pytest.raises(TypeError):
        engine.assembler.assemble_totals([{'product_id': product.id, 'quantity': 1}], 'Tamil Nadu')


@pytest.mark.parametrize('items', [[], [{'quantity': 1}], [{'product_id': 1, 'quantity': 0}]])
def test_malformed_items(engine, items):
    with pytest.raises(PricingValidationError):
        engine.assembler.assemble_totals(items)


def test_reassembly_at_quote_time_reproduces_quote(engine, product):
    start = timezone.now() - timedelta(hours=1)
    DiscountFactory(discount_value=Decimal('20'), valid_from=start, valid_until=start + timedelta(hours=2))
    quoted_at = start + timedelta(minutes=30)
    items = [{'product_id': product.id, 'quantity': 3}]

    quote = engine.assembler.assemble_totals(items, shipping_state='Kerala', now=quoted_at)
    confirm = engine.assembler.assemble_totals(items, shipping_state='Kerala', now=quoted_at)
    later = engine.assembler.assemble_totals(items, shipping_state='Kerala', now=start + timedelta(hours=3))

    assert confirm == quote
    assert confirm.total_minor_units == quote.total_minor_units
    assert later.total_amount == quote.total_amount + quote.discount_amount
