"""
Tests for discount resolution and product offers.
"""
from datetime import timedelta
from decimal import Decimal

import pytest
from django.utils import timezone

from apps.common.exceptions import NotFoundError
from apps.discounts.models import DiscountUsage
from apps.discounts.services import DiscountResolver
from apps.products.services import CatalogService
from tests.factories import DiscountFactory, OrderFactory, ProductFactory

pytestmark = pytest.mark.django_db


@pytest.fixture
def resolver():
    return DiscountResolver(CatalogService())


def test_scopes_matching_the_product(resolver, product):
    sitewide = DiscountFactory(discount_value=Decimal('5'))
    by_product = DiscountFactory(product=product, discount_value=Decimal('8'))
    by_category = DiscountFactory(category=product.category, discount_value=Decimal('6'))
    by_subcategory = DiscountFactory(subcategory=product.subcategory, discount_value=Decimal('7'))
    DiscountFactory(product=ProductFactory(), discount_value=Decimal('50'))

    found = resolver.resolve_product_discounts(product)

    assert found == [by_product, by_subcategory, by_category, sitewide]


def test_inactive_and_out_of_window_are_excluded(resolver, product):
    now = timezone.now()
    DiscountFactory(is_active=False)
    DiscountFactory(valid_from=now + timedelta(hours=1), valid_until=now + timedelta(days=1))
    DiscountFactory(valid_from=now - timedelta(days=2), valid_until=now - timedelta(days=1))

    assert resolver.resolve_product_discounts(product) == []


def test_exhausted_usage_limit_is_excluded(resolver, product):
    DiscountFactory(usage_limit=3, used_count=3)
    assert resolver.resolve_product_discounts(product) == []


def test_user_type_filters_known_users_only(resolver, product, customer, wholesaler):
    trade = DiscountFactory(user_type='WHOLESALER')

    assert resolver.resolve_product_discounts(product, user=customer) == []
    assert resolver.resolve_product_discounts(product, user=wholesaler) == [trade]
    assert resolver.resolve_product_discounts(product, user=None) == [trade]


def test_per_user_limit_excludes_used_discount(resolver, product, customer):
    used = DiscountFactory(per_user_limit=1)
    unlimited = DiscountFactory(per_user_limit=0, discount_value=Decimal('5'))
    DiscountUsage.objects.create(discount=used, user=customer, order=OrderFactory(user=customer),
                                 discount_amount=Decimal('10'))

    assert resolver.resolve_product_discounts(product, user=customer) == [unlimited]


def test_equal_values_prefer_most_recent(resolver, product):
    older = DiscountFactory(discount_value=Decimal('10'))
    newer = DiscountFactory(discount_value=Decimal('10'))

    assert resolver.resolve_product_discounts(product) == [newer, older]


def test_calculate_product_discount_picks_best(resolver, product):
    DiscountFactory(discount_value=Decimal('10'))
    best = DiscountFactory(product=product, discount_type='FIXED_AMOUNT', discount_value=Decimal('75'))

    offer = resolver.calculate_product_discount(product.id)

    assert offer['hasDiscount'] is True
    assert offer['originalPrice'] == Decimal('500.00')
    assert offer['bestDiscount']['discountId'] == best.id
    assert offer['discountAmount'] == Decimal('75.00')
    assert offer['finalPrice'] == Decimal('425.00')
    assert len(offer['applicableDiscounts']) == 2


def test_calculate_product_discount_uses_offer_price(resolver):
    product = ProductFactory(offer_price=Decimal('400'))
    offer = resolver.calculate_product_discount(product.id)

    assert offer['hasDiscount'] is False
    assert offer['finalPrice'] == Decimal('400.00')


def test_calculate_product_discount_unknown_product(resolver):
    with pytest.raises(NotFoundError):
        resolver.calculate_product_discount(999999)


def test_available_discounts_are_deduplicated(resolver, product):
    other = ProductFactory()
    sitewide = DiscountFactory(discount_value=Decimal('5'))
    mine = DiscountFactory(product=product, discount_value=Decimal('15'))
    theirs = DiscountFactory(product=other, discount_value=Decimal('12'))

    found = resolver.get_available_discounts([product.id, other.id])

    assert found == [mine, theirs, sitewide]


def test_active_discounts_without_scope_lists_everything(resolver, product):
    scoped = DiscountFactory(product=product, discount_value=Decimal('20'))
    sitewide = DiscountFactory(discount_value=Decimal('5'))

    assert resolver.get_active_discounts() == [scoped, sitewide]
    assert resolver.get_active_discounts(product_id=ProductFactory().id) == [sitewide]
