"""
Tests for coupon validation.
"""
from datetime import timedelta
from decimal import Decimal

import pytest
from django.utils import timezone

from apps.discounts.models import DiscountUsage
from apps.discounts.services import CouponValidator
from apps.discounts.services.coupon_service import (
    MSG_EXPIRED, MSG_INACTIVE, MSG_INVALID_CODE, MSG_NOT_YET_VALID,
    MSG_PER_USER_LIMIT, MSG_USAGE_LIMIT,
)
from tests.factories import DiscountFactory, OrderFactory

pytestmark = pytest.mark.django_db


@pytest.fixture
def validator():
    return CouponValidator()


def test_minimum_order_amount_not_met(validator):
    DiscountFactory(name='SAVE50', discount_type='FIXED_AMOUNT', discount_value=Decimal('50'),
                    min_order_amount=Decimal('100'))

    result = validator.validate_coupon('SAVE50', order_amount=Decimal('80'))

    assert result.is_valid is False
    assert result.message == 'Minimum order amount of ₹100.00 required'
    assert result.to_dict() == {'isValid': False, 'message': result.message}


def test_valid_fixed_coupon(validator):
    coupon = DiscountFactory(name='SAVE50', discount_type='FIXED_AMOUNT', discount_value=Decimal('50'),
                             min_order_amount=Decimal('100'))

    result = validator.validate_coupon('SAVE50', order_amount=Decimal('150'))

    assert result.is_valid is True
    assert result.discount == coupon
    assert result.discount_amount == Decimal('50.00')
    assert result.to_dict()['discount']['discountAmount'] == Decimal('50.00')


def test_percentage_coupon_reports_cap(validator):
    DiscountFactory(name='BIG', discount_value=Decimal('50'), max_discount=Decimal('200'))

    result = validator.validate_coupon('BIG', order_amount=Decimal('1000'))

    assert result.discount_amount == Decimal('200.00')
    assert result.max_discount_reached is True


def test_unknown_code(validator):
    result = validator.validate_coupon('NOPE', order_amount=Decimal('100'))
    assert result.message == MSG_INVALID_CODE


def test_lookup_by_id(validator):
    coupon = DiscountFactory(name='WELCOME')
    result = validator.validate_coupon(str(coupon.id), order_amount=Decimal('100'))
    assert result.is_valid is True
    assert result.discount == coupon


def test_inactive(validator):
    DiscountFactory(name='OFF', is_active=False)
    assert validator.validate_coupon('OFF', order_amount=Decimal('100')).message == MSG_INACTIVE


def test_not_yet_valid(validator):
    now = timezone.now()
    DiscountFactory(name='SOON', valid_from=now + timedelta(days=1), valid_until=now + timedelta(days=2))
    assert validator.validate_coupon('SOON', order_amount=Decimal('100')).message == MSG_NOT_YET_VALID


def test_expired(validator):
    now = timezone.now()
    DiscountFactory(name='OLD', valid_from=now - timedelta(days=5), valid_until=now - timedelta(days=1))
    assert validator.validate_coupon('OLD', order_amount=Decimal('100')).message == MSG_EXPIRED


def test_validation_uses_given_time(validator):
    now = timezone.now()
    DiscountFactory(name='OLD', valid_from=now - timedelta(days=5), valid_until=now - timedelta(days=1))
    result = validator.validate_coupon('OLD', order_amount=Decimal('100'), now=now - timedelta(days=2))
    assert result.is_valid is True


def test_usage_limit_reached(validator):
    DiscountFactory(name='ONCE', usage_limit=1, used_count=1)
    assert validator.validate_coupon('ONCE', order_amount=Decimal('100')).message == MSG_USAGE_LIMIT


def test_per_user_limit(validator, customer):
    coupon = DiscountFactory(name='MINE', per_user_limit=1)
    DiscountUsage.objects.create(discount=coupon, user=customer, order=OrderFactory(user=customer),
                                 discount_amount=Decimal('10'))

    result = validator.validate_coupon('MINE', user=customer, order_amount=Decimal('100'))

    assert result.message == MSG_PER_USER_LIMIT
    # Anonymous previews skip user scoped checks
    assert validator.validate_coupon('MINE', order_amount=Decimal('100')).is_valid is True


def test_role_restricted_coupon_accepted_for_other_roles(validator, customer, wholesaler):
    DiscountFactory(name='TRADE', user_type='WHOLESALER', discount_type='FIXED_AMOUNT', discount_value=Decimal('50'))

    result = validator.validate_coupon('TRADE', user=customer, order_amount=Decimal('100'))

    assert result.is_valid is True
    assert result.discount_amount == Decimal('50.00')
    assert validator.validate_coupon('TRADE', user=wholesaler, order_amount=Decimal('100')).is_valid is True


def test_inactive_reported_before_expiry(validator):
    now = timezone.now()
    DiscountFactory(name='BOTH', is_active=False, valid_from=now - timedelta(days=5),
                    valid_until=now - timedelta(days=1))
    assert validator.validate_coupon('BOTH', order_amount=Decimal('100')).message == MSG_INACTIVE
