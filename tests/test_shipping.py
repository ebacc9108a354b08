"""
Tests for the state shipping fee.
"""
from decimal import Decimal

import pytest

from apps.orders.services.shipping import calculate_shipping_cost


@pytest.mark.parametrize('state, expected', [
    ('Tamil Nadu', Decimal('80.00')),
    ('Kerala', Decimal('100.00')),
    ('Karnataka', Decimal('100.00')),
    ('Andhra Pradesh', Decimal('100.00')),
    ('Telangana', Decimal('100.00')),
    ('Maharashtra', Decimal('200.00')),
    ('', Decimal('200.00')),
    (None, Decimal('200.00')),
])
def test_shipping_cost_by_state(state, expected):
    assert calculate_shipping_cost(state) == expected


def test_state_match_ignores_case_and_whitespace():
    assert calculate_shipping_cost('  TAMIL NADU ') == Decimal('80.00')
    assert calculate_shipping_cost('kerala') == Decimal('100.00')
