"""
Tests for currency helpers.
"""
from decimal import Decimal

import pytest

from apps.common.money import from_minor_units, quantize_money, to_decimal, to_minor_units


def test_quantize_rounds_half_up():
    assert quantize_money('2.345') == Decimal('2.35')
    assert quantize_money('2.344') == Decimal('2.34')


def test_float_input_does_not_drift():
    assert to_decimal(0.1) + to_decimal(0.2) == Decimal('0.3')


def test_minor_units():
    assert to_minor_units(Decimal('1080.00')) == 108000
    assert to_minor_units('0.015') == 2
    assert from_minor_units(108050) == Decimal('1080.50')


def test_invalid_amount_raises_value_error():
    with pytest.raises(ValueError):
        to_decimal('abc')
