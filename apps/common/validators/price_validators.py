"""
Money and quantity validators.
"""
from decimal import Decimal

from rest_framework import serializers


def validate_money_amount(value, min_value=Decimal('0')):
    """
    Validate a money amount is not below ``min_value``.

    Args:
        value: Amount decimal
        min_value: Minimum allowed amount (default: 0)

    Raises:
        serializers.ValidationError: If the amount is below the minimum

    Returns:
        decimal.Decimal: Validated amount
    """
    if value is not None and value < min_value:
        raise serializers.ValidationError(f"Amount must be at least {min_value}.")
    return value


def validate_quantity(value, min_value=1):
    """
    Validate quantity is positive and meets minimum requirement.

    Args:
        value: Quantity integer
        min_value: Minimum allowed quantity (default: 1)

    Raises:
        serializers.ValidationError: If quantity is invalid

    Returns:
        int: Validated quantity
    """
    if value < min_value:
        raise serializers.ValidationError(f"Quantity must be at least {min_value}.")
    return value


def validate_percentage(discount_type, discount_value):
    """
    Object-level check used from ``validate()``: percentage values stay within 0-100.
    """
    if discount_type == 'PERCENTAGE' and discount_value is not None and discount_value > 100:
        raise serializers.ValidationError({'discount_value': 'Percentage discount cannot exceed 100%.'})
