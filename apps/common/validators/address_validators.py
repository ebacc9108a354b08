"""
Shipping address validators.
"""
import re

from rest_framework import serializers

PHONE_PATTERN = re.compile(r'^(\+91[\-\s]?)?[6-9]\d{9}$')
PINCODE_PATTERN = re.compile(r'^[1-9]\d{5}$')


def validate_phone(value):
    """Indian mobile number, optionally prefixed with +91"""
    if value and not PHONE_PATTERN.match(value.strip()):
        raise serializers.ValidationError("Invalid phone number format. Expected a 10 digit mobile number.")
    return value


def validate_pincode(value):
    if value and not PINCODE_PATTERN.match(value.strip()):
        raise serializers.ValidationError("Invalid pincode. Expected 6 digits.")
    return value
