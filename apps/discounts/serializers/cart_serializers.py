"""
Cart and coupon request serializers.
"""
from rest_framework import serializers
from apps.common.validators import validate_quantity


class CartItemSerializer(serializers.Serializer):
    product_id = serializers.IntegerField(min_value=1)
    variant_id = serializers.IntegerField(min_value=1, required=False, allow_null=True, default=None)
    quantity = serializers.IntegerField(validators=[validate_quantity])


class CartCalculationSerializer(serializers.Serializer):
    items = CartItemSerializer(many=True, allow_empty=False)
    discount_code = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=100)


class AvailableDiscountsSerializer(serializers.Serializer):
    product_ids = serializers.ListField(child=serializers.IntegerField(min_value=1), allow_empty=True)
