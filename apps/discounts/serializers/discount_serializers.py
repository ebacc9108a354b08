"""
Discount serializers for admin CRUD and reporting.
"""
from rest_framework import serializers

from apps.common.validators import validate_money_amount, validate_percentage
from ..models import Discount, DiscountUsage


class DiscountSerializer(serializers.ModelSerializer):
    """Serializer for discounts; counters are maintained by usage recording only"""
    usage_count = serializers.IntegerField(read_only=True, required=False)
    is_sitewide = serializers.BooleanField(read_only=True)

    class Meta:
        model = Discount
        fields = [
            'id', 'name', 'description', 'discount_type', 'discount_value',
            'product', 'category', 'subcategory', 'min_quantity', 'user_type',
            'min_order_amount', 'max_discount', 'usage_limit', 'per_user_limit',
            'valid_from', 'valid_until', 'is_active', 'used_count', 'total_discounts',
            'usage_count', 'is_sitewide', 'created_at', 'updated_at',
        ]
        read_only_fields = ['id', 'used_count', 'total_discounts', 'created_at', 'updated_at']
        # Name uniqueness is reported by the admin service
        extra_kwargs = {
            'name': {'validators': []},
            'min_order_amount': {'validators': [validate_money_amount]},
            'max_discount': {'validators': [validate_money_amount]},
        }

    def validate_discount_value(self, value):
        if value <= 0:
            raise serializers.ValidationError('Discount value must be greater than 0.')
        return value

    def validate(self, attrs):
        instance = self.instance
        discount_type = attrs.get('discount_type', getattr(instance, 'discount_type', None))
        discount_value = attrs.get('discount_value', getattr(instance, 'discount_value', None))
        validate_percentage(discount_type, discount_value)

        valid_from = attrs.get('valid_from', getattr(instance, 'valid_from', None))
        valid_until = attrs.get('valid_until', getattr(instance, 'valid_until', None))
        if valid_from and valid_until and valid_from >= valid_until:
            raise serializers.ValidationError({'valid_until': 'Valid until must be after valid from.'})
        return attrs


class DiscountUsageSerializer(serializers.ModelSerializer):
    """Serializer for discount usage ledger rows"""
    order_number = serializers.CharField(source='order.order_number', read_only=True)
    username = serializers.CharField(source='user.username', read_only=True, default=None)

    class Meta:
        model = DiscountUsage
        fields = ['id', 'discount', 'user', 'username', 'order', 'order_number', 'discount_amount', 'created_at']


class DiscountToggleSerializer(serializers.Serializer):
    is_active = serializers.BooleanField(required=False, allow_null=True, default=None)
