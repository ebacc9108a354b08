"""
Order serializers.
"""
from rest_framework import serializers

from apps.common.validators import validate_phone, validate_pincode, validate_quantity
from ..models import Order, OrderItem, OrderTrackingEvent


class OrderItemInputSerializer(serializers.Serializer):
    product_id = serializers.IntegerField(min_value=1)
    variant_id = serializers.IntegerField(min_value=1, required=False, allow_null=True, default=None)
    quantity = serializers.IntegerField(validators=[validate_quantity])


class QuoteSerializer(serializers.Serializer):
    """Items to price, with an optional coupon and destination state"""
    items = OrderItemInputSerializer(many=True, allow_empty=False)
    discount_code = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=100)
    state = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=100)


class CheckoutSerializer(serializers.Serializer):
    """Checkout request with shipping contact"""
    items = OrderItemInputSerializer(many=True, allow_empty=False)
    discount_code = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=100)
    name = serializers.CharField(max_length=100)
    email = serializers.EmailField()
    phone = serializers.CharField(max_length=20, validators=[validate_phone])
    address = serializers.CharField()
    city = serializers.CharField(max_length=100)
    state = serializers.CharField(max_length=100)
    pincode = serializers.CharField(max_length=10, validators=[validate_pincode])


class RefundSerializer(serializers.Serializer):
    reason = serializers.CharField(required=False, allow_blank=True, default='')
    refund_amount = serializers.DecimalField(
        max_digits=12, decimal_places=2, required=False, allow_null=True, default=None
    )
    admin_notes = serializers.CharField(required=False, allow_blank=True, default='')


class OrderItemSerializer(serializers.ModelSerializer):
    class Meta:
        model = OrderItem
        fields = [
            'id', 'product', 'variant', 'product_name', 'quantity', 'unit_price',
            'line_total', 'quantity_savings', 'quantity_rule_id',
        ]


class OrderTrackingEventSerializer(serializers.ModelSerializer):
    class Meta:
        model = OrderTrackingEvent
        fields = ['status', 'description', 'location', 'created_at']


class OrderSerializer(serializers.ModelSerializer):
    """Full order with items and tracking history"""
    items = OrderItemSerializer(many=True, read_only=True)
    tracking_events = OrderTrackingEventSerializer(many=True, read_only=True)

    class Meta:
        model = Order
        fields = [
            'id', 'order_number', 'status', 'payment_status', 'payment_method',
            'name', 'email', 'phone', 'address', 'city', 'state', 'pincode',
            'subtotal', 'quantity_savings', 'discount', 'shipping_cost', 'total_amount',
            'discount_code', 'applied_discounts', 'gateway', 'gateway_order_id', 'gateway_payment_id',
            'gateway_refund_id', 'tracking_number', 'carrier', 'tracking_url', 'estimated_delivery',
            'shipped_at', 'delivered_at', 'items', 'tracking_events', 'created_at', 'updated_at',
        ]
        read_only_fields = fields


class OrderStatusUpdateSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Order.Status.choices)
    admin_notes = serializers.CharField(required=False, allow_blank=True, default='')


class TrackingInfoSerializer(serializers.Serializer):
    tracking_number = serializers.CharField(max_length=100)
    carrier = serializers.CharField(max_length=100)
    tracking_url = serializers.URLField(required=False, allow_blank=True, default='')
    estimated_delivery = serializers.DateTimeField(required=False, allow_null=True, default=None)
