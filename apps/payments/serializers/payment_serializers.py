"""
Payment transaction serializers for initiate, confirm and status operations.
"""
from rest_framework import serializers

from apps.orders.serializers import CheckoutSerializer
from ..gateways import GATEWAY_CLASSES
from ..models import PaymentTransaction


class PaymentInitiateSerializer(CheckoutSerializer):
    """Checkout data plus the gateway to charge through"""
    gateway = serializers.ChoiceField(
        choices=sorted(GATEWAY_CLASSES), required=False, allow_null=True, default=None
    )


class PaymentConfirmSerializer(serializers.Serializer):
    gateway_order_id = serializers.CharField(max_length=100)
    payload = serializers.DictField(required=False, default=dict)


class PaymentTransactionSerializer(serializers.ModelSerializer):
    """
    Serializer for payment transaction status.
    Used for: GET /api/payments/status/{gateway_order_id}/
    """
    order_number = serializers.CharField(source='order.order_number', read_only=True, default=None)

    class Meta:
        model = PaymentTransaction
        fields = [
            'transaction_id', 'gateway', 'gateway_order_id', 'gateway_payment_id',
            'amount', 'amount_minor', 'currency', 'status', 'order_number',
            'quoted_totals', 'error_message', 'created_at', 'paid_at',
        ]
        read_only_fields = fields
