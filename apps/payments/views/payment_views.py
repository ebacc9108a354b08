"""
Online payment views.
"""
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
import logging

from apps.common.utils import success_response, error_response
from apps.orders.engine import get_pricing_engine
from apps.orders.serializers import OrderSerializer
from ..serializers import PaymentInitiateSerializer, PaymentConfirmSerializer, PaymentTransactionSerializer

logger = logging.getLogger(__name__)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def initiate_payment(request):
    """Quote the checkout and open a gateway order for the exact total"""
    serializer = PaymentInitiateSerializer(data=request.data)
    if not serializer.is_valid():
        return error_response("Invalid payment data", serializer.errors)

    data = dict(serializer.validated_data)
    gateway_name = data.pop('gateway', None)
    _, payment_data = get_pricing_engine().payments.initiate_payment(request.user, data, gateway_name)
    return success_response(payment_data, "Payment initiated", 201)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def confirm_payment(request):
    """Verify a gateway payment and create the order"""
    serializer = PaymentConfirmSerializer(data=request.data)
    if not serializer.is_valid():
        return error_response("Invalid confirmation data", serializer.errors)

    data = serializer.validated_data
    order = get_pricing_engine().payments.confirm_payment(
        request.user, data['gateway_order_id'], data['payload']
    )
    logger.info(f"Payment confirmation returned order {order.order_number} to user {request.user.pk}")
    return success_response(OrderSerializer(order).data, "Payment confirmed")


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def get_payment_status(request, gateway_order_id):
    """Payment status; ?refresh=true polls the gateway for pending payments"""
    refresh = request.query_params.get('refresh', '').lower() in ('1', 'true')
    payment = get_pricing_engine().payments.get_payment_status(request.user, gateway_order_id, refresh)
    return success_response(PaymentTransactionSerializer(payment).data)
