"""
Admin order management: listing, fulfilment, statistics and refunds.
"""
from datetime import timedelta

from rest_framework.views import APIView

from apps.common.exceptions import PricingValidationError
from apps.common.permissions import IsAdminRole
from apps.common.utils import error_response, paginated_response, success_response
from ..engine import get_pricing_engine
from ..serializers import (
    OrderSerializer, OrderStatusUpdateSerializer, RefundSerializer, TrackingInfoSerializer,
)
from ..services import OrderService


class AdminOrderListView(APIView):
    """All orders, filtered by ?status, ?paymentStatus and ?userId"""
    permission_classes = [IsAdminRole]

    def get(self, request):
        queryset = OrderService.get_all_orders(request.query_params)
        return paginated_response(queryset, OrderSerializer, request)


class OrderStatsView(APIView):
    permission_classes = [IsAdminRole]

    def get(self, request):
        return success_response(OrderService.get_order_stats())


class OrderStatusView(APIView):
    permission_classes = [IsAdminRole]

    def patch(self, request, order_number):
        serializer = OrderStatusUpdateSerializer(data=request.data)
        if not serializer.is_valid():
            return error_response('Invalid status data', serializer.errors)

        order = get_pricing_engine().orders.update_order_status(order_number, **serializer.validated_data)
        return success_response(OrderSerializer(order).data, 'Order status updated successfully')


class OrderTrackingView(APIView):
    permission_classes = [IsAdminRole]

    def patch(self, request, order_number):
        serializer = TrackingInfoSerializer(data=request.data)
        if not serializer.is_valid():
            return error_response('Invalid tracking data', serializer.errors)

        order = get_pricing_engine().orders.update_tracking_info(order_number, **serializer.validated_data)
        return success_response(OrderSerializer(order).data, 'Tracking information updated successfully')


class CancelExpiredOrdersView(APIView):
    """Cancel unpaid pending orders older than ?hours (default 24)"""
    permission_classes = [IsAdminRole]

    def post(self, request):
        try:
            hours = int(request.query_params.get('hours', 24))
        except (TypeError, ValueError):
            raise PricingValidationError('hours must be an integer')
        if hours < 1:
            raise PricingValidationError('hours must be at least 1')

        result = get_pricing_engine().orders.cancel_expired_pending_orders(max_age=timedelta(hours=hours))
        return success_response(result, f"{result['cancelledCount']} expired orders cancelled")


class OrderRefundView(APIView):
    """Refund a paid order through its original gateway"""
    permission_classes = [IsAdminRole]

    def post(self, request, order_number):
        serializer = RefundSerializer(data=request.data)
        if not serializer.is_valid():
            return error_response('Invalid refund data', serializer.errors)

        order = get_pricing_engine().orders.process_refund(order_number, **serializer.validated_data)
        return success_response(OrderSerializer(order).data, 'Refund processed successfully')
