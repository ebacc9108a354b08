"""
Order quote, checkout and query views.
"""
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.views import APIView

from apps.common.utils import error_response, paginated_response, request_user, success_response
from ..engine import get_pricing_engine
from ..serializers import CheckoutSerializer, OrderSerializer, QuoteSerializer
from ..services import OrderService


class QuoteView(APIView):
    """Price a cart without creating anything"""
    permission_classes = [AllowAny]

    def post(self, request):
        serializer = QuoteSerializer(data=request.data)
        if not serializer.is_valid():
            return error_response('Invalid order data', serializer.errors)

        data = serializer.validated_data
        totals = get_pricing_engine().assembler.assemble_totals(
            data['items'],
            coupon_code=data.get('discount_code'),
            shipping_state=data.get('state'),
            user=request_user(request),
        )
        return success_response(totals.to_dict())


class CodOrderView(APIView):
    """Place a cash-on-delivery order"""
    permission_classes = [IsAuthenticated]

    def post(self, request):
        serializer = CheckoutSerializer(data=request.data)
        if not serializer.is_valid():
            return error_response('Invalid order data', serializer.errors)

        order, totals = get_pricing_engine().orders.place_cod_order(request.user, serializer.validated_data)
        return success_response({
            'order': OrderSerializer(order).data,
            'discountError': totals.discount_error,
        }, 'Order placed successfully', 201)


class UserOrderListView(APIView):
    """The caller's own orders, newest first, optionally filtered by ?status"""
    permission_classes = [IsAuthenticated]

    def get(self, request):
        queryset = OrderService.get_user_orders(request.user, request.query_params.get('status'))
        return paginated_response(queryset, OrderSerializer, request)


class OrderDetailView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, order_number):
        order = OrderService.get_order_detail(request.user, order_number)
        return success_response(OrderSerializer(order).data)
