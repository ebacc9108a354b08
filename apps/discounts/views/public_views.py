"""
Customer facing discount endpoints: coupon checks, cart calculation and offers.
"""
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.views import APIView

from apps.common.money import quantize_money, to_decimal
from apps.common.utils import error_response, request_user, success_response
from apps.orders.engine import get_pricing_engine
from ..serializers import AvailableDiscountsSerializer, CartCalculationSerializer, DiscountSerializer
from ..types import CartLine


class ValidateCouponView(APIView):
    """Validate a coupon code against an order amount"""
    permission_classes = [AllowAny]

    def get(self, request, code):
        raw_amount = request.query_params.get('orderAmount', '0')
        try:
            order_amount = quantize_money(to_decimal(raw_amount or '0'))
        except (ValueError, ArithmeticError):
            return error_response('orderAmount must be a number')

        engine = get_pricing_engine()
        validation = engine.coupons.validate_coupon(code, request_user(request), order_amount)
        message = 'Discount code is valid' if validation.is_valid else validation.message
        return success_response(validation.to_dict(), message)


class CalculateCartView(APIView):
    """Preview cart discounts in coupon mode or best automatic mode"""
    permission_classes = [AllowAny]

    def post(self, request):
        serializer = CartCalculationSerializer(data=request.data)
        if not serializer.is_valid():
            return error_response('Invalid cart data', serializer.errors)

        engine = get_pricing_engine()
        items = serializer.validated_data['items']
        products = engine.catalog.get_products(item['product_id'] for item in items)

        lines = []
        for item in items:
            product = products.get(item['product_id'])
            if product is None:
                return error_response(f"Product {item['product_id']} not found", status_code=404)
            variant = None
            if item.get('variant_id'):
                variant = engine.catalog.get_variant(item['variant_id'], product)
            lines.append(CartLine(
                product_id=product.id,
                quantity=item['quantity'],
                unit_price=quantize_money(engine.catalog.resolve_unit_price(product, variant)),
                category_id=product.category_id,
                subcategory_id=product.subcategory_id,
                product_name=product.name,
            ))

        result = engine.cart_calculator.calculate_cart_discounts(
            lines,
            user=request_user(request),
            coupon_code=serializer.validated_data.get('discount_code'),
        )
        message = result.errors[0] if result.errors else 'Cart discounts calculated'
        return success_response(result.to_dict(), message)


class AvailableDiscountsView(APIView):
    """Discounts a customer could use for the products in their cart"""
    permission_classes = [AllowAny]

    def post(self, request):
        serializer = AvailableDiscountsSerializer(data=request.data)
        if not serializer.is_valid():
            return error_response('Invalid request data', serializer.errors)

        discounts = get_pricing_engine().resolver.get_available_discounts(
            serializer.validated_data['product_ids'], user=request_user(request)
        )
        return success_response(DiscountSerializer(discounts, many=True).data)


class ProductDiscountView(APIView):
    """Best single-unit offer for a product"""
    permission_classes = [AllowAny]

    def get(self, request, product_id):
        offer = get_pricing_engine().resolver.calculate_product_discount(
            product_id, user=request_user(request)
        )
        return success_response(offer)


class ApplyDiscountView(APIView):
    """Apply a discount to an existing unpaid order"""
    permission_classes = [IsAuthenticated]

    def post(self, request, order_id, discount_id):
        usage = get_pricing_engine().discount_application.apply_discount(order_id, discount_id, request.user)
        return success_response({
            'usageId': usage.id,
            'discountId': usage.discount_id,
            'orderId': usage.order_id,
            'discountAmount': usage.discount_amount,
            'orderTotal': usage.order.total_amount,
        }, 'Discount applied successfully')
