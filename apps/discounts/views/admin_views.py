"""
Admin discount management views.
"""
from rest_framework.views import APIView

from apps.common.permissions import IsAdminRole
from apps.common.utils import error_response, paginated_response, success_response
from ..serializers import DiscountSerializer, DiscountToggleSerializer, DiscountUsageSerializer
from ..services import DiscountAdminService


class DiscountListCreateView(APIView):
    """List discounts with filters, or create a new one"""
    permission_classes = [IsAdminRole]

    def get(self, request):
        queryset = DiscountAdminService.list_discounts(request.query_params)
        return paginated_response(queryset, DiscountSerializer, request)

    def post(self, request):
        serializer = DiscountSerializer(data=request.data)
        if not serializer.is_valid():
            return error_response('Invalid discount data', serializer.errors)

        discount = DiscountAdminService.create_discount(serializer.validated_data, created_by=request.user)
        return success_response(DiscountSerializer(discount).data, 'Discount created successfully', 201)


class DiscountDetailView(APIView):
    permission_classes = [IsAdminRole]

    def get(self, request, discount_id):
        discount = DiscountAdminService.get_discount(discount_id)
        data = DiscountSerializer(discount).data
        data['recent_usages'] = DiscountUsageSerializer(
            DiscountAdminService.get_recent_usages(discount), many=True
        ).data
        return success_response(data)

    def put(self, request, discount_id):
        return self._update(request, discount_id, partial=False)

    def patch(self, request, discount_id):
        return self._update(request, discount_id, partial=True)

    def _update(self, request, discount_id, partial):
        discount = DiscountAdminService.get_discount(discount_id)
        serializer = DiscountSerializer(discount, data=request.data, partial=partial)
        if not serializer.is_valid():
            return error_response('Invalid discount data', serializer.errors)

        discount = DiscountAdminService.update_discount(discount_id, serializer.validated_data)
        return success_response(DiscountSerializer(discount).data, 'Discount updated successfully')

    def delete(self, request, discount_id):
        DiscountAdminService.delete_discount(discount_id)
        return success_response(None, 'Discount deleted successfully')


class DiscountToggleView(APIView):
    """Activate, deactivate or flip a discount"""
    permission_classes = [IsAdminRole]

    def patch(self, request, discount_id):
        serializer = DiscountToggleSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        discount = DiscountAdminService.toggle_discount_activation(
            discount_id, serializer.validated_data.get('is_active')
        )
        state = 'activated' if discount.is_active else 'deactivated'
        return success_response(DiscountSerializer(discount).data, f'Discount {state} successfully')


class DiscountStatsView(APIView):
    permission_classes = [IsAdminRole]

    def get(self, request):
        stats = DiscountAdminService.get_discount_stats()
        stats['mostUsedDiscounts'] = DiscountSerializer(stats['mostUsedDiscounts'], many=True).data
        stats['recentDiscounts'] = DiscountSerializer(stats['recentDiscounts'], many=True).data
        return success_response(stats)
