"""
Discount administration: create, edit, toggle, delete and reporting.
"""
from typing import Dict, Optional
import logging

from django.db import IntegrityError, transaction
from django.db.models import Count, Q, Sum
from django.utils import timezone

from apps.common.exceptions import NotFoundError, PricingValidationError
from apps.common.money import ZERO
from ..models import Discount, DiscountUsage

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = [
    'name', 'description', 'discount_type', 'discount_value', 'product', 'category',
    'subcategory', 'min_quantity', 'user_type', 'min_order_amount', 'max_discount',
    'usage_limit', 'per_user_limit', 'valid_from', 'valid_until', 'is_active',
]


class DiscountAdminService:
    """Service class for discount administration"""

    @staticmethod
    def validate_rules(discount: Discount) -> None:
        """Raise PricingValidationError when the discount breaks a value or date rule"""
        if discount.discount_value is None or discount.discount_value <= 0:
            raise PricingValidationError('Discount value must be greater than 0')
        if discount.discount_type not in Discount.DiscountType.values:
            raise PricingValidationError(f"Unsupported discount type: {discount.discount_type}")
        if discount.discount_type == Discount.DiscountType.PERCENTAGE and discount.discount_value > 100:
            raise PricingValidationError('Percentage discount cannot exceed 100%')
        if discount.valid_from >= discount.valid_until:
            raise PricingValidationError('Valid from date must be before valid until date')
        if discount.usage_limit is not None and discount.used_count > discount.usage_limit:
            raise PricingValidationError('Usage limit cannot be lower than the current usage count')

    @staticmethod
    def get_discount(discount_id) -> Discount:
        try:
            return Discount.objects.select_related('product', 'category', 'subcategory').get(id=discount_id)
        except (Discount.DoesNotExist, ValueError, TypeError):
            raise NotFoundError('Discount not found')

    @staticmethod
    def get_recent_usages(discount: Discount, limit: int = 10):
        return discount.usages.select_related('user', 'order').order_by('-created_at')[:limit]

    @staticmethod
    def create_discount(data: Dict, created_by=None) -> Discount:
        discount = Discount(**{key: data[key] for key in EDITABLE_FIELDS if key in data})
        discount.created_by = created_by
        DiscountAdminService.validate_rules(discount)
        try:
            with transaction.atomic():
                discount.save()
        except IntegrityError:
            raise PricingValidationError(f"A discount named {discount.name!r} already exists")
        logger.info(f"Discount created: {discount.id} {discount.name}")
        return discount

    @staticmethod
    def update_discount(discount_id, data: Dict) -> Discount:
        with transaction.atomic():
            try:
                discount = Discount.objects.select_for_update().get(id=discount_id)
            except (Discount.DoesNotExist, ValueError, TypeError):
                raise NotFoundError('Discount not found')
            for key in EDITABLE_FIELDS:
                if key in data:
                    setattr(discount, key, data[key])
            DiscountAdminService.validate_rules(discount)
            try:
                with transaction.atomic():
                    discount.save()
            except IntegrityError:
                raise PricingValidationError(f"A discount named {discount.name!r} already exists")
        logger.info(f"Discount updated: {discount.id}")
        return discount

    @staticmethod
    @transaction.atomic
    def delete_discount(discount_id) -> None:
        try:
            discount = Discount.objects.select_for_update().get(id=discount_id)
        except (Discount.DoesNotExist, ValueError, TypeError):
            raise NotFoundError('Discount not found')
        if discount.used_count > 0 or discount.usages.exists():
            raise PricingValidationError('Cannot delete discount that has been used')
        discount.delete()
        logger.info(f"Discount deleted: {discount_id}")

    @staticmethod
    def toggle_discount_activation(discount_id, is_active: Optional[bool] = None) -> Discount:
        discount = DiscountAdminService.get_discount(discount_id)
        discount.is_active = (not discount.is_active) if is_active is None else bool(is_active)
        discount.save(update_fields=['is_active', 'updated_at'])
        logger.info(f"Discount {discount.id} {'activated' if discount.is_active else 'deactivated'}")
        return discount

    @staticmethod
    def list_discounts(filters: Dict):
        queryset = Discount.objects.select_related('product', 'category', 'subcategory').annotate(
            usage_count=Count('usages')
        )

        is_active = filters.get('isActive')
        if is_active not in (None, ''):
            queryset = queryset.filter(is_active=str(is_active).lower() in ('true', '1'))

        discount_type = filters.get('discountType')
        if discount_type:
            queryset = queryset.filter(discount_type=discount_type)

        search = filters.get('search')
        if search:
            queryset = queryset.filter(Q(name__icontains=search) | Q(description__icontains=search))

        return queryset.order_by('-created_at', '-id')

    @staticmethod
    def get_discount_stats(now=None) -> Dict:
        now = now or timezone.now()
        total_amount = Discount.objects.aggregate(total=Sum('total_discounts'))['total']
        return {
            'totalDiscounts': Discount.objects.count(),
            'activeDiscounts': Discount.objects.filter(is_active=True).count(),
            'expiredDiscounts': Discount.objects.filter(valid_until__lt=now).count(),
            'totalUsage': DiscountUsage.objects.count(),
            'totalDiscountAmount': total_amount or ZERO,
            'mostUsedDiscounts': list(
                Discount.objects.annotate(usage_count=Count('usages')).order_by('-used_count', '-id')[:5]
            ),
            'recentDiscounts': list(Discount.objects.order_by('-created_at', '-id')[:10]),
        }
