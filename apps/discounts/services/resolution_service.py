"""
Discount resolution: which discounts currently apply to a product for a user.
"""
from typing import Dict, Iterable, List
import logging

from django.db.models import Count, Q
from django.utils import timezone

from apps.common.money import ZERO, quantize_money
from ..models import Discount
from ..types import CartLine
from .calculations import compute_line_amount

logger = logging.getLogger(__name__)


def _known_user(user):
    if user is None or not getattr(user, 'is_authenticated', False):
        return None
    return user


class DiscountResolver:
    """Finds eligible product, category, subcategory and sitewide discounts"""

    def __init__(self, catalog):
        self.catalog = catalog

    def _scope_filter(self, product_id=None, category_id=None, subcategory_id=None) -> Q:
        scope = Q(product__isnull=True, category__isnull=True, subcategory__isnull=True)
        if product_id is not None:
            scope |= Q(product_id=product_id)
        if category_id is not None:
            scope |= Q(category_id=category_id)
        if subcategory_id is not None:
            scope |= Q(subcategory_id=subcategory_id)
        return scope

    def _candidates(self, scope: Q, user, now):
        queryset = Discount.objects.filter(
            scope,
            is_active=True,
            valid_from__lte=now,
            valid_until__gte=now,
        )
        if user is not None:
            queryset = queryset.annotate(
                user_usage_count=Count('usages', filter=Q(usages__user=user))
            )
        return queryset.order_by('-discount_value', '-created_at', '-id')

    @staticmethod
    def is_eligible(discount, user, user_usage_count=None) -> bool:
        """User-scoped checks are skipped for anonymous callers"""
        if user is not None:
            if discount.restricts_user_type and getattr(user, 'role', None) != discount.user_type:
                return False
            if discount.per_user_limit > 0:
                if user_usage_count is None:
                    user_usage_count = discount.usages.filter(user=user).count()
                if user_usage_count >= discount.per_user_limit:
                    return False
        if discount.usage_limit_reached:
            return False
        return True

    def resolve_for_scope(self, product_id=None, category_id=None, subcategory_id=None,
                          user=None, now=None) -> List[Discount]:
        now = now or timezone.now()
        user = _known_user(user)
        scope = self._scope_filter(product_id, category_id, subcategory_id)
        return [
            discount for discount in self._candidates(scope, user, now)
            if self.is_eligible(discount, user, getattr(discount, 'user_usage_count', None))
        ]

    def resolve_product_discounts(self, product, user=None, now=None) -> List[Discount]:
        """Eligible discounts for ``product``, best value first then most recent"""
        if not hasattr(product, 'category_id'):
            product = self.catalog.get_product(product)
        return self.resolve_for_scope(
            product_id=product.id,
            category_id=product.category_id,
            subcategory_id=product.subcategory_id,
            user=user,
            now=now,
        )

    def get_active_discounts(self, user=None, product_id=None, category_id=None,
                             subcategory_id=None, now=None) -> List[Discount]:
        """
        Browse eligible discounts for any combination of scopes.

        With no scope given every active discount is considered, not only
        sitewide ones.
        """
        now = now or timezone.now()
        user = _known_user(user)
        if product_id is None and category_id is None and subcategory_id is None:
            scope = Q()
        else:
            scope = self._scope_filter(product_id, category_id, subcategory_id)
        return [
            discount for discount in self._candidates(scope, user, now)
            if self.is_eligible(discount, user, getattr(discount, 'user_usage_count', None))
        ]

    def calculate_product_discount(self, product_id, user=None, now=None) -> Dict:
        """Best single-unit offer for a product page"""
        product = self.catalog.get_product(product_id)
        price = quantize_money(product.selling_price)
        discounts = self.resolve_product_discounts(product, user=user, now=now)
        line = CartLine(
            product_id=product.id,
            quantity=1,
            unit_price=price,
            category_id=product.category_id,
            subcategory_id=product.subcategory_id,
            product_name=product.name,
        )

        offers = []
        for discount in discounts:
            amount = min(compute_line_amount(discount, line.total, line.quantity), price)
            offers.append({
                'discountId': discount.id,
                'name': discount.name,
                'discountType': discount.discount_type,
                'discountValue': discount.discount_value,
                'calculatedAmount': amount,
                'finalPrice': max(ZERO, price - amount),
            })

        if not offers:
            return {
                'hasDiscount': False,
                'originalPrice': price,
                'finalPrice': price,
                'discountAmount': ZERO,
                'applicableDiscounts': [],
                'bestDiscount': None,
            }

        # Stable sort keeps resolution order among equal amounts
        offers.sort(key=lambda offer: offer['calculatedAmount'], reverse=True)
        best = offers[0]
        return {
            'hasDiscount': True,
            'originalPrice': price,
            'finalPrice': best['finalPrice'],
            'discountAmount': best['calculatedAmount'],
            'applicableDiscounts': offers,
            'bestDiscount': best,
        }

    def get_available_discounts(self, product_ids: Iterable, user=None, now=None) -> List[Discount]:
        """De-duplicated union of the discounts eligible for any product in a cart"""
        now = now or timezone.now()
        products = self.catalog.get_products(product_ids)
        seen = {}
        for product in products.values():
            for discount in self.resolve_product_discounts(product, user=user, now=now):
                seen.setdefault(discount.id, discount)
        if not products:
            for discount in self.resolve_for_scope(user=user, now=now):
                seen.setdefault(discount.id, discount)
        return sorted(
            seen.values(),
            key=lambda d: (-d.discount_value, -d.created_at.timestamp(), -d.id),
        )
