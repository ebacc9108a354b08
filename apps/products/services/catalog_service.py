"""
Catalog lookup used by the pricing engine: products, variants and stock.
"""
from decimal import Decimal
from typing import Dict, Iterable, Optional
import logging

from django.db.models import F

from apps.common.exceptions import NotFoundError, OutOfStockError, PricingValidationError
from apps.common.money import to_decimal
from ..models import Product, ProductVariant

logger = logging.getLogger(__name__)


class CatalogService:
    """Read access to catalog prices plus atomic stock reservation"""

    def get_product(self, product_id) -> Product:
        try:
            return Product.objects.select_related('category', 'subcategory').get(id=product_id)
        except (Product.DoesNotExist, ValueError, TypeError):
            raise NotFoundError(f"Product not found: {product_id}")

    def get_products(self, product_ids: Iterable) -> Dict[int, Product]:
        products = Product.objects.select_related('category', 'subcategory').filter(id__in=list(product_ids))
        return {product.id: product for product in products}

    def get_variant(self, variant_id, product: Optional[Product] = None) -> ProductVariant:
        queryset = ProductVariant.objects.all()
        if product is not None:
            queryset = queryset.filter(product=product)
        try:
            return queryset.get(id=variant_id)
        except (ProductVariant.DoesNotExist, ValueError, TypeError):
            raise NotFoundError(f"Product variant not found: {variant_id}")

    def get_purchasable_product(self, product_id) -> Product:
        product = self.get_product(product_id)
        if not product.is_active:
            raise PricingValidationError(f"Product {product.id} is not available for purchase")
        return product

    @staticmethod
    def resolve_unit_price(product: Product, variant: Optional[ProductVariant] = None) -> Decimal:
        """Variant price overrides the product price; offer price overrides normal price"""
        if variant is not None and variant.price is not None:
            return to_decimal(variant.price)
        return to_decimal(product.selling_price)

    def reserve_stock(self, variant_id, quantity: int) -> None:
        """
        Decrement variant stock only when enough remains.

        Must run inside the caller's transaction so a later failure
        restores the stock on rollback.
        """
        updated = ProductVariant.objects.filter(id=variant_id, stock__gte=quantity).update(
            stock=F('stock') - quantity
        )
        if not updated:
            logger.warning(f"Stock reservation failed for variant {variant_id}, requested {quantity}")
            raise OutOfStockError(f"Insufficient stock for variant {variant_id}")

    def release_stock(self, variant_id, quantity: int) -> None:
        ProductVariant.objects.filter(id=variant_id).update(stock=F('stock') + quantity)
