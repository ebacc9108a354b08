"""
Product models module.
"""
from .category import Category, Subcategory
from .product import Product, ProductVariant
from .quantity_price import SubcategoryQuantityPrice

__all__ = [
    'Category',
    'Subcategory',
    'Product',
    'ProductVariant',
    'SubcategoryQuantityPrice',
]
