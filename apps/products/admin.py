from django.contrib import admin
from .models import Category, Subcategory, Product, ProductVariant, SubcategoryQuantityPrice


class SubcategoryInline(admin.TabularInline):
    model = Subcategory
    extra = 0
    fields = ['name']


class ProductVariantInline(admin.TabularInline):
    model = ProductVariant
    extra = 0
    fields = ['color', 'size', 'sku', 'stock', 'price']


class QuantityPriceInline(admin.TabularInline):
    model = SubcategoryQuantityPrice
    extra = 1
    fields = ['quantity', 'price_type', 'value', 'is_active']


@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    list_display = ['name', 'created_at']
    search_fields = ['name']
    ordering = ['name']
    inlines = [SubcategoryInline]


@admin.register(Subcategory)
class SubcategoryAdmin(admin.ModelAdmin):
    list_display = ['name', 'category', 'created_at']
    list_filter = ['category']
    search_fields = ['name', 'category__name']
    inlines = [QuantityPriceInline]


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ['name', 'product_code', 'normal_price', 'offer_price', 'status', 'category', 'subcategory']
    list_filter = ['status', 'category', 'subcategory']
    search_fields = ['name', 'product_code']
    list_editable = ['status']
    inlines = [ProductVariantInline]
