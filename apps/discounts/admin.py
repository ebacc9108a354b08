from django.contrib import admin
from .models import Discount, DiscountUsage


class DiscountUsageInline(admin.TabularInline):
    model = DiscountUsage
    extra = 0
    readonly_fields = ['user', 'order', 'discount_amount', 'created_at']
    can_delete = False


@admin.register(Discount)
class DiscountAdmin(admin.ModelAdmin):
    list_display = [
        'name', 'discount_type', 'discount_value', 'user_type', 'is_active',
        'valid_from', 'valid_until', 'used_count', 'usage_limit', 'total_discounts',
    ]
    list_filter = ['discount_type', 'is_active', 'user_type', 'valid_from', 'valid_until']
    search_fields = ['name', 'description']
    ordering = ['-created_at']
    # Counters only move through usage recording
    readonly_fields = ['used_count', 'total_discounts', 'created_by', 'created_at', 'updated_at']

    fieldsets = (
        ('Basic Information', {
            'fields': ('name', 'description', 'discount_type', 'discount_value', 'is_active')
        }),
        ('Scope', {
            'fields': ('product', 'category', 'subcategory', 'min_quantity', 'user_type')
        }),
        ('Limits', {
            'fields': ('min_order_amount', 'max_discount', 'usage_limit', 'per_user_limit',
                       'valid_from', 'valid_until')
        }),
        ('Usage', {
            'fields': ('used_count', 'total_discounts', 'created_by', 'created_at', 'updated_at')
        }),
    )
    inlines = [DiscountUsageInline]

    def save_model(self, request, obj, form, change):
        if not change:
            obj.created_by = request.user
        super().save_model(request, obj, form, change)


@admin.register(DiscountUsage)
class DiscountUsageAdmin(admin.ModelAdmin):
    list_display = ['discount', 'user', 'order', 'discount_amount', 'created_at']
    list_filter = ['created_at']
    search_fields = ['discount__name', 'user__username', 'order__order_number']
    readonly_fields = ['discount', 'user', 'order', 'discount_amount', 'created_at']
