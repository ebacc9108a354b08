from django.contrib import admin
from django.urls import reverse
from django.utils.html import format_html
from .engine import get_pricing_engine
from .models import Order, OrderItem, OrderTrackingEvent


class OrderItemInline(admin.TabularInline):
    """Inline admin for order items"""
    model = OrderItem
    extra = 0
    readonly_fields = ['product', 'variant', 'product_name', 'quantity', 'unit_price',
                       'line_total', 'quantity_savings', 'quantity_rule_id']
    can_delete = False


class OrderTrackingEventInline(admin.TabularInline):
    model = OrderTrackingEvent
    extra = 0
    readonly_fields = ['status', 'description', 'location', 'created_at']


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    """Admin interface for orders; money fields are read-only once assembled"""

    list_display = [
        'order_number', 'user_link', 'status_display', 'payment_status', 'payment_method',
        'total_amount', 'discount', 'created_at',
    ]
    list_filter = ['status', 'payment_status', 'payment_method', 'gateway', 'created_at']
    search_fields = ['order_number', 'user__username', 'phone', 'gateway_order_id']
    ordering = ['-created_at']
    readonly_fields = [
        'order_number', 'subtotal', 'quantity_savings', 'discount', 'shipping_cost', 'total_amount',
        'discount_code', 'applied_discounts', 'gateway', 'gateway_order_id', 'gateway_payment_id',
        'gateway_refund_id', 'shipped_at', 'delivered_at', 'created_at', 'updated_at',
    ]

    fieldsets = (
        ('Basic Information', {
            'fields': ('order_number', 'user', 'status', 'payment_status', 'payment_method')
        }),
        ('Shipping', {
            'fields': ('name', 'email', 'phone', 'address', 'city', 'state', 'pincode')
        }),
        ('Totals', {
            'fields': ('subtotal', 'quantity_savings', 'discount', 'shipping_cost', 'total_amount',
                       'discount_code', 'applied_discounts')
        }),
        ('Payment Information', {
            'fields': ('gateway', 'gateway_order_id', 'gateway_payment_id', 'gateway_refund_id'),
            'classes': ('collapse',)
        }),
        ('Fulfilment', {
            'fields': ('tracking_number', 'carrier', 'tracking_url', 'estimated_delivery',
                       'shipped_at', 'delivered_at'),
        }),
        ('Notes', {
            'fields': ('admin_notes', 'created_at', 'updated_at')
        }),
    )

    inlines = [OrderItemInline, OrderTrackingEventInline]

    def user_link(self, obj):
        """Link to user admin page"""
        url = reverse('admin:users_user_change', args=[obj.user_id])
        return format_html('<a href="{}">{}</a>', url, obj.user.username)
    user_link.short_description = 'User'
    user_link.admin_order_field = 'user__username'

    def status_display(self, obj):
        """Display order status with color coding"""
        status_colors = {
            Order.Status.PENDING: '#ffc107',
            Order.Status.CONFIRMED: '#28a745',
            Order.Status.PROCESSING: '#17a2b8',
            Order.Status.SHIPPED: '#6f42c1',
            Order.Status.DELIVERED: '#20c997',
            Order.Status.CANCELLED: '#dc3545',
            Order.Status.REFUNDED: '#6c757d',
        }
        return format_html(
            '<span style="color: {}; font-weight: bold;">{}</span>',
            status_colors.get(obj.status, '#000000'), obj.get_status_display()
        )
    status_display.short_description = 'Status'
    status_display.admin_order_field = 'status'

    def get_queryset(self, request):
        return super().get_queryset(request).select_related('user')

    actions = ['mark_as_shipped', 'mark_as_delivered']

    def _move(self, request, queryset, from_statuses, status):
        orders = get_pricing_engine().orders
        updated_count = 0
        for order in queryset.filter(status__in=from_statuses):
            orders.update_order_status(order.order_number, status)
            updated_count += 1
        return updated_count

    def mark_as_shipped(self, request, queryset):
        """Mark selected confirmed orders as shipped"""
        updated_count = self._move(
            request, queryset, [Order.Status.CONFIRMED, Order.Status.PROCESSING], Order.Status.SHIPPED
        )
        self.message_user(request, f'{updated_count} orders marked as shipped.')
    mark_as_shipped.short_description = 'Mark as shipped'

    def mark_as_delivered(self, request, queryset):
        updated_count = self._move(request, queryset, [Order.Status.SHIPPED], Order.Status.DELIVERED)
        self.message_user(request, f'{updated_count} orders marked as delivered.')
    mark_as_delivered.short_description = 'Mark as delivered'
