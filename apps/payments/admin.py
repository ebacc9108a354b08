from django.contrib import admin
from .models import PaymentTransaction


@admin.register(PaymentTransaction)
class PaymentTransactionAdmin(admin.ModelAdmin):
    list_display = [
        'transaction_id', 'user', 'gateway', 'gateway_order_id', 'amount',
        'currency', 'status', 'order', 'created_at', 'paid_at',
    ]
    list_filter = ['gateway', 'status', 'created_at']
    search_fields = ['transaction_id', 'gateway_order_id', 'gateway_payment_id', 'user__username']
    readonly_fields = [
        'transaction_id', 'gateway_order_id', 'gateway_payment_id', 'amount', 'amount_minor',
        'checkout_payload', 'quoted_totals', 'evaluated_at', 'callback_data', 'created_at', 'paid_at',
    ]
    ordering = ['-created_at']
