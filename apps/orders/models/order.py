from django.conf import settings
from django.core.serializers.json import DjangoJSONEncoder
from django.db import models
from django.db.models import F, Q


class Order(models.Model):
    """Persisted checkout; money fields come from one OrderTotals assembly"""

    class Status(models.TextChoices):
        PENDING = 'PENDING', 'Pending'
        CONFIRMED = 'CONFIRMED', 'Confirmed'
        PROCESSING = 'PROCESSING', 'Processing'
        SHIPPED = 'SHIPPED', 'Shipped'
        DELIVERED = 'DELIVERED', 'Delivered'
        CANCELLED = 'CANCELLED', 'Cancelled'
        REFUNDED = 'REFUNDED', 'Refunded'

    class PaymentStatus(models.TextChoices):
        PENDING = 'PENDING', 'Pending'
        PAID = 'PAID', 'Paid'
        REFUNDING = 'REFUNDING', 'Refund in progress'
        FAILED = 'FAILED', 'Failed'
        REFUNDED = 'REFUNDED', 'Refunded'

    class PaymentMethod(models.TextChoices):
        COD = 'COD', 'Cash on delivery'
        ONLINE = 'ONLINE', 'Online'

    order_number = models.CharField(max_length=50, unique=True)
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name='orders')

    # Shipping contact
    name = models.CharField(max_length=100)
    email = models.EmailField()
    phone = models.CharField(max_length=20)
    address = models.TextField()
    city = models.CharField(max_length=100)
    state = models.CharField(max_length=100)
    pincode = models.CharField(max_length=10)

    status = models.CharField(max_length=20, choices=Status.choices, default=Status.PENDING)
    payment_status = models.CharField(max_length=20, choices=PaymentStatus.choices, default=PaymentStatus.PENDING)
    payment_method = models.CharField(max_length=20, choices=PaymentMethod.choices)

    subtotal = models.DecimalField(max_digits=12, decimal_places=2, help_text="Line totals after quantity pricing")
    quantity_savings = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    discount = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    shipping_cost = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    total_amount = models.DecimalField(max_digits=12, decimal_places=2)

    discount_code = models.CharField(max_length=100, blank=True, default='')
    applied_discounts = models.JSONField(default=list, blank=True, encoder=DjangoJSONEncoder)

    # Gateway references
    gateway = models.CharField(max_length=20, blank=True, default='')
    gateway_order_id = models.CharField(max_length=100, blank=True, default='')
    gateway_payment_id = models.CharField(max_length=100, blank=True, default='')
    gateway_refund_id = models.CharField(max_length=100, blank=True, default='')

    # Fulfilment
    tracking_number = models.CharField(max_length=100, blank=True, default='')
    carrier = models.CharField(max_length=100, blank=True, default='')
    tracking_url = models.URLField(blank=True, default='')
    estimated_delivery = models.DateTimeField(null=True, blank=True)
    shipped_at = models.DateTimeField(null=True, blank=True)
    delivered_at = models.DateTimeField(null=True, blank=True)

    admin_notes = models.TextField(blank=True, default='')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'orders'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['user']),
            models.Index(fields=['status']),
            models.Index(fields=['payment_status']),
            models.Index(fields=['gateway_order_id']),
            models.Index(fields=['created_at']),
        ]
        constraints = [
            models.CheckConstraint(condition=Q(discount__lte=F('subtotal')), name='order_discount_within_subtotal'),
        ]

    def __str__(self):
        return f"Order {self.order_number}"

    @property
    def totals_balance(self):
        return self.total_amount == self.subtotal - self.discount + self.shipping_cost
