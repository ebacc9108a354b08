from django.conf import settings
from django.core.serializers.json import DjangoJSONEncoder
from django.db import models
from django.utils import timezone
import uuid


class PaymentTransaction(models.Model):
    """
    One online checkout attempt through a gateway.

    Holds the checkout payload and the evaluation time of the quote so the
    confirmation can reassemble exactly the totals that were charged.
    """

    class Status(models.TextChoices):
        PENDING = 'pending', 'Pending'
        SUCCESS = 'success', 'Success'
        FAILED = 'failed', 'Failed'
        REFUNDED = 'refunded', 'Refunded'

    transaction_id = models.CharField(max_length=100, unique=True, help_text="Internal transaction ID")
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='payment_transactions')
    gateway = models.CharField(max_length=20)
    gateway_order_id = models.CharField(max_length=100, unique=True)
    gateway_payment_id = models.CharField(max_length=100, blank=True, default='')

    amount = models.DecimalField(max_digits=12, decimal_places=2, help_text="Charged amount in major units")
    amount_minor = models.PositiveBigIntegerField(help_text="Charged amount in minor units sent to the gateway")
    currency = models.CharField(max_length=3, default='INR')
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.PENDING)

    checkout_payload = models.JSONField(default=dict, encoder=DjangoJSONEncoder)
    quoted_totals = models.JSONField(default=dict, encoder=DjangoJSONEncoder)
    evaluated_at = models.DateTimeField(help_text="Pricing evaluation time reused at confirmation")

    callback_data = models.JSONField(default=dict, blank=True, encoder=DjangoJSONEncoder)
    error_message = models.TextField(blank=True, default='')

    order = models.ForeignKey(
        'orders.Order', on_delete=models.SET_NULL, null=True, blank=True, related_name='payment_transactions'
    )

    created_at = models.DateTimeField(auto_now_add=True)
    paid_at = models.DateTimeField(null=True, blank=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'payment_transactions'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['user']),
            models.Index(fields=['status']),
            models.Index(fields=['created_at']),
        ]

    def __str__(self):
        return f"Payment {self.transaction_id} - {self.status}"

    def save(self, *args, **kwargs):
        # Generate transaction ID if not set
        if not self.transaction_id:
            self.transaction_id = f"pay_{uuid.uuid4().hex[:16]}"

        # Set paid_at when status changes to success
        if self.status == self.Status.SUCCESS and not self.paid_at:
            self.paid_at = timezone.now()

        super().save(*args, **kwargs)
