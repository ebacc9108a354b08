from django.conf import settings
from django.db import models


class DiscountUsage(models.Model):
    """Ledger row binding one redemption of a discount to one order"""
    discount = models.ForeignKey('Discount', on_delete=models.CASCADE, related_name='usages')
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, null=True, blank=True, related_name='discount_usages'
    )
    order = models.ForeignKey('orders.Order', on_delete=models.CASCADE, related_name='discount_usages')
    discount_amount = models.DecimalField(max_digits=12, decimal_places=2)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'discount_usages'
        ordering = ['-created_at']
        constraints = [
            models.UniqueConstraint(fields=['discount', 'order'], name='uniq_discount_usage_per_order'),
        ]
        indexes = [
            models.Index(fields=['discount', 'user']),
        ]

    def __str__(self):
        return f"{self.discount.name} on order {self.order_id}: {self.discount_amount}"
