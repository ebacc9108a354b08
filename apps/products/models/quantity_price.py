from django.db import models


class SubcategoryQuantityPrice(models.Model):
    """
    Bulk pricing tier for a subcategory.

    A rule applies to a line when its ``quantity`` threshold is at most the
    ordered quantity. PERCENTAGE takes ``value`` percent off the line;
    FIXED_AMOUNT replaces the whole line total with ``value``.
    """

    class PriceType(models.TextChoices):
        PERCENTAGE = 'PERCENTAGE', 'Percentage'
        FIXED_AMOUNT = 'FIXED_AMOUNT', 'Fixed total'

    subcategory = models.ForeignKey(
        'Subcategory', on_delete=models.CASCADE, related_name='quantity_prices'
    )
    quantity = models.PositiveIntegerField(help_text="Minimum quantity for this tier")
    price_type = models.CharField(max_length=20, choices=PriceType.choices)
    value = models.DecimalField(max_digits=12, decimal_places=2)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'subcategory_quantity_prices'
        ordering = ['subcategory', '-quantity']
        indexes = [
            models.Index(fields=['subcategory', 'is_active', 'quantity']),
        ]

    def __str__(self):
        return f"{self.subcategory} x{self.quantity}: {self.price_type} {self.value}"
