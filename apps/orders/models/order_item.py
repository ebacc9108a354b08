from django.db import models


class OrderItem(models.Model):
    """Line of an order with the prices resolved at checkout"""
    order = models.ForeignKey('Order', on_delete=models.CASCADE, related_name='items')
    product = models.ForeignKey('products.Product', on_delete=models.PROTECT, related_name='order_items')
    variant = models.ForeignKey(
        'products.ProductVariant', on_delete=models.SET_NULL, null=True, blank=True, related_name='order_items'
    )
    product_name = models.CharField(max_length=200)
    quantity = models.PositiveIntegerField()
    unit_price = models.DecimalField(max_digits=12, decimal_places=2, help_text="Resolved base unit price")
    line_total = models.DecimalField(max_digits=12, decimal_places=2, help_text="Total after quantity pricing")
    quantity_savings = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    quantity_rule_id = models.IntegerField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'order_items'
        ordering = ['id']

    def __str__(self):
        return f"{self.product_name} x{self.quantity}"
