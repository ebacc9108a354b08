from django.db import models


class Product(models.Model):
    """Catalog product with the price fields read by the pricing engine"""

    class Status(models.TextChoices):
        ACTIVE = 'ACTIVE', 'Active'
        INACTIVE = 'INACTIVE', 'Inactive'
        OUT_OF_STOCK = 'OUT_OF_STOCK', 'Out of stock'

    name = models.CharField(max_length=200)
    product_code = models.CharField(max_length=50, unique=True, null=True, blank=True)
    description = models.TextField(blank=True, default='')

    normal_price = models.DecimalField(max_digits=12, decimal_places=2, help_text="List price")
    offer_price = models.DecimalField(
        max_digits=12, decimal_places=2, null=True, blank=True,
        help_text="Sale price; overrides normal_price when set"
    )
    wholesale_price = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)

    status = models.CharField(max_length=20, choices=Status.choices, default=Status.ACTIVE)

    category = models.ForeignKey(
        'Category', on_delete=models.PROTECT, related_name='products'
    )
    subcategory = models.ForeignKey(
        'Subcategory', on_delete=models.SET_NULL, null=True, blank=True, related_name='products'
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'products'
        indexes = [
            models.Index(fields=['status']),
            models.Index(fields=['category']),
            models.Index(fields=['subcategory']),
        ]

    def __str__(self):
        return f"{self.name} (id: {self.id})"

    @property
    def is_active(self):
        return self.status == self.Status.ACTIVE

    @property
    def selling_price(self):
        """Offer price if present, else normal price"""
        if self.offer_price is not None:
            return self.offer_price
        return self.normal_price


class ProductVariant(models.Model):
    """Color/size variant holding its own stock and an optional price override"""
    product = models.ForeignKey(Product, on_delete=models.CASCADE, related_name='variants')
    color = models.CharField(max_length=50, blank=True, default='')
    size = models.CharField(max_length=50, blank=True, default='')
    sku = models.CharField(max_length=100, unique=True, null=True, blank=True)
    stock = models.PositiveIntegerField(default=0)
    price = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)

    class Meta:
        db_table = 'product_variants'
        constraints = [
            models.CheckConstraint(condition=models.Q(stock__gte=0), name='variant_stock_non_negative'),
        ]

    def __str__(self):
        label = ' '.join(part for part in [self.color, self.size] if part)
        return f"{self.product.name} {label}".strip()
