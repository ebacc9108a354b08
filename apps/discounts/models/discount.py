from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import F, Q


class Discount(models.Model):
    """
    Scoped price reduction rule, also redeemable as a coupon by its name.

    A discount with no product, category or subcategory is sitewide.
    ``used_count`` and ``total_discounts`` are only changed by usage recording.
    """

    class DiscountType(models.TextChoices):
        PERCENTAGE = 'PERCENTAGE', 'Percentage'
        FIXED_AMOUNT = 'FIXED_AMOUNT', 'Fixed amount'
        BUY_X_GET_Y = 'BUY_X_GET_Y', 'Buy X get Y'

    ALL_USERS = 'ALL'
    USER_TYPE_CHOICES = [
        ('ALL', 'All users'),
        ('CUSTOMER', 'Customer'),
        ('WHOLESALER', 'Wholesaler'),
        ('ADMIN', 'Admin'),
    ]

    name = models.CharField(max_length=100, unique=True, help_text="Display name, also entered as the coupon code")
    description = models.TextField(blank=True, default='')
    discount_type = models.CharField(max_length=20, choices=DiscountType.choices)
    discount_value = models.DecimalField(max_digits=12, decimal_places=2)

    # Scope; all unset means sitewide
    product = models.ForeignKey(
        'products.Product', on_delete=models.CASCADE, null=True, blank=True, related_name='discounts'
    )
    category = models.ForeignKey(
        'products.Category', on_delete=models.CASCADE, null=True, blank=True, related_name='discounts'
    )
    subcategory = models.ForeignKey(
        'products.Subcategory', on_delete=models.CASCADE, null=True, blank=True, related_name='discounts'
    )

    min_quantity = models.PositiveIntegerField(null=True, blank=True)
    user_type = models.CharField(max_length=20, choices=USER_TYPE_CHOICES, null=True, blank=True)
    min_order_amount = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    max_discount = models.DecimalField(
        max_digits=12, decimal_places=2, null=True, blank=True,
        help_text="Cap on the computed amount of a percentage discount"
    )
    usage_limit = models.PositiveIntegerField(null=True, blank=True, help_text="Global redemption cap")
    per_user_limit = models.PositiveIntegerField(default=1)

    valid_from = models.DateTimeField()
    valid_until = models.DateTimeField()
    is_active = models.BooleanField(default=True)

    used_count = models.PositiveIntegerField(default=0)
    total_discounts = models.DecimalField(max_digits=14, decimal_places=2, default=0)

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='+'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'discounts'
        ordering = ['-discount_value', '-created_at', '-id']
        indexes = [
            models.Index(fields=['is_active', 'valid_from', 'valid_until']),
            models.Index(fields=['product']),
            models.Index(fields=['category']),
            models.Index(fields=['subcategory']),
        ]
        constraints = [
            models.CheckConstraint(condition=Q(discount_value__gt=0), name='discount_value_positive'),
            models.CheckConstraint(
                condition=~Q(discount_type='PERCENTAGE') | Q(discount_value__lte=100),
                name='discount_percentage_at_most_100',
            ),
            models.CheckConstraint(condition=Q(valid_from__lt=F('valid_until')), name='discount_window_ordered'),
            models.CheckConstraint(
                condition=Q(usage_limit__isnull=True) | Q(used_count__lte=F('usage_limit')),
                name='discount_used_within_limit',
            ),
        ]

    def __str__(self):
        return f"{self.name} ({self.discount_type} {self.discount_value})"

    @property
    def is_sitewide(self):
        return self.product_id is None and self.category_id is None and self.subcategory_id is None

    @property
    def restricts_user_type(self):
        return bool(self.user_type) and self.user_type != self.ALL_USERS

    @property
    def usage_limit_reached(self):
        return self.usage_limit is not None and self.used_count >= self.usage_limit

    def is_valid_at(self, now):
        return self.valid_from <= now <= self.valid_until

    def clean(self):
        errors = {}
        if self.discount_value is not None and self.discount_value <= 0:
            errors['discount_value'] = 'Discount value must be greater than 0'
        elif (self.discount_type == self.DiscountType.PERCENTAGE
              and self.discount_value is not None and self.discount_value > 100):
            errors['discount_value'] = 'Percentage discount cannot exceed 100%'
        if self.valid_from and self.valid_until and self.valid_from >= self.valid_until:
            errors['valid_until'] = 'Valid from date must be before valid until date'
        if errors:
            raise ValidationError(errors)
