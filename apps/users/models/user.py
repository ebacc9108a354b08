from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    """Storefront account; ``role`` drives discount eligibility and admin access"""

    class Role(models.TextChoices):
        CUSTOMER = 'CUSTOMER', 'Customer'
        WHOLESALER = 'WHOLESALER', 'Wholesaler'
        ADMIN = 'ADMIN', 'Admin'

    role = models.CharField(
        max_length=20,
        choices=Role.choices,
        default=Role.CUSTOMER,
        help_text="Account role matched against Discount.user_type"
    )
    phone = models.CharField(max_length=20, unique=True, null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'users'
        verbose_name = 'User'
        verbose_name_plural = 'Users'
        indexes = [
            models.Index(fields=['role']),
        ]

    def __str__(self):
        return self.username or self.phone or f"User {self.id}"

    @property
    def is_admin_role(self):
        return self.role == self.Role.ADMIN
