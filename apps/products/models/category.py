from django.db import models


class Category(models.Model):
    """Top level product category; a discount scope"""
    name = models.CharField(max_length=100, unique=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'product_categories'
        verbose_name_plural = 'Categories'

    def __str__(self):
        return self.name


class Subcategory(models.Model):
    """Second level category; carries quantity pricing tiers and is a discount scope"""
    category = models.ForeignKey(Category, on_delete=models.CASCADE, related_name='subcategories')
    name = models.CharField(max_length=100)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'product_subcategories'
        verbose_name_plural = 'Subcategories'
        constraints = [
            models.UniqueConstraint(fields=['category', 'name'], name='uniq_subcategory_per_category'),
        ]

    def __str__(self):
        return f"{self.category.name} / {self.name}"
