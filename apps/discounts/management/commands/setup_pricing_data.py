"""
Management command to set up sample catalog pricing and discounts.
"""
from datetime import timedelta
from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone

from apps.discounts.models import Discount
from apps.products.models import Category, Product, ProductVariant, Subcategory, SubcategoryQuantityPrice


class Command(BaseCommand):
    help = 'Set up sample products, quantity tiers and discounts for development'

    def add_arguments(self, parser):
        parser.add_argument('--days', type=int, default=90, help='Validity window of the sample discounts')

    def handle(self, *args, **options):
        self.stdout.write('Setting up pricing data...')

        with transaction.atomic():
            subcategory = self.setup_catalog()
            self.setup_quantity_tiers(subcategory)
            self.setup_discounts(options['days'])

        self.stdout.write(self.style.SUCCESS('Successfully set up pricing data'))

    def setup_catalog(self):
        category, _ = Category.objects.get_or_create(name='Apparel')
        subcategory, _ = Subcategory.objects.get_or_create(category=category, name='T-Shirts')
        products = [
            ('TS-001', 'Classic Tee', Decimal('500.00'), None),
            ('TS-002', 'Printed Tee', Decimal('650.00'), Decimal('599.00')),
        ]
        for code, name, normal_price, offer_price in products:
            product, created = Product.objects.get_or_create(
                product_code=code,
                defaults={
                    'name': name,
                    'normal_price': normal_price,
                    'offer_price': offer_price,
                    'category': category,
                    'subcategory': subcategory,
                },
            )
            for size in ('M', 'L'):
                ProductVariant.objects.get_or_create(
                    sku=f"{code}-{size}", defaults={'product': product, 'size': size, 'stock': 50}
                )
            if created:
                self.stdout.write(f'Created product: {name}')
        return subcategory

    def setup_quantity_tiers(self, subcategory):
        tiers = [
            (5, SubcategoryQuantityPrice.PriceType.PERCENTAGE, Decimal('10.00')),
            (10, SubcategoryQuantityPrice.PriceType.PERCENTAGE, Decimal('20.00')),
        ]
        for quantity, price_type, value in tiers:
            SubcategoryQuantityPrice.objects.get_or_create(
                subcategory=subcategory, quantity=quantity,
                defaults={'price_type': price_type, 'value': value},
            )

    def setup_discounts(self, days):
        now = timezone.now()
        discounts = [
            {
                'name': 'WELCOME10',
                'description': '10% off sitewide, up to 200',
                'discount_type': Discount.DiscountType.PERCENTAGE,
                'discount_value': Decimal('10.00'),
                'max_discount': Decimal('200.00'),
            },
            {
                'name': 'SAVE50',
                'description': 'Flat 50 off orders above 100',
                'discount_type': Discount.DiscountType.FIXED_AMOUNT,
                'discount_value': Decimal('50.00'),
                'min_order_amount': Decimal('100.00'),
            },
            {
                'name': 'TRADE15',
                'description': 'Wholesale partners save 15%',
                'discount_type': Discount.DiscountType.PERCENTAGE,
                'discount_value': Decimal('15.00'),
                'user_type': 'WHOLESALER',
                'per_user_limit': 0,
            },
        ]
        for data in discounts:
            discount, created = Discount.objects.get_or_create(
                name=data['name'],
                defaults={**data, 'valid_from': now, 'valid_until': now + timedelta(days=days)},
            )
            if created:
                self.stdout.write(f'Created discount: {discount.name}')
