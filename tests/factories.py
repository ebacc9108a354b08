"""
Test factories for creating test data using factory_boy.
"""
from datetime import timedelta
from decimal import Decimal

import factory
from django.contrib.auth import get_user_model
from django.utils import timezone
from factory import Faker, LazyFunction, SubFactory
from factory.django import DjangoModelFactory

User = get_user_model()


class UserFactory(DjangoModelFactory):
    """Factory for creating test users."""

    class Meta:
        model = User
        django_get_or_create = ('username',)

    username = factory.Sequence(lambda n: f"testuser{n}")
    email = factory.LazyAttribute(lambda obj: f"{obj.username}@example.com")
    first_name = Faker('first_name')
    last_name = Faker('last_name')
    phone = factory.Sequence(lambda n: f"98765{n:05d}")
    role = User.Role.CUSTOMER
    is_active = True


class WholesalerFactory(UserFactory):
    role = User.Role.WHOLESALER


class AdminUserFactory(UserFactory):
    role = User.Role.ADMIN
    is_staff = True


class CategoryFactory(DjangoModelFactory):
    """Factory for creating product categories."""

    class Meta:
        model = 'products.Category'
        django_get_or_create = ('name',)

    name = factory.Sequence(lambda n: f"Category {n}")


class SubcategoryFactory(DjangoModelFactory):

    class Meta:
        model = 'products.Subcategory'

    category = SubFactory(CategoryFactory)
    name = factory.Sequence(lambda n: f"Subcategory {n}")


class ProductFactory(DjangoModelFactory):
    """Factory for creating products priced at 500 with no offer."""

    class Meta:
        model = 'products.Product'

    name = factory.Sequence(lambda n: f"Product {n}")
    product_code = factory.Sequence(lambda n: f"P{n:05d}")
    description = Faker('text', max_nb_chars=200)
    normal_price = Decimal('500.00')
    offer_price = None
    status = 'ACTIVE'
    category = SubFactory(CategoryFactory)
    subcategory = factory.LazyAttribute(lambda obj: SubcategoryFactory(category=obj.category))


class ProductVariantFactory(DjangoModelFactory):

    class Meta:
        model = 'products.ProductVariant'

    product = SubFactory(ProductFactory)
    color = 'Red'
    size = 'M'
    sku = factory.Sequence(lambda n: f"SKU-{n:05d}")
    stock = 10
    price = None


class QuantityPriceFactory(DjangoModelFactory):
    """Factory for subcategory quantity tiers."""

    class Meta:
        model = 'products.SubcategoryQuantityPrice'

    subcategory = SubFactory(SubcategoryFactory)
    quantity = 5
    price_type = 'PERCENTAGE'
    value = Decimal('20.00')
    is_active = True


class DiscountFactory(DjangoModelFactory):
    """Factory for discounts; sitewide 10% valid from yesterday for a month by default."""

    class Meta:
        model = 'discounts.Discount'

    name = factory.Sequence(lambda n: f"DISCOUNT{n}")
    description = 'Test discount'
    discount_type = 'PERCENTAGE'
    discount_value = Decimal('10.00')
    product = None
    category = None
    subcategory = None
    user_type = 'ALL'
    min_order_amount = Decimal('0.00')
    max_discount = None
    usage_limit = None
    per_user_limit = 1
    valid_from = LazyFunction(lambda: timezone.now() - timedelta(days=1))
    valid_until = LazyFunction(lambda: timezone.now() + timedelta(days=30))
    is_active = True


class OrderFactory(DjangoModelFactory):
    """Factory for an unpaid COD order with balanced totals."""

    class Meta:
        model = 'orders.Order'

    order_number = factory.Sequence(lambda n: f"ORD-1700000000000-T{n:05d}")
    user = SubFactory(UserFactory)
    name = Faker('name')
    email = factory.LazyAttribute(lambda obj: obj.user.email)
    phone = '9876543210'
    address = '12 Anna Salai'
    city = 'Chennai'
    state = 'Tamil Nadu'
    pincode = '600002'
    status = 'CONFIRMED'
    payment_status = 'PENDING'
    payment_method = 'COD'
    subtotal = Decimal('1000.00')
    discount = Decimal('0.00')
    shipping_cost = Decimal('80.00')
    total_amount = Decimal('1080.00')


def checkout_data(items, discount_code=None, state='Tamil Nadu'):
    """Checkout payload with a valid shipping contact."""
    return {
        'items': items,
        'discount_code': discount_code,
        'name': 'Test Customer',
        'email': 'customer@example.com',
        'phone': '9876543210',
        'address': '12 Anna Salai',
        'city': 'Chennai',
        'state': state,
        'pincode': '600002',
    }
