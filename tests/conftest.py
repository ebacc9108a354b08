"""
Test configuration for the storefront pricing engine.
"""
import pytest
from rest_framework.test import APIClient


@pytest.fixture
def engine():
    """Freshly wired pricing engine using the test settings."""
    from apps.orders.engine import build_pricing_engine
    return build_pricing_engine()


@pytest.fixture
def customer():
    from tests.factories import UserFactory
    return UserFactory()


@pytest.fixture
def wholesaler():
    from tests.factories import WholesalerFactory
    return WholesalerFactory()


@pytest.fixture
def admin_account():
    from tests.factories import AdminUserFactory
    return AdminUserFactory()


@pytest.fixture
def product():
    """Product priced at 500 with a subcategory and no quantity tiers."""
    from tests.factories import ProductFactory
    return ProductFactory()


@pytest.fixture
def variant(product):
    from tests.factories import ProductVariantFactory
    return ProductVariantFactory(product=product, stock=10)


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def customer_client(customer):
    client = APIClient()
    client.force_authenticate(user=customer)
    return client


@pytest.fixture
def admin_client(admin_account):
    client = APIClient()
    client.force_authenticate(user=admin_account)
    return client
