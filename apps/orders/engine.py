"""
Pricing engine wiring.

Services are built once at startup and shared by reference; the only
module level state is the settings they are built from.
"""
from dataclasses import dataclass

from django.apps import apps
from django.conf import settings


@dataclass(frozen=True)
class PricingEngine:
    catalog: object
    quantity_pricing: object
    resolver: object
    coupons: object
    cart_calculator: object
    assembler: object
    usage_recorder: object
    discount_application: object
    orders: object
    payments: object


def build_pricing_engine(auto_product_discounts=None, strict_coupons=None, gateway_factory=None,
                         currency=None) -> PricingEngine:
    from apps.discounts.services import (
        CartDiscountCalculator, CouponValidator, DiscountApplicationService, DiscountResolver, UsageRecorder,
    )
    from apps.payments.gateways import get_gateway
    from apps.payments.services import PaymentService
    from apps.products.services import CatalogService
    from .services import OrderService, OrderTotalsAssembler, QuantityPricingService

    pricing = getattr(settings, 'PRICING', {})
    if auto_product_discounts is None:
        auto_product_discounts = pricing.get('AUTO_PRODUCT_DISCOUNTS', True)
    if strict_coupons is None:
        strict_coupons = pricing.get('STRICT_COUPONS', False)
    gateway_factory = gateway_factory or get_gateway
    currency = currency or pricing.get('CURRENCY', 'INR')

    catalog = CatalogService()
    quantity_pricing = QuantityPricingService()
    resolver = DiscountResolver(catalog)
    coupons = CouponValidator()
    cart_calculator = CartDiscountCalculator(resolver, coupons)
    assembler = OrderTotalsAssembler(
        catalog, quantity_pricing, cart_calculator,
        auto_product_discounts=auto_product_discounts,
        strict_coupons=strict_coupons,
    )
    usage_recorder = UsageRecorder()
    orders = OrderService(assembler, catalog, usage_recorder, gateway_factory)
    return PricingEngine(
        catalog=catalog,
        quantity_pricing=quantity_pricing,
        resolver=resolver,
        coupons=coupons,
        cart_calculator=cart_calculator,
        assembler=assembler,
        usage_recorder=usage_recorder,
        discount_application=DiscountApplicationService(usage_recorder),
        orders=orders,
        payments=PaymentService(assembler, orders, gateway_factory, currency=currency),
    )


def get_pricing_engine() -> PricingEngine:
    return apps.get_app_config('orders').engine
