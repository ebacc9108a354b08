"""
Order services module.
"""
from .quantity_pricing import QuantityPriceResult, QuantityPricingService, select_quantity_price
from .shipping import calculate_shipping_cost
from .totals_service import OrderTotals, OrderTotalsAssembler, PricedLine
from .order_service import OrderService

__all__ = [
    'QuantityPriceResult',
    'QuantityPricingService',
    'select_quantity_price',
    'calculate_shipping_cost',
    'OrderTotals',
    'OrderTotalsAssembler',
    'PricedLine',
    'OrderService',
]
