"""
Order models module.
"""
from .order import Order
from .order_item import OrderItem
from .tracking import OrderTrackingEvent

__all__ = [
    'Order',
    'OrderItem',
    'OrderTrackingEvent',
]
