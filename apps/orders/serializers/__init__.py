"""
Order serializers module.
"""
from .order_serializers import (
    OrderItemInputSerializer,
    QuoteSerializer,
    CheckoutSerializer,
    RefundSerializer,
    OrderStatusUpdateSerializer,
    TrackingInfoSerializer,
    OrderItemSerializer,
    OrderTrackingEventSerializer,
    OrderSerializer,
)

__all__ = [
    'OrderItemInputSerializer',
    'QuoteSerializer',
    'CheckoutSerializer',
    'RefundSerializer',
    'OrderStatusUpdateSerializer',
    'TrackingInfoSerializer',
    'OrderItemSerializer',
    'OrderTrackingEventSerializer',
    'OrderSerializer',
]
