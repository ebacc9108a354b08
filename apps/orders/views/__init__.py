"""
Order views module.
"""
from .order_views import QuoteView, CodOrderView, UserOrderListView, OrderDetailView
from .admin_order_views import (
    AdminOrderListView, OrderStatsView, OrderStatusView, OrderTrackingView,
    CancelExpiredOrdersView, OrderRefundView,
)

__all__ = [
    'QuoteView',
    'CodOrderView',
    'UserOrderListView',
    'OrderDetailView',
    'AdminOrderListView',
    'OrderStatsView',
    'OrderStatusView',
    'OrderTrackingView',
    'CancelExpiredOrdersView',
    'OrderRefundView',
]
