from django.urls import path
from . import views

urlpatterns = [
    path('', views.UserOrderListView.as_view(), name='order-list'),
    path('quote/', views.QuoteView.as_view(), name='order-quote'),
    path('cod/', views.CodOrderView.as_view(), name='order-cod'),
    path('admin/', views.AdminOrderListView.as_view(), name='admin-order-list'),
    path('admin/stats/', views.OrderStatsView.as_view(), name='admin-order-stats'),
    path('admin/cancel-expired/', views.CancelExpiredOrdersView.as_view(), name='admin-order-cancel-expired'),
    path('<str:order_number>/', views.OrderDetailView.as_view(), name='order-detail'),
    path('<str:order_number>/status/', views.OrderStatusView.as_view(), name='order-status'),
    path('<str:order_number>/tracking/', views.OrderTrackingView.as_view(), name='order-tracking'),
    path('<str:order_number>/refund/', views.OrderRefundView.as_view(), name='order-refund'),
]
