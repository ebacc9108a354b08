from django.urls import path

from . import views

urlpatterns = [
    # Customer
    path('validate/<str:code>/', views.ValidateCouponView.as_view(), name='validate-coupon'),
    path('calculate-cart/', views.CalculateCartView.as_view(), name='calculate-cart'),
    path('available/', views.AvailableDiscountsView.as_view(), name='available-discounts'),
    path('product/<int:product_id>/', views.ProductDiscountView.as_view(), name='product-discount'),
    path('apply/<int:order_id>/<int:discount_id>/', views.ApplyDiscountView.as_view(), name='apply-discount'),

    # Admin
    path('', views.DiscountListCreateView.as_view(), name='discount-list'),
    path('stats/', views.DiscountStatsView.as_view(), name='discount-stats'),
    path('<int:discount_id>/', views.DiscountDetailView.as_view(), name='discount-detail'),
    path('<int:discount_id>/toggle/', views.DiscountToggleView.as_view(), name='discount-toggle'),
]
