from django.urls import path
from . import views

app_name = 'payments'

urlpatterns = [
    path('initiate/', views.initiate_payment, name='initiate_payment'),
    path('confirm/', views.confirm_payment, name='confirm_payment'),
    path('status/<str:gateway_order_id>/', views.get_payment_status, name='payment_status'),
]
