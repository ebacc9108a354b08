"""
Payment views module.
"""
from .payment_views import initiate_payment, confirm_payment, get_payment_status

__all__ = [
    'initiate_payment',
    'confirm_payment',
    'get_payment_status',
]
