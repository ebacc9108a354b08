"""
Payment serializers module.
"""
from .payment_serializers import (
    PaymentInitiateSerializer, PaymentConfirmSerializer, PaymentTransactionSerializer,
)

__all__ = [
    'PaymentInitiateSerializer',
    'PaymentConfirmSerializer',
    'PaymentTransactionSerializer',
]
