# apps/payments/gateways/__init__.py
from django.conf import settings

from apps.common.exceptions import PricingValidationError
from .base import PaymentGatewayBase
from .fake import FakeGateway
from .phonepe import PhonePeGateway
from .razorpay import RazorpayGateway

GATEWAY_CLASSES = {
    RazorpayGateway.name: RazorpayGateway,
    PhonePeGateway.name: PhonePeGateway,
    FakeGateway.name: FakeGateway,
}


def get_gateway(name=None) -> PaymentGatewayBase:
    cfg = getattr(settings, "PAYMENTS", {})
    name = name or cfg.get("DEFAULT_GATEWAY", "fake")
    try:
        gateway_class = GATEWAY_CLASSES[name]
    except KeyError:
        raise PricingValidationError(f"Unsupported payment gateway: {name}")
    options = cfg.get("GATEWAYS", {}).get(name, {})
    return gateway_class(options, timeout=cfg.get("TIMEOUT", 20))


__all__ = [
    'PaymentGatewayBase',
    'RazorpayGateway',
    'PhonePeGateway',
    'FakeGateway',
    'GATEWAY_CLASSES',
    'get_gateway',
]
