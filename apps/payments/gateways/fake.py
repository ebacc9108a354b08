# apps/payments/gateways/fake.py
import uuid

from .base import PaymentGatewayBase


class FakeGateway(PaymentGatewayBase):
    """In-process gateway for local development and tests"""
    name = "fake"

    def create_order(self, amount_minor, currency, reference, customer=None):
        gateway_order_id = f"fake_{uuid.uuid4().hex[:16]}"
        return {
            'gateway_order_id': gateway_order_id,
            'payload': {'orderId': gateway_order_id, 'amount': int(amount_minor), 'currency': currency},
        }

    def verify_payment(self, gateway_order_id, payload):
        ok = str(payload.get('status', 'SUCCESS')).upper() != 'FAILED'
        amount = payload.get('amount')
        return {
            'ok': ok,
            'payment_id': payload.get('payment_id') or f"fakepay_{gateway_order_id[5:]}",
            'amount_minor': int(amount) if amount is not None else None,
        }

    def refund(self, payment_id, amount_minor, reference):
        return {'refund_id': f"fakerefund_{uuid.uuid4().hex[:12]}", 'status': 'processed'}
