# apps/payments/gateways/razorpay.py
import hashlib
import hmac
import logging

from .base import PaymentGatewayBase

logger = logging.getLogger(__name__)


class RazorpayGateway(PaymentGatewayBase):
    """Orders API for creation and refunds; HMAC signature for verification"""
    name = "razorpay"

    @property
    def base_url(self):
        return self.config.get('base_url', 'https://api.razorpay.com/v1').rstrip('/')

    @property
    def auth(self):
        return (self.config.get('key_id', ''), self.config.get('key_secret', ''))

    def create_order(self, amount_minor, currency, reference, customer=None):
        order = self._request('POST', f"{self.base_url}/orders", auth=self.auth, json={
            'amount': int(amount_minor),
            'currency': currency,
            'receipt': reference,
            'notes': {'reference': reference},
        })
        logger.info(f"Razorpay order created: {order.get('id')} amount={amount_minor} {currency}")
        return {
            'gateway_order_id': order['id'],
            'payload': {
                'key': self.config.get('key_id', ''),
                'orderId': order['id'],
                'amount': order.get('amount', int(amount_minor)),
                'currency': order.get('currency', currency),
            },
        }

    def signature_for(self, order_id, payment_id):
        body = f"{order_id}|{payment_id}".encode()
        return hmac.new(self.config.get('key_secret', '').encode(), body, hashlib.sha256).hexdigest()

    def verify_payment(self, gateway_order_id, payload):
        payment_id = str(payload.get('razorpay_payment_id') or '')
        signature = str(payload.get('razorpay_signature') or '')
        order_id = str(payload.get('razorpay_order_id') or gateway_order_id)

        ok = bool(payment_id and signature) and order_id == gateway_order_id and hmac.compare_digest(
            self.signature_for(gateway_order_id, payment_id), signature
        )
        if ok:
            logger.info(f"Razorpay payment verified for order: {gateway_order_id}")
        else:
            logger.warning(f"Razorpay payment verification failed for order: {gateway_order_id}")
        return {'ok': ok, 'payment_id': payment_id, 'amount_minor': None}

    def refund(self, payment_id, amount_minor, reference):
        refund = self._request('POST', f"{self.base_url}/payments/{payment_id}/refund", auth=self.auth, json={
            'amount': int(amount_minor),
            'notes': {'reference': reference},
        })
        logger.info(f"Razorpay refund processed: {refund.get('id')} for payment: {payment_id}")
        return {'refund_id': refund.get('id', ''), 'status': refund.get('status', '')}
