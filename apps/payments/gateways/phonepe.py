# apps/payments/gateways/phonepe.py
import base64
import hashlib
import json
import logging

from apps.common.exceptions import GatewayError
from .base import PaymentGatewayBase

logger = logging.getLogger(__name__)

PAY_PATH = '/pg/v1/pay'
REFUND_PATH = '/pg/v1/refund'


class PhonePeGateway(PaymentGatewayBase):
    """Pay page checkout; payments are verified with a server side status check"""
    name = "phonepe"

    @property
    def base_url(self):
        return self.config.get('base_url', '').rstrip('/')

    @property
    def merchant_id(self):
        return self.config.get('merchant_id', '')

    def checksum(self, content: str) -> str:
        digest = hashlib.sha256((content + self.config.get('salt_key', '')).encode()).hexdigest()
        return f"{digest}###{self.config.get('salt_index', '1')}"

    def _signed_post(self, path, body):
        encoded = base64.b64encode(json.dumps(body).encode()).decode()
        return self._request('POST', f"{self.base_url}{path}", json={'request': encoded}, headers={
            'Content-Type': 'application/json',
            'X-VERIFY': self.checksum(encoded + path),
        })

    def create_order(self, amount_minor, currency, reference, customer=None):
        customer = customer or {}
        body = {
            'merchantId': self.merchant_id,
            'merchantTransactionId': reference,
            'merchantUserId': f"MUID{customer.get('user_id', '')}",
            'amount': int(amount_minor),
            'redirectUrl': self.config.get('redirect_url', ''),
            'redirectMode': 'REDIRECT',
            'callbackUrl': self.config.get('callback_url', ''),
            'paymentInstrument': {'type': 'PAY_PAGE'},
        }
        if customer.get('phone'):
            body['mobileNumber'] = customer['phone']

        response = self._signed_post(PAY_PATH, body)
        if not response.get('success'):
            raise GatewayError(response.get('message') or 'PhonePe payment initiation failed')
        redirect = (((response.get('data') or {}).get('instrumentResponse') or {}).get('redirectInfo') or {})
        logger.info(f"PhonePe payment initiated: {reference} amount={amount_minor}")
        return {
            'gateway_order_id': reference,
            'payload': {'merchantTransactionId': reference, 'redirectUrl': redirect.get('url', '')},
        }

    def check_status(self, merchant_transaction_id):
        path = f"/pg/v1/status/{self.merchant_id}/{merchant_transaction_id}"
        return self._request('GET', f"{self.base_url}{path}", headers={
            'Content-Type': 'application/json',
            'X-VERIFY': self.checksum(path),
            'X-MERCHANT-ID': self.merchant_id,
        })

    def verify_payment(self, gateway_order_id, payload):
        status = self.check_status(gateway_order_id)
        data = status.get('data') or {}
        ok = bool(status.get('success')) and status.get('code') == 'PAYMENT_SUCCESS'
        if not ok:
            logger.warning(f"PhonePe payment {gateway_order_id} not successful: {status.get('code')}")
        amount = data.get('amount')
        return {
            'ok': ok,
            'payment_id': data.get('transactionId', ''),
            'amount_minor': int(amount) if amount is not None else None,
        }

    def refund(self, payment_id, amount_minor, reference):
        response = self._signed_post(REFUND_PATH, {
            'merchantId': self.merchant_id,
            'merchantUserId': 'REFUND',
            'originalTransactionId': payment_id,
            'merchantTransactionId': reference,
            'amount': int(amount_minor),
            'callbackUrl': self.config.get('callback_url', ''),
        })
        if not response.get('success'):
            raise GatewayError(response.get('message') or 'Refund failed')
        data = response.get('data') or {}
        logger.info(f"PhonePe refund processed: {data.get('merchantTransactionId', reference)} for {payment_id}")
        return {'refund_id': data.get('merchantTransactionId', reference), 'status': data.get('state', '')}
