# apps/payments/gateways/base.py
from abc import ABC, abstractmethod
import logging

import requests

from apps.common.exceptions import GatewayError

logger = logging.getLogger(__name__)


class PaymentGatewayBase(ABC):
    """
    Adapter contract. Amounts are always integers in minor currency units.
    """
    name: str = "base"

    def __init__(self, config=None, timeout=20, session=None):
        self.config = config or {}
        self.timeout = timeout
        self.session = session or requests.Session()

    @abstractmethod
    def create_order(self, amount_minor: int, currency: str, reference: str, customer=None) -> dict:
        """Register a payment with the gateway.
        Return: {'gateway_order_id': str, 'payload': dict for the client}"""
        raise NotImplementedError

    @abstractmethod
    def verify_payment(self, gateway_order_id: str, payload: dict) -> dict:
        """Check a completed payment.
        Return: {'ok': bool, 'payment_id': str, 'amount_minor': int or None}"""
        raise NotImplementedError

    @abstractmethod
    def refund(self, payment_id: str, amount_minor: int, reference: str) -> dict:
        """Return: {'refund_id': str, 'status': str}"""
        raise NotImplementedError

    def _request(self, method, url, **kwargs):
        kwargs.setdefault('timeout', self.timeout)
        try:
            response = self.session.request(method, url, **kwargs)
        except requests.RequestException as exc:
            logger.error(f"{self.name} request to {url} failed: {exc}")
            raise GatewayError(f"{self.name} is unreachable")
        if response.status_code >= 400:
            logger.error(f"{self.name} returned {response.status_code} for {url}: {response.text[:500]}")
            raise GatewayError(f"{self.name} rejected the request")
        try:
            return response.json()
        except ValueError:
            raise GatewayError(f"{self.name} returned an invalid response")
