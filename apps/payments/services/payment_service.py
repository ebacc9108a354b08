"""
Online payment flow: quote and initiate at the gateway, then verify and
create the order on confirmation.
"""
from typing import Dict, Tuple
import logging
import uuid

from django.db import transaction
from django.utils import timezone

from apps.common.exceptions import (
    ConcurrencyConflict, NotFoundError, PaymentVerificationError, PricingError, PricingMismatchError,
)
from apps.orders.models import Order
from apps.orders.services import OrderService
from ..models import PaymentTransaction

logger = logging.getLogger(__name__)


class PaymentService:
    """Service class for payment operations"""

    def __init__(self, assembler, order_service, gateway_factory, currency='INR'):
        self.assembler = assembler
        self.order_service = order_service
        self.gateway_factory = gateway_factory
        self.currency = currency

    @staticmethod
    def generate_reference() -> str:
        return f"TXN{uuid.uuid4().hex[:24].upper()}"

    def _assemble(self, user, checkout: Dict, now):
        return self.assembler.assemble_totals(
            checkout['items'],
            coupon_code=checkout.get('discount_code'),
            shipping_state=checkout['state'],
            user=user,
            now=now,
        )

    def initiate_payment(self, user, order_data: Dict, gateway_name=None) -> Tuple[PaymentTransaction, Dict]:
        """Price the checkout once and register that exact amount with the gateway"""
        shipping = OrderService.validate_shipping(order_data)
        checkout = {
            **shipping,
            'items': [dict(item) for item in order_data['items']],
            'discount_code': order_data.get('discount_code') or '',
        }
        now = timezone.now()
        totals = self._assemble(user, checkout, now)

        gateway = self.gateway_factory(gateway_name)
        reference = self.generate_reference()
        created = gateway.create_order(
            totals.total_minor_units,
            self.currency,
            reference,
            customer={'user_id': user.pk, 'phone': shipping['phone']},
        )

        payment = PaymentTransaction.objects.create(
            user=user,
            gateway=gateway.name,
            gateway_order_id=created['gateway_order_id'],
            amount=totals.total_amount,
            amount_minor=totals.total_minor_units,
            currency=self.currency,
            checkout_payload=checkout,
            quoted_totals=totals.to_dict(),
            evaluated_at=now,
        )
        logger.info(
            f"Payment initiated: {payment.transaction_id} via {gateway.name} "
            f"order={payment.gateway_order_id} amount_minor={payment.amount_minor}"
        )
        return payment, {
            'transactionId': payment.transaction_id,
            'gateway': gateway.name,
            'gatewayOrderId': payment.gateway_order_id,
            'amount': payment.amount,
            'amountMinor': payment.amount_minor,
            'currency': payment.currency,
            'gatewayPayload': created.get('payload', {}),
            'totals': payment.quoted_totals,
        }

    def _mark_failed(self, payment: PaymentTransaction, message: str, callback_data=None):
        PaymentTransaction.objects.filter(pk=payment.pk, status=PaymentTransaction.Status.PENDING).update(
            status=PaymentTransaction.Status.FAILED,
            error_message=message,
            callback_data=callback_data or {},
            updated_at=timezone.now(),
        )

    def confirm_payment(self, user, gateway_order_id: str, payload: Dict) -> Order:
        """
        Verify the payment and persist the order.

        Totals are reassembled with the quote's evaluation time; any difference
        from the charged minor amount aborts without creating an order.
        Confirming an already confirmed payment returns its order.
        """
        try:
            payment = PaymentTransaction.objects.select_related('order').get(
                gateway_order_id=gateway_order_id, user=user
            )
        except PaymentTransaction.DoesNotExist:
            raise NotFoundError('Payment transaction not found')

        if payment.status == PaymentTransaction.Status.SUCCESS and payment.order is not None:
            return payment.order
        if payment.status != PaymentTransaction.Status.PENDING:
            raise PaymentVerificationError(f"Payment is {payment.status}")

        gateway = self.gateway_factory(payment.gateway)
        verification = gateway.verify_payment(payment.gateway_order_id, payload or {})
        if not verification['ok']:
            self._mark_failed(payment, 'Payment verification failed', payload)
            raise PaymentVerificationError()
        paid_minor = verification.get('amount_minor')
        if paid_minor is not None and paid_minor != payment.amount_minor:
            self._mark_failed(payment, f"Gateway reported {paid_minor}, expected {payment.amount_minor}", payload)
            raise PaymentVerificationError('Paid amount does not match the order total')

        attempts = 2
        for attempt in range(1, attempts + 1):
            try:
                return self._complete(user, payment.pk, verification['payment_id'], payload or {})
            except ConcurrencyConflict as exc:
                if attempt < attempts:
                    logger.warning(f"Confirmation conflict for {gateway_order_id}, retrying: {exc.detail}")
                    continue
                logger.error(f"RECONCILE paid transaction {payment.transaction_id} has no order: {exc.detail}")
                self._mark_failed(payment, str(exc.detail), payload)
                raise
            except PricingError as exc:
                logger.error(f"RECONCILE paid transaction {payment.transaction_id} rejected: {exc.detail}")
                self._mark_failed(payment, str(exc.detail), payload)
                raise

    @transaction.atomic
    def _complete(self, user, payment_pk, gateway_payment_id, payload) -> Order:
        payment = PaymentTransaction.objects.select_for_update().get(pk=payment_pk)
        if payment.status == PaymentTransaction.Status.SUCCESS and payment.order_id:
            return payment.order
        if payment.status != PaymentTransaction.Status.PENDING:
            raise PaymentVerificationError(f"Payment is {payment.status}")

        checkout = payment.checkout_payload
        totals = self._assemble(user, checkout, payment.evaluated_at)
        if totals.total_minor_units != payment.amount_minor:
            raise PricingMismatchError(
                f"Order total changed from {payment.amount_minor} to {totals.total_minor_units} minor units"
            )

        shipping = {key: checkout[key] for key in ('name', 'email', 'phone', 'address', 'city', 'state', 'pincode')}
        order = self.order_service.persist_order(
            user, shipping, totals,
            payment_method=Order.PaymentMethod.ONLINE,
            payment_status=Order.PaymentStatus.PAID,
            description=f"Payment received via {payment.gateway}",
            gateway=payment.gateway,
            gateway_order_id=payment.gateway_order_id,
            gateway_payment_id=gateway_payment_id,
        )

        payment.status = PaymentTransaction.Status.SUCCESS
        payment.gateway_payment_id = gateway_payment_id
        payment.callback_data = payload
        payment.order = order
        payment.paid_at = timezone.now()
        payment.save()
        logger.info(f"Payment {payment.transaction_id} confirmed for order {order.order_number}")
        return order

    def get_payment_status(self, user, gateway_order_id: str, refresh: bool = False) -> PaymentTransaction:
        """Transaction state; with ``refresh`` a pending payment is checked at the gateway"""
        try:
            payment = PaymentTransaction.objects.select_related('order').get(
                gateway_order_id=gateway_order_id, user=user
            )
        except PaymentTransaction.DoesNotExist:
            raise NotFoundError('Payment transaction not found')

        if refresh and payment.status == PaymentTransaction.Status.PENDING and payment.gateway == 'phonepe':
            gateway = self.gateway_factory(payment.gateway)
            if gateway.verify_payment(payment.gateway_order_id, {})['ok']:
                self.confirm_payment(user, gateway_order_id, {})
                payment.refresh_from_db()
        return payment
