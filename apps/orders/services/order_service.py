"""
Core order service: checkout persistence, order lookup, fulfilment
status changes and refunds.
"""
import logging
import secrets
import string
import time
from datetime import timedelta
from typing import Dict, Tuple

from django.db import DatabaseError, transaction
from django.db.models import Count, Sum
from django.utils import timezone

from apps.common.exceptions import (
    ConcurrencyConflict, GatewayError, NotFoundError, PricingValidationError,
)
from apps.common.money import ZERO, quantize_money, to_decimal, to_minor_units
from ..models import Order, OrderItem, OrderTrackingEvent
from .totals_service import OrderTotals

logger = logging.getLogger(__name__)

SHIPPING_FIELDS = ['name', 'email', 'phone', 'address', 'city', 'state', 'pincode']
PENDING_ORDER_TTL = timedelta(hours=24)

STATUS_DESCRIPTIONS = {
    'PENDING': 'Order has been placed and is awaiting confirmation',
    'CONFIRMED': 'Order has been confirmed and is being processed',
    'PROCESSING': 'Order is being prepared for shipment',
    'SHIPPED': 'Order has been shipped',
    'DELIVERED': 'Order has been delivered successfully',
    'CANCELLED': 'Order has been cancelled',
    'REFUNDED': 'Order has been refunded',
}
FINAL_STATUSES = ('CANCELLED', 'REFUNDED')


class OrderService:
    """Service class for core order business logic"""

    def __init__(self, assembler, catalog, usage_recorder, gateway_factory):
        self.assembler = assembler
        self.catalog = catalog
        self.usage_recorder = usage_recorder
        self.gateway_factory = gateway_factory

    @staticmethod
    def generate_order_number() -> str:
        """ORD-<epoch millis>-<6 random characters>"""
        alphabet = string.ascii_uppercase + string.digits
        suffix = ''.join(secrets.choice(alphabet) for _ in range(6))
        return f"ORD-{int(time.time() * 1000)}-{suffix}"

    @staticmethod
    def validate_shipping(order_data: Dict) -> Dict:
        missing = [key for key in SHIPPING_FIELDS if not str(order_data.get(key) or '').strip()]
        if missing:
            raise PricingValidationError(f"All shipping information fields are required: {', '.join(missing)}")
        return {key: str(order_data[key]).strip() for key in SHIPPING_FIELDS}

    def place_cod_order(self, user, order_data: Dict) -> Tuple[Order, OrderTotals]:
        """
        Price and persist a cash-on-delivery order.

        A lost race on stock or a discount cap is retried once with a fresh
        assembly; a second conflict is surfaced to the caller.
        """
        shipping = self.validate_shipping(order_data)
        attempts = 2
        for attempt in range(1, attempts + 1):
            totals = self.assembler.assemble_totals(
                order_data['items'],
                coupon_code=order_data.get('discount_code'),
                shipping_state=shipping['state'],
                user=user,
            )
            try:
                order = self.persist_order(
                    user, shipping, totals,
                    payment_method=Order.PaymentMethod.COD,
                    payment_status=Order.PaymentStatus.PENDING,
                    description='Order placed with cash on delivery',
                )
                return order, totals
            except ConcurrencyConflict as exc:
                if attempt == attempts:
                    raise
                logger.warning(f"COD checkout conflict for user {user.pk}, retrying: {exc.detail}")

    @transaction.atomic
    def persist_order(self, user, shipping: Dict, totals: OrderTotals, payment_method: str,
                      payment_status: str, description: str = '', gateway: str = '',
                      gateway_order_id: str = '', gateway_payment_id: str = '') -> Order:
        """
        Write order, items, stock reservations and discount usages in one
        transaction. Conflicts roll everything back; other storage errors
        while recording a usage only lose that usage and are logged.
        """
        order = Order.objects.create(
            order_number=self.generate_order_number(),
            user=user,
            status=Order.Status.CONFIRMED,
            payment_status=payment_status,
            payment_method=payment_method,
            subtotal=totals.subtotal,
            quantity_savings=totals.quantity_savings,
            discount=totals.discount_amount,
            shipping_cost=totals.shipping_cost,
            total_amount=totals.total_amount,
            discount_code=totals.discount_code or '',
            applied_discounts=[d.to_dict() for d in totals.applied_discounts],
            gateway=gateway,
            gateway_order_id=gateway_order_id,
            gateway_payment_id=gateway_payment_id,
            **shipping,
        )

        for line in totals.lines:
            if line.variant_id is not None:
                self.catalog.reserve_stock(line.variant_id, line.quantity)
            OrderItem.objects.create(
                order=order,
                product_id=line.product_id,
                variant_id=line.variant_id,
                product_name=line.product_name,
                quantity=line.quantity,
                unit_price=line.unit_price,
                line_total=line.line_total,
                quantity_savings=line.savings,
                quantity_rule_id=line.quantity_pricing.applied_rule_id,
            )

        for discount_id, amount in totals.usage_amounts().items():
            try:
                self.usage_recorder.record_usage(discount_id, user, order, amount)
            except ConcurrencyConflict:
                raise
            except DatabaseError:
                logger.error(
                    f"RECONCILE discount usage not recorded: discount={discount_id} "
                    f"order={order.order_number} amount={amount}",
                    exc_info=True,
                )

        OrderTrackingEvent.objects.create(
            order=order,
            status=order.status,
            description=description or 'Order confirmed',
        )
        logger.info(
            f"Order {order.order_number} created: subtotal={order.subtotal} discount={order.discount} "
            f"shipping={order.shipping_cost} total={order.total_amount} method={payment_method}"
        )
        return order

    @staticmethod
    def get_order_detail(user, order_number: str) -> Order:
        queryset = Order.objects.select_related('user').prefetch_related('items', 'tracking_events')
        if not getattr(user, 'is_admin_role', False):
            queryset = queryset.filter(user=user)
        try:
            return queryset.get(order_number=order_number)
        except Order.DoesNotExist:
            raise NotFoundError('Order not found')

    @staticmethod
    def get_user_orders(user, status=None):
        queryset = Order.objects.filter(user=user).prefetch_related('items', 'tracking_events')
        if status:
            queryset = queryset.filter(status=status)
        return queryset.order_by('-created_at', '-id')

    @staticmethod
    def get_all_orders(filters: Dict):
        queryset = Order.objects.select_related('user').prefetch_related('items', 'tracking_events')

        status = filters.get('status')
        if status:
            queryset = queryset.filter(status=status)

        payment_status = filters.get('paymentStatus')
        if payment_status:
            queryset = queryset.filter(payment_status=payment_status)

        user_id = filters.get('userId')
        if user_id not in (None, ''):
            try:
                queryset = queryset.filter(user_id=int(user_id))
            except (TypeError, ValueError):
                raise PricingValidationError('userId must be an integer')

        return queryset.order_by('-created_at', '-id')

    def _release_items(self, order: Order) -> None:
        for item in order.items.all():
            if item.variant_id:
                self.catalog.release_stock(item.variant_id, item.quantity)

    @staticmethod
    def _lock(order_number: str) -> Order:
        try:
            return Order.objects.select_for_update().get(order_number=order_number)
        except Order.DoesNotExist:
            raise NotFoundError('Order not found')

    def update_order_status(self, order_number: str, status: str, admin_notes: str = '', now=None) -> Order:
        """
        Move an order to ``status`` and log the transition.

        Refunds go through ``process_refund``; cancelled and refunded orders
        are final. Cancelling puts reserved stock back.
        """
        if status not in Order.Status.values:
            raise PricingValidationError('Invalid status')
        if status == Order.Status.REFUNDED:
            raise PricingValidationError('Use the refund action to refund an order')
        now = now or timezone.now()

        with transaction.atomic():
            order = self._lock(order_number)
            previous = order.status
            if previous in FINAL_STATUSES and status != previous:
                raise PricingValidationError(f"Cannot change status of a {previous.lower()} order")
            if order.payment_status == Order.PaymentStatus.REFUNDING:
                raise PricingValidationError('Refund in progress for this order')

            order.status = status
            if admin_notes:
                order.admin_notes = admin_notes
            if status == Order.Status.SHIPPED and previous != status:
                order.shipped_at = now
            if status == Order.Status.DELIVERED and previous != status:
                order.delivered_at = now
            order.save()

            if status != previous:
                OrderTrackingEvent.objects.create(
                    order=order,
                    status=status,
                    description=STATUS_DESCRIPTIONS[status],
                    location=f"{order.city}, {order.state}",
                )
                if status == Order.Status.CANCELLED:
                    self._release_items(order)

        logger.info(f"Order status updated: {order.order_number} {previous} -> {status}")
        return order

    def update_tracking_info(self, order_number: str, tracking_number: str, carrier: str,
                             tracking_url: str = '', estimated_delivery=None, now=None) -> Order:
        """Record the shipment and mark the order shipped"""
        now = now or timezone.now()
        with transaction.atomic():
            order = self._lock(order_number)
            if order.status in FINAL_STATUSES or order.status == Order.Status.DELIVERED:
                raise PricingValidationError(f"Cannot ship a {order.status.lower()} order")

            order.tracking_number = tracking_number
            order.carrier = carrier
            order.tracking_url = tracking_url or ''
            order.estimated_delivery = estimated_delivery
            order.status = Order.Status.SHIPPED
            order.shipped_at = order.shipped_at or now
            order.save()

            OrderTrackingEvent.objects.create(
                order=order,
                status=Order.Status.SHIPPED,
                description=f"Order shipped via {carrier}. Tracking number: {tracking_number}",
                location=f"{order.city}, {order.state}",
            )

        logger.info(f"Tracking info updated for order: {order.order_number}")
        return order

    @staticmethod
    def get_order_stats(now=None) -> Dict:
        now = timezone.localtime(now or timezone.now())
        start_of_day = now.replace(hour=0, minute=0, second=0, microsecond=0)
        start_of_month = start_of_day.replace(day=1)

        breakdown = {status: 0 for status in Order.Status.values}
        for row in Order.objects.values('status').annotate(count=Count('id')):
            breakdown[row['status']] = row['count']

        revenue = Order.objects.filter(payment_status=Order.PaymentStatus.PAID).exclude(
            status=Order.Status.CANCELLED
        )
        return {
            'totalOrders': sum(breakdown.values()),
            'statusBreakdown': breakdown,
            'revenue': {
                'total': revenue.aggregate(total=Sum('total_amount'))['total'] or ZERO,
                'monthly': revenue.filter(created_at__gte=start_of_month).aggregate(
                    total=Sum('total_amount'))['total'] or ZERO,
            },
            'todayOrders': Order.objects.filter(created_at__gte=start_of_day).count(),
        }

    def cancel_expired_pending_orders(self, max_age: timedelta = PENDING_ORDER_TTL, now=None) -> Dict:
        """Cancel orders left unpaid in PENDING for longer than ``max_age``"""
        cutoff = (now or timezone.now()) - max_age
        candidates = Order.objects.filter(
            status=Order.Status.PENDING,
            payment_status=Order.PaymentStatus.PENDING,
            created_at__lt=cutoff,
        ).values_list('pk', flat=True)

        cancelled = []
        for pk in list(candidates):
            with transaction.atomic():
                order = Order.objects.select_for_update().filter(
                    pk=pk, status=Order.Status.PENDING, payment_status=Order.PaymentStatus.PENDING,
                ).first()
                if order is None:
                    continue
                order.status = Order.Status.CANCELLED
                order.payment_status = Order.PaymentStatus.FAILED
                order.save(update_fields=['status', 'payment_status', 'updated_at'])
                OrderTrackingEvent.objects.create(
                    order=order,
                    status=Order.Status.CANCELLED,
                    description='Order automatically cancelled due to incomplete payment',
                )
                self._release_items(order)
            cancelled.append(order.order_number)
            logger.info(f"Auto-cancelled expired order: {order.order_number}")

        return {'cancelledCount': len(cancelled), 'cancelledOrders': cancelled}

    def _claim_refund(self, order_number: str, refund_amount):
        """Lock the order, check it is refundable and mark it REFUNDING"""
        with transaction.atomic():
            try:
                order = Order.objects.select_for_update().get(order_number=order_number)
            except Order.DoesNotExist:
                raise NotFoundError('Order not found')

            if order.status == Order.Status.REFUNDED or order.payment_status == Order.PaymentStatus.REFUNDED:
                raise PricingValidationError('Order is already refunded')
            if order.payment_status == Order.PaymentStatus.REFUNDING:
                raise PricingValidationError('Refund already in progress for this order')
            if order.payment_status != Order.PaymentStatus.PAID:
                raise PricingValidationError('Cannot refund order that is not paid')
            if not order.gateway or not order.gateway_payment_id:
                raise PricingValidationError('Original transaction ID not found for refund')

            amount = quantize_money(to_decimal(refund_amount)) if refund_amount is not None else order.total_amount
            if amount <= 0 or amount > order.total_amount:
                raise PricingValidationError('Refund amount must be positive and not exceed the order total')

            claimed = Order.objects.filter(
                pk=order.pk, payment_status=Order.PaymentStatus.PAID,
            ).update(payment_status=Order.PaymentStatus.REFUNDING)
            if not claimed:
                raise ConcurrencyConflict('Refund already in progress for this order')
        return order, amount

    def process_refund(self, order_number: str, reason: str = '', refund_amount=None,
                       admin_notes: str = '') -> Order:
        """
        Refund through the original gateway, then restore stock and log the event.

        The order is claimed as REFUNDING before the gateway call so a second
        refund request for the same order is rejected instead of paying out
        twice; a gateway failure releases the claim.
        """
        order, amount = self._claim_refund(order_number, refund_amount)

        gateway = self.gateway_factory(order.gateway)
        try:
            refund = gateway.refund(
                order.gateway_payment_id,
                to_minor_units(amount),
                reference=f"REFUND_{order.order_number}",
            )
        except GatewayError:
            Order.objects.filter(
                pk=order.pk, payment_status=Order.PaymentStatus.REFUNDING,
            ).update(payment_status=Order.PaymentStatus.PAID)
            logger.error(f"Refund failed for order {order.order_number}", exc_info=True)
            raise

        with transaction.atomic():
            order = Order.objects.select_for_update().get(pk=order.pk)
            # Cancellation already put the stock back
            restock = order.status != Order.Status.CANCELLED
            order.status = Order.Status.REFUNDED
            order.payment_status = Order.PaymentStatus.REFUNDED
            order.gateway_refund_id = refund.get('refund_id', '')
            if admin_notes:
                order.admin_notes = admin_notes
            order.save(update_fields=[
                'status', 'payment_status', 'gateway_refund_id', 'admin_notes', 'updated_at',
            ])
            order.payment_transactions.update(status='refunded')
            OrderTrackingEvent.objects.create(
                order=order,
                status=Order.Status.REFUNDED,
                description=(
                    f"Order refunded. Amount: ₹{amount}. Reason: {reason or 'n/a'}. "
                    f"Refund ID: {order.gateway_refund_id}"
                ),
            )
            if restock:
                self._release_items(order)

        logger.info(f"Order refunded: {order.order_number}, refund id {order.gateway_refund_id}")
        return order
