"""
Management command to cancel pending orders that were never paid.
"""
from datetime import timedelta

from django.core.management.base import BaseCommand

from apps.orders.engine import get_pricing_engine


class Command(BaseCommand):
    help = 'Cancel unpaid pending orders older than the given age and restore their stock'

    def add_arguments(self, parser):
        parser.add_argument('--hours', type=int, default=24, help='Age after which a pending order expires')

    def handle(self, *args, **options):
        result = get_pricing_engine().orders.cancel_expired_pending_orders(
            max_age=timedelta(hours=options['hours'])
        )
        for order_number in result['cancelledOrders']:
            self.stdout.write(f'Cancelled order: {order_number}')
        self.stdout.write(self.style.SUCCESS(f"Cancelled {result['cancelledCount']} expired orders"))
