from django.apps import AppConfig


class OrdersConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.orders'
    label = 'orders'
    verbose_name = 'Orders'
    engine = None

    def ready(self):
        from .engine import build_pricing_engine
        self.engine = build_pricing_engine()
