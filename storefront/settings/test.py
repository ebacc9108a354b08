"""
Test settings for storefront project.
"""

from .base import *

# Use SQLite for testing
DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}


# Disable migrations for faster testing
class DisableMigrations:
    def __contains__(self, item):
        return True

    def __getitem__(self, item):
        return None


MIGRATION_MODULES = DisableMigrations()

# Use faster password hasher for testing
PASSWORD_HASHERS = [
    'django.contrib.auth.hashers.MD5PasswordHasher',
]

CACHES = {
    'default': {
        'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
    }
}

PAYMENTS = {
    **PAYMENTS,
    'DEFAULT_GATEWAY': 'fake',
    'GATEWAYS': {
        **PAYMENTS['GATEWAYS'],
        'razorpay': {
            'key_id': 'rzp_test_key',
            'key_secret': 'rzp_test_secret',
            'base_url': 'https://api.razorpay.test/v1',
        },
        'phonepe': {
            **PAYMENTS['GATEWAYS']['phonepe'],
            'merchant_id': 'PGTESTMERCHANT',
            'salt_key': 'test-salt-key',
            'salt_index': '1',
            'base_url': 'https://api.phonepe.test',
        },
    },
}

LOGGING['root']['level'] = 'WARNING'
LOGGING['loggers']['apps']['level'] = 'WARNING'
