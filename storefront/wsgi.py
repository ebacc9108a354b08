"""
WSGI config for storefront project.
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'storefront.settings.base')

application = get_wsgi_application()
