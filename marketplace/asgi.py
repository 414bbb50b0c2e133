"""
ASGI config for the marketplace inbox project.

It exposes the ASGI callable as a module-level variable named ``application``.
Delivery is poll-based, so only the HTTP protocol is served.
"""

import os

from django.core.asgi import get_asgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'marketplace.settings')

application = get_asgi_application()
