"""
WSGI config for the chat backend.

Only the REST API is served over WSGI; websockets need the ASGI entry point
in config.asgi.
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

application = get_wsgi_application()
