# backend/wsgi.py
"""
WSGI entrypoint (gunicorn backend.wsgi).

Each request runs on its own worker thread/process; the checkout and
cancellation services provide the cross-request guarantees through database
transactions. Production deploys set DJANGO_SETTINGS_MODULE=backend.settings.prod.
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "backend.settings.dev")

application = get_wsgi_application()
