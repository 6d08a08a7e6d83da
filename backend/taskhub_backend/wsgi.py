"""WSGI entry point for the TaskHub backend."""
import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "taskhub_backend.settings")

application = get_wsgi_application()
