"""
WSGI config for the Levitenleser backend.
"""
import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'levitenleser.settings')

application = get_wsgi_application()
