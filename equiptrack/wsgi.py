"""
WSGI config for the equiptrack project.
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'equiptrack.settings')

application = get_wsgi_application()
