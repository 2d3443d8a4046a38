"""
Management command: serve
~~~~~~~~~~~~~~~~~~~~~~~~~

Establishes the ledger session, then serves the API on ``0.0.0.0:$API_PORT``.
The session is built before the listener opens; any establishment failure
exits with status 1 and nothing is served.

Usage::

    python manage.py serve
    python manage.py serve --port 8000

Production deployments run ``backend.wsgi:application`` under a WSGI
server instead, which performs the same bootstrap on import.
"""

import logging

from django.conf import settings
from django.core.management import call_command
from django.core.management.base import BaseCommand

from ledger.bootstrap import bootstrap

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = "Connect to the ledger and serve the evidence API."

    def add_arguments(self, parser):
        parser.add_argument("--port", default=None, help="Overrides API_PORT.")

    def handle(self, *args, **options):
        bootstrap()

        port = options.get("port") or settings.API_PORT
        logger.info("Starting API server on port %s...", port)
        # No autoreload: the reloader would run the server in a child
        # process without the installed session.
        call_command("runserver", f"0.0.0.0:{port}", use_reloader=False)
