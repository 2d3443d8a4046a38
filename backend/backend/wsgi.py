"""
WSGI config for the evidence ledger API.

Importing this module establishes the ledger session before the server
accepts connections; a failed establishment exits the process.
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "backend.settings")

application = get_wsgi_application()

from ledger.bootstrap import bootstrap  # noqa: E402

bootstrap()
