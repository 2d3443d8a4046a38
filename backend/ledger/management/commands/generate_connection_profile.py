"""
Management command: generate_connection_profile
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

Writes the connection profile from the ``LEDGER`` settings (``FABRIC_ORG``,
``FABRIC_MSP_ID``, ``FABRIC_PEER_*``, ``FABRIC_GATEWAY_*``,
``FABRIC_TLS_CERT_PATH``).  Overwrites an existing file.

Usage::

    python manage.py generate_connection_profile
    python manage.py generate_connection_profile --output /etc/evidence/profile.yaml
"""

from pathlib import Path

from django.core.management.base import BaseCommand, CommandError

from core.domain.exceptions import ConnectionMetadataGenerationFailed
from ledger.profile import ConnectionProfileGenerator


class Command(BaseCommand):
    help = "Generate the ledger connection profile."

    def add_arguments(self, parser):
        parser.add_argument(
            "--output",
            help="Destination path (defaults to FABRIC_CONNECTION_PROFILE).",
        )

    def handle(self, *args, **options):
        output = Path(options["output"]) if options.get("output") else None
        try:
            path = ConnectionProfileGenerator().generate(output)
        except ConnectionMetadataGenerationFailed as exc:
            raise CommandError(str(exc)) from exc
        self.stdout.write(self.style.SUCCESS(f"Connection profile written to {path}"))
