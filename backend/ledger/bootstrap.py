"""
ledger.bootstrap — Startup wiring for the ledger session.

``bootstrap()`` is the only place a session is established.  It runs once
per process, before the first request is served, and turns any
``SessionEstablishmentError`` into a logged, non-zero process exit.
"""

from __future__ import annotations

import atexit
import logging
from typing import Any, Mapping

from django.apps import apps

from core.domain.exceptions import SessionEstablishmentError

from .mediator import TransactionMediator
from .profile import ConnectionProfileGenerator, get_ledger_settings
from .session import establish_session

logger = logging.getLogger(__name__)


def build_mediator(options: Mapping[str, Any] | None = None) -> TransactionMediator:
    """Regenerate metadata when forced, then establish the session."""
    options = get_ledger_settings(options)
    if options["REGENERATE_CONFIG"]:
        logger.info("Regenerating connection profile...")
        ConnectionProfileGenerator(options).generate()
    return TransactionMediator(establish_session(options))


def bootstrap(options: Mapping[str, Any] | None = None) -> TransactionMediator:
    """
    Install the process-wide mediator on ``LedgerAppConfig``.

    Idempotent: an already installed mediator is returned unchanged.
    Exits the process with status 1 when the session cannot be built.
    The session is closed again at interpreter exit.
    """
    app_config = apps.get_app_config("ledger")
    if app_config.mediator is not None:
        return app_config.mediator

    try:
        mediator = build_mediator(options)
    except SessionEstablishmentError as exc:
        logger.critical("Failed to connect to Fabric: %s", exc)
        raise SystemExit(1) from exc

    app_config.install(mediator)
    atexit.register(app_config.uninstall)
    return mediator
