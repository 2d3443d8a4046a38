"""
core.domain.exception_handler — DRF-compatible global exception handler.

Maps ledger exceptions from ``core.domain.exceptions`` and client-input
failures to the external error envelope ``{"error": ...}`` so that views
don't need per-endpoint try/except boilerplate.

Register in ``settings.py``::

    REST_FRAMEWORK = {
        ...
        'EXCEPTION_HANDLER': 'core.domain.exception_handler.ledger_exception_handler',
    }
"""

from __future__ import annotations

import logging

from rest_framework import status
from rest_framework.exceptions import ParseError, UnsupportedMediaType, ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_default_handler

from core.domain.exceptions import (
    LedgerCallError,
    LedgerError,
    PayloadDecodeError,
    SessionUnavailable,
)

logger = logging.getLogger(__name__)

INVALID_INPUT_MESSAGE = "Invalid input"

# Client-input failures: the body never reached the ledger.
_CLIENT_INPUT_ERRORS = (ParseError, UnsupportedMediaType, ValidationError)

# Ledger exception → HTTP status code
_STATUS_MAP: dict[type, int] = {
    SessionUnavailable: status.HTTP_503_SERVICE_UNAVAILABLE,
    PayloadDecodeError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    LedgerCallError:    status.HTTP_500_INTERNAL_SERVER_ERROR,
    LedgerError:        status.HTTP_500_INTERNAL_SERVER_ERROR,  # catch-all base class last
}


def error_body(exc: LedgerError) -> dict[str, str]:
    """Build the external error envelope for a ledger exception."""
    body = {"error": exc.message}
    if isinstance(exc, PayloadDecodeError):
        body["raw"] = exc.raw
    return body


def ledger_exception_handler(exc: Exception, context: dict) -> Response | None:
    """
    DRF exception handler that also handles ``core.domain.exceptions``.

    Client-input errors are flattened to a generic 400 before DRF's
    default handler sees them.  Ledger errors keep their message
    verbatim.  Anything else goes to the default DRF handler.
    """
    if isinstance(exc, _CLIENT_INPUT_ERRORS):
        logger.info(
            "Rejected malformed request in %s: %s",
            context.get("view", "unknown"),
            exc,
        )
        return Response(
            {"error": INVALID_INPUT_MESSAGE},
            status=status.HTTP_400_BAD_REQUEST,
        )

    # Most specific first
    for exc_class, status_code in _STATUS_MAP.items():
        if isinstance(exc, exc_class):
            logger.warning(
                "Ledger exception [%s] in %s: %s",
                type(exc).__name__,
                context.get("view", "unknown"),
                exc,
            )
            return Response(error_body(exc), status=status_code)

    return drf_default_handler(exc, context)
