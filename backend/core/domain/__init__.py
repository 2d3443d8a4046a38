"""
core.domain — Shared domain utilities for the ledger and evidence apps.

Modules
-------
exceptions          Ledger-facing exceptions that map cleanly to HTTP responses.
exception_handler   DRF exception handler producing the ``{"error": ...}`` envelope.

Usage from any app::

    from core.domain.exceptions import LedgerCallError, PayloadDecodeError
"""
