"""
core.domain.exceptions — Ledger-facing exception hierarchy.

These exceptions describe failures of the ledger mediation layer.  They
are deliberately **not** DRF exceptions so that ``ledger`` stays
framework-agnostic.  The global DRF exception handler in
``core.domain.exception_handler`` maps them to HTTP responses.

Mapping cheatsheet
------------------
┌──────────────────────────────┬──────────────────────────────┬──────┐
│ Exception                    │ Meaning                      │ Code │
├──────────────────────────────┼──────────────────────────────┼──────┤
│ SessionEstablishmentError    │ startup-fatal, never served  │  —   │
│ LedgerCallError              │ submit / evaluate failed     │ 500  │
│ PayloadDecodeError           │ evaluate payload unparseable │ 500  │
│ SessionUnavailable           │ no session installed         │ 503  │
└──────────────────────────────┴──────────────────────────────┴──────┘

Startup-fatal subclasses (raised only while establishing the session)::

    ConfigLoadFailed
    ConnectionMetadataGenerationFailed
    WalletOpenFailed
    IdentityNotFound
    GatewayConnectFailed
    ChannelResolutionFailed
"""

from __future__ import annotations


class LedgerError(Exception):
    """
    Base class for every error raised by the ledger mediation layer.

    ``message`` is kept verbatim; upstream text is never rewritten.
    """

    def __init__(self, message: str = "A ledger operation failed.") -> None:
        self.message = message
        super().__init__(self.message)


# ════════════════════════════════════════════════════════════════════
#  Startup-fatal errors
# ════════════════════════════════════════════════════════════════════


class SessionEstablishmentError(LedgerError):
    """
    The ledger session could not be built.

    Fatal at boot: the process logs it and exits instead of serving
    traffic with a half-established session.
    """


class ConfigLoadFailed(SessionEstablishmentError):
    """Network configuration (wallet path, profile path, channel) is unusable."""


class ConnectionMetadataGenerationFailed(SessionEstablishmentError):
    """The connection profile was missing and could not be generated."""


class WalletOpenFailed(SessionEstablishmentError):
    """The credential store directory could not be opened or created."""


class IdentityNotFound(SessionEstablishmentError):
    """
    No credential exists for the configured identity label.

    Requires out-of-band provisioning, so it is never retried.
    """

    def __init__(self, label: str, message: str | None = None) -> None:
        if message is None:
            message = f"identity {label} not found in wallet, run setup script first"
        super().__init__(message)
        self.label = label


class GatewayConnectFailed(SessionEstablishmentError):
    """The gateway client refused the connection profile or identity."""


class ChannelResolutionFailed(SessionEstablishmentError):
    """The configured channel could not be resolved on the network."""


# ════════════════════════════════════════════════════════════════════
#  Per-request errors
# ════════════════════════════════════════════════════════════════════


class LedgerCallError(LedgerError):
    """
    A ``submit`` or ``evaluate`` round trip failed.

    The outcome of a failed submission is unknown; callers must not retry
    it blindly (see ``ledger.mediator``).
    """

    def __init__(self, message: str, *, operation: str | None = None) -> None:
        super().__init__(message)
        self.operation = operation


class PayloadDecodeError(LedgerError):
    """
    An evaluation succeeded but its payload did not decode into the
    expected shape.  ``raw`` holds the payload for diagnosis.
    """

    def __init__(self, raw: str, message: str = "Failed to parse response") -> None:
        super().__init__(message)
        self.raw = raw


class SessionUnavailable(LedgerError):
    """A request arrived before a ledger session was installed."""

    def __init__(self, message: str = "Ledger session is not established") -> None:
        super().__init__(message)
