"""
ledger.session — Network Session Establisher.

Builds exactly one long-lived ``LedgerSession`` bound to one identity,
one channel and one contract.  Establishment is a single upfront step
run at boot; every failure surfaces as a ``SessionEstablishmentError``
subclass and is fatal to startup.

Steps
-----
1. Load network configuration            → ``ConfigLoadFailed``
2. Generate the connection profile if
   it does not exist yet                 → ``ConnectionMetadataGenerationFailed``
3. Open the wallet                       → ``WalletOpenFailed``
4. Resolve the submitting identity       → ``IdentityNotFound``
5. Connect the gateway                   → ``GatewayConnectFailed``
6. Resolve the channel, bind the contract → ``ChannelResolutionFailed``
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Sequence

import yaml
from django.utils.module_loading import import_string

from core.domain.exceptions import GatewayConnectFailed

from .identity import FileSystemWallet, Identity, resolve_identity
from .profile import (
    ConnectionProfileGenerator,
    get_ledger_settings,
    load_network_config,
    read_connection_profile,
)

logger = logging.getLogger(__name__)


class LedgerSession:
    """
    Authenticated binding ``{identity, channel, contract}``.

    Immutable after construction and shared read-only by every request
    thread.  Concurrency safety of the underlying contract object is the
    gateway client's responsibility (``RestGateway`` keeps one HTTP
    session per thread).
    """

    def __init__(
        self,
        contract: Any,
        *,
        identity: Identity,
        channel: str,
        contract_name: str,
        gateway: Any = None,
    ) -> None:
        self._contract = contract
        self._gateway = gateway
        self.identity = identity
        self.channel = channel
        self.contract_name = contract_name

    def __repr__(self) -> str:
        return (
            f"<LedgerSession identity={self.identity.label!r} "
            f"channel={self.channel!r} contract={self.contract_name!r}>"
        )

    def submit(self, operation: str, args: Sequence[str]) -> bytes:
        """State-mutating, ordering-sensitive invocation."""
        return self._contract.submit_transaction(operation, *args)

    def evaluate(self, operation: str, args: Sequence[str]) -> bytes:
        """Read-only invocation."""
        return self._contract.evaluate_transaction(operation, *args)

    def close(self) -> None:
        if self._gateway is not None and hasattr(self._gateway, "close"):
            self._gateway.close()


def establish_session(
    options: Mapping[str, Any] | None = None,
    *,
    gateway_class: Any = None,
) -> LedgerSession:
    """
    Build the process-wide ``LedgerSession``.

    ``options`` overrides the ``LEDGER`` settings block; ``gateway_class``
    overrides ``LEDGER["GATEWAY_CLASS"]`` (any class exposing
    ``connect(profile, identity)``).
    """
    options = get_ledger_settings(options)
    config = load_network_config(options)

    if not config.connection_profile_path.exists():
        logger.info("Connection file not found, generating...")
        ConnectionProfileGenerator(options).generate(config.connection_profile_path)

    wallet = FileSystemWallet(config.wallet_path)
    logger.info("Wallet opened at %s", config.wallet_path)

    identity = resolve_identity(wallet, options["IDENTITY_LABEL"])

    try:
        profile = read_connection_profile(config.connection_profile_path)
    except (OSError, ValueError, yaml.YAMLError) as exc:
        raise GatewayConnectFailed(f"failed to connect to gateway: {exc}") from exc

    if gateway_class is None:
        gateway_class = import_string(options["GATEWAY_CLASS"])
    gateway = gateway_class.connect(profile, identity)

    network = gateway.get_network(config.channel)
    contract = network.get_contract(options["CONTRACT_NAME"])

    session = LedgerSession(
        contract,
        identity=identity,
        channel=config.channel,
        contract_name=options["CONTRACT_NAME"],
        gateway=gateway,
    )
    logger.info("Ledger session established: %r", session)
    return session
