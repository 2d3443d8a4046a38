"""
ledger.profile — Network configuration and connection-metadata provider.

Two collaborators live here:

``load_network_config``
    Resolves the wallet path, connection-profile path and channel from the
    ``LEDGER`` settings block.

``ConnectionProfileGenerator``
    Writes a connection profile (YAML) from the organisation, peer and
    gateway settings.  Used once at boot when the profile is missing, or
    on demand via ``REGENERATE_CONFIG`` / ``manage.py
    generate_connection_profile``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

import yaml
from django.conf import settings

from core.domain.exceptions import ConfigLoadFailed, ConnectionMetadataGenerationFailed

logger = logging.getLogger(__name__)

DEFAULTS: dict[str, Any] = {
    "IDENTITY_LABEL": "appUser",
    "CONTRACT_NAME": "evidencecc",
    "CHANNEL": "mychannel",
    "WALLET_PATH": "wallet",
    "CONNECTION_PROFILE": "connection-profile.yaml",
    "ORGANIZATION": "Org1",
    "MSP_ID": "Org1MSP",
    "PEER_NAME": "peer0.org1.example.com",
    "PEER_URL": "grpcs://localhost:7051",
    "GATEWAY_URL": "http://localhost:8080",
    "GATEWAY_TIMEOUT": 300,
    "TLS_CERT_PATH": "",
    "REGENERATE_CONFIG": False,
    "GATEWAY_CLASS": "ledger.gateway.RestGateway",
}


def get_ledger_settings(overrides: Mapping[str, Any] | None = None) -> dict[str, Any]:
    """
    Return the effective ``LEDGER`` settings block.

    Empty values fall back to ``DEFAULTS`` for the identity label and the
    contract name, mirroring the "unset means default" environment rules.
    """
    options = dict(DEFAULTS)
    options.update(getattr(settings, "LEDGER", {}))
    if overrides:
        options.update(overrides)
    for key in ("IDENTITY_LABEL", "CONTRACT_NAME"):
        if not options.get(key):
            options[key] = DEFAULTS[key]
    return options


@dataclass(frozen=True)
class NetworkConfig:
    wallet_path: Path
    connection_profile_path: Path
    channel: str


def load_network_config(options: Mapping[str, Any] | None = None) -> NetworkConfig:
    """Resolve the network configuration; every value must be non-empty."""
    options = options if options is not None else get_ledger_settings()

    missing = [
        key
        for key in ("WALLET_PATH", "CONNECTION_PROFILE", "CHANNEL")
        if not str(options.get(key) or "").strip()
    ]
    if missing:
        raise ConfigLoadFailed(
            f"failed to load config: missing {', '.join(missing)}"
        )

    return NetworkConfig(
        wallet_path=Path(options["WALLET_PATH"]),
        connection_profile_path=Path(options["CONNECTION_PROFILE"]),
        channel=str(options["CHANNEL"]).strip(),
    )


def read_connection_profile(path: Path) -> dict[str, Any]:
    """Parse a YAML (or JSON) connection profile into a mapping."""
    with open(path, encoding="utf-8") as fh:
        profile = yaml.safe_load(fh)
    if not isinstance(profile, dict):
        raise ValueError(f"connection profile {path} is not a mapping")
    return profile


class ConnectionProfileGenerator:
    """
    Render a single-organisation connection profile.

    The layout follows the common Fabric connection-profile shape
    (``client`` / ``organizations`` / ``peers``) with a ``client.gateway``
    block naming the REST gateway used by ``ledger.gateway.RestGateway``.
    """

    def __init__(self, options: Mapping[str, Any] | None = None) -> None:
        self.options = options if options is not None else get_ledger_settings()

    def build(self) -> dict[str, Any]:
        opts = self.options
        organization = opts["ORGANIZATION"]
        peer_name = opts["PEER_NAME"]

        peer: dict[str, Any] = {
            "url": opts["PEER_URL"],
            "grpcOptions": {"ssl-target-name-override": peer_name},
        }
        tls_cert_path = opts.get("TLS_CERT_PATH")
        if tls_cert_path:
            peer["tlsCACerts"] = {"pem": Path(tls_cert_path).read_text(encoding="utf-8")}

        return {
            "name": f"{organization.lower()}-network",
            "version": "1.0.0",
            "client": {
                "organization": organization,
                "gateway": {
                    "url": opts["GATEWAY_URL"],
                    "timeout": int(opts["GATEWAY_TIMEOUT"]),
                },
            },
            "organizations": {
                organization: {
                    "mspid": opts["MSP_ID"],
                    "peers": [peer_name],
                },
            },
            "peers": {peer_name: peer},
        }

    def generate(self, path: Path | None = None) -> Path:
        """
        Write the profile to ``path`` (default: the configured location).

        Raises ``ConnectionMetadataGenerationFailed`` on any failure.
        """
        if path is None:
            path = Path(self.options["CONNECTION_PROFILE"])
        try:
            profile = self.build()
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, "w", encoding="utf-8") as fh:
                yaml.safe_dump(profile, fh, sort_keys=False)
        except (OSError, ValueError, KeyError) as exc:
            raise ConnectionMetadataGenerationFailed(
                f"failed to generate connection profile: {exc}"
            ) from exc

        logger.info("Connection profile written to %s", path)
        return path
