"""
ledger.gateway — Ledger gateway client over a Fabric REST gateway.

Object graph mirrors the Fabric gateway SDKs::

    gateway  = RestGateway.connect(profile, identity)
    network  = gateway.get_network("mychannel")
    contract = network.get_contract("evidencecc")
    contract.submit_transaction("AddEvidence", "log.txt", ...)   # -> bytes
    contract.evaluate_transaction("GetEvidence", "E1")          # -> bytes

Wire contract with the gateway sidecar
--------------------------------------
``GET  {url}/channels/{channel}``                                channel lookup
``POST {url}/channels/{channel}/contracts/{name}/submit``        ordered, durable
``POST {url}/channels/{channel}/contracts/{name}/evaluate``      read-only

Transaction bodies are ``{"function": <name>, "args": [<str>, ...]}``; the
response body is returned untouched.  The submitting identity travels in
the ``X-Fabric-Identity`` / ``X-Fabric-MSPID`` headers.

``requests.Session`` is not documented as thread-safe, so each request
borrows a session from a small pool and returns it when the response has
been read.  Idle sessions keep their connections alive for reuse.
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Any, Iterator, Mapping
from urllib.parse import quote

import requests

from core.domain.exceptions import ChannelResolutionFailed, GatewayConnectFailed, LedgerCallError

from .identity import Identity

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 300.0
POOL_SIZE = 10


class RestGateway:
    """Connection to a REST gateway on behalf of one identity."""

    def __init__(self, base_url: str, identity: Identity, timeout: float = DEFAULT_TIMEOUT) -> None:
        self.base_url = base_url.rstrip("/")
        self.identity = identity
        self.timeout = timeout
        self._lock = threading.Lock()
        self._idle: list[requests.Session] = []
        self._closed = False

    @classmethod
    def connect(cls, profile: Mapping[str, Any], identity: Identity) -> "RestGateway":
        """
        Validate the connection profile and bind it to ``identity``.

        No network traffic happens here; reachability is proven by
        ``get_network``.
        """
        client = profile.get("client") or {}
        gateway = (client.get("gateway") or {}) if isinstance(client, Mapping) else None
        if not isinstance(gateway, Mapping):
            raise GatewayConnectFailed(
                "failed to connect to gateway: malformed client.gateway block"
            )
        base_url = gateway.get("url")
        if not base_url:
            raise GatewayConnectFailed(
                "failed to connect to gateway: connection profile has no client.gateway.url"
            )
        try:
            timeout = float(gateway.get("timeout", DEFAULT_TIMEOUT))
        except (TypeError, ValueError) as exc:
            raise GatewayConnectFailed(
                f"failed to connect to gateway: invalid timeout: {exc}"
            ) from exc

        logger.info("Gateway %s bound to identity %s", base_url, identity.label)
        return cls(base_url, identity, timeout)

    @contextmanager
    def checkout(self) -> Iterator[requests.Session]:
        """
        Borrow an HTTP session for one request.

        A borrowed session is used by one thread at a time.  Up to
        ``POOL_SIZE`` idle sessions are kept for reuse; the rest are closed
        on return.
        """
        with self._lock:
            session = self._idle.pop() if self._idle else None
        if session is None:
            session = requests.Session()
            session.headers.update({
                "X-Fabric-Identity": self.identity.label,
                "X-Fabric-MSPID": self.identity.msp_id,
            })
        try:
            yield session
        finally:
            with self._lock:
                keep = not self._closed and len(self._idle) < POOL_SIZE
                if keep:
                    self._idle.append(session)
            if not keep:
                session.close()

    def request(self, method: str, path: str, **kwargs: Any) -> requests.Response:
        kwargs.setdefault("timeout", self.timeout)
        with self.checkout() as session:
            return session.request(method, f"{self.base_url}{path}", **kwargs)

    def get_network(self, channel: str) -> "Network":
        try:
            response = self.request("GET", f"/channels/{quote(channel, safe='')}")
        except requests.RequestException as exc:
            raise ChannelResolutionFailed(f"failed to get network: {exc}") from exc
        if not response.ok:
            raise ChannelResolutionFailed(
                f"failed to get network: {_error_text(response)}"
            )
        return Network(self, channel)

    def close(self) -> None:
        """Close idle sessions; sessions still on loan are closed when returned."""
        with self._lock:
            self._closed = True
            idle, self._idle = self._idle, []
        for session in idle:
            session.close()


class Network:
    def __init__(self, gateway: RestGateway, name: str) -> None:
        self.gateway = gateway
        self.name = name

    def get_contract(self, name: str) -> "Contract":
        return Contract(self, name)


class Contract:
    def __init__(self, network: Network, name: str) -> None:
        self.network = network
        self.name = name

    def _path(self, mode: str) -> str:
        return (
            f"/channels/{quote(self.network.name, safe='')}"
            f"/contracts/{quote(self.name, safe='')}/{mode}"
        )

    def _invoke(self, mode: str, function: str, args: tuple[str, ...]) -> bytes:
        try:
            response = self.network.gateway.request(
                "POST",
                self._path(mode),
                json={"function": function, "args": list(args)},
            )
        except requests.RequestException as exc:
            raise LedgerCallError(str(exc), operation=function) from exc
        if not response.ok:
            raise LedgerCallError(_error_text(response), operation=function)
        return response.content

    def submit_transaction(self, function: str, *args: str) -> bytes:
        return self._invoke("submit", function, args)

    def evaluate_transaction(self, function: str, *args: str) -> bytes:
        return self._invoke("evaluate", function, args)


def _error_text(response: requests.Response) -> str:
    text = response.text.strip()
    return text or f"{response.status_code} {response.reason}"
