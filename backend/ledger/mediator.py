"""
ledger.mediator — Transaction Mediator.

The sole path by which evidence operations reach the ledger.  Each call is
one stateless round trip on the shared ``LedgerSession``:

    add_evidence   →  submit("AddEvidence",  <10 positional args>)
    get_evidence   →  evaluate("GetEvidence", [id])
    update_status  →  submit("UpdateStatus", [id, status])

Argument ABI
------------
Arguments are strings.  Their order and textual form are a wire contract
with the deployed contract logic and change only with a coordinated
contract upgrade:

    0 name   1 description   2 caseId   3 collectedBy
    4 collectionTimestamp    5 location 6 cid
    7 fileSize            base-10, no leading zeros or separators
    8 checksum
    9 passwordProtected   literal "true" / "false"

``fileType`` is part of the record but is not sent with ``AddEvidence``.

Delivery semantics
------------------
At most once.  A failed submission may or may not have been committed, so
it is surfaced to the caller and never retried here; retries would need
idempotency keys agreed with the contract.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Protocol, Sequence

from core.domain.exceptions import LedgerCallError, PayloadDecodeError

logger = logging.getLogger(__name__)

ADD_EVIDENCE = "AddEvidence"
GET_EVIDENCE = "GetEvidence"
UPDATE_STATUS = "UpdateStatus"


class Session(Protocol):
    def submit(self, operation: str, args: Sequence[str]) -> bytes: ...

    def evaluate(self, operation: str, args: Sequence[str]) -> bytes: ...


@dataclass(frozen=True)
class EvidenceFields:
    """Evidence record fields supplied by a client (the ledger assigns the id)."""

    name: str = ""
    description: str = ""
    case_id: str = ""
    collected_by: str = ""
    collection_timestamp: str = ""
    location: str = ""
    cid: str = ""
    file_size: int = 0
    file_type: str = ""
    checksum: str = ""
    password_protected: bool = False


@dataclass(frozen=True)
class TransactionRequest:
    operation: str
    args: tuple[str, ...]


@dataclass(frozen=True)
class AddEvidenceResult:
    cid: str
    tx_hash: str


# ════════════════════════════════════════════════════════════════════
#  Argument serialization
# ════════════════════════════════════════════════════════════════════


def render_int(value: int) -> str:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"expected int, got {type(value).__name__}")
    return str(value)


def render_bool(value: bool) -> str:
    if not isinstance(value, bool):
        raise TypeError(f"expected bool, got {type(value).__name__}")
    return "true" if value else "false"


def add_evidence_request(fields: EvidenceFields) -> TransactionRequest:
    return TransactionRequest(
        ADD_EVIDENCE,
        (
            fields.name,
            fields.description,
            fields.case_id,
            fields.collected_by,
            fields.collection_timestamp,
            fields.location,
            fields.cid,
            render_int(fields.file_size),
            fields.checksum,
            render_bool(fields.password_protected),
        ),
    )


def get_evidence_request(evidence_id: str) -> TransactionRequest:
    return TransactionRequest(GET_EVIDENCE, (evidence_id,))


def update_status_request(evidence_id: str, status: str) -> TransactionRequest:
    return TransactionRequest(UPDATE_STATUS, (evidence_id, status))


# ════════════════════════════════════════════════════════════════════
#  Payload decoding
# ════════════════════════════════════════════════════════════════════

#: Wire key → expected JSON type for a ledger evidence record.
RECORD_FIELDS: dict[str, type] = {
    "name": str,
    "description": str,
    "caseId": str,
    "collectedBy": str,
    "collectionTimestamp": str,
    "location": str,
    "cid": str,
    "fileSize": int,
    "fileType": str,
    "checksum": str,
    "passwordProtected": bool,
}

_ZERO_VALUES: dict[type, Any] = {str: "", int: 0, bool: False}


def _lookup(document: dict[str, Any], key: str) -> tuple[bool, Any]:
    # Exact key first, then a case-insensitive match.
    if key in document:
        return True, document[key]
    lowered = key.lower()
    for candidate, value in document.items():
        if candidate.lower() == lowered:
            return True, value
    return False, None


def _check_type(key: str, value: Any, expected: type) -> Any:
    if value is None:
        return _ZERO_VALUES[expected]
    if expected is int and isinstance(value, bool):
        raise ValueError(f"{key}: expected int, got bool")
    if not isinstance(value, expected):
        raise ValueError(f"{key}: expected {expected.__name__}, got {type(value).__name__}")
    return value


def decode_evidence_record(payload: bytes) -> dict[str, Any]:
    """
    Decode an evaluate payload into an EvidenceRecord-shaped dict.

    Missing fields take zero values and unknown keys are dropped; ``id`` is
    kept only when the ledger sends it as a string.  Any other mismatch
    raises ``PayloadDecodeError`` carrying the raw text.
    """
    raw = payload.decode("utf-8", errors="replace")
    try:
        document = json.loads(payload)
        if not isinstance(document, dict):
            raise ValueError(f"expected object, got {type(document).__name__}")

        record: dict[str, Any] = {}
        found, value = _lookup(document, "id")
        if found and isinstance(value, str):
            record["id"] = value
        for key, expected in RECORD_FIELDS.items():
            found, value = _lookup(document, key)
            record[key] = _check_type(key, value, expected) if found else _ZERO_VALUES[expected]
    except ValueError as exc:
        # json.JSONDecodeError and UnicodeDecodeError are ValueErrors too.
        logger.warning("Undecodable %s payload (%s): %r", GET_EVIDENCE, exc, raw)
        raise PayloadDecodeError(raw) from exc
    return record


# ════════════════════════════════════════════════════════════════════
#  Mediator
# ════════════════════════════════════════════════════════════════════


class TransactionMediator:
    """
    Maps evidence operations onto ``submit`` / ``evaluate`` calls.

    Holds no mutable state; one instance serves every request thread.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def _call(self, mode: str, request: TransactionRequest) -> bytes:
        invoke = self.session.submit if mode == "submit" else self.session.evaluate
        try:
            return invoke(request.operation, list(request.args))
        except LedgerCallError:
            logger.warning("%s %s failed", mode.capitalize(), request.operation)
            raise
        except Exception as exc:
            # Foreign client errors are surfaced with their text unchanged.
            logger.warning("%s %s failed: %s", mode.capitalize(), request.operation, exc)
            raise LedgerCallError(str(exc), operation=request.operation) from exc

    def add_evidence(self, fields: EvidenceFields) -> AddEvidenceResult:
        """Register a record; returns the caller's cid and the ledger's tx handle."""
        request = add_evidence_request(fields)
        result = self._call("submit", request)
        tx_hash = result.decode("utf-8", errors="replace")
        logger.info("Evidence %s submitted (tx %s)", fields.cid, tx_hash)
        return AddEvidenceResult(cid=fields.cid, tx_hash=tx_hash)

    def get_evidence(self, evidence_id: str) -> dict[str, Any]:
        payload = self._call("evaluate", get_evidence_request(evidence_id))
        logger.debug("Raw %s response for %s: %r", GET_EVIDENCE, evidence_id, payload)
        return decode_evidence_record(payload)

    def update_status(self, evidence_id: str, status: str) -> None:
        self._call("submit", update_status_request(evidence_id, status))
        logger.info("Status of evidence %s set to %r", evidence_id, status)
