"""
Evidence app serializers.

Request/Response translation for the evidence API.  Serializers handle
field definitions and structural validation only.  **No ledger calls live
here**; those belong in ``ledger.mediator``.

JSON typing is strict: a string field accepts only JSON strings, an
integer field only JSON integers, a boolean field only ``true``/``false``.
DRF's usual coercion (``"42"`` → 42, ``1`` → True, 42 → ``"42"``) would
let wrongly-typed bodies reach the ledger.

Structure
---------
1. Strict field types
2. Request serializers (add evidence, update status)
3. Response serializers (record, add result, message, error)
"""

from __future__ import annotations

from typing import Any

from rest_framework import serializers

from ledger.mediator import EvidenceFields

#: Largest value the contract's 64-bit size parser accepts.
MAX_FILE_SIZE = 2**63 - 1


# ═══════════════════════════════════════════════════════════════════
#  1. Strict field types
# ═══════════════════════════════════════════════════════════════════


class StrictCharField(serializers.CharField):
    """Accepts JSON strings only; content is passed through untrimmed."""

    default_error_messages = {
        "invalid": "Not a valid string.",
    }

    def __init__(self, **kwargs: Any) -> None:
        kwargs.setdefault("allow_blank", True)
        kwargs.setdefault("trim_whitespace", False)
        super().__init__(**kwargs)

    def to_internal_value(self, data: Any) -> str:
        if not isinstance(data, str):
            self.fail("invalid")
        return super().to_internal_value(data)


class StrictIntegerField(serializers.IntegerField):
    """Accepts JSON integers only (no booleans, floats or numeric strings)."""

    def to_internal_value(self, data: Any) -> int:
        if isinstance(data, bool) or not isinstance(data, int):
            self.fail("invalid")
        return super().to_internal_value(data)


class StrictBooleanField(serializers.BooleanField):
    """Accepts JSON ``true`` / ``false`` only."""

    def to_internal_value(self, data: Any) -> bool:
        if not isinstance(data, bool):
            self.fail("invalid")
        return data


# ═══════════════════════════════════════════════════════════════════
#  2. Request serializers
# ═══════════════════════════════════════════════════════════════════


class EvidenceCreateSerializer(serializers.Serializer):
    """
    Body of ``POST /evidence``.

    Absent fields take zero values (``""``, ``0``, ``false``); ``null`` and
    wrongly-typed values are rejected.  ``fileSize`` must lie within
    ``0 .. 2**63-1``.
    """

    name = StrictCharField(required=False, default="")
    description = StrictCharField(required=False, default="")
    caseId = StrictCharField(required=False, default="")
    collectedBy = StrictCharField(required=False, default="")
    collectionTimestamp = StrictCharField(required=False, default="")
    location = StrictCharField(required=False, default="")
    cid = StrictCharField(required=False, default="", help_text="Content identifier of the stored file.")
    fileSize = StrictIntegerField(
        required=False,
        default=0,
        min_value=0,
        max_value=MAX_FILE_SIZE,
        help_text="File size in bytes.",
    )
    fileType = StrictCharField(required=False, default="")
    checksum = StrictCharField(required=False, default="")
    passwordProtected = StrictBooleanField(required=False, default=False)

    def to_fields(self) -> EvidenceFields:
        """Convert validated data into the mediator's input shape."""
        data = self.validated_data
        return EvidenceFields(
            name=data["name"],
            description=data["description"],
            case_id=data["caseId"],
            collected_by=data["collectedBy"],
            collection_timestamp=data["collectionTimestamp"],
            location=data["location"],
            cid=data["cid"],
            file_size=data["fileSize"],
            file_type=data["fileType"],
            checksum=data["checksum"],
            password_protected=data["passwordProtected"],
        )


class StatusUpdateSerializer(serializers.Serializer):
    """Body of ``PUT /evidence/<id>/status``; transitions are the contract's call."""

    status = StrictCharField(required=False, default="")


# ═══════════════════════════════════════════════════════════════════
#  3. Response serializers
# ═══════════════════════════════════════════════════════════════════


class EvidenceRecordSerializer(serializers.Serializer):
    """Evidence record as decoded from the ledger."""

    id = serializers.CharField(read_only=True, help_text="Ledger-assigned identifier (when supplied).")
    name = serializers.CharField(read_only=True)
    description = serializers.CharField(read_only=True)
    caseId = serializers.CharField(read_only=True)
    collectedBy = serializers.CharField(read_only=True)
    collectionTimestamp = serializers.CharField(read_only=True)
    location = serializers.CharField(read_only=True)
    cid = serializers.CharField(read_only=True)
    fileSize = serializers.IntegerField(read_only=True)
    fileType = serializers.CharField(read_only=True)
    checksum = serializers.CharField(read_only=True)
    passwordProtected = serializers.BooleanField(read_only=True)


class AddEvidenceResponseSerializer(serializers.Serializer):
    message = serializers.CharField(read_only=True)
    cid = serializers.CharField(read_only=True)
    txHash = serializers.CharField(read_only=True, source="tx_hash")


class MessageSerializer(serializers.Serializer):
    message = serializers.CharField(read_only=True)


class ErrorSerializer(serializers.Serializer):
    error = serializers.CharField(read_only=True)
    raw = serializers.CharField(
        read_only=True,
        help_text="Undecodable ledger payload (decode failures only).",
    )
