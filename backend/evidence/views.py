"""
Evidence app ViewSets.

Architecture: Views are intentionally thin.
Every view follows the strict three-step pattern:

    1. Parse / validate input via a serializer.
    2. Delegate the ledger round trip to ``TransactionMediator``.
    3. Serialize the result and return a DRF ``Response``.

Ledger errors are not caught here; ``ledger_exception_handler`` turns
them into ``{"error": ...}`` envelopes.

The mediator is injected: ``EvidenceViewSet.as_view(..., mediator=m)``
wins, otherwise the one installed on ``LedgerAppConfig`` at boot is used.
"""

from __future__ import annotations

from django.apps import apps
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import ParseError
from rest_framework.permissions import AllowAny
from rest_framework.request import Request
from rest_framework.response import Response

from drf_spectacular.utils import OpenApiResponse, extend_schema

from core.domain.exception_handler import INVALID_INPUT_MESSAGE
from core.domain.exceptions import SessionUnavailable
from ledger.mediator import TransactionMediator

from .serializers import (
    AddEvidenceResponseSerializer,
    ErrorSerializer,
    EvidenceCreateSerializer,
    EvidenceRecordSerializer,
    MessageSerializer,
    StatusUpdateSerializer,
)

_LEDGER_ERROR = OpenApiResponse(response=ErrorSerializer, description="Ledger call failed.")
_INVALID_INPUT = OpenApiResponse(response=ErrorSerializer, description="Malformed body.")


def _request_body(request: Request):
    """Parsed JSON body; an empty body is not JSON and is rejected."""
    if request.stream is None:
        raise ParseError("Empty request body.")
    return request.data


def _invalid_input() -> Response:
    return Response({"error": INVALID_INPUT_MESSAGE}, status=status.HTTP_400_BAD_REQUEST)


class EvidenceViewSet(viewsets.ViewSet):
    """
    Evidence endpoints backed by the ledger.

    Uses ``viewsets.ViewSet`` so every action is explicitly defined; there
    is no list, delete or partial update.
    """

    permission_classes = [AllowAny]
    lookup_value_regex = r"[^/]+"

    #: Injected ``TransactionMediator``; falls back to ``LedgerAppConfig``.
    mediator: TransactionMediator | None = None

    def get_mediator(self) -> TransactionMediator:
        mediator = self.mediator or apps.get_app_config("ledger").mediator
        if mediator is None:
            raise SessionUnavailable()
        return mediator

    @extend_schema(
        summary="Register evidence",
        description=(
            "Submit `AddEvidence` to the ledger. Returns the caller's `cid` and the "
            "transaction handle reported by the ledger. Not retried on failure."
        ),
        request=EvidenceCreateSerializer,
        responses={
            201: OpenApiResponse(response=AddEvidenceResponseSerializer, description="Evidence added."),
            400: _INVALID_INPUT,
            500: _LEDGER_ERROR,
        },
        tags=["Evidence"],
    )
    def create(self, request: Request) -> Response:
        """POST /evidence — Register evidence on the ledger."""
        serializer = EvidenceCreateSerializer(data=_request_body(request))
        if not serializer.is_valid():
            return _invalid_input()

        result = self.get_mediator().add_evidence(serializer.to_fields())

        response_serializer = AddEvidenceResponseSerializer({
            "message": "Evidence added successfully",
            "cid": result.cid,
            "tx_hash": result.tx_hash,
        })
        return Response(response_serializer.data, status=status.HTTP_201_CREATED)

    @extend_schema(
        summary="Retrieve evidence",
        description=(
            "Evaluate `GetEvidence` on the ledger. An undecodable payload is returned "
            "as `raw` alongside the error."
        ),
        responses={
            200: OpenApiResponse(response=EvidenceRecordSerializer, description="Evidence record."),
            500: _LEDGER_ERROR,
        },
        tags=["Evidence"],
    )
    def retrieve(self, request: Request, pk: str = None) -> Response:
        """GET /evidence/{id} — Evidence record from the ledger."""
        record = self.get_mediator().get_evidence(pk)
        serializer = EvidenceRecordSerializer(record)
        return Response(serializer.data, status=status.HTTP_200_OK)

    @action(detail=True, methods=["put"], url_path="status")
    @extend_schema(
        summary="Update evidence status",
        description="Submit `UpdateStatus` to the ledger. Transition rules are enforced by the contract.",
        request=StatusUpdateSerializer,
        responses={
            200: OpenApiResponse(response=MessageSerializer, description="Status updated."),
            400: _INVALID_INPUT,
            500: _LEDGER_ERROR,
        },
        tags=["Evidence"],
    )
    def update_status(self, request: Request, pk: str = None) -> Response:
        """PUT /evidence/{id}/status — Update evidence status."""
        serializer = StatusUpdateSerializer(data=_request_body(request))
        if not serializer.is_valid():
            return _invalid_input()

        self.get_mediator().update_status(pk, serializer.validated_data["status"])

        response_serializer = MessageSerializer({"message": "Status updated successfully"})
        return Response(response_serializer.data, status=status.HTTP_200_OK)
