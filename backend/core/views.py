"""
Core app views — **Thin Views**.

Only the health check lives here.  It never touches the ledger session,
so it reports success regardless of ledger connectivity.
"""

from __future__ import annotations

from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from drf_spectacular.utils import OpenApiResponse, extend_schema

from .serializers import HealthSerializer


class HealthCheckView(APIView):
    """
    **GET /health**

    Liveness probe for the API process.

    **Response** (``200 OK``)::

        {"status": "ok", "message": "API is running"}
    """

    permission_classes = [AllowAny]
    authentication_classes = []

    @extend_schema(
        summary="Health check",
        description="Report that the API process is up. Does not contact the ledger.",
        responses={200: OpenApiResponse(response=HealthSerializer, description="API is running.")},
        tags=["Health"],
    )
    def get(self, request: Request) -> Response:
        serializer = HealthSerializer({"status": "ok", "message": "API is running"})
        return Response(serializer.data, status=status.HTTP_200_OK)
