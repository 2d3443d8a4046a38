"""
Core app URL configuration.

Endpoint summary
----------------
GET  /health    — Liveness probe (never touches the ledger session).
"""

from django.urls import path

from . import views

app_name = "core"

urlpatterns = [
    path(
        "health",
        views.HealthCheckView.as_view(),
        name="health",
    ),
]
