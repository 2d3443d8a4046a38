"""
URL configuration for the evidence ledger API.

Routes are unprefixed and carry no trailing slash::

    GET  /health
    POST /evidence
    GET  /evidence/<id>
    PUT  /evidence/<id>/status
"""
from django.urls import include, path

from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView

urlpatterns = [
    # ── App routes ───────────────────────────────────────────────────
    path('', include('core.urls')),
    path('', include('evidence.urls')),

    # ── Swagger / OpenAPI schema ─────────────────────────────────────
    path('schema', SpectacularAPIView.as_view(), name='schema'),
    path('docs', SpectacularSwaggerView.as_view(url_name='schema'), name='swagger-ui'),
]
