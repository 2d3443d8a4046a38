"""
Evidence app URL configuration.

All routes are unprefixed and carry no trailing slash (included from
``backend.urls``).

Route Hierarchy
---------------
  POST /evidence                  → register evidence   (submit AddEvidence)
  GET  /evidence/{id}             → retrieve record     (evaluate GetEvidence)
  PUT  /evidence/{id}/status      → update status       (submit UpdateStatus)
"""

from rest_framework.routers import SimpleRouter

from .views import EvidenceViewSet

router = SimpleRouter(trailing_slash=False)
router.register(
    prefix=r"evidence",
    viewset=EvidenceViewSet,
    basename="evidence",
)

urlpatterns = router.urls
