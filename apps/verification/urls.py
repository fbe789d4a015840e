"""URL routing for identity verification."""

from __future__ import annotations

from django.urls import include, path  # type: ignore
from rest_framework.routers import DefaultRouter  # type: ignore

from .views import VerificationViewSet

router = DefaultRouter()
router.register(r"", VerificationViewSet, basename="verification")

urlpatterns = [
    path("", include(router.urls)),
]
