"""URL routing for student requests."""

from __future__ import annotations

from django.urls import include, path  # type: ignore
from rest_framework.routers import DefaultRouter  # type: ignore

from .views import StudentRequestViewSet

router = DefaultRouter()
router.register(r"", StudentRequestViewSet, basename="student-request")

urlpatterns = [
    path("", include(router.urls)),
]
