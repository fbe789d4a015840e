"""URL routing for the back office."""

from __future__ import annotations

from django.urls import include, path  # type: ignore
from rest_framework.routers import DefaultRouter  # type: ignore

from .views import ActivityLogViewSet, DashboardView, SystemConfigView

router = DefaultRouter()
router.register(r"activity", ActivityLogViewSet, basename="activity")

urlpatterns = [
    path("dashboard/", DashboardView.as_view(), name="dashboard"),
    path("config/", SystemConfigView.as_view(), name="config"),
    path("", include(router.urls)),
]
