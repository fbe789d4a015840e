"""URL routing for location master data."""

from __future__ import annotations

from django.urls import include, path  # type: ignore
from rest_framework.routers import DefaultRouter  # type: ignore

from .views import CityViewSet, DepartmentViewSet, InstitutionViewSet

router = DefaultRouter()
router.register(r"departments", DepartmentViewSet, basename="department")
router.register(r"cities", CityViewSet, basename="city")
router.register(r"institutions", InstitutionViewSet, basename="institution")

urlpatterns = [path("", include(router.urls))]
