"""URL routing for the properties domain."""

from __future__ import annotations

from django.urls import include, path  # type: ignore
from rest_framework.routers import DefaultRouter  # type: ignore

from .views import (
    AmenityViewSet,
    CommonAreaViewSet,
    ContainerViewSet,
    PropertyTypeViewSet,
    PropertyViewSet,
    UnitViewSet,
)

router = DefaultRouter()
# Prefixed routes first so "types/" or "units/" are not read as listing ids.
router.register(r"types", PropertyTypeViewSet, basename="property-type")
router.register(r"amenities", AmenityViewSet, basename="amenity")
router.register(r"common-areas", CommonAreaViewSet, basename="common-area")
router.register(r"containers", ContainerViewSet, basename="container")
router.register(r"units", UnitViewSet, basename="unit")
router.register(r"", PropertyViewSet, basename="property")

urlpatterns = [
    path("", include(router.urls)),
]
