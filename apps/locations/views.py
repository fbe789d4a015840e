"""Location master data API.

Reads are public because the search form and the owner registration form
need the dropdowns before login; writes are reserved to super-admins.
"""

from __future__ import annotations

import logging

from django.db.models import Count, Q  # type: ignore
from django_filters.rest_framework import DjangoFilterBackend  # type: ignore
from rest_framework import status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore

from apps.users.permissions import IsSuperAdminOrReadOnly
from shared.api.exceptions import ConflictError, delete_or_conflict
from .models import City, Department, Institution
from .serializers import CitySerializer, DepartmentSerializer, InstitutionSerializer

logger = logging.getLogger(__name__)

MIN_SEARCH_LENGTH = 2


def _search_term(request) -> str | None:
    """Return the trimmed `q` parameter, or None when it is too short to search."""
    term = (request.query_params.get("q") or "").strip()
    return term if len(term) >= MIN_SEARCH_LENGTH else None


class DepartmentViewSet(viewsets.ModelViewSet):
    serializer_class = DepartmentSerializer
    permission_classes = [IsSuperAdminOrReadOnly]
    filter_backends = [DjangoFilterBackend]
    filterset_fields = ["is_active", "code"]
    pagination_class = None

    def get_queryset(self):  # type: ignore
        return Department.objects.annotate(cities_count=Count("cities")).order_by("name")

    def perform_destroy(self, instance):  # type: ignore
        cities = instance.cities.count()
        if cities:
            raise ConflictError(
                f"El departamento tiene {cities} ciudades. Elimínelas o reasígnelas primero."
            )
        logger.info(f"Department {instance.code} deleted by {self.request.user.id}")
        delete_or_conflict(instance, "El departamento está en uso y no se puede eliminar.")

    @action(detail=True, methods=["get"], url_path="cities")
    def cities(self, request, pk=None):  # type: ignore
        department = self.get_object()
        qs = department.cities.select_related("department")
        if request.query_params.get("active") == "true":
            qs = qs.filter(is_active=True)
        return Response(CitySerializer(qs, many=True).data)


class CityViewSet(viewsets.ModelViewSet):
    serializer_class = CitySerializer
    permission_classes = [IsSuperAdminOrReadOnly]
    filter_backends = [DjangoFilterBackend]
    filterset_fields = ["department", "is_active"]
    pagination_class = None

    def get_queryset(self):  # type: ignore
        return City.objects.select_related("department").order_by("name")

    def perform_destroy(self, instance):  # type: ignore
        properties = instance.properties.count()
        if properties:
            raise ConflictError(
                f"La ciudad tiene {properties} inmuebles. Elimínelos o reasígnelos primero."
            )
        institutions = instance.institutions.count()
        if institutions:
            raise ConflictError(
                f"La ciudad tiene {institutions} instituciones. Elimínelas o reasígnelas primero."
            )
        requests = instance.student_requests.count()
        if requests:
            raise ConflictError(
                f"La ciudad tiene {requests} solicitudes de estudiantes. Elimínelas primero."
            )
        logger.info(f"City {instance.id} deleted by {self.request.user.id}")
        delete_or_conflict(instance, "La ciudad está en uso y no se puede eliminar.")

    @action(detail=False, methods=["get"], url_path="search")
    def search(self, request):  # type: ignore
        """GET /api/v1/locations/cities/search/?q=bog"""
        term = _search_term(request)
        if term is None:
            return Response([])
        qs = self.get_queryset().filter(name__icontains=term, is_active=True)[:20]
        return Response(self.get_serializer(qs, many=True).data)


class InstitutionViewSet(viewsets.ModelViewSet):
    serializer_class = InstitutionSerializer
    permission_classes = [IsSuperAdminOrReadOnly]
    filter_backends = [DjangoFilterBackend]
    filterset_fields = ["city", "type", "city__department"]
    pagination_class = None

    def get_queryset(self):  # type: ignore
        return Institution.objects.select_related("city__department").order_by("name")

    def perform_destroy(self, instance):  # type: ignore
        if instance.properties.exists() or instance.student_requests.exists():
            raise ConflictError("La institución está asociada a inmuebles o solicitudes de estudiantes.")
        delete_or_conflict(instance, "La institución está en uso y no se puede eliminar.")

    @action(detail=False, methods=["get"], url_path="search")
    def search(self, request):  # type: ignore
        """GET /api/v1/locations/institutions/search/?q=nal&city=1&type=universidad"""
        term = _search_term(request)
        if term is None:
            return Response([], status=status.HTTP_200_OK)
        qs = self.filter_queryset(self.get_queryset()).filter(
            Q(name__icontains=term) | Q(acronym__icontains=term)
        )
        return Response(self.get_serializer(qs[:20], many=True).data)
