"""Listing API views."""

from __future__ import annotations

import logging

from django.db.models import Q  # type: ignore
from django_filters.rest_framework import DjangoFilterBackend  # type: ignore
from rest_framework import mixins, permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.filters import OrderingFilter  # type: ignore
from rest_framework.response import Response  # type: ignore

from apps.locations.models import City
from apps.locations.serializers import CityShortSerializer
from apps.users.permissions import IsOwnerUser, IsPlatformAdmin, IsSuperAdminOrReadOnly, is_platform_admin
from shared.api.exceptions import ConflictError, delete_or_conflict
from . import services
from .filters import PropertyFilterSet
from .models import Amenity, CommonArea, Property, PropertyType
from .serializers import (
    AmenitySerializer,
    CommonAreaSerializer,
    ContainerSerializer,
    ContainerWriteSerializer,
    InterestSerializer,
    PropertySerializer,
    PropertyTypeSerializer,
    PropertyWriteSerializer,
    RejectSerializer,
    RentalModeSerializer,
    UnitRentalStatusSerializer,
    UnitSerializer,
    UnitWriteSerializer,
)

logger = logging.getLogger(__name__)


class IsPropertyOwnerOrAdmin(permissions.BasePermission):
    """Позволяет управлять объектом его владельцу и модераторам."""

    def has_object_permission(self, request, view, obj: Property):  # type: ignore
        if request.method in permissions.SAFE_METHODS:
            return True
        user = request.user
        if not user.is_authenticated:
            return False
        return obj.owner_id == user.id or is_platform_admin(user)


class PropertyViewSet(viewsets.ModelViewSet):
    """
    Listings.

    Public:
    - GET /api/v1/properties/ - approved listings, featured first then newest
    - GET /api/v1/properties/{id}/ - detail, counts a view
    - GET /api/v1/properties/available-cities/
    Owners:
    - POST /api/v1/properties/, PATCH/DELETE /api/v1/properties/{id}/
    - GET /api/v1/properties/mine/
    - DELETE /api/v1/properties/{id}/images/{index}/
    - POST /api/v1/properties/{id}/toggle-rented/
    Authenticated users:
    - POST /api/v1/properties/{id}/interest/
    Moderators:
    - GET /api/v1/properties/pending/
    - POST /api/v1/properties/{id}/approve/, /reject/, /toggle-featured/
    """

    queryset = Property.objects.select_related(
        "owner", "property_type", "city__department", "features"
    ).prefetch_related(
        "amenities", "images", "nearby_institutions__institution", "rules", "services", "common_areas"
    )
    filter_backends = [DjangoFilterBackend, OrderingFilter]
    filterset_class = PropertyFilterSet
    ordering_fields = ["monthly_rent", "created_at", "views_count", "bedrooms"]
    ordering = ["-is_featured", "-created_at"]
    http_method_names = ["get", "post", "patch", "delete", "head", "options"]

    def get_permissions(self):  # type: ignore
        if self.action in {"list", "retrieve", "available_cities"}:
            return [permissions.AllowAny()]
        if self.action == "create":
            return [IsOwnerUser()]
        if self.action in {"pending", "approve", "reject", "toggle_featured"}:
            return [permissions.IsAuthenticated(), IsPlatformAdmin()]
        return [permissions.IsAuthenticated(), IsPropertyOwnerOrAdmin()]

    def get_queryset(self):  # type: ignore
        qs = super().get_queryset()
        user = self.request.user
        if self.action in {"list", "available_cities", "interest"}:
            return qs.filter(status=Property.Status.APPROVED)
        if self.action == "mine":
            return qs.filter(owner=user)
        if self.action == "pending":
            return qs.filter(status=Property.Status.PENDING).order_by("submitted_at")
        if is_platform_admin(user):
            return qs
        if user.is_authenticated:
            return qs.filter(Q(status=Property.Status.APPROVED) | Q(owner=user))
        return qs.filter(status=Property.Status.APPROVED)

    def get_serializer_class(self):  # type: ignore
        if self.action in {"create", "update", "partial_update"}:
            return PropertyWriteSerializer
        return PropertySerializer

    def create(self, request, *args, **kwargs):  # type: ignore
        response = super().create(request, *args, **kwargs)
        message = "Propiedad publicada exitosamente. Será revisada por nuestro equipo."
        if response.data.get("status") == Property.Status.APPROVED:
            message = "Propiedad publicada exitosamente."
        return Response({"message": message, "property": response.data}, status=status.HTTP_201_CREATED)

    def retrieve(self, request, *args, **kwargs):  # type: ignore
        property_obj = self.get_object()
        property_obj.increment_views()
        return Response(self.get_serializer(property_obj).data)

    def perform_destroy(self, instance):  # type: ignore
        services.delete_property(instance, self.request.user)

    @action(detail=False, methods=["get"], url_path="mine")
    def mine(self, request):  # type: ignore
        qs = self.filter_queryset(self.get_queryset())
        page = self.paginate_queryset(qs)
        if page is not None:
            return self.get_paginated_response(self.get_serializer(page, many=True).data)
        return Response(self.get_serializer(qs, many=True).data)

    @action(detail=False, methods=["get"], url_path="pending")
    def pending(self, request):  # type: ignore
        qs = self.get_queryset()
        page = self.paginate_queryset(qs)
        if page is not None:
            return self.get_paginated_response(self.get_serializer(page, many=True).data)
        return Response(self.get_serializer(qs, many=True).data)

    @action(detail=False, methods=["get"], url_path="available-cities")
    def available_cities(self, request):  # type: ignore
        """Cities that currently have at least one approved listing."""
        cities = (
            City.objects.filter(properties__status=Property.Status.APPROVED)
            .select_related("department")
            .distinct()
            .order_by("name")
        )
        return Response(CityShortSerializer(cities, many=True).data)

    @action(detail=True, methods=["post"], url_path="approve")
    def approve(self, request, pk=None):  # type: ignore
        property_obj = self.get_object()
        services.approve_property(property_obj, request.user)
        return Response(
            {"message": "Inmueble aprobado.", "property": PropertySerializer(property_obj).data},
            status=status.HTTP_200_OK,
        )

    @action(detail=True, methods=["post"], url_path="reject")
    def reject(self, request, pk=None):  # type: ignore
        property_obj = self.get_object()
        serializer = RejectSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        services.reject_property(property_obj, request.user, serializer.validated_data["reason"])
        return Response(
            {"message": "Inmueble rechazado.", "property": PropertySerializer(property_obj).data},
            status=status.HTTP_200_OK,
        )

    @action(detail=True, methods=["post"], url_path="toggle-featured")
    def toggle_featured(self, request, pk=None):  # type: ignore
        property_obj = self.get_object()
        property_obj.is_featured = not property_obj.is_featured
        property_obj.save(update_fields=["is_featured", "updated_at"])
        logger.info(f"Property {property_obj.id} is_featured={property_obj.is_featured}")
        return Response(PropertySerializer(property_obj).data)

    @action(detail=True, methods=["post"], url_path="toggle-rented")
    def toggle_rented(self, request, pk=None):  # type: ignore
        property_obj = self.get_object()
        services.set_rented(property_obj, not property_obj.is_rented)
        return Response(PropertySerializer(property_obj).data)

    @action(detail=True, methods=["delete"], url_path=r"images/(?P<index>[0-9]+)")
    def delete_image(self, request, pk=None, index=None):  # type: ignore
        property_obj = self.get_object()
        try:
            services.delete_image(property_obj, int(index))
        except services.PropertyImageNotFoundError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_404_NOT_FOUND)
        except services.LastImageError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        # Reload to drop the prefetched image list.
        return Response(PropertySerializer(self.get_object()).data)

    @action(detail=True, methods=["post"], url_path="interest")
    def interest(self, request, pk=None):  # type: ignore
        property_obj = self.get_object()
        if property_obj.owner_id == request.user.id:
            return Response(
                {"detail": "No puede mostrar interés en su propio inmueble."},
                status=status.HTTP_400_BAD_REQUEST,
            )
        serializer = InterestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        services.express_interest(property_obj, request.user, serializer.validated_data.get("message", ""))
        return Response(
            {"message": "El propietario fue notificado de tu interés.", "interests_count": property_obj.interests_count},
            status=status.HTTP_200_OK,
        )


class PropertyTypeViewSet(viewsets.ModelViewSet):
    queryset = PropertyType.objects.all()
    serializer_class = PropertyTypeSerializer
    permission_classes = [IsSuperAdminOrReadOnly]
    pagination_class = None

    def perform_destroy(self, instance):  # type: ignore
        if instance.properties.exists():
            raise ConflictError("Hay inmuebles de este tipo. Reasígnelos antes de eliminarlo.")
        if instance.student_requests.exists():
            raise ConflictError("Hay solicitudes de estudiantes que buscan este tipo de inmueble.")
        delete_or_conflict(instance, "El tipo de inmueble está en uso y no se puede eliminar.")

    @action(detail=False, methods=["get"], url_path=r"by-name/(?P<name>[^/]+)")
    def by_name(self, request, name=None):  # type: ignore
        property_type = PropertyType.objects.filter(name__iexact=name).first()
        if property_type is None:
            return Response({"detail": "Tipo de inmueble no encontrado."}, status=status.HTTP_404_NOT_FOUND)
        return Response(self.get_serializer(property_type).data)


class AmenityViewSet(viewsets.ModelViewSet):
    queryset = Amenity.objects.all()
    serializer_class = AmenitySerializer
    permission_classes = [IsSuperAdminOrReadOnly]
    pagination_class = None


class CommonAreaViewSet(viewsets.ModelViewSet):
    queryset = CommonArea.objects.all()
    serializer_class = CommonAreaSerializer
    permission_classes = [IsSuperAdminOrReadOnly]
    pagination_class = None


def _visible(qs, user):  # type: ignore
    if is_platform_admin(user):
        return qs
    if user.is_authenticated:
        return qs.filter(Q(status=Property.Status.APPROVED) | Q(owner=user))
    return qs.filter(status=Property.Status.APPROVED)


class ContainerViewSet(viewsets.ModelViewSet):
    """
    Pensions and shared apartments rented complete or room by room.

    - POST /api/v1/properties/containers/ - owners; moderators may pass ``owner_id``
    - GET /api/v1/properties/containers/pending/ - moderators
    - POST /api/v1/properties/containers/{id}/rent-complete/
    - POST /api/v1/properties/containers/{id}/change-mode/ {"mode": "by_unit"}
    - POST /api/v1/properties/containers/{id}/approve/ - approves the pending rooms too
    - GET/POST /api/v1/properties/containers/{id}/units/
    """

    queryset = (
        Property.objects.filter(is_container=True)
        .select_related("owner", "property_type", "city__department", "features")
        .prefetch_related(
            "amenities",
            "images",
            "nearby_institutions__institution",
            "rules",
            "services",
            "common_areas",
            "units__images",
            "units__amenities",
        )
    )
    http_method_names = ["get", "post", "patch", "delete", "head", "options"]

    def get_permissions(self):  # type: ignore
        if self.action in {"list", "retrieve"}:
            return [permissions.AllowAny()]
        if self.action == "units" and self.request.method in permissions.SAFE_METHODS:
            return [permissions.AllowAny()]
        if self.action == "create":
            return [IsOwnerUser()]
        if self.action in {"pending", "approve"}:
            return [permissions.IsAuthenticated(), IsPlatformAdmin()]
        return [permissions.IsAuthenticated(), IsPropertyOwnerOrAdmin()]

    def get_queryset(self):  # type: ignore
        qs = super().get_queryset()
        if self.action == "pending":
            return qs
        return _visible(qs, self.request.user)

    def get_serializer_class(self):  # type: ignore
        if self.action in {"create", "update", "partial_update"}:
            return ContainerWriteSerializer
        return ContainerSerializer

    def create(self, request, *args, **kwargs):  # type: ignore
        response = super().create(request, *args, **kwargs)
        return Response(
            {"message": "Inmueble publicado con sus habitaciones.", "container": response.data},
            status=status.HTTP_201_CREATED,
        )

    def perform_destroy(self, instance):  # type: ignore
        services.delete_property(instance, self.request.user)

    @action(detail=False, methods=["get"], url_path="pending")
    def pending(self, request):  # type: ignore
        qs = services.pending_containers().prefetch_related("units__images", "units__amenities", "images")
        page = self.paginate_queryset(qs)
        if page is not None:
            return self.get_paginated_response(self.get_serializer(page, many=True).data)
        return Response(self.get_serializer(qs, many=True).data)

    @action(detail=True, methods=["post"], url_path="rent-complete")
    def rent_complete(self, request, pk=None):  # type: ignore
        container = self.get_object()
        try:
            services.rent_complete(container)
        except services.ContainerStateError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(self.get_serializer(self.get_object()).data)

    @action(detail=True, methods=["post"], url_path="change-mode")
    def change_mode(self, request, pk=None):  # type: ignore
        container = self.get_object()
        serializer = RentalModeSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        services.change_to_by_unit(container)
        return Response(self.get_serializer(self.get_object()).data)

    @action(detail=True, methods=["post"], url_path="approve")
    def approve(self, request, pk=None):  # type: ignore
        container = self.get_object()
        services.approve_property(container, request.user)
        return Response(
            {"message": "Inmueble y habitaciones aprobados.", "container": self.get_serializer(self.get_object()).data}
        )

    @action(detail=True, methods=["get", "post"], url_path="units")
    def units(self, request, pk=None):  # type: ignore
        container = self.get_object()
        if request.method == "GET":
            return Response(self.get_serializer(container).data["units"])
        serializer = UnitWriteSerializer(data=request.data, context={"request": request, "container": container})
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(serializer.data, status=status.HTTP_201_CREATED)


class UnitViewSet(
    mixins.RetrieveModelMixin,
    mixins.UpdateModelMixin,
    mixins.DestroyModelMixin,
    viewsets.GenericViewSet,
):
    """
    Rooms of a container.

    - GET/PATCH/DELETE /api/v1/properties/units/{id}/
    - PATCH /api/v1/properties/units/{id}/rental-status/ {"is_rented": true}
    - POST /api/v1/properties/units/{id}/approve/, /reject/ - moderators
    """

    queryset = (
        Property.objects.filter(parent__isnull=False)
        .select_related("owner", "parent")
        .prefetch_related("amenities", "images")
    )
    http_method_names = ["get", "post", "patch", "delete", "head", "options"]

    def get_permissions(self):  # type: ignore
        if self.action == "retrieve":
            return [permissions.AllowAny()]
        if self.action in {"approve", "reject"}:
            return [permissions.IsAuthenticated(), IsPlatformAdmin()]
        return [permissions.IsAuthenticated(), IsPropertyOwnerOrAdmin()]

    def get_queryset(self):  # type: ignore
        return _visible(super().get_queryset(), self.request.user)

    def get_serializer_class(self):  # type: ignore
        if self.action in {"update", "partial_update"}:
            return UnitWriteSerializer
        return UnitSerializer

    def perform_destroy(self, instance):  # type: ignore
        services.delete_property(instance, self.request.user)

    @action(detail=True, methods=["patch"], url_path="rental-status")
    def rental_status(self, request, pk=None):  # type: ignore
        unit = self.get_object()
        serializer = UnitRentalStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        services.set_rented(unit, serializer.validated_data["is_rented"])
        return Response(UnitSerializer(unit).data)

    @action(detail=True, methods=["post"], url_path="approve")
    def approve(self, request, pk=None):  # type: ignore
        unit = self.get_object()
        services.approve_property(unit, request.user)
        return Response({"message": "Habitación aprobada.", "unit": UnitSerializer(unit).data})

    @action(detail=True, methods=["post"], url_path="reject")
    def reject(self, request, pk=None):  # type: ignore
        unit = self.get_object()
        serializer = RejectSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        services.reject_property(unit, request.user, serializer.validated_data["reason"])
        return Response({"message": "Habitación rechazada.", "unit": UnitSerializer(unit).data})
