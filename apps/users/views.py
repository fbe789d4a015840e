"""User management API for the back office."""

from __future__ import annotations

import logging

from django.contrib.auth import get_user_model  # type: ignore
from django.db.models import Count, Q  # type: ignore
from django_filters.rest_framework import DjangoFilterBackend  # type: ignore
from rest_framework import filters, permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.exceptions import ValidationError  # type: ignore
from rest_framework.response import Response  # type: ignore

from apps.properties.models import Property
from .permissions import IsSuperAdmin
from .serializers import UserAdminSerializer

User = get_user_model()
logger = logging.getLogger(__name__)


class UserViewSet(viewsets.ModelViewSet):
    """
    Super-admin management of every account.

    Endpoints:
    - GET /api/v1/users/ - list (filters: user_type, plan, verification_status, is_active; search)
    - GET/PATCH/DELETE /api/v1/users/{id}/
    - POST /api/v1/users/{id}/activate/ and /deactivate/
    - GET /api/v1/users/{id}/stats/ - listing counters of an owner
    """

    serializer_class = UserAdminSerializer
    permission_classes = [permissions.IsAuthenticated, IsSuperAdmin]
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_fields = ["user_type", "plan", "verification_status", "is_active", "owner_role"]
    search_fields = ["name", "email", "phone", "id_number"]
    ordering_fields = ["created_at", "name", "email"]
    http_method_names = ["get", "patch", "delete", "post", "head", "options"]

    def get_queryset(self):  # type: ignore
        return User.objects.annotate(properties_count=Count("properties", distinct=True)).order_by("-created_at")

    def create(self, request, *args, **kwargs):  # type: ignore
        """Accounts are created through the auth endpoints."""
        return Response(status=status.HTTP_405_METHOD_NOT_ALLOWED)

    def perform_destroy(self, instance):  # type: ignore
        if instance.pk == self.request.user.pk:
            raise ValidationError({"detail": "No puede eliminar su propia cuenta."})
        logger.info(f"User {instance.id} deleted by {self.request.user.id}")
        instance.delete()

    def _set_active(self, request, active: bool):  # type: ignore
        user = self.get_object()
        if user.pk == request.user.pk:
            return Response(
                {"detail": "No puede cambiar el estado de su propia cuenta."},
                status=status.HTTP_400_BAD_REQUEST,
            )
        if user.is_active == active:
            message = "El usuario ya está activo." if active else "El usuario ya está desactivado."
            return Response({"detail": message}, status=status.HTTP_400_BAD_REQUEST)
        user.is_active = active
        user.save(update_fields=["is_active", "updated_at"])
        logger.info(f"User {user.id} is_active={active} by {request.user.id}")
        return Response(self.get_serializer(self.get_queryset().get(pk=user.pk)).data)

    @action(detail=True, methods=["post"], url_path="activate")
    def activate(self, request, pk=None):  # type: ignore
        return self._set_active(request, True)

    @action(detail=True, methods=["post"], url_path="deactivate")
    def deactivate(self, request, pk=None):  # type: ignore
        return self._set_active(request, False)

    @action(detail=True, methods=["get"], url_path="stats")
    def stats(self, request, pk=None):  # type: ignore
        user = self.get_object()
        counts = Property.objects.filter(owner=user).aggregate(
            total=Count("id"),
            pending=Count("id", filter=Q(status=Property.Status.PENDING)),
            approved=Count("id", filter=Q(status=Property.Status.APPROVED)),
            rejected=Count("id", filter=Q(status=Property.Status.REJECTED)),
            rented=Count("id", filter=Q(is_rented=True)),
        )
        return Response(
            {
                "user_id": user.id,
                "properties": counts,
                "favorites": user.favorites.count(),
                "payment_requests": user.payment_requests.count(),
            }
        )
