"""API views for student housing requests."""

from __future__ import annotations

import logging

from django_filters.rest_framework import DjangoFilterBackend  # type: ignore
from rest_framework import permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore

from apps.users.permissions import IsPlatformAdmin, is_platform_admin
from .filters import StudentRequestFilterSet
from .models import StudentRequest
from .serializers import StudentRequestSerializer

logger = logging.getLogger(__name__)


class IsRequestCreatorOrAdmin(permissions.BasePermission):
    message = "Solo el autor de la solicitud puede modificarla."

    def has_object_permission(self, request, view, obj: StudentRequest) -> bool:  # type: ignore
        if is_platform_admin(request.user):
            return True
        return obj.student_id is not None and obj.student_id == request.user.id


class StudentRequestViewSet(viewsets.ModelViewSet):
    """
    - POST /api/v1/student-requests/ - anyone, signed-in students are linked to it
    - GET /api/v1/student-requests/?city=&property_type=&min_budget=&max_budget=&university=
      (open requests unless ``status`` is given)
    - GET /api/v1/student-requests/mine/
    - PATCH /api/v1/student-requests/{id}/, POST /{id}/close/ - creator or admin
    - DELETE /api/v1/student-requests/{id}/ - admin
    """

    queryset = StudentRequest.objects.select_related("city", "institution", "property_type_desired")
    serializer_class = StudentRequestSerializer
    filter_backends = [DjangoFilterBackend]
    filterset_class = StudentRequestFilterSet
    http_method_names = ["get", "post", "patch", "delete", "head", "options"]

    def get_permissions(self):  # type: ignore
        if self.action == "create":
            return [permissions.AllowAny()]
        if self.action == "destroy":
            return [permissions.IsAuthenticated(), IsPlatformAdmin()]
        if self.action in {"partial_update", "update", "close"}:
            return [permissions.IsAuthenticated(), IsRequestCreatorOrAdmin()]
        return [permissions.IsAuthenticated()]

    def get_queryset(self):  # type: ignore
        qs = super().get_queryset()
        if self.action == "mine":
            return qs.filter(student=self.request.user)
        if self.action == "list" and "status" not in self.request.query_params:
            qs = qs.filter(status=StudentRequest.Status.OPEN)
        return qs

    def perform_create(self, serializer):  # type: ignore
        user = self.request.user
        student = user if user.is_authenticated else None
        instance = serializer.save(student=student)
        logger.info(f"Student request {instance.id} created for city {instance.city_id}")

    @action(detail=False, methods=["get"], url_path="mine")
    def mine(self, request):  # type: ignore
        qs = self.get_queryset()
        return Response(self.get_serializer(qs, many=True).data)

    @action(detail=True, methods=["post"], url_path="close")
    def close(self, request, pk=None):  # type: ignore
        student_request = self.get_object()
        if student_request.status == StudentRequest.Status.CLOSED:
            return Response({"detail": "La solicitud ya está cerrada."}, status=status.HTTP_400_BAD_REQUEST)
        student_request.close()
        return Response(self.get_serializer(student_request).data)
