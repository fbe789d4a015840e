"""API views for identity verification."""

from __future__ import annotations

from django.contrib.auth import get_user_model  # type: ignore
from django.shortcuts import get_object_or_404  # type: ignore
from rest_framework import permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore

from apps.users.permissions import IsPlatformAdmin
from . import services
from .models import VerificationDocuments
from .serializers import (
    VerificationDocumentsSerializer,
    VerificationRejectSerializer,
    VerificationStatusSerializer,
    VerificationSubmitSerializer,
)

User = get_user_model()


class VerificationViewSet(viewsets.GenericViewSet):
    """
    Users:
    - POST /api/v1/verification/submit/
    - GET /api/v1/verification/status/
    Admins (``{user_id}`` is the user being reviewed):
    - GET /api/v1/verification/pending/
    - GET /api/v1/verification/{user_id}/
    - POST /api/v1/verification/{user_id}/approve/
    - POST /api/v1/verification/{user_id}/reject/
    """

    serializer_class = VerificationDocumentsSerializer
    queryset = VerificationDocuments.objects.select_related("user")

    def get_permissions(self):  # type: ignore
        if self.action in {"submit", "status"}:
            return [permissions.IsAuthenticated()]
        return [permissions.IsAuthenticated(), IsPlatformAdmin()]

    def _reviewed_user(self, pk):  # type: ignore
        return get_object_or_404(User, pk=pk)

    @action(detail=False, methods=["post"], url_path="submit")
    def submit(self, request):  # type: ignore
        serializer = VerificationSubmitSerializer(data=request.data, context={"request": request})
        serializer.is_valid(raise_exception=True)
        try:
            services.submit_documents(request.user, serializer.validated_data)
        except services.AlreadyVerifiedError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(
            {
                "message": "Documentos enviados. Te avisaremos cuando sean revisados.",
                "verification_status": request.user.verification_status,
            },
            status=status.HTTP_201_CREATED,
        )

    @action(detail=False, methods=["get"], url_path="status")
    def status(self, request):  # type: ignore
        return Response(VerificationStatusSerializer(request.user).data)

    @action(detail=False, methods=["get"], url_path="pending")
    def pending(self, request):  # type: ignore
        qs = self.get_queryset().filter(user__verification_status=User.VerificationStatus.PENDING)
        page = self.paginate_queryset(qs)
        if page is not None:
            return self.get_paginated_response(self.get_serializer(page, many=True).data)
        return Response(self.get_serializer(qs, many=True).data)

    def retrieve(self, request, pk=None):  # type: ignore
        user = self._reviewed_user(pk)
        try:
            documents = services.get_documents(user)
        except services.VerificationDocumentsMissingError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_404_NOT_FOUND)
        return Response(self.get_serializer(documents).data)

    @action(detail=True, methods=["post"], url_path="approve")
    def approve(self, request, pk=None):  # type: ignore
        user = self._reviewed_user(pk)
        try:
            services.approve(user, request.user)
        except services.VerificationDocumentsMissingError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_404_NOT_FOUND)
        return Response(
            {"message": "Usuario verificado.", "verification_status": user.verification_status},
            status=status.HTTP_200_OK,
        )

    @action(detail=True, methods=["post"], url_path="reject")
    def reject(self, request, pk=None):  # type: ignore
        user = self._reviewed_user(pk)
        serializer = VerificationRejectSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            services.reject(user, request.user, serializer.validated_data["reason"])
        except services.VerificationDocumentsMissingError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_404_NOT_FOUND)
        return Response(
            {"message": "Verificación rechazada.", "verification_status": user.verification_status},
            status=status.HTTP_200_OK,
        )
