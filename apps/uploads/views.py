"""API views for direct-to-Cloudinary uploads."""

from __future__ import annotations

import logging

from rest_framework import permissions, status  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import APIView  # type: ignore

from apps.finances.models import PaymentRequest
from apps.properties.models import PropertyImage
from apps.users.permissions import is_platform_admin
from shared.api.exceptions import ServiceUnavailableError
from . import services
from .serializers import AssetDeleteSerializer

logger = logging.getLogger(__name__)


class UploadSignatureView(APIView):
    """GET /api/v1/uploads/signature/?folder=properties"""

    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):  # type: ignore
        try:
            payload = services.build_upload_signature(request.query_params.get("folder"))
        except services.CloudStorageConfigurationError as exc:
            raise ServiceUnavailableError(str(exc)) from exc
        except services.InvalidFolderError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(payload)


class AssetDeleteView(APIView):
    """
    POST /api/v1/uploads/delete/ {"public_ids": [...]}

    Assets already attached to another user's listing or payment proof
    can only be removed by admins.
    """

    permission_classes = [permissions.IsAuthenticated]

    def _foreign_assets(self, user, public_ids: list[str]) -> set[str]:
        if is_platform_admin(user):
            return set()
        foreign = set(
            PropertyImage.objects.filter(public_id__in=public_ids)
            .exclude(property__owner=user)
            .values_list("public_id", flat=True)
        )
        foreign |= set(
            PaymentRequest.objects.filter(proof_image_public_id__in=public_ids)
            .exclude(user=user)
            .values_list("proof_image_public_id", flat=True)
        )
        return foreign

    def post(self, request):  # type: ignore
        serializer = AssetDeleteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        public_ids = serializer.validated_data["public_ids"]

        if self._foreign_assets(request.user, public_ids):
            return Response(
                {"detail": "No tiene permiso para eliminar estas imágenes."},
                status=status.HTTP_403_FORBIDDEN,
            )

        try:
            results = {public_id: services.destroy_asset(public_id) for public_id in public_ids}
        except services.CloudStorageConfigurationError as exc:
            raise ServiceUnavailableError(str(exc)) from exc
        return Response(
            {
                "deleted": [pid for pid, ok in results.items() if ok],
                "not_found": [pid for pid, ok in results.items() if not ok],
            },
            status=status.HTTP_200_OK,
        )
