"""API views for favorites management."""

from __future__ import annotations

from rest_framework import mixins, permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore

from .models import Favorite
from .serializers import (
    FavoriteBulkDeleteSerializer,
    FavoritePropertyInputSerializer,
    FavoriteSerializer,
    FavoriteToggleSerializer,
)


class FavoriteViewSet(
    mixins.ListModelMixin,
    mixins.DestroyModelMixin,
    viewsets.GenericViewSet,
):
    """
    Favorites of the authenticated user.

    Endpoints:
    - GET /api/v1/favorites/ - list
    - POST /api/v1/favorites/ - add {"property_id": 12}
    - DELETE /api/v1/favorites/{id}/ - remove
    - DELETE /api/v1/favorites/property/{property_id}/ - remove by listing
    - POST /api/v1/favorites/toggle/ - add or remove
    - GET /api/v1/favorites/check/{property_id}/
    - POST /api/v1/favorites/bulk-delete/ {"favorite_ids": [...]}
    """

    serializer_class = FavoriteSerializer
    permission_classes = [permissions.IsAuthenticated]

    def get_queryset(self):  # type: ignore
        return (
            Favorite.objects.filter(user=self.request.user)
            .select_related('property__city', 'property__property_type')
            .prefetch_related('property__images')
        )

    def _detail(self, favorite: Favorite):  # type: ignore
        return FavoriteSerializer(self.get_queryset().get(pk=favorite.pk)).data

    def create(self, request, *args, **kwargs):  # type: ignore
        serializer = FavoritePropertyInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        favorite, created = Favorite.objects.get_or_create(
            user=request.user, property_id=serializer.validated_data['property_id']
        )
        if not created:
            return Response(
                {"detail": "Este inmueble ya está en tus favoritos."},
                status=status.HTTP_400_BAD_REQUEST,
            )
        return Response(self._detail(favorite), status=status.HTTP_201_CREATED)

    @action(detail=False, methods=['delete'], url_path='property/(?P<property_id>[0-9]+)')
    def remove_property(self, request, property_id=None):  # type: ignore
        deleted, _ = Favorite.objects.filter(user=request.user, property_id=property_id).delete()
        if not deleted:
            return Response(
                {"detail": "El inmueble no está en tus favoritos."},
                status=status.HTTP_404_NOT_FOUND,
            )
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=False, methods=['post'], url_path='toggle')
    def toggle(self, request):  # type: ignore
        """
        POST /api/v1/favorites/toggle/  {"property_id": 123}

        Returns {"action": "added" | "removed", ...}.
        """
        toggle_serializer = FavoriteToggleSerializer(data=request.data)
        toggle_serializer.is_valid(raise_exception=True)
        property_id = toggle_serializer.validated_data['property_id']
        deleted, _ = Favorite.objects.filter(user=request.user, property_id=property_id).delete()
        if deleted:
            return Response(
                {"action": "removed", "property_id": property_id, "message": "Inmueble eliminado de favoritos"},
                status=status.HTTP_200_OK,
            )

        serializer = FavoritePropertyInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        favorite = Favorite.objects.create(user=request.user, property_id=serializer.validated_data['property_id'])
        return Response(
            {"action": "added", "favorite": self._detail(favorite), "message": "Inmueble agregado a favoritos"},
            status=status.HTTP_201_CREATED,
        )

    @action(detail=False, methods=['post'], url_path='bulk-delete')
    def bulk_delete(self, request):  # type: ignore
        serializer = FavoriteBulkDeleteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        # Only the caller's own favorites are touched.
        deleted_count, _ = Favorite.objects.filter(
            id__in=serializer.validated_data['favorite_ids'], user=request.user
        ).delete()
        return Response(
            {"deleted": deleted_count, "message": f"Se eliminaron {deleted_count} favoritos"},
            status=status.HTTP_200_OK,
        )

    @action(detail=False, methods=['get'], url_path='check/(?P<property_id>[0-9]+)')
    def check(self, request, property_id=None):  # type: ignore
        favorite = Favorite.objects.filter(user=request.user, property_id=property_id).first()
        return Response(
            {"is_favorite": favorite is not None, "favorite_id": favorite.id if favorite else None},
            status=status.HTTP_200_OK,
        )
