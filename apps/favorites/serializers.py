"""Serializers for the favorites domain."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from apps.properties.models import Property
from .models import Favorite


class FavoritePropertySerializer(serializers.ModelSerializer):
    """Tarjeta resumida del inmueble en la lista de favoritos."""

    city = serializers.CharField(source='city.name', read_only=True)
    property_type = serializers.CharField(source='property_type.name', read_only=True)
    featured_image = serializers.SerializerMethodField()

    class Meta:
        model = Property
        fields = [
            'id',
            'slug',
            'title',
            'city',
            'neighborhood',
            'property_type',
            'monthly_rent',
            'currency',
            'bedrooms',
            'bathrooms',
            'is_featured',
            'is_rented',
            'featured_image',
        ]
        read_only_fields = fields

    def get_featured_image(self, obj):  # type: ignore
        image = obj.featured_image
        return image.url if image else None


class FavoriteSerializer(serializers.ModelSerializer):
    property_id = serializers.ReadOnlyField(source='property.id')
    property = FavoritePropertySerializer(read_only=True)

    class Meta:
        model = Favorite
        fields = ['id', 'property_id', 'property', 'created_at']


class FavoriteToggleSerializer(serializers.Serializer):
    property_id = serializers.IntegerField()


class FavoritePropertyInputSerializer(FavoriteToggleSerializer):
    """Only approved listings can be bookmarked."""

    def validate_property_id(self, value: int) -> int:  # type: ignore
        if not Property.objects.filter(id=value, status=Property.Status.APPROVED).exists():
            raise serializers.ValidationError("El inmueble no existe o no está publicado.")
        return value


class FavoriteBulkDeleteSerializer(serializers.Serializer):
    favorite_ids = serializers.ListField(
        child=serializers.IntegerField(),
        allow_empty=False,
        help_text="IDs de favoritos a eliminar",
    )
