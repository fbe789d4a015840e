from __future__ import annotations

from rest_framework import serializers  # type: ignore


class AssetDeleteSerializer(serializers.Serializer):
    public_ids = serializers.ListField(
        child=serializers.CharField(max_length=255),
        min_length=1,
        max_length=20,
    )
