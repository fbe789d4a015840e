"""Serializers for the super-admin back office."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .models import ActivityLog, SystemConfig


class ActivityLogSerializer(serializers.ModelSerializer):
    user_email = serializers.CharField(source="user.email", read_only=True, default=None)
    property_title = serializers.CharField(source="property.title", read_only=True, default=None)

    class Meta:
        model = ActivityLog
        fields = ["id", "type", "message", "user", "user_email", "property", "property_title", "timestamp"]
        read_only_fields = fields


class SystemConfigSerializer(serializers.ModelSerializer):
    class Meta:
        model = SystemConfig
        fields = [
            "commission_rate",
            "featured_property_price",
            "max_images_per_property",
            "min_property_price",
            "max_property_price",
            "auto_approval_enabled",
            "updated_at",
        ]
        read_only_fields = ["updated_at"]
        extra_kwargs = {"max_images_per_property": {"min_value": 1, "max_value": 50}}

    def validate(self, attrs):  # type: ignore
        min_price = attrs.get("min_property_price", getattr(self.instance, "min_property_price", None))
        max_price = attrs.get("max_property_price", getattr(self.instance, "max_property_price", None))
        if min_price is not None and max_price is not None and min_price > max_price:
            raise serializers.ValidationError(
                {"min_property_price": ["El precio mínimo no puede superar el máximo."]}
            )
        return attrs


class PurgeLogsSerializer(serializers.Serializer):
    days = serializers.IntegerField(min_value=1, default=90)
