"""Serializers for notifications."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .models import Notification


class NotificationSerializer(serializers.ModelSerializer):
    """Serializer for notifications."""

    interested_user_name = serializers.CharField(source='interested_user.name', read_only=True, default=None)

    class Meta:
        model = Notification
        fields = [
            'id',
            'type',
            'title',
            'message',
            'property',
            'property_title',
            'interested_user',
            'interested_user_name',
            'is_read',
            'created_at',
        ]
        read_only_fields = fields
