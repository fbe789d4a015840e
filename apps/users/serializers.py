"""Serializers for user-related API endpoints."""

from __future__ import annotations

from django.contrib.auth import get_user_model  # type: ignore
from rest_framework import serializers  # type: ignore

from .models import PHONE_VALIDATOR

User = get_user_model()


class PhoneField(serializers.CharField):
    """Strips spaces, dashes and parentheses, then checks the phone format."""

    def __init__(self, **kwargs):  # type: ignore
        kwargs.setdefault("validators", [PHONE_VALIDATOR])
        super().__init__(**kwargs)

    def to_internal_value(self, data):  # type: ignore
        return User.objects.normalize_phone(super().to_internal_value(data))


class UserSerializer(serializers.ModelSerializer):
    """Profile as seen by the account holder."""

    phone = PhoneField(required=False, allow_null=True)
    whatsapp = PhoneField(required=False, allow_blank=True)
    is_premium = serializers.BooleanField(read_only=True)

    class Meta:
        model = User
        fields = [
            "id",
            "email",
            "name",
            "phone",
            "whatsapp",
            "user_type",
            "owner_role",
            "id_type",
            "id_number",
            "payment_preference",
            "plan",
            "plan_type",
            "plan_started_at",
            "plan_expires_at",
            "premium_since",
            "is_premium",
            "verification_status",
            "verification_rejection_reason",
            "is_verified",
            "is_active",
            "created_at",
            "updated_at",
        ]
        read_only_fields = [
            "id",
            "email",
            "user_type",
            "plan",
            "plan_type",
            "plan_started_at",
            "plan_expires_at",
            "premium_since",
            "verification_status",
            "verification_rejection_reason",
            "is_verified",
            "is_active",
            "created_at",
            "updated_at",
        ]

    def validate_phone(self, value):  # type: ignore
        if not value:
            return None
        qs = User.objects.filter(phone=value)
        if self.instance is not None:
            qs = qs.exclude(pk=self.instance.pk)
        if qs.exists():
            raise serializers.ValidationError("Ya existe un usuario con este teléfono.")
        return value


class UserAdminSerializer(UserSerializer):
    """Back-office view of a user; plan and role are editable here."""

    properties_count = serializers.IntegerField(read_only=True, required=False)

    class Meta(UserSerializer.Meta):
        fields = UserSerializer.Meta.fields + ["properties_count", "last_login"]
        read_only_fields = [
            "id",
            "premium_since",
            "verification_status",
            "verification_rejection_reason",
            "is_verified",
            "created_at",
            "updated_at",
            "last_login",
        ]


class UserShortSerializer(serializers.ModelSerializer):
    """Compact owner/contact card embedded in listings and requests."""

    class Meta:
        model = User
        fields = ["id", "name", "email", "phone", "whatsapp", "user_type", "owner_role", "is_verified", "plan"]
        read_only_fields = fields
