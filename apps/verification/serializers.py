"""Serializers for identity verification."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from apps.users.serializers import UserShortSerializer
from .models import VerificationDocuments

_MISSING = "Debe adjuntar todos los documentos requeridos."
_MISSING_ERRORS = {"required": _MISSING, "blank": _MISSING, "null": _MISSING}


class VerificationSubmitSerializer(serializers.Serializer):
    id_front = serializers.URLField(max_length=500, error_messages=_MISSING_ERRORS)
    id_back = serializers.URLField(max_length=500, error_messages=_MISSING_ERRORS)
    selfie = serializers.URLField(max_length=500, error_messages=_MISSING_ERRORS)
    utility_bill = serializers.URLField(max_length=500, required=False, allow_blank=True)

    def validate(self, attrs):  # type: ignore
        user = self.context["request"].user
        if user.is_owner() and not attrs.get("utility_bill"):
            raise serializers.ValidationError(
                {"utility_bill": ["Los propietarios deben adjuntar un recibo de servicio público."]}
            )
        return attrs


class VerificationStatusSerializer(serializers.Serializer):
    verification_status = serializers.CharField()
    is_verified = serializers.BooleanField()
    rejection_reason = serializers.CharField(source="verification_rejection_reason")
    submitted_at = serializers.SerializerMethodField()

    def get_submitted_at(self, user):  # type: ignore
        documents = getattr(user, "verification_documents", None)
        return serializers.DateTimeField().to_representation(documents.submitted_at) if documents else None


class VerificationDocumentsSerializer(serializers.ModelSerializer):
    """Full document set, decrypted, for the reviewing admin."""

    user = UserShortSerializer(read_only=True)
    verification_status = serializers.CharField(source="user.verification_status", read_only=True)

    class Meta:
        model = VerificationDocuments
        fields = [
            "user",
            "verification_status",
            "id_front",
            "id_back",
            "selfie",
            "utility_bill",
            "submitted_at",
            "processed_at",
        ]
        read_only_fields = fields


class VerificationRejectSerializer(serializers.Serializer):
    reason = serializers.CharField(
        max_length=1000,
        error_messages={
            "required": "Debe indicar el motivo del rechazo.",
            "blank": "Debe indicar el motivo del rechazo.",
        },
    )
