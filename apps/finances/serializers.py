"""Serializers for payment requests and subscriptions."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from apps.users.serializers import UserShortSerializer
from .models import PaymentRequest, Subscription

_REQUIRED = "Todos los campos son obligatorios."
_REQUIRED_ERRORS = {"required": _REQUIRED, "blank": _REQUIRED, "null": _REQUIRED}


class PaymentRequestSerializer(serializers.ModelSerializer):
    """Заявка на оплату; владелец заявки виден администраторам."""

    user = UserShortSerializer(read_only=True)
    plan_type_display = serializers.CharField(source="get_plan_type_display", read_only=True)

    class Meta:
        model = PaymentRequest
        fields = [
            "id",
            "user",
            "amount",
            "plan_type",
            "plan_type_display",
            "plan_duration",
            "reference_code",
            "proof_image_url",
            "proof_image_public_id",
            "status",
            "rejection_reason",
            "created_at",
            "processed_at",
        ]
        read_only_fields = ["status", "rejection_reason", "created_at", "processed_at"]
        extra_kwargs = {
            "amount": {"error_messages": _REQUIRED_ERRORS},
            "plan_type": {"error_messages": _REQUIRED_ERRORS},
            "plan_duration": {"error_messages": _REQUIRED_ERRORS, "min_value": 1},
            "reference_code": {"error_messages": _REQUIRED_ERRORS},
            "proof_image_url": {"error_messages": _REQUIRED_ERRORS},
        }


class PaymentRejectSerializer(serializers.Serializer):
    reason = serializers.CharField(required=False, allow_blank=True, max_length=1000)


class SubscriptionSerializer(serializers.ModelSerializer):
    days_remaining = serializers.IntegerField(read_only=True)
    payment_reference = serializers.CharField(
        source="payment_request.reference_code", read_only=True, default=None
    )

    class Meta:
        model = Subscription
        fields = [
            "id",
            "plan",
            "plan_type",
            "started_at",
            "expires_at",
            "status",
            "days_remaining",
            "payment_reference",
            "created_at",
        ]
        read_only_fields = fields
