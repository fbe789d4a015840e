"""Serializers for student requests."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from apps.locations.models import City, Institution
from apps.properties.models import PropertyType
from .models import StudentRequest

REQUIRED_MESSAGE = "Por favor complete todos los campos requeridos."
_REQUIRED_ERRORS = {"required": REQUIRED_MESSAGE, "blank": REQUIRED_MESSAGE, "null": REQUIRED_MESSAGE}


class StudentRequestSerializer(serializers.ModelSerializer):
    city_id = serializers.PrimaryKeyRelatedField(
        source="city", queryset=City.objects.filter(is_active=True), error_messages=_REQUIRED_ERRORS
    )
    city = serializers.CharField(source="city.name", read_only=True)
    institution_id = serializers.PrimaryKeyRelatedField(
        source="institution", queryset=Institution.objects.all(), required=False, allow_null=True
    )
    institution = serializers.CharField(source="institution.name", read_only=True, default=None)
    property_type_desired_id = serializers.PrimaryKeyRelatedField(
        source="property_type_desired", queryset=PropertyType.objects.all(), error_messages=_REQUIRED_ERRORS
    )
    property_type_desired = serializers.CharField(source="property_type_desired.name", read_only=True)
    required_amenities = serializers.ListField(child=serializers.CharField(max_length=100), required=False)
    deal_breakers = serializers.ListField(child=serializers.CharField(max_length=100), required=False)

    class Meta:
        model = StudentRequest
        fields = [
            "id",
            "student",
            "student_name",
            "student_email",
            "student_phone",
            "student_whatsapp",
            "city_id",
            "city",
            "institution_id",
            "institution",
            "university_target",
            "budget_max",
            "property_type_desired_id",
            "property_type_desired",
            "required_amenities",
            "deal_breakers",
            "move_in_date",
            "contract_duration",
            "additional_notes",
            "status",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["student", "status", "created_at", "updated_at"]
        extra_kwargs = {
            "student_name": {"error_messages": _REQUIRED_ERRORS},
            "student_email": {"error_messages": _REQUIRED_ERRORS},
            "student_phone": {"error_messages": _REQUIRED_ERRORS},
            "budget_max": {"error_messages": _REQUIRED_ERRORS},
            "move_in_date": {"error_messages": _REQUIRED_ERRORS},
        }

    def validate(self, attrs):  # type: ignore
        institution = attrs.get("institution")
        city = attrs.get("city") or getattr(self.instance, "city", None)
        if institution is not None and city is not None and institution.city_id != city.id:
            raise serializers.ValidationError(
                {"institution_id": ["La institución no pertenece a la ciudad seleccionada."]}
            )
        if self.instance is None:
            request = self.context["request"]
            if request.user.is_authenticated and StudentRequest.objects.filter(
                student=request.user, status=StudentRequest.Status.OPEN
            ).exists():
                raise serializers.ValidationError(
                    {"detail": "Ya tienes una solicitud activa. Cierra la actual antes de crear una nueva."}
                )
        return attrs
