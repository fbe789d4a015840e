"""Serializers for location master data."""

from __future__ import annotations

from django.core.exceptions import ValidationError as DjangoValidationError  # type: ignore
from django.utils.text import slugify  # type: ignore
from rest_framework import serializers  # type: ignore

from shared.api.exceptions import ConflictError
from .coordinates import LATITUDE_VALIDATORS, LONGITUDE_VALIDATORS, normalize_coordinate
from .models import City, Department, Institution


class CoordinateField(serializers.Field):
    """Accepts numbers or comma-decimal strings; non-numeric input becomes null."""

    def __init__(self, kind: str, **kwargs):  # type: ignore
        self.range_validators = LATITUDE_VALIDATORS if kind == "latitude" else LONGITUDE_VALIDATORS
        kwargs.setdefault("required", False)
        kwargs.setdefault("allow_null", True)
        super().__init__(**kwargs)

    def to_internal_value(self, data):  # type: ignore
        value = normalize_coordinate(data)
        if value is None:
            return None
        for validator in self.range_validators:
            try:
                validator(value)
            except DjangoValidationError as exc:
                raise serializers.ValidationError(exc.messages)
        return value

    def to_representation(self, value):  # type: ignore
        return float(value) if value is not None else None


class DepartmentSerializer(serializers.ModelSerializer):
    cities_count = serializers.IntegerField(read_only=True, required=False)

    class Meta:
        model = Department
        fields = ["id", "name", "code", "slug", "is_active", "cities_count", "created_at", "updated_at"]
        read_only_fields = ["id", "created_at", "updated_at"]
        extra_kwargs = {
            "code": {"validators": [], "min_length": 3},
            "slug": {"validators": [], "required": False},
        }

    def validate_code(self, value: str) -> str:
        return value.upper()

    def validate(self, attrs):  # type: ignore
        name = attrs.get("name") or getattr(self.instance, "name", "")
        if not attrs.get("slug") and (self.instance is None or "name" in attrs):
            attrs["slug"] = slugify(name)
        others = Department.objects.all()
        if self.instance is not None:
            others = others.exclude(pk=self.instance.pk)
        if "code" in attrs and others.filter(code=attrs["code"]).exists():
            raise ConflictError(f"Ya existe un departamento con el código {attrs['code']}.")
        if attrs.get("slug") and others.filter(slug=attrs["slug"]).exists():
            raise ConflictError(f"Ya existe un departamento con el slug {attrs['slug']}.")
        return attrs


class DepartmentShortSerializer(serializers.ModelSerializer):
    class Meta:
        model = Department
        fields = ["id", "name", "code", "slug"]


class CitySerializer(serializers.ModelSerializer):
    department = DepartmentShortSerializer(read_only=True)
    department_id = serializers.PrimaryKeyRelatedField(
        source="department", queryset=Department.objects.all(), write_only=True
    )

    class Meta:
        model = City
        fields = ["id", "name", "slug", "department", "department_id", "is_active", "created_at", "updated_at"]
        read_only_fields = ["id", "created_at", "updated_at"]
        extra_kwargs = {"slug": {"required": False}}
        validators = []

    def validate(self, attrs):  # type: ignore
        name = attrs.get("name") or getattr(self.instance, "name", "")
        if not attrs.get("slug") and (self.instance is None or "name" in attrs):
            attrs["slug"] = slugify(name)
        department = attrs.get("department") or getattr(self.instance, "department", None)
        slug = attrs.get("slug") or getattr(self.instance, "slug", "")
        others = City.objects.filter(department=department, slug=slug)
        if self.instance is not None:
            others = others.exclude(pk=self.instance.pk)
        if others.exists():
            raise ConflictError(f"La ciudad {name} ya existe en este departamento.")
        return attrs


class CityShortSerializer(serializers.ModelSerializer):
    department = serializers.CharField(source="department.name", read_only=True)

    class Meta:
        model = City
        fields = ["id", "name", "slug", "department"]


class InstitutionSerializer(serializers.ModelSerializer):
    city = CityShortSerializer(read_only=True)
    city_id = serializers.PrimaryKeyRelatedField(source="city", queryset=City.objects.all(), write_only=True)
    latitude = CoordinateField("latitude")
    longitude = CoordinateField("longitude")

    class Meta:
        model = Institution
        fields = [
            "id",
            "name",
            "acronym",
            "type",
            "city",
            "city_id",
            "latitude",
            "longitude",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "created_at", "updated_at"]
        validators = []

    def validate(self, attrs):  # type: ignore
        name = attrs.get("name") or getattr(self.instance, "name", "")
        city = attrs.get("city") or getattr(self.instance, "city", None)
        others = Institution.objects.filter(name__iexact=name, city=city)
        if self.instance is not None:
            others = others.exclude(pk=self.instance.pk)
        if others.exists():
            raise ConflictError(f"La institución {name} ya está registrada en esta ciudad.")
        return attrs
