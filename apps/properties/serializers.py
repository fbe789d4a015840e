"""Serializers for listings and their master data."""

from __future__ import annotations

from decimal import Decimal

from django.contrib.auth import get_user_model  # type: ignore
from django.db.models import Q  # type: ignore
from rest_framework import serializers  # type: ignore

from apps.administration.services import get_system_config
from apps.locations.models import City, Institution
from apps.locations.serializers import CoordinateField
from apps.users.permissions import is_platform_admin
from apps.users.serializers import UserShortSerializer
from shared.api.exceptions import ConflictError
from . import services
from .models import (
    Amenity,
    CommonArea,
    Property,
    PropertyFeature,
    PropertyImage,
    PropertyInstitution,
    PropertyRule,
    PropertyService,
    PropertyType,
)

REQUIRED_FIELDS_MESSAGE = "Por favor complete todos los campos requeridos."
IMAGES_REQUIRED_MESSAGE = services.IMAGES_REQUIRED_MESSAGE

_REQUIRED_ERRORS = {
    "required": REQUIRED_FIELDS_MESSAGE,
    "blank": REQUIRED_FIELDS_MESSAGE,
    "null": REQUIRED_FIELDS_MESSAGE,
}


class PropertyTypeSerializer(serializers.ModelSerializer):
    class Meta:
        model = PropertyType
        fields = ["id", "name", "description"]
        extra_kwargs = {"name": {"validators": []}}

    def validate_name(self, value: str) -> str:
        value = value.strip().lower()
        others = PropertyType.objects.filter(name__iexact=value)
        if self.instance is not None:
            others = others.exclude(pk=self.instance.pk)
        if others.exists():
            raise ConflictError(f"El tipo de inmueble \"{value}\" ya existe.")
        return value


class AmenitySerializer(serializers.ModelSerializer):
    class Meta:
        model = Amenity
        fields = ["id", "name", "icon"]
        extra_kwargs = {"name": {"validators": []}}

    def validate_name(self, value: str) -> str:
        value = value.strip()
        others = Amenity.objects.filter(name__iexact=value)
        if self.instance is not None:
            others = others.exclude(pk=self.instance.pk)
        if others.exists():
            raise ConflictError(f"La comodidad \"{value}\" ya existe.")
        return value


class CommonAreaSerializer(serializers.ModelSerializer):
    class Meta:
        model = CommonArea
        fields = ["id", "name", "slug", "icon", "description"]
        read_only_fields = ["id", "slug"]
        extra_kwargs = {"name": {"validators": []}}

    def validate_name(self, value: str) -> str:
        value = value.strip()
        others = CommonArea.objects.filter(name__iexact=value)
        if self.instance is not None:
            others = others.exclude(pk=self.instance.pk)
        if others.exists():
            raise ConflictError(f"La zona común \"{value}\" ya existe.")
        return value


class PropertyRuleSerializer(serializers.ModelSerializer):
    VALUE_REQUIRED = {PropertyRule.RuleType.CURFEW, PropertyRule.RuleType.TENANT_PROFILE}

    class Meta:
        model = PropertyRule
        fields = ["rule_type", "is_allowed", "value", "description"]

    def validate(self, attrs):  # type: ignore
        if attrs.get("rule_type") in self.VALUE_REQUIRED and not attrs.get("value"):
            raise serializers.ValidationError({"value": ["Esta regla requiere un valor."]})
        return attrs


class PropertyServiceSerializer(serializers.ModelSerializer):
    class Meta:
        model = PropertyService
        fields = ["service_type", "is_included", "additional_cost", "description"]


class PropertyFeatureSerializer(serializers.ModelSerializer):
    class Meta:
        model = PropertyFeature
        fields = ["is_furnished", "has_parking", "allows_pets"]


def _unique_entries(items: list[dict], key: str, message: str) -> list[dict]:
    seen = [item.get(key) for item in items]
    if len(seen) != len(set(seen)):
        raise serializers.ValidationError(message)
    return items


class PropertyImageSerializer(serializers.ModelSerializer):
    class Meta:
        model = PropertyImage
        fields = ["id", "url", "public_id", "is_featured", "order_position"]
        read_only_fields = ["id"]
        extra_kwargs = {"order_position": {"required": False}}


class PropertyInstitutionSerializer(serializers.ModelSerializer):
    id = serializers.IntegerField(source="institution.id", read_only=True)
    name = serializers.CharField(source="institution.name", read_only=True)
    acronym = serializers.CharField(source="institution.acronym", read_only=True)
    type = serializers.CharField(source="institution.type", read_only=True)

    class Meta:
        model = PropertyInstitution
        fields = ["id", "name", "acronym", "type", "distance"]


class NearbyInstitutionInputSerializer(serializers.Serializer):
    institution_id = serializers.PrimaryKeyRelatedField(queryset=Institution.objects.all(), source="institution")
    distance = serializers.IntegerField(required=False, allow_null=True, min_value=0)


class PropertySerializer(serializers.ModelSerializer):
    """Read representation used by the search results and the detail page."""

    owner = UserShortSerializer(read_only=True)
    property_type = PropertyTypeSerializer(read_only=True)
    city = serializers.CharField(source="city.name", read_only=True)
    city_id = serializers.IntegerField(read_only=True)
    department = serializers.CharField(source="city.department.name", read_only=True)
    amenities = AmenitySerializer(many=True, read_only=True)
    images = PropertyImageSerializer(many=True, read_only=True)
    institutions = PropertyInstitutionSerializer(source="nearby_institutions", many=True, read_only=True)
    latitude = CoordinateField("latitude", read_only=True)
    longitude = CoordinateField("longitude", read_only=True)
    rules = PropertyRuleSerializer(many=True, read_only=True)
    services = PropertyServiceSerializer(many=True, read_only=True)
    common_areas = CommonAreaSerializer(many=True, read_only=True)
    features = serializers.SerializerMethodField()
    parent_id = serializers.IntegerField(read_only=True)

    class Meta:
        model = Property
        fields = [
            "id",
            "slug",
            "title",
            "description",
            "owner",
            "property_type",
            "monthly_rent",
            "deposit",
            "currency",
            "bedrooms",
            "bathrooms",
            "area",
            "floor",
            "available_from",
            "city",
            "city_id",
            "department",
            "street",
            "neighborhood",
            "postal_code",
            "latitude",
            "longitude",
            "amenities",
            "institutions",
            "images",
            "rules",
            "services",
            "common_areas",
            "features",
            "parent_id",
            "is_container",
            "rental_mode",
            "total_units",
            "available_units",
            "status",
            "is_featured",
            "is_verified",
            "is_rented",
            "rejection_reason",
            "submitted_at",
            "reviewed_at",
            "views_count",
            "interests_count",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_features(self, obj: Property) -> dict | None:
        try:
            return PropertyFeatureSerializer(obj.features).data
        except PropertyFeature.DoesNotExist:
            return None


class PropertyWriteSerializer(serializers.ModelSerializer):
    """Create/update payload of the listing form."""

    title = serializers.CharField(min_length=10, max_length=100, error_messages=_REQUIRED_ERRORS)
    description = serializers.CharField(min_length=50, max_length=2000, error_messages=_REQUIRED_ERRORS)
    monthly_rent = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=Decimal("0"), error_messages=_REQUIRED_ERRORS
    )
    property_type_id = serializers.PrimaryKeyRelatedField(
        source="property_type", queryset=PropertyType.objects.all(), error_messages=_REQUIRED_ERRORS
    )
    city_id = serializers.PrimaryKeyRelatedField(
        source="city", queryset=City.objects.filter(is_active=True), error_messages=_REQUIRED_ERRORS
    )
    street = serializers.CharField(max_length=255, error_messages=_REQUIRED_ERRORS)
    latitude = CoordinateField("latitude")
    longitude = CoordinateField("longitude")
    amenity_ids = serializers.PrimaryKeyRelatedField(
        source="amenities", queryset=Amenity.objects.all(), many=True, required=False
    )
    institutions = NearbyInstitutionInputSerializer(many=True, required=False)
    images = PropertyImageSerializer(many=True, required=False)
    rules = PropertyRuleSerializer(many=True, required=False)
    services = PropertyServiceSerializer(many=True, required=False)
    common_area_ids = serializers.PrimaryKeyRelatedField(
        source="common_areas", queryset=CommonArea.objects.all(), many=True, required=False
    )
    features = PropertyFeatureSerializer(required=False)

    class Meta:
        model = Property
        fields = [
            "title",
            "description",
            "property_type_id",
            "monthly_rent",
            "deposit",
            "currency",
            "bedrooms",
            "bathrooms",
            "area",
            "floor",
            "available_from",
            "city_id",
            "street",
            "neighborhood",
            "postal_code",
            "latitude",
            "longitude",
            "amenity_ids",
            "institutions",
            "images",
            "rules",
            "services",
            "common_area_ids",
            "features",
        ]

    def validate_rules(self, value: list[dict]) -> list[dict]:
        return _unique_entries(value, "rule_type", "Cada regla solo puede indicarse una vez.")

    def validate_services(self, value: list[dict]) -> list[dict]:
        return _unique_entries(value, "service_type", "Cada servicio solo puede indicarse una vez.")

    def validate_monthly_rent(self, value: Decimal) -> Decimal:
        config = get_system_config()
        if not config.min_property_price <= value <= config.max_property_price:
            raise serializers.ValidationError(
                f"El precio debe estar entre ${config.min_property_price:,.0f} y ${config.max_property_price:,.0f}."
            )
        return value

    def validate_images(self, value: list[dict]) -> list[dict]:
        config = get_system_config()
        if len(value) > config.max_images_per_property:
            raise serializers.ValidationError(
                f"Máximo {config.max_images_per_property} imágenes por inmueble."
            )
        return value

    def validate(self, attrs):  # type: ignore
        if self.instance is None and not attrs.get("images"):
            raise serializers.ValidationError({"images": [IMAGES_REQUIRED_MESSAGE]})
        if self.instance is not None and "images" in attrs and not attrs["images"]:
            raise serializers.ValidationError({"images": [IMAGES_REQUIRED_MESSAGE]})
        return attrs

    def create(self, validated_data):  # type: ignore
        return services.create_property(self.context["request"].user, validated_data)

    def update(self, instance, validated_data):  # type: ignore
        return services.update_property(instance, validated_data)

    def to_representation(self, instance):  # type: ignore
        return PropertySerializer(instance, context=self.context).data


class UnitSerializer(serializers.ModelSerializer):
    """Room of a container as shown on the container page."""

    amenities = AmenitySerializer(many=True, read_only=True)
    images = PropertyImageSerializer(many=True, read_only=True)
    parent_id = serializers.IntegerField(read_only=True)

    class Meta:
        model = Property
        fields = [
            "id",
            "parent_id",
            "slug",
            "title",
            "description",
            "monthly_rent",
            "deposit",
            "currency",
            "bathrooms",
            "area",
            "floor",
            "available_from",
            "amenities",
            "images",
            "status",
            "is_verified",
            "is_rented",
            "rejection_reason",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class UnitWriteSerializer(PropertyWriteSerializer):
    """
    Room payload.

    Address, owner and type come from the container, so only the room's own
    data is accepted. Photos are optional.
    """

    title = serializers.CharField(min_length=3, max_length=100, error_messages=_REQUIRED_ERRORS)
    description = serializers.CharField(max_length=2000, required=False, allow_blank=True)

    class Meta:
        model = Property
        fields = [
            "title",
            "description",
            "monthly_rent",
            "deposit",
            "bathrooms",
            "area",
            "floor",
            "available_from",
            "amenity_ids",
            "images",
        ]

    def validate(self, attrs):  # type: ignore
        return attrs

    def create(self, validated_data):  # type: ignore
        return services.create_unit(self.context["container"], validated_data)

    def to_representation(self, instance):  # type: ignore
        return UnitSerializer(instance, context=self.context).data


class ContainerSerializer(PropertySerializer):
    units = serializers.SerializerMethodField()
    unit_stats = serializers.SerializerMethodField()

    class Meta(PropertySerializer.Meta):
        fields = PropertySerializer.Meta.fields + ["units", "unit_stats"]
        read_only_fields = fields

    def get_units(self, obj: Property) -> list[dict]:
        units = obj.units.all()
        request = self.context.get("request")
        user = getattr(request, "user", None)
        if not (user and (user.id == obj.owner_id or is_platform_admin(user))):
            units = [unit for unit in units if unit.status == Property.Status.APPROVED]
        return UnitSerializer(units, many=True, context=self.context).data

    def get_unit_stats(self, obj: Property) -> dict[str, int]:
        return services.unit_stats(obj)


class ContainerWriteSerializer(PropertyWriteSerializer):
    """
    Pension or shared apartment with its first rooms.

    Rented by unit, the container itself carries no rent; rented complete, it
    needs a monthly rent within the configured range. Moderators may publish
    on behalf of an owner through ``owner_id``.
    """

    monthly_rent = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=Decimal("0"), required=False
    )
    rental_mode = serializers.ChoiceField(
        choices=Property.RentalMode.choices, default=Property.RentalMode.BY_UNIT
    )
    units = UnitWriteSerializer(many=True, required=False)
    owner_id = serializers.PrimaryKeyRelatedField(
        source="owner",
        queryset=get_user_model().objects.filter(
            Q(user_type__in=["owner", "admin", "super_admin"]) | Q(is_staff=True)
        ),
        required=False,
        write_only=True,
    )

    class Meta(PropertyWriteSerializer.Meta):
        fields = PropertyWriteSerializer.Meta.fields + ["rental_mode", "units", "owner_id"]

    def validate_monthly_rent(self, value: Decimal) -> Decimal:
        return value

    def validate_owner_id(self, value):  # type: ignore
        if not is_platform_admin(self.context["request"].user):
            raise serializers.ValidationError(
                "Solo los administradores pueden publicar a nombre de otro propietario."
            )
        return value

    def validate(self, attrs):  # type: ignore
        attrs = super().validate(attrs)
        if self.instance is not None:
            # Rental mode changes go through rent-complete / change-mode.
            attrs.pop("rental_mode", None)
            attrs.pop("units", None)
            attrs.pop("owner", None)
            if self.instance.rental_mode == Property.RentalMode.COMPLETE and "monthly_rent" in attrs:
                self._check_complete_rent(attrs.get("monthly_rent"))
            else:
                attrs.pop("monthly_rent", None)
            return attrs
        if attrs["rental_mode"] == Property.RentalMode.COMPLETE:
            self._check_complete_rent(attrs.get("monthly_rent"))
        return attrs

    def _check_complete_rent(self, value: Decimal | None) -> None:
        if value is None:
            raise serializers.ValidationError({"monthly_rent": [REQUIRED_FIELDS_MESSAGE]})
        try:
            PropertyWriteSerializer.validate_monthly_rent(self, value)
        except serializers.ValidationError as exc:
            raise serializers.ValidationError({"monthly_rent": exc.detail}) from exc

    def create(self, validated_data):  # type: ignore
        owner = validated_data.pop("owner", None) or self.context["request"].user
        return services.create_container(owner, validated_data)

    def to_representation(self, instance):  # type: ignore
        return ContainerSerializer(instance, context=self.context).data


class UnitRentalStatusSerializer(serializers.Serializer):
    is_rented = serializers.BooleanField()


class RentalModeSerializer(serializers.Serializer):
    mode = serializers.ChoiceField(
        choices=[Property.RentalMode.BY_UNIT],
        error_messages={"invalid_choice": "Modo de arriendo no válido."},
    )


class RejectSerializer(serializers.Serializer):
    reason = serializers.CharField(
        error_messages={
            "required": "Debe indicar el motivo del rechazo.",
            "blank": "Debe indicar el motivo del rechazo.",
        }
    )


class InterestSerializer(serializers.Serializer):
    message = serializers.CharField(required=False, allow_blank=True, max_length=500)
