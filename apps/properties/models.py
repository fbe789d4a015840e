"""Listing domain models for EstuArriendo.

A listing (``Property``) is published by an owner, reviewed by an admin
and only then shown in the public search. Images are hosted on Cloudinary,
so the database keeps their URL and public id rather than the files.
"""

from __future__ import annotations

from decimal import Decimal

from django.conf import settings  # type: ignore
from django.core.validators import MinValueValidator  # type: ignore
from django.db import models  # type: ignore
from django.db.models import F  # type: ignore
from django.utils import timezone  # type: ignore
from django.utils.text import slugify  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from apps.locations.coordinates import LATITUDE_VALIDATORS, LONGITUDE_VALIDATORS


class PropertyType(models.Model):
    """Kind of housing: pensión, habitación, apartamento, aparta-estudio."""

    name = models.CharField(max_length=50, unique=True)
    description = models.TextField(blank=True)

    class Meta:
        verbose_name = _("Tipo de inmueble")
        verbose_name_plural = _("Tipos de inmueble")
        ordering = ["name"]

    def __str__(self) -> str:
        return self.name


class Amenity(models.Model):
    """Comodidad que se puede asociar a un inmueble (wifi, lavadora...)."""

    name = models.CharField(max_length=100, unique=True)
    icon = models.CharField(
        max_length=100,
        blank=True,
        help_text=_("Identificador del icono en el frontend."),
    )

    class Meta:
        verbose_name = _("Comodidad")
        verbose_name_plural = _("Comodidades")
        ordering = ["name"]

    def __str__(self) -> str:
        return self.name


class CommonArea(models.Model):
    """Shared space of a pension or apartment (cocina, sala, patio de ropas...)."""

    name = models.CharField(max_length=100, unique=True)
    slug = models.SlugField(max_length=120, unique=True, blank=True)
    icon = models.CharField(max_length=100, blank=True)
    description = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Zona común")
        verbose_name_plural = _("Zonas comunes")
        ordering = ["name"]

    def __str__(self) -> str:
        return self.name

    def save(self, *args, **kwargs):  # type: ignore
        if not self.slug:
            self.slug = slugify(self.name)
        super().save(*args, **kwargs)


class Property(models.Model):
    """
    Inmueble publicado para arriendo a estudiantes.

    Three shapes share this table:
    - standalone listings (``parent`` empty, ``is_container`` false);
    - containers: pensions or apartments rented whole or room by room
      (``is_container`` true);
    - units: rooms of a container (``parent`` set). They inherit owner and
      address from the container.
    """

    class Status(models.TextChoices):
        PENDING = "pending", _("En revisión")
        APPROVED = "approved", _("Aprobado")
        REJECTED = "rejected", _("Rechazado")

    class RentalMode(models.TextChoices):
        COMPLETE = "complete", _("Completo")
        BY_UNIT = "by_unit", _("Por habitación")

    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="properties",
    )
    property_type = models.ForeignKey(
        PropertyType,
        on_delete=models.PROTECT,
        related_name="properties",
    )
    title = models.CharField(max_length=100)
    slug = models.SlugField(max_length=120, unique=True, blank=True)
    description = models.TextField()

    monthly_rent = models.DecimalField(
        max_digits=12, decimal_places=2, validators=[MinValueValidator(Decimal("0"))]
    )
    deposit = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    currency = models.CharField(max_length=3, default="COP")
    bedrooms = models.PositiveSmallIntegerField(default=1)
    bathrooms = models.PositiveSmallIntegerField(default=1)
    area = models.DecimalField(
        max_digits=8, decimal_places=2, null=True, blank=True, help_text=_("Área en m².")
    )
    floor = models.SmallIntegerField(null=True, blank=True)
    available_from = models.DateField(null=True, blank=True)

    city = models.ForeignKey("locations.City", on_delete=models.PROTECT, related_name="properties")
    street = models.CharField(max_length=255)
    neighborhood = models.CharField(max_length=120, blank=True)
    postal_code = models.CharField(max_length=10, blank=True)
    latitude = models.DecimalField(
        max_digits=10, decimal_places=7, null=True, blank=True, validators=LATITUDE_VALIDATORS
    )
    longitude = models.DecimalField(
        max_digits=11, decimal_places=7, null=True, blank=True, validators=LONGITUDE_VALIDATORS
    )

    amenities = models.ManyToManyField(Amenity, related_name="properties", blank=True)
    institutions = models.ManyToManyField(
        "locations.Institution",
        through="PropertyInstitution",
        related_name="properties",
        blank=True,
    )
    common_areas = models.ManyToManyField(
        CommonArea,
        through="PropertyCommonArea",
        related_name="properties",
        blank=True,
    )

    parent = models.ForeignKey(
        "self",
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="units",
    )
    is_container = models.BooleanField(default=False)
    rental_mode = models.CharField(max_length=20, choices=RentalMode.choices, blank=True)
    total_units = models.PositiveSmallIntegerField(default=0)
    available_units = models.PositiveSmallIntegerField(default=0)

    status = models.CharField(max_length=20, choices=Status.choices, default=Status.PENDING)
    is_featured = models.BooleanField(default=False)
    is_verified = models.BooleanField(default=False)
    is_rented = models.BooleanField(default=False)
    rejection_reason = models.TextField(blank=True)
    submitted_at = models.DateTimeField(default=timezone.now)
    reviewed_at = models.DateTimeField(null=True, blank=True)

    views_count = models.PositiveIntegerField(default=0)
    interests_count = models.PositiveIntegerField(default=0)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Inmueble")
        verbose_name_plural = _("Inmuebles")
        ordering = ["-is_featured", "-created_at"]
        indexes = [
            models.Index(fields=["status"]),
            models.Index(fields=["owner", "status"]),
            models.Index(fields=["city", "status"]),
            models.Index(fields=["parent", "status"]),
        ]

    def __str__(self) -> str:
        return self.title

    def save(self, *args, **kwargs):  # type: ignore
        if not self.slug:
            base_slug = slugify(self.title)[:100] or "inmueble"
            candidate = base_slug
            counter = 1
            while self.__class__.objects.filter(slug=candidate).exclude(pk=self.pk).exists():
                counter += 1
                candidate = f"{base_slug}-{counter}"
            self.slug = candidate
        super().save(*args, **kwargs)

    # --- Moderation -----------------------------------------------------------
    def approve(self) -> None:
        self.status = self.Status.APPROVED
        self.is_verified = True
        self.rejection_reason = ""
        self.reviewed_at = timezone.now()
        self.save(update_fields=["status", "is_verified", "rejection_reason", "reviewed_at", "updated_at"])

    def reject(self, reason: str) -> None:
        self.status = self.Status.REJECTED
        self.is_verified = False
        self.rejection_reason = reason
        self.reviewed_at = timezone.now()
        self.save(update_fields=["status", "is_verified", "rejection_reason", "reviewed_at", "updated_at"])

    def resubmit(self) -> None:
        """Edited rejected listings go back to the review queue."""
        self.status = self.Status.PENDING
        self.rejection_reason = ""
        self.submitted_at = timezone.now()
        self.reviewed_at = None

    # --- Counters -------------------------------------------------------------
    def increment_views(self) -> None:
        Property.objects.filter(pk=self.pk).update(views_count=F("views_count") + 1)
        self.views_count += 1

    def increment_interests(self) -> None:
        Property.objects.filter(pk=self.pk).update(interests_count=F("interests_count") + 1)
        self.interests_count += 1

    @property
    def is_unit(self) -> bool:
        return self.parent_id is not None

    @property
    def featured_image(self) -> "PropertyImage | None":
        images = list(self.images.all())
        for image in images:
            if image.is_featured:
                return image
        return images[0] if images else None


class PropertyImage(models.Model):
    """Imagen alojada en Cloudinary."""

    property = models.ForeignKey(Property, on_delete=models.CASCADE, related_name="images")
    url = models.URLField(max_length=500)
    public_id = models.CharField(max_length=255, blank=True)
    is_featured = models.BooleanField(default=False)
    order_position = models.PositiveSmallIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("Imagen del inmueble")
        verbose_name_plural = _("Imágenes del inmueble")
        ordering = ["order_position", "id"]

    def __str__(self) -> str:
        return f"{self.property.title} [{self.order_position}]"


class PropertyInstitution(models.Model):
    """Nearby institution with the walking distance in metres."""

    property = models.ForeignKey(Property, on_delete=models.CASCADE, related_name="nearby_institutions")
    institution = models.ForeignKey(
        "locations.Institution", on_delete=models.CASCADE, related_name="nearby_properties"
    )
    distance = models.PositiveIntegerField(null=True, blank=True, help_text=_("Distancia en metros."))

    class Meta:
        ordering = ["distance", "id"]
        constraints = [
            models.UniqueConstraint(fields=["property", "institution"], name="unique_property_institution"),
        ]

    def __str__(self) -> str:
        return f"{self.property_id} → {self.institution_id}"


class PropertyCommonArea(models.Model):
    property = models.ForeignKey(Property, on_delete=models.CASCADE, related_name="property_common_areas")
    common_area = models.ForeignKey(CommonArea, on_delete=models.CASCADE, related_name="property_links")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["property", "common_area"], name="unique_property_common_area"),
        ]

    def __str__(self) -> str:
        return f"{self.property_id} → {self.common_area_id}"


class PropertyRule(models.Model):
    """House rule of a listing. ``value`` carries the detail, e.g. the curfew hour."""

    class RuleType(models.TextChoices):
        VISITS = "visits", _("Visitas")
        PETS = "pets", _("Mascotas")
        SMOKING = "smoking", _("Fumar")
        NOISE = "noise", _("Ruido")
        CURFEW = "curfew", _("Hora de llegada")
        TENANT_PROFILE = "tenant_profile", _("Perfil del inquilino")
        COUPLES = "couples", _("Parejas")
        CHILDREN = "children", _("Niños")

    property = models.ForeignKey(Property, on_delete=models.CASCADE, related_name="rules")
    rule_type = models.CharField(max_length=20, choices=RuleType.choices)
    is_allowed = models.BooleanField(default=False)
    value = models.CharField(max_length=100, blank=True)
    description = models.TextField(blank=True)

    class Meta:
        verbose_name = _("Regla del inmueble")
        verbose_name_plural = _("Reglas del inmueble")
        ordering = ["rule_type"]
        constraints = [
            models.UniqueConstraint(fields=["property", "rule_type"], name="unique_property_rule"),
        ]

    def __str__(self) -> str:
        return f"{self.property_id}: {self.rule_type}"


class PropertyService(models.Model):
    """Service offered with the rent: meals, housekeeping, laundry..."""

    class ServiceType(models.TextChoices):
        BREAKFAST = "breakfast", _("Desayuno")
        LUNCH = "lunch", _("Almuerzo")
        DINNER = "dinner", _("Cena")
        HOUSEKEEPING = "housekeeping", _("Aseo")
        LAUNDRY = "laundry", _("Lavandería")
        WIFI = "wifi", _("Internet")
        UTILITIES = "utilities", _("Servicios públicos")

    property = models.ForeignKey(Property, on_delete=models.CASCADE, related_name="services")
    service_type = models.CharField(max_length=20, choices=ServiceType.choices)
    is_included = models.BooleanField(default=True)
    additional_cost = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal("0"))],
    )
    description = models.TextField(blank=True)

    class Meta:
        verbose_name = _("Servicio del inmueble")
        verbose_name_plural = _("Servicios del inmueble")
        ordering = ["service_type"]
        constraints = [
            models.UniqueConstraint(fields=["property", "service_type"], name="unique_property_service"),
        ]

    def __str__(self) -> str:
        return f"{self.property_id}: {self.service_type}"


class PropertyFeature(models.Model):
    property = models.OneToOneField(Property, on_delete=models.CASCADE, related_name="features")
    is_furnished = models.BooleanField(default=False)
    has_parking = models.BooleanField(default=False)
    allows_pets = models.BooleanField(default=False)

    def __str__(self) -> str:
        return f"{self.property_id} features"
