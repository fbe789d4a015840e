"""Location master data: departments, cities and educational institutions."""

from __future__ import annotations

from django.db import models  # type: ignore
from django.utils.text import slugify  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from .coordinates import LATITUDE_VALIDATORS, LONGITUDE_VALIDATORS


class Department(models.Model):
    """Colombian department (first-level administrative division)."""

    name = models.CharField(_("Nombre"), max_length=100)
    code = models.CharField(_("Código"), max_length=3, unique=True)
    slug = models.SlugField(max_length=120, unique=True, blank=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Departamento")
        verbose_name_plural = _("Departamentos")
        ordering = ["name"]

    def __str__(self) -> str:
        return self.name

    def save(self, *args, **kwargs):  # type: ignore
        self.code = self.code.upper()
        if not self.slug:
            self.slug = slugify(self.name)
        super().save(*args, **kwargs)


class City(models.Model):
    name = models.CharField(_("Nombre"), max_length=100)
    department = models.ForeignKey(Department, on_delete=models.PROTECT, related_name="cities")
    slug = models.SlugField(max_length=120, blank=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Ciudad")
        verbose_name_plural = _("Ciudades")
        ordering = ["name"]
        constraints = [
            models.UniqueConstraint(fields=["department", "slug"], name="unique_city_slug_per_department"),
        ]

    def __str__(self) -> str:
        return f"{self.name}, {self.department.name}"

    def save(self, *args, **kwargs):  # type: ignore
        if not self.slug:
            self.slug = slugify(self.name)
        super().save(*args, **kwargs)


class Institution(models.Model):
    """University or institute that listings can be close to."""

    class Type(models.TextChoices):
        UNIVERSITY = "universidad", _("Universidad")
        CORPORATION = "corporacion", _("Corporación universitaria")
        INSTITUTE = "instituto", _("Instituto")
        TECHNICAL = "tecnico", _("Institución técnica")
        OTHER = "otro", _("Otro")

    name = models.CharField(_("Nombre"), max_length=200)
    acronym = models.CharField(_("Sigla"), max_length=20, blank=True)
    city = models.ForeignKey(City, on_delete=models.PROTECT, related_name="institutions")
    type = models.CharField(max_length=20, choices=Type.choices, default=Type.UNIVERSITY)
    latitude = models.DecimalField(
        max_digits=10, decimal_places=7, null=True, blank=True, validators=LATITUDE_VALIDATORS
    )
    longitude = models.DecimalField(
        max_digits=11, decimal_places=7, null=True, blank=True, validators=LONGITUDE_VALIDATORS
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Institución")
        verbose_name_plural = _("Instituciones")
        ordering = ["name"]
        constraints = [
            models.UniqueConstraint(fields=["name", "city"], name="unique_institution_per_city"),
        ]

    def __str__(self) -> str:
        return self.acronym or self.name
