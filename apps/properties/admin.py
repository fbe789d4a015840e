"""Admin registrations for properties domain."""

from __future__ import annotations

from django.contrib import admin

from .models import (
    Amenity,
    CommonArea,
    Property,
    PropertyCommonArea,
    PropertyFeature,
    PropertyImage,
    PropertyInstitution,
    PropertyRule,
    PropertyService,
    PropertyType,
)


@admin.register(Amenity)
class AmenityAdmin(admin.ModelAdmin):
    list_display = ("name", "icon")
    search_fields = ("name",)


class PropertyImageInline(admin.TabularInline):
    model = PropertyImage
    extra = 0
    fields = ("url", "public_id", "order_position", "is_featured")


class PropertyInstitutionInline(admin.TabularInline):
    model = PropertyInstitution
    extra = 0
    autocomplete_fields = ("institution",)


class PropertyRuleInline(admin.TabularInline):
    model = PropertyRule
    extra = 0


class PropertyServiceInline(admin.TabularInline):
    model = PropertyService
    extra = 0


class PropertyCommonAreaInline(admin.TabularInline):
    model = PropertyCommonArea
    extra = 0


class PropertyFeatureInline(admin.StackedInline):
    model = PropertyFeature
    can_delete = False


@admin.register(Property)
class PropertyAdmin(admin.ModelAdmin):
    list_display = (
        "title",
        "city",
        "property_type",
        "status",
        "monthly_rent",
        "is_featured",
        "is_rented",
        "owner",
    )
    list_filter = (
        "status",
        "property_type",
        "is_container",
        "rental_mode",
        "is_featured",
        "is_rented",
        "city__department",
    )
    search_fields = ("title", "street", "neighborhood", "owner__email")
    inlines = (
        PropertyImageInline,
        PropertyInstitutionInline,
        PropertyRuleInline,
        PropertyServiceInline,
        PropertyCommonAreaInline,
        PropertyFeatureInline,
    )
    raw_id_fields = ("parent",)
    filter_horizontal = ("amenities",)
    readonly_fields = ("created_at", "updated_at", "submitted_at", "reviewed_at", "views_count", "interests_count")


@admin.register(PropertyType)
class PropertyTypeAdmin(admin.ModelAdmin):
    list_display = ("name", "description")
    search_fields = ("name",)


@admin.register(CommonArea)
class CommonAreaAdmin(admin.ModelAdmin):
    list_display = ("name", "slug", "icon")
    search_fields = ("name",)
    prepopulated_fields = {"slug": ("name",)}
