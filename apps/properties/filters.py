"""FilterSet definitions for listing search."""

from __future__ import annotations

import django_filters  # type: ignore
from django.db.models import Count, Q  # type: ignore

from .models import Property, PropertyType

PENSION_TYPE = "pension"


class PropertyFilterSet(django_filters.FilterSet):
    """Filters of the public search bar and the admin listing tables."""

    # Accepts a city id or a fragment of its name
    city = django_filters.CharFilter(method="filter_city")
    department = django_filters.NumberFilter(field_name="city__department_id")
    # Accepts a property type id or its name ("apartamento"). Pensions list containers only.
    type = django_filters.CharFilter(method="filter_type")
    price_min = django_filters.NumberFilter(field_name="monthly_rent", lookup_expr="gte")
    price_max = django_filters.NumberFilter(field_name="monthly_rent", lookup_expr="lte")
    bedrooms = django_filters.NumberFilter(field_name="bedrooms", lookup_expr="gte")
    bathrooms = django_filters.NumberFilter(field_name="bathrooms", lookup_expr="gte")
    institution = django_filters.NumberFilter(field_name="institutions__id", distinct=True)
    is_featured = django_filters.BooleanFilter(field_name="is_featured")
    is_rented = django_filters.BooleanFilter(field_name="is_rented")
    is_container = django_filters.BooleanFilter(field_name="is_container")
    parent = django_filters.NumberFilter(field_name="parent_id")
    status = django_filters.ChoiceFilter(choices=Property.Status.choices)
    q = django_filters.CharFilter(method="filter_search")

    # CSV of amenity ids, requires all selected amenities
    amenities = django_filters.CharFilter(method="filter_amenities")

    class Meta:
        model = Property
        fields = ["city", "department", "type", "is_featured", "is_rented", "status"]

    def filter_city(self, queryset, name, value):  # type: ignore
        value = (value or "").strip()
        if not value:
            return queryset
        if value.isdigit():
            return queryset.filter(city_id=int(value))
        return queryset.filter(city__name__icontains=value)

    def filter_type(self, queryset, name, value):  # type: ignore
        value = (value or "").strip()
        if not value:
            return queryset
        if value.isdigit():
            queryset = queryset.filter(property_type_id=int(value))
            is_pension = PropertyType.objects.filter(pk=int(value), name__iexact=PENSION_TYPE).exists()
        else:
            queryset = queryset.filter(property_type__name__iexact=value)
            is_pension = value.lower() == PENSION_TYPE
        if is_pension:
            queryset = queryset.filter(is_container=True)
        return queryset

    def filter_search(self, queryset, name, value):  # type: ignore
        value = (value or "").strip()
        if not value:
            return queryset
        return queryset.filter(
            Q(title__icontains=value) | Q(description__icontains=value) | Q(neighborhood__icontains=value)
        )

    def filter_amenities(self, queryset, name, value):  # type: ignore
        if not value:
            return queryset
        try:
            ids = {int(x) for x in str(value).replace(" ", "").split(",") if x}
        except ValueError:
            return queryset
        if not ids:
            return queryset
        # Require all of the amenities: annotate count of matched amenities
        qs = queryset.filter(amenities__id__in=ids).annotate(
            matched_amenities=Count("amenities", filter=Q(amenities__id__in=ids), distinct=True)
        ).filter(matched_amenities=len(ids))
        return qs.distinct()
