"""FilterSet for the student request board."""

from __future__ import annotations

import django_filters  # type: ignore
from django.db.models import Q  # type: ignore

from .models import StudentRequest


class StudentRequestFilterSet(django_filters.FilterSet):
    city = django_filters.NumberFilter(field_name="city_id")
    department = django_filters.NumberFilter(field_name="city__department_id")
    institution = django_filters.NumberFilter(field_name="institution_id")
    property_type = django_filters.CharFilter(method="filter_property_type")
    min_budget = django_filters.NumberFilter(field_name="budget_max", lookup_expr="gte")
    max_budget = django_filters.NumberFilter(field_name="budget_max", lookup_expr="lte")
    # Matches the catalogue institution or the free-text target
    university = django_filters.CharFilter(method="filter_university")

    class Meta:
        model = StudentRequest
        fields = ["status", "city", "institution"]

    def filter_property_type(self, queryset, name, value):  # type: ignore
        value = (value or "").strip()
        if value.isdigit():
            return queryset.filter(property_type_desired_id=int(value))
        return queryset.filter(property_type_desired__name__iexact=value)

    def filter_university(self, queryset, name, value):  # type: ignore
        value = (value or "").strip()
        if not value:
            return queryset
        return queryset.filter(
            Q(university_target__icontains=value)
            | Q(institution__name__icontains=value)
            | Q(institution__acronym__iexact=value)
        )
