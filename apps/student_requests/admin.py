"""Admin registrations for student requests."""

from __future__ import annotations

from django.contrib import admin

from .models import StudentRequest


@admin.register(StudentRequest)
class StudentRequestAdmin(admin.ModelAdmin):
    list_display = ("student_name", "city", "property_type_desired", "budget_max", "move_in_date", "status")
    list_filter = ("status", "city__department", "property_type_desired")
    search_fields = ("student_name", "student_email", "university_target")
