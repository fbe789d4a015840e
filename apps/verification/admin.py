"""Admin registrations for verification documents."""

from __future__ import annotations

from django.contrib import admin

from .models import VerificationDocuments


@admin.register(VerificationDocuments)
class VerificationDocumentsAdmin(admin.ModelAdmin):
    list_display = ("user", "submitted_at", "processed_at")
    search_fields = ("user__email", "user__name")
    readonly_fields = ("submitted_at", "processed_at")
