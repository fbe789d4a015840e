"""Admin registrations for the back office."""

from __future__ import annotations

from django.contrib import admin

from .models import ActivityLog, SystemConfig


@admin.register(ActivityLog)
class ActivityLogAdmin(admin.ModelAdmin):
    list_display = ("type", "message", "user", "timestamp")
    list_filter = ("type",)
    search_fields = ("message", "user__email")
    readonly_fields = ("type", "message", "user", "property", "timestamp")


@admin.register(SystemConfig)
class SystemConfigAdmin(admin.ModelAdmin):
    list_display = ("commission_rate", "min_property_price", "max_property_price", "auto_approval_enabled")

    def has_add_permission(self, request):  # type: ignore
        return not SystemConfig.objects.exists()

    def has_delete_permission(self, request, obj=None):  # type: ignore
        return False
