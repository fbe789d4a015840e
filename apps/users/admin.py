"""Admin registrations for the users domain."""

from __future__ import annotations

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.utils.translation import gettext_lazy as _

from .models import CustomUser, PasswordResetToken


@admin.register(CustomUser)
class CustomUserAdmin(BaseUserAdmin):
    fieldsets = (
        (None, {"fields": ("email", "password")}),
        (_("Contacto"), {"fields": ("name", "phone", "whatsapp", "payment_preference")}),
        (_("Propietario"), {"fields": ("user_type", "owner_role", "id_type", "id_number")}),
        (
            _("Plan"),
            {"fields": ("plan", "plan_type", "plan_started_at", "plan_expires_at", "premium_since")},
        ),
        (
            _("Verificación"),
            {"fields": ("verification_status", "verification_rejection_reason", "is_verified")},
        ),
        (_("Seguridad"), {"fields": ("failed_login_attempts", "locked_until")}),
        (
            _("Permisos"),
            {"fields": ("is_active", "is_staff", "is_superuser", "groups", "user_permissions")},
        ),
        (_("Fechas"), {"fields": ("last_login", "created_at", "updated_at")}),
    )
    add_fieldsets = (
        (
            None,
            {
                "classes": ("wide",),
                "fields": ("email", "name", "phone", "user_type", "password1", "password2"),
            },
        ),
    )
    list_display = ("email", "name", "user_type", "plan", "verification_status", "is_active", "is_locked")
    list_filter = ("user_type", "plan", "verification_status", "is_active", "is_staff")
    search_fields = ("email", "name", "phone", "id_number")
    ordering = ("email",)
    readonly_fields = ("created_at", "updated_at", "last_login")


@admin.register(PasswordResetToken)
class PasswordResetTokenAdmin(admin.ModelAdmin):
    list_display = ("user", "expires_at", "attempts_left", "is_used", "created_at")
    list_filter = ("is_used", "expires_at")
    search_fields = ("user__email", "user__phone")
