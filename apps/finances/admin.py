"""Admin registrations for finances domain."""

from __future__ import annotations

from django.contrib import admin

from .models import PaymentRequest, Subscription


@admin.register(PaymentRequest)
class PaymentRequestAdmin(admin.ModelAdmin):
    list_display = ("reference_code", "user", "amount", "plan_type", "status", "created_at", "processed_at")
    list_filter = ("status", "plan_type")
    search_fields = ("reference_code", "user__email", "user__name")
    readonly_fields = ("created_at", "processed_at")


@admin.register(Subscription)
class SubscriptionAdmin(admin.ModelAdmin):
    list_display = ("user", "plan", "plan_type", "status", "started_at", "expires_at")
    list_filter = ("status", "plan_type")
    search_fields = ("user__email",)
