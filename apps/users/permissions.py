"""Permission classes shared by every API of the marketplace."""

from __future__ import annotations

from rest_framework import permissions  # type: ignore


def is_platform_admin(user) -> bool:
    """True for authenticated admins, super-admins and Django staff."""
    if not user or not user.is_authenticated:
        return False
    if getattr(user, "is_staff", False) or getattr(user, "is_superuser", False):
        return True
    return hasattr(user, "is_platform_admin") and user.is_platform_admin()


class IsPlatformAdmin(permissions.BasePermission):
    """Moderators: listing review, payment review, document review."""

    message = "Solo los administradores pueden realizar esta acción."

    def has_permission(self, request, view) -> bool:  # type: ignore
        return is_platform_admin(request.user)


class IsSuperAdmin(permissions.BasePermission):
    """
    Back-office owners.

    Super-admins manage master data, users and the system configuration.
    Django superusers are always let through.
    """

    message = "Solo el super administrador puede realizar esta acción."

    def has_permission(self, request, view) -> bool:  # type: ignore
        user = request.user
        if not user.is_authenticated:
            return False
        if getattr(user, "is_superuser", False):
            return True
        return hasattr(user, "is_super_admin") and user.is_super_admin()


class IsSuperAdminOrReadOnly(IsSuperAdmin):
    """Anyone can read master data, only super-admins write it."""

    def has_permission(self, request, view) -> bool:  # type: ignore
        if request.method in permissions.SAFE_METHODS:
            return True
        return super().has_permission(request, view)


class IsOwnerUser(permissions.BasePermission):
    """Accounts allowed to publish listings: owners and moderators."""

    message = "Solo los propietarios pueden publicar inmuebles."

    def has_permission(self, request, view) -> bool:  # type: ignore
        user = request.user
        if not user.is_authenticated:
            return False
        if is_platform_admin(user):
            return True
        return hasattr(user, "is_owner") and user.is_owner()
