"""Serializers for authentication flows (register, login, password reset)."""

from __future__ import annotations

import logging
import secrets
from datetime import timedelta
from typing import Any

from django.contrib.auth import get_user_model  # type: ignore
from django.db import transaction  # type: ignore
from django.utils import timezone  # type: ignore
from rest_framework import serializers  # type: ignore

from apps.administration.models import ActivityLog
from apps.administration.services import log_activity
from apps.notifications.services import send_email_notification
from .models import PasswordResetToken
from .serializers import PhoneField


User = get_user_model()
logger = logging.getLogger(__name__)

LOGIN_ATTEMPTS_THRESHOLD = 5
RESET_CODE_TTL = timedelta(minutes=15)


def _find_user(identifier: str):
    """Look a user up by email when the identifier has an '@', by phone otherwise."""
    if "@" in identifier:
        return User.objects.get(email__iexact=identifier)
    return User.objects.get(phone=User.objects.normalize_phone(identifier))


class RegisterSerializer(serializers.Serializer):
    """Sign-up for students and owners.

    Owners additionally provide their identification document and whether
    they publish as a person or as an agency.
    """

    email = serializers.EmailField()
    name = serializers.CharField(min_length=3, max_length=100)
    phone = PhoneField()
    whatsapp = PhoneField(required=False, allow_blank=True)
    password = serializers.CharField(min_length=6, max_length=50, write_only=True)
    password_confirm = serializers.CharField(min_length=6, max_length=50, write_only=True)
    user_type = serializers.ChoiceField(
        choices=[User.UserType.TENANT, User.UserType.OWNER],
        default=User.UserType.TENANT,
    )
    owner_role = serializers.ChoiceField(choices=User.OwnerRole.choices, required=False, allow_blank=True)
    id_type = serializers.ChoiceField(choices=User.IdType.choices, required=False, allow_blank=True)
    id_number = serializers.CharField(required=False, allow_blank=True, max_length=30)
    payment_preference = serializers.ChoiceField(
        choices=User.PaymentPreference.choices, required=False, allow_blank=True
    )

    def validate(self, attrs: dict[str, Any]) -> dict[str, Any]:  # type: ignore
        if attrs.get("password") != attrs.get("password_confirm"):
            raise serializers.ValidationError({"password_confirm": "Las contraseñas no coinciden."})
        email = attrs.get("email")
        phone = attrs.get("phone", "")
        if User.objects.filter(email__iexact=email).exists():
            raise serializers.ValidationError({"email": "Ya existe un usuario con este email."})
        if phone and User.objects.filter(phone=phone).exists():
            raise serializers.ValidationError({"phone": "Ya existe un usuario con este teléfono."})

        if attrs.get("user_type") == User.UserType.OWNER:
            missing = {
                field: "Este campo es obligatorio para propietarios."
                for field in ("owner_role", "id_type", "id_number")
                if not attrs.get(field)
            }
            if missing:
                raise serializers.ValidationError(missing)
        else:
            attrs.pop("owner_role", None)
        return attrs

    @transaction.atomic
    def create(self, validated_data: dict[str, Any]):  # type: ignore
        password = validated_data.pop("password")
        validated_data.pop("password_confirm", None)
        user = User.objects.create_user(password=password, **validated_data)
        log_activity(
            ActivityLog.Type.USER_REGISTERED,
            f"Nuevo {user.get_user_type_display().lower()} registrado: {user.email}",
            user=user,
        )
        logger.info(f"User {user.id} registered as {user.user_type}")
        return user


class OwnerRegisterSerializer(RegisterSerializer):
    """Owner registration form: user_type is forced to owner."""

    user_type = serializers.HiddenField(default=User.UserType.OWNER)


class LoginSerializer(serializers.Serializer):
    login = serializers.CharField()
    password = serializers.CharField(write_only=True)

    def validate(self, attrs: dict[str, Any]) -> dict[str, Any]:  # type: ignore
        login = attrs.get("login", "")
        password = attrs.get("password", "")

        try:
            user = _find_user(login)
        except User.DoesNotExist:
            raise serializers.ValidationError({"login": "Credenciales inválidas."})

        if user.is_locked:
            raise serializers.ValidationError(
                {"non_field_errors": ["Cuenta bloqueada temporalmente. Intente más tarde."]}
            )

        if not user.check_password(password):
            user.register_failed_attempt(threshold=LOGIN_ATTEMPTS_THRESHOLD)
            raise serializers.ValidationError({"login": "Credenciales inválidas."})

        if not user.is_active:
            raise serializers.ValidationError({"non_field_errors": ["La cuenta está desactivada."]})

        user.unlock()
        attrs["user"] = user
        return attrs


class PasswordResetRequestSerializer(serializers.Serializer):
    """Resolves the account; ``user`` is None for unknown identifiers."""

    identifier = serializers.CharField()

    def validate(self, attrs: dict[str, Any]) -> dict[str, Any]:  # type: ignore
        try:
            attrs["user"] = _find_user(attrs.get("identifier", ""))
        except User.DoesNotExist:
            logger.info("Password reset requested for an unknown identifier")
            attrs["user"] = None
        return attrs

    @transaction.atomic
    def create(self, validated_data: dict[str, Any]):  # type: ignore
        user = validated_data["user"]
        PasswordResetToken.objects.filter(user=user, is_used=False).update(is_used=True)

        code = f"{secrets.randbelow(1_000_000):06d}"
        token = PasswordResetToken.objects.create(
            user=user,
            code=code,
            expires_at=timezone.now() + RESET_CODE_TTL,
            attempts_left=3,
        )

        send_email_notification(
            recipient_email=user.email,
            subject="Código para restablecer tu contraseña",
            context={"message": f"Tu código para restablecer la contraseña es: {code}"},
        )
        return token


class PasswordResetVerifySerializer(serializers.Serializer):
    """Checks a code without consuming it so the UI can move to the next step."""

    identifier = serializers.CharField()
    code = serializers.CharField(max_length=6)

    def validate(self, attrs: dict[str, Any]) -> dict[str, Any]:  # type: ignore
        try:
            user = _find_user(attrs.get("identifier", ""))
        except User.DoesNotExist as exc:
            raise serializers.ValidationError({"code": "El código expiró. Solicite uno nuevo."}) from exc
        token = (
            PasswordResetToken.objects.filter(user=user, is_used=False).order_by("-created_at").first()
        )
        if token is None or token.is_expired or token.attempts_left == 0:
            raise serializers.ValidationError({"code": "El código expiró. Solicite uno nuevo."})
        if token.code != attrs["code"]:
            token.decrement_attempt()
            raise serializers.ValidationError({"code": "Código incorrecto."})
        attrs["user"] = user
        return attrs


class PasswordResetConfirmSerializer(serializers.Serializer):
    identifier = serializers.CharField()
    code = serializers.CharField(max_length=6)
    new_password = serializers.CharField(min_length=6, max_length=50)
    new_password_confirm = serializers.CharField(min_length=6, max_length=50)

    def validate(self, attrs: dict[str, Any]) -> dict[str, Any]:  # type: ignore
        if attrs.get("new_password") != attrs.get("new_password_confirm"):
            raise serializers.ValidationError({"new_password_confirm": "Las contraseñas no coinciden."})
        try:
            attrs["user"] = _find_user(attrs.get("identifier", ""))
        except User.DoesNotExist as exc:
            raise serializers.ValidationError({"code": "Código no encontrado. Solicite uno nuevo."}) from exc
        return attrs

    def create(self, validated_data: dict[str, Any]):  # type: ignore
        # Failed attempts persist even when validation fails.
        user = validated_data["user"]
        code = validated_data["code"]

        token = PasswordResetToken.objects.filter(user=user, is_used=False).order_by("-created_at").first()
        if token is None:
            raise serializers.ValidationError({"code": "Código no encontrado. Solicite uno nuevo."})

        if token.is_expired:
            token.mark_used()
            raise serializers.ValidationError({"code": "El código expiró."})

        if token.attempts_left == 0:
            token.mark_used()
            raise serializers.ValidationError({"code": "Demasiados intentos. Solicite un nuevo código."})

        if token.code != code:
            token.decrement_attempt()
            raise serializers.ValidationError({"code": "Código incorrecto."})

        user.set_password(validated_data["new_password"])
        user.failed_login_attempts = 0
        user.locked_until = None
        user.save(update_fields=["password", "failed_login_attempts", "locked_until"])
        token.mark_used()
        return user
