"""API exceptions with status codes DRF does not ship."""

from __future__ import annotations

from django.db.models import ProtectedError  # type: ignore
from rest_framework import status  # type: ignore
from rest_framework.exceptions import APIException  # type: ignore


class ConflictError(APIException):
    """The request clashes with existing data (duplicates, referenced rows)."""

    status_code = status.HTTP_409_CONFLICT
    default_detail = "El recurso entra en conflicto con datos existentes."
    default_code = "conflict"


class ServiceUnavailableError(APIException):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = "Servicio externo no configurado."
    default_code = "service_unavailable"


def delete_or_conflict(instance, message: str) -> None:
    """Delete ``instance``; rows still referenced through PROTECT become a 409."""
    try:
        instance.delete()
    except ProtectedError as exc:
        raise ConflictError(message) from exc
