"""Cloudinary helpers.

Browsers upload images straight to Cloudinary with a short-lived signature
issued here; the API only ever stores the resulting URL and public id.
"""

from __future__ import annotations

import logging
import re
import time

import cloudinary  # type: ignore
import cloudinary.uploader  # type: ignore
import cloudinary.utils  # type: ignore
from django.conf import settings  # type: ignore

logger = logging.getLogger(__name__)

FOLDER_PATTERN = re.compile(r"^[A-Za-z0-9_\-/]{1,100}$")


class CloudStorageConfigurationError(RuntimeError):
    """Raised when Cloudinary credentials are missing."""


class InvalidFolderError(ValueError):
    pass


def _credentials() -> dict[str, str]:
    credentials = {
        "cloud_name": settings.CLOUDINARY_CLOUD_NAME,
        "api_key": settings.CLOUDINARY_API_KEY,
        "api_secret": settings.CLOUDINARY_API_SECRET,
    }
    if not all(credentials.values()):
        raise CloudStorageConfigurationError(
            "El servicio de imágenes no está configurado. Contacte al administrador."
        )
    return credentials


def configure() -> dict[str, str]:
    credentials = _credentials()
    cloudinary.config(secure=True, **credentials)
    return credentials


def resolve_folder(folder: str | None) -> str:
    """Every upload lives below ``CLOUDINARY_DEFAULT_FOLDER``."""
    root = settings.CLOUDINARY_DEFAULT_FOLDER
    folder = (folder or "").strip().strip("/")
    if not folder:
        return root
    if not FOLDER_PATTERN.match(folder) or ".." in folder:
        raise InvalidFolderError("Nombre de carpeta no válido.")
    if folder == root or folder.startswith(f"{root}/"):
        return folder
    return f"{root}/{folder}"


def build_upload_signature(folder: str | None = None) -> dict[str, object]:
    """Parameters the browser sends along with the file to Cloudinary's upload API."""
    credentials = configure()
    folder = resolve_folder(folder)
    timestamp = int(time.time())
    signature = cloudinary.utils.api_sign_request(
        {"timestamp": timestamp, "folder": folder}, credentials["api_secret"]
    )
    return {
        "signature": signature,
        "timestamp": timestamp,
        "api_key": credentials["api_key"],
        "cloud_name": credentials["cloud_name"],
        "folder": folder,
    }


def destroy_asset(public_id: str) -> bool:
    """Delete an uploaded image; returns False when Cloudinary does not know it."""
    configure()
    result = cloudinary.uploader.destroy(public_id, invalidate=True)
    deleted = result.get("result") == "ok"
    logger.info(f"Cloudinary destroy {public_id}: {result.get('result')}")
    return deleted
