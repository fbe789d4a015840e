"""
Fernet helpers for identity documents.

Document references (Cloudinary URLs of ID cards and selfies) are stored
encrypted at rest and decrypted only for the reviewing admin.
"""

from __future__ import annotations

import base64
import hashlib
import logging

from cryptography.fernet import Fernet, InvalidToken
from django.conf import settings  # type: ignore
from django.core.exceptions import ImproperlyConfigured  # type: ignore

logger = logging.getLogger(__name__)


class DocumentDecryptionError(Exception):
    """Stored ciphertext could not be decrypted with the configured key."""


def get_encryption_key() -> bytes:
    """
    Return the Fernet key built from ``settings.ENCRYPTION_KEY``.

    Any passphrase is accepted: it is hashed to the 32 bytes Fernet needs.
    """
    key = getattr(settings, "ENCRYPTION_KEY", None)
    if not key:
        raise ImproperlyConfigured(
            "ENCRYPTION_KEY no está configurada. "
            "Genere una con: python -c 'from cryptography.fernet import Fernet; print(Fernet.generate_key().decode())'"
        )
    if isinstance(key, str):
        key = base64.urlsafe_b64encode(hashlib.sha256(key.encode()).digest())
    return key


def _fernet() -> Fernet:
    return Fernet(get_encryption_key())


def encrypt_value(plaintext: str) -> str:
    if not plaintext:
        return ""
    return _fernet().encrypt(plaintext.encode()).decode()


def decrypt_value(token: str) -> str:
    if not token:
        return ""
    try:
        return _fernet().decrypt(token.encode()).decode()
    except InvalidToken as exc:
        logger.error("Unable to decrypt stored document reference; check ENCRYPTION_KEY")
        raise DocumentDecryptionError("No fue posible descifrar el documento almacenado.") from exc
