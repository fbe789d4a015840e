"""
Model fields that keep sensitive values encrypted in the database.
"""

from __future__ import annotations

from django.core.validators import MaxLengthValidator  # type: ignore
from django.db import models  # type: ignore

from .encryption import decrypt_value, encrypt_value


class EncryptedTextField(models.TextField):
    """
    Text column holding Fernet ciphertext.

    The model attribute is always plaintext; ``max_length`` validates the
    plaintext, the column itself is unbounded because ciphertext is longer.
    """

    description = "Encrypted text"

    def __init__(self, *args, **kwargs):
        self.plaintext_max_length = kwargs.pop("max_length", None)
        if self.plaintext_max_length:
            kwargs["validators"] = [
                *kwargs.get("validators", []),
                MaxLengthValidator(self.plaintext_max_length),
            ]
        super().__init__(*args, **kwargs)

    def deconstruct(self):  # type: ignore
        name, path, args, kwargs = super().deconstruct()
        if self.plaintext_max_length:
            kwargs["max_length"] = self.plaintext_max_length
            kwargs.pop("validators", None)
        return name, path, args, kwargs

    def from_db_value(self, value, expression, connection):  # type: ignore
        if value is None:
            return value
        return decrypt_value(value)

    def get_prep_value(self, value):  # type: ignore
        value = super().get_prep_value(value)
        if value is None or value == "":
            return value
        return encrypt_value(str(value))

    def to_python(self, value):  # type: ignore
        if value is None:
            return value
        return str(value)
