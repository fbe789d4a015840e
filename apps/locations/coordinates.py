"""Latitude/longitude parsing shared by institutions and listings.

Forms in Colombia commonly type decimals with a comma ("4,6097"), and map
pickers send floats; both end up here.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any

from django.core.validators import MaxValueValidator, MinValueValidator  # type: ignore

LATITUDE_VALIDATORS = [
    MinValueValidator(Decimal("-90"), message="La latitud debe estar entre -90 y 90."),
    MaxValueValidator(Decimal("90"), message="La latitud debe estar entre -90 y 90."),
]
LONGITUDE_VALIDATORS = [
    MinValueValidator(Decimal("-180"), message="La longitud debe estar entre -180 y 180."),
    MaxValueValidator(Decimal("180"), message="La longitud debe estar entre -180 y 180."),
]


def normalize_coordinate(value: Any) -> Decimal | None:
    """Return the coordinate as Decimal, or None when it is empty or not numeric."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float, Decimal)):
        text = str(value)
    else:
        text = str(value).strip().replace(",", ".")
    if not text:
        return None
    try:
        number = Decimal(text)
    except InvalidOperation:
        return None
    if not number.is_finite():
        return None
    try:
        return number.quantize(Decimal("0.0000001"))
    except InvalidOperation:
        # Too many digits to quantize; left as is for the range validators.
        return number
