"""Domain services for the listing lifecycle.

submit -> pending -> approved | rejected; editing a rejected listing sends
it back to pending. Each transition writes to the activity log and
notifies the interested party.

Containers (pensions, shared apartments) are rented either complete or
room by room. Their ``total_units``/``available_units`` counters are
recomputed from the units after every change that touches a unit.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any

from django.db import transaction  # type: ignore
from django.db.models import Q  # type: ignore

from apps.administration.models import ActivityLog
from apps.administration.services import get_system_config, log_activity
from apps.notifications import services as notifications
from .models import (
    Property,
    PropertyFeature,
    PropertyImage,
    PropertyInstitution,
    PropertyRule,
    PropertyService,
    PropertyType,
)

logger = logging.getLogger(__name__)

IMAGES_REQUIRED_MESSAGE = "Por favor agregue al menos una imagen."
UNIT_PROPERTY_TYPE = "habitacion"


class PropertyImageNotFoundError(Exception):
    """Raised when an image index does not exist on the listing."""


class LastImageError(Exception):
    """Raised when removing an image would leave a listing without images."""


class ContainerStateError(Exception):
    """Raised when a container cannot switch to the requested rental mode."""


def _replace_images(property_obj: Property, images: list[dict[str, Any]]) -> None:
    property_obj.images.all().delete()
    has_featured = any(image.get("is_featured") for image in images)
    featured_assigned = False
    for position, image in enumerate(images):
        is_featured = bool(image.get("is_featured")) and not featured_assigned
        if not has_featured and position == 0:
            is_featured = True
        featured_assigned = featured_assigned or is_featured
        PropertyImage.objects.create(
            property=property_obj,
            url=image["url"],
            public_id=image.get("public_id", ""),
            is_featured=is_featured,
            order_position=position,
        )


def _replace_institutions(property_obj: Property, institutions: list[dict[str, Any]]) -> None:
    property_obj.nearby_institutions.all().delete()
    seen: set[int] = set()
    for item in institutions:
        institution = item["institution"]
        if institution.pk in seen:
            continue
        seen.add(institution.pk)
        PropertyInstitution.objects.create(
            property=property_obj,
            institution=institution,
            distance=item.get("distance"),
        )


def _replace_rules(property_obj: Property, rules: list[dict[str, Any]]) -> None:
    property_obj.rules.all().delete()
    PropertyRule.objects.bulk_create(PropertyRule(property=property_obj, **rule) for rule in rules)


def _replace_services(property_obj: Property, offered: list[dict[str, Any]]) -> None:
    property_obj.services.all().delete()
    PropertyService.objects.bulk_create(PropertyService(property=property_obj, **item) for item in offered)


def _save_features(property_obj: Property, features: dict[str, Any]) -> None:
    PropertyFeature.objects.update_or_create(property=property_obj, defaults=features)


def _save_details(property_obj: Property, details: dict[str, Any]) -> None:
    """Apply the optional nested collections; ``None`` leaves a collection untouched."""
    if details.get("amenities") is not None:
        property_obj.amenities.set(details["amenities"])
    if details.get("images") is not None:
        _replace_images(property_obj, details["images"])
    if details.get("institutions") is not None:
        _replace_institutions(property_obj, details["institutions"])
    if details.get("rules") is not None:
        _replace_rules(property_obj, details["rules"])
    if details.get("services") is not None:
        _replace_services(property_obj, details["services"])
    if details.get("common_areas") is not None:
        property_obj.common_areas.set(details["common_areas"])
    if details.get("features") is not None:
        _save_features(property_obj, details["features"])


def _pop_details(data: dict[str, Any]) -> dict[str, Any]:
    keys = ("amenities", "images", "institutions", "rules", "services", "common_areas", "features")
    return {key: data.pop(key, None) for key in keys}


@transaction.atomic
def create_property(owner, data: dict[str, Any]) -> Property:
    """Persist a new listing; it always enters the review queue unless auto-approval is on."""
    data = dict(data)
    details = _pop_details(data)

    property_obj = Property.objects.create(owner=owner, status=Property.Status.PENDING, **data)
    _save_details(property_obj, details)

    log_activity(
        ActivityLog.Type.PROPERTY_SUBMITTED,
        f"Nuevo inmueble enviado: {property_obj.title}",
        user=owner,
        property=property_obj,
    )
    logger.info(f"Property {property_obj.id} submitted by user {owner.id}")

    if get_system_config().auto_approval_enabled:
        property_obj.approve()
        notifications.notify_property_approved(property_obj)
    else:
        notifications.notify_property_submitted(property_obj)
    return property_obj


@transaction.atomic
def update_property(property_obj: Property, data: dict[str, Any]) -> Property:
    data = dict(data)
    details = _pop_details(data)

    for field, value in data.items():
        setattr(property_obj, field, value)

    resubmitted = property_obj.status == Property.Status.REJECTED
    if resubmitted:
        property_obj.resubmit()
    property_obj.save()
    _save_details(property_obj, details)

    if resubmitted:
        log_activity(
            ActivityLog.Type.PROPERTY_SUBMITTED,
            f"Inmueble reenviado tras corrección: {property_obj.title}",
            user=property_obj.owner,
            property=property_obj,
        )
        notifications.notify_property_submitted(property_obj)
    return property_obj


@transaction.atomic
def approve_property(property_obj: Property, reviewer) -> Property:
    """
    Approve a listing.

    Approving a container approves its pending units as well. Approving the
    last pending unit of a container approves the container too.
    """
    property_obj.approve()
    log_activity(
        ActivityLog.Type.PROPERTY_APPROVED,
        f"Inmueble aprobado: {property_obj.title}",
        user=reviewer,
        property=property_obj,
    )
    logger.info(f"Property {property_obj.id} approved by {reviewer.id}")

    if property_obj.is_container:
        units = list(property_obj.units.exclude(status=Property.Status.APPROVED))
        for unit in units:
            unit.approve()
        if units:
            logger.info(f"Container {property_obj.id}: {len(units)} units approved with it")
    elif property_obj.is_unit:
        container = property_obj.parent
        pending = container.units.exclude(status=Property.Status.APPROVED).exists()
        if not pending and container.status != Property.Status.APPROVED:
            container.approve()
            log_activity(
                ActivityLog.Type.PROPERTY_APPROVED,
                f"Inmueble aprobado con todas sus habitaciones: {container.title}",
                user=reviewer,
                property=container,
            )
            notifications.notify_property_approved(container)
            logger.info(f"Container {container.id} approved after its last unit")

    notifications.notify_property_approved(property_obj)
    return property_obj


@transaction.atomic
def reject_property(property_obj: Property, reviewer, reason: str) -> Property:
    property_obj.reject(reason)
    log_activity(
        ActivityLog.Type.PROPERTY_REJECTED,
        f"Inmueble rechazado: {property_obj.title}. Motivo: {reason}",
        user=reviewer,
        property=property_obj,
    )
    notifications.notify_property_rejected(property_obj)
    logger.info(f"Property {property_obj.id} rejected by {reviewer.id}")
    return property_obj


def express_interest(property_obj: Property, user, message: str = "") -> None:
    property_obj.increment_interests()
    notifications.notify_property_interest(property_obj, user, message)


def delete_image(property_obj: Property, index: int) -> PropertyImage:
    """Remove the image at ``index`` (display order) and keep a featured image."""
    images = list(PropertyImage.objects.filter(property=property_obj))
    if index < 0 or index >= len(images):
        raise PropertyImageNotFoundError(f"La imagen {index} no existe.")
    # Units may have no photos of their own; every other listing keeps one.
    if len(images) == 1 and not property_obj.is_unit:
        raise LastImageError(IMAGES_REQUIRED_MESSAGE)
    removed = images.pop(index)
    removed.delete()
    for position, image in enumerate(images):
        image.order_position = position
        if removed.is_featured and position == 0:
            image.is_featured = True
        image.save(update_fields=["order_position", "is_featured"])
    return removed


def set_rented(property_obj: Property, is_rented: bool) -> Property:
    property_obj.is_rented = is_rented
    property_obj.save(update_fields=["is_rented", "updated_at"])
    if property_obj.is_unit:
        refresh_unit_counts(property_obj.parent)
    return property_obj


def delete_property(property_obj: Property, user) -> None:
    log_activity(
        ActivityLog.Type.PROPERTY_DELETED,
        f"Inmueble eliminado: {property_obj.title}",
        user=user,
    )
    logger.info(f"Property {property_obj.id} deleted by {user.id}")
    container = property_obj.parent
    property_obj.delete()
    if container is not None:
        refresh_unit_counts(container)


# --- Containers and units -----------------------------------------------------


def refresh_unit_counts(container: Property) -> Property:
    units = Property.objects.filter(parent=container)
    container.total_units = units.count()
    container.available_units = units.filter(is_rented=False).count()
    container.save(update_fields=["total_units", "available_units", "updated_at"])
    return container


def _unit_type(container: Property) -> PropertyType:
    return PropertyType.objects.filter(name__iexact=UNIT_PROPERTY_TYPE).first() or container.property_type


def _create_unit(container: Property, data: dict[str, Any]) -> Property:
    data = dict(data)
    details = _pop_details(data)
    unit = Property.objects.create(
        owner=container.owner,
        parent=container,
        property_type=_unit_type(container),
        city=container.city,
        street=container.street,
        neighborhood=container.neighborhood,
        latitude=container.latitude,
        longitude=container.longitude,
        status=Property.Status.PENDING,
        **data,
    )
    _save_details(unit, details)
    if get_system_config().auto_approval_enabled:
        unit.approve()
    return unit


@transaction.atomic
def create_container(owner, data: dict[str, Any]) -> Property:
    """Publish a container with its initial units. Rooms rented one by one carry no container rent."""
    data = dict(data)
    units = data.pop("units", None) or []
    data["is_container"] = True
    data.setdefault("rental_mode", Property.RentalMode.BY_UNIT)
    if data["rental_mode"] == Property.RentalMode.BY_UNIT:
        data["monthly_rent"] = Decimal("0")

    container = create_property(owner, data)
    for unit_data in units:
        _create_unit(container, unit_data)
    refresh_unit_counts(container)
    return container


@transaction.atomic
def create_unit(container: Property, data: dict[str, Any]) -> Property:
    unit = _create_unit(container, data)
    refresh_unit_counts(container)
    log_activity(
        ActivityLog.Type.PROPERTY_SUBMITTED,
        f"Nueva habitación en {container.title}: {unit.title}",
        user=container.owner,
        property=unit,
    )
    logger.info(f"Unit {unit.id} added to container {container.id}")
    if unit.status == Property.Status.PENDING:
        notifications.notify_property_submitted(unit)
    return unit


@transaction.atomic
def rent_complete(container: Property) -> Property:
    """Rent the whole container; refused while any room is already rented on its own."""
    units = Property.objects.filter(parent=container)
    if units.filter(is_rented=True).exists():
        raise ContainerStateError(
            "No se puede arrendar completo: hay habitaciones arrendadas por separado."
        )
    units.update(is_rented=True)
    container.rental_mode = Property.RentalMode.COMPLETE
    container.is_rented = True
    container.total_units = units.count()
    container.available_units = 0
    container.save(update_fields=["rental_mode", "is_rented", "total_units", "available_units", "updated_at"])
    logger.info(f"Container {container.id} rented complete")
    return container


@transaction.atomic
def change_to_by_unit(container: Property) -> Property:
    """Release every room and rent the container room by room again."""
    units = Property.objects.filter(parent=container)
    units.update(is_rented=False)
    container.rental_mode = Property.RentalMode.BY_UNIT
    container.is_rented = False
    container.total_units = units.count()
    container.available_units = container.total_units
    container.save(update_fields=["rental_mode", "is_rented", "total_units", "available_units", "updated_at"])
    logger.info(f"Container {container.id} switched to by-unit rental")
    return container


def pending_containers():
    """Containers waiting for review themselves or through one of their units."""
    return (
        Property.objects.filter(is_container=True)
        .filter(Q(status=Property.Status.PENDING) | Q(units__status=Property.Status.PENDING))
        .distinct()
        .order_by("submitted_at")
    )


def unit_stats(container: Property) -> dict[str, int]:
    stats = {"pending": 0, "approved": 0, "rejected": 0, "total": 0}
    for unit in container.units.all():
        stats[unit.status] += 1
        stats["total"] += 1
    return stats
