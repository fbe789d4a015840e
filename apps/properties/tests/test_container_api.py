"""Tests for pensions rented complete or room by room."""

from __future__ import annotations

from decimal import Decimal

from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.notifications.models import Notification
from apps.properties import services
from apps.properties.models import CommonArea, Property, PropertyRule, PropertyType
from apps.users.models import User

from .test_property_api import PropertyTestMixin


class ContainerTestMixin(PropertyTestMixin):
    def create_container_fixtures(self) -> None:
        self.create_fixtures()
        self.pension = PropertyType.objects.create(name="pension")
        self.kitchen = CommonArea.objects.create(name="Cocina", icon="kitchen")

    def make_container(self, units: int = 2, **overrides) -> Property:
        data = {
            "property_type": self.pension,
            "title": "Pensión familiar en el centro",
            "monthly_rent": Decimal("0"),
            "is_container": True,
            "rental_mode": Property.RentalMode.BY_UNIT,
        }
        data.update(overrides)
        container = self.make_property(**data)
        for number in range(1, units + 1):
            self.make_property(
                parent=container,
                property_type=self.room,
                title=f"Habitación {number}",
                description="",
                monthly_rent=Decimal("450000"),
                status=container.status,
            )
        return services.refresh_unit_counts(container)

    def container_payload(self, **overrides) -> dict:
        payload = self.listing_payload(
            title="Pensión universitaria La Esperanza",
            property_type_id=self.pension.id,
            rental_mode="by_unit",
            common_area_ids=[self.kitchen.id],
            rules=[
                {"rule_type": "pets", "is_allowed": False},
                {"rule_type": "curfew", "is_allowed": True, "value": "22:00"},
            ],
            services=[
                {"service_type": "breakfast", "is_included": True},
                {"service_type": "laundry", "is_included": False, "additional_cost": "40000"},
            ],
            features={"is_furnished": True, "has_parking": False, "allows_pets": False},
            units=[
                {"title": "Habitación 1", "monthly_rent": "450000"},
                {"title": "Habitación 2", "monthly_rent": "500000", "bathrooms": 1},
            ],
        )
        payload.pop("monthly_rent")
        payload.update(overrides)
        return payload


class ContainerPublicationTests(ContainerTestMixin, APITestCase):
    def setUp(self) -> None:
        self.create_container_fixtures()

    def test_owner_publishes_container_with_units(self) -> None:
        self.client.force_authenticate(self.owner)
        response = self.client.post(reverse("properties:container-list"), self.container_payload(), format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)

        container = Property.objects.get(is_container=True)
        self.assertEqual(container.monthly_rent, Decimal("0"))
        self.assertEqual(container.rental_mode, Property.RentalMode.BY_UNIT)
        self.assertEqual((container.total_units, container.available_units), (2, 2))
        self.assertEqual(list(container.common_areas.all()), [self.kitchen])
        self.assertEqual(container.rules.get(rule_type="curfew").value, "22:00")
        self.assertEqual(container.services.get(service_type="laundry").additional_cost, Decimal("40000"))
        self.assertTrue(container.features.is_furnished)

        unit = container.units.get(title="Habitación 2")
        self.assertEqual(unit.owner, self.owner)
        self.assertEqual(unit.city, self.city)
        self.assertEqual(unit.property_type, self.room)
        self.assertEqual(unit.status, Property.Status.PENDING)
        self.assertEqual(response.data["container"]["unit_stats"], {"pending": 2, "approved": 0, "rejected": 0, "total": 2})

    def test_complete_mode_requires_rent(self) -> None:
        self.client.force_authenticate(self.owner)
        response = self.client.post(
            reverse("properties:container-list"),
            self.container_payload(rental_mode="complete"),
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("monthly_rent", response.data)

        response = self.client.post(
            reverse("properties:container-list"),
            self.container_payload(rental_mode="complete", monthly_rent="1800000"),
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(Property.objects.get(is_container=True).monthly_rent, Decimal("1800000"))

    def test_tenant_cannot_publish(self) -> None:
        self.client.force_authenticate(self.tenant)
        response = self.client.post(reverse("properties:container-list"), self.container_payload(), format="json")
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_admin_publishes_for_owner(self) -> None:
        self.client.force_authenticate(self.admin)
        response = self.client.post(
            reverse("properties:container-list"), self.container_payload(owner_id=self.owner.id), format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(Property.objects.get(is_container=True).owner, self.owner)

    def test_owner_cannot_publish_for_someone_else(self) -> None:
        other = User.objects.create_user(
            email="other@example.com", password="secret123", name="Otra Dueña", user_type=User.UserType.OWNER
        )
        self.client.force_authenticate(self.owner)
        response = self.client.post(
            reverse("properties:container-list"), self.container_payload(owner_id=other.id), format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("owner_id", response.data)

    def test_rule_needing_value(self) -> None:
        self.client.force_authenticate(self.owner)
        response = self.client.post(
            reverse("properties:container-list"),
            self.container_payload(rules=[{"rule_type": "curfew", "is_allowed": True}]),
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(PropertyRule.objects.exists())

    def test_owner_adds_unit(self) -> None:
        container = self.make_container(units=1)
        self.client.force_authenticate(self.owner)
        response = self.client.post(
            reverse("properties:container-units", args=[container.id]),
            {"title": "Habitación 3", "monthly_rent": "520000"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(response.data["parent_id"], container.id)
        container.refresh_from_db()
        self.assertEqual((container.total_units, container.available_units), (2, 2))

    def test_other_owner_cannot_add_unit(self) -> None:
        container = self.make_container(units=1)
        intruder = User.objects.create_user(
            email="other@example.com", password="secret123", name="Otro Dueño", user_type=User.UserType.OWNER
        )
        self.client.force_authenticate(intruder)
        response = self.client.post(
            reverse("properties:container-units", args=[container.id]),
            {"title": "Habitación 3", "monthly_rent": "520000"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_public_sees_only_approved_units(self) -> None:
        container = self.make_container(units=2)
        container.units.filter(title="Habitación 2").update(status=Property.Status.PENDING)
        response = self.client.get(reverse("properties:container-units", args=[container.id]))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([unit["title"] for unit in response.data], ["Habitación 1"])

        self.client.force_authenticate(self.owner)
        response = self.client.get(reverse("properties:container-units", args=[container.id]))
        self.assertEqual(len(response.data), 2)

    def test_pension_search_lists_containers_only(self) -> None:
        container = self.make_container(units=1)
        self.make_property(title="Pensión suelta sin habitaciones", property_type=self.pension)
        response = self.client.get(reverse("properties:property-list"), {"type": "pension"})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([item["id"] for item in response.data["results"]], [container.id])


class ContainerRentalTests(ContainerTestMixin, APITestCase):
    def setUp(self) -> None:
        self.create_container_fixtures()
        self.container = self.make_container(units=3)
        self.client.force_authenticate(self.owner)

    def test_unit_rental_status_updates_availability(self) -> None:
        unit = self.container.units.first()
        response = self.client.patch(
            reverse("properties:unit-rental-status", args=[unit.id]), {"is_rented": True}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertTrue(response.data["is_rented"])
        self.container.refresh_from_db()
        self.assertEqual((self.container.total_units, self.container.available_units), (3, 2))

    def test_rent_complete(self) -> None:
        response = self.client.post(reverse("properties:container-rent-complete", args=[self.container.id]))
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["rental_mode"], "complete")
        self.assertTrue(response.data["is_rented"])
        self.assertEqual(response.data["available_units"], 0)
        self.assertFalse(self.container.units.filter(is_rented=False).exists())

    def test_rent_complete_refused_with_rented_room(self) -> None:
        services.set_rented(self.container.units.first(), True)
        response = self.client.post(reverse("properties:container-rent-complete", args=[self.container.id]))
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.container.refresh_from_db()
        self.assertEqual(self.container.rental_mode, Property.RentalMode.BY_UNIT)

    def test_change_back_to_by_unit(self) -> None:
        services.rent_complete(self.container)
        url = reverse("properties:container-change-mode", args=[self.container.id])
        response = self.client.post(url, {"mode": "complete"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["mode"][0], "Modo de arriendo no válido.")

        response = self.client.post(url, {"mode": "by_unit"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["rental_mode"], "by_unit")
        self.assertFalse(response.data["is_rented"])
        self.assertEqual(response.data["available_units"], 3)
        self.assertFalse(self.container.units.filter(is_rented=True).exists())

    def test_deleting_unit_recounts(self) -> None:
        unit = self.container.units.first()
        response = self.client.delete(reverse("properties:unit-detail", args=[unit.id]))
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.container.refresh_from_db()
        self.assertEqual((self.container.total_units, self.container.available_units), (2, 2))

    def test_deleting_container_removes_units(self) -> None:
        response = self.client.delete(reverse("properties:container-detail", args=[self.container.id]))
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Property.objects.exists())

    def test_tenant_cannot_change_rental(self) -> None:
        self.client.force_authenticate(self.tenant)
        response = self.client.post(reverse("properties:container-rent-complete", args=[self.container.id]))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)


class ContainerModerationTests(ContainerTestMixin, APITestCase):
    def setUp(self) -> None:
        self.create_container_fixtures()
        self.container = self.make_container(units=2, status=Property.Status.PENDING)
        self.client.force_authenticate(self.admin)

    def test_pending_queue_includes_containers_with_pending_units(self) -> None:
        approved = self.make_container(units=1, title="Pensión ya aprobada")
        approved.units.update(status=Property.Status.PENDING)
        self.make_container(units=1, title="Pensión sin pendientes")
        response = self.client.get(reverse("properties:container-pending"))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual({item["id"] for item in response.data["results"]}, {self.container.id, approved.id})

    def test_approving_container_approves_units(self) -> None:
        response = self.client.post(reverse("properties:container-approve", args=[self.container.id]))
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertFalse(self.container.units.exclude(status=Property.Status.APPROVED).exists())
        self.assertEqual(response.data["container"]["unit_stats"]["approved"], 2)

    def test_last_unit_approval_approves_container(self) -> None:
        first, second = self.container.units.order_by("id")
        self.client.post(reverse("properties:unit-approve", args=[first.id]))
        self.container.refresh_from_db()
        self.assertEqual(self.container.status, Property.Status.PENDING)

        response = self.client.post(reverse("properties:unit-approve", args=[second.id]))
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.container.refresh_from_db()
        self.assertEqual(self.container.status, Property.Status.APPROVED)
        self.assertTrue(
            Notification.objects.filter(
                user=self.owner, type=Notification.Type.PROPERTY_APPROVED, property=self.container
            ).exists()
        )

    def test_reject_unit_requires_reason(self) -> None:
        unit = self.container.units.first()
        url = reverse("properties:unit-reject", args=[unit.id])
        response = self.client.post(url, {}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        response = self.client.post(url, {"reason": "La foto no corresponde"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        unit.refresh_from_db()
        self.assertEqual(unit.status, Property.Status.REJECTED)

    def test_owner_cannot_approve(self) -> None:
        self.client.force_authenticate(self.owner)
        response = self.client.post(reverse("properties:container-approve", args=[self.container.id]))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)


class CommonAreaTests(ContainerTestMixin, APITestCase):
    def setUp(self) -> None:
        self.create_container_fixtures()
        self.super_admin = User.objects.create_superuser(
            email="root@example.com", password="secret123", name="Super Admin"
        )

    def test_listed_publicly(self) -> None:
        response = self.client.get(reverse("properties:common-area-list"))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data[0]["slug"], "cocina")

    def test_super_admin_creates_and_duplicates_conflict(self) -> None:
        self.client.force_authenticate(self.super_admin)
        url = reverse("properties:common-area-list")
        response = self.client.post(url, {"name": "Patio de ropas"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(response.data["slug"], "patio-de-ropas")
        response = self.client.post(url, {"name": "cocina"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
