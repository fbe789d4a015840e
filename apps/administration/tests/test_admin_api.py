"""Tests for the super-admin back office."""

from __future__ import annotations

from datetime import timedelta
from decimal import Decimal
from io import StringIO

from django.core.management import call_command
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from apps.administration.models import ActivityLog, SystemConfig
from apps.administration.tasks import purge_activity_logs_task
from apps.finances.models import PaymentRequest
from apps.locations.models import City, Department
from apps.properties.models import Amenity, PropertyType
from apps.users.models import User


class BackOfficeAPITests(APITestCase):
    def setUp(self) -> None:
        self.super_admin = User.objects.create_superuser(
            email="root@example.com", password="secret123", name="Super Admin"
        )
        self.admin = User.objects.create_user(
            email="admin@example.com", password="secret123", name="Moderador", user_type=User.UserType.ADMIN
        )
        self.owner = User.objects.create_user(
            email="owner@example.com", password="secret123", name="Dueña", user_type=User.UserType.OWNER
        )
        self.client.force_authenticate(self.super_admin)

    def test_dashboard(self) -> None:
        PaymentRequest.objects.create(
            user=self.owner,
            amount=Decimal("30000"),
            plan_type="monthly",
            plan_duration=30,
            reference_code="A1",
            proof_image_url="https://x/a.jpg",
            status=PaymentRequest.Status.VERIFIED,
        )
        PaymentRequest.objects.create(
            user=self.owner,
            amount=Decimal("10000"),
            plan_type="weekly",
            plan_duration=7,
            reference_code="A2",
            proof_image_url="https://x/b.jpg",
        )
        response = self.client.get(reverse("administration:dashboard"))
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["users"]["total"], 3)
        self.assertEqual(response.data["users"]["owners"], 1)
        self.assertEqual(response.data["payments"]["pending"], 1)
        self.assertEqual(response.data["payments"]["revenue"], Decimal("30000"))
        self.assertEqual(response.data["properties"]["total"], 0)

    def test_dashboard_is_super_admin_only(self) -> None:
        self.client.force_authenticate(self.admin)
        response = self.client.get(reverse("administration:dashboard"))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_activity_list_filter_and_statistics(self) -> None:
        ActivityLog.objects.create(type=ActivityLog.Type.USER_REGISTERED, message="Nuevo usuario")
        ActivityLog.objects.create(type=ActivityLog.Type.PROPERTY_APPROVED, message="Inmueble aprobado")
        response = self.client.get(reverse("administration:activity-list"), {"type": "user_registered"})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["count"], 1)

        stats = self.client.get(reverse("administration:activity-statistics"))
        self.assertEqual(stats.data["total"], 2)
        self.assertEqual(stats.data["by_type"]["property_approved"]["total"], 1)

    def test_purge_old_logs(self) -> None:
        old = ActivityLog.objects.create(type=ActivityLog.Type.USER_REGISTERED, message="Antiguo")
        ActivityLog.objects.filter(pk=old.pk).update(timestamp=timezone.now() - timedelta(days=120))
        ActivityLog.objects.create(type=ActivityLog.Type.USER_REGISTERED, message="Reciente")
        response = self.client.post(reverse("administration:activity-purge"), {"days": 90}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["deleted"], 1)
        self.assertEqual(ActivityLog.objects.count(), 1)

    def test_purge_task(self) -> None:
        old = ActivityLog.objects.create(type=ActivityLog.Type.USER_REGISTERED, message="Antiguo")
        ActivityLog.objects.filter(pk=old.pk).update(timestamp=timezone.now() - timedelta(days=10))
        self.assertEqual(purge_activity_logs_task(days=5), {"deleted": 1})

    def test_read_and_update_config(self) -> None:
        response = self.client.get(reverse("administration:config"))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(response.data["auto_approval_enabled"])

        response = self.client.patch(
            reverse("administration:config"),
            {"auto_approval_enabled": True, "max_images_per_property": 15},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        config = SystemConfig.load()
        self.assertTrue(config.auto_approval_enabled)
        self.assertEqual(config.max_images_per_property, 15)
        self.assertTrue(ActivityLog.objects.filter(type=ActivityLog.Type.CONFIG_UPDATED).exists())

    def test_config_price_range_validated(self) -> None:
        response = self.client.patch(
            reverse("administration:config"), {"min_property_price": "50000000"}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("min_property_price", response.data)


class ManagementCommandTests(APITestCase):
    def test_seed_reference_data_is_idempotent(self) -> None:
        call_command("seed_reference_data", stdout=StringIO())
        counts = (Department.objects.count(), City.objects.count(), PropertyType.objects.count())
        call_command("seed_reference_data", stdout=StringIO())
        self.assertEqual(
            (Department.objects.count(), City.objects.count(), PropertyType.objects.count()), counts
        )
        self.assertTrue(City.objects.filter(name="Valledupar", department__code="CES").exists())
        self.assertTrue(Amenity.objects.filter(name="WiFi").exists())
        self.assertTrue(SystemConfig.objects.filter(pk=1).exists())

    def test_create_super_admin(self) -> None:
        call_command("create_super_admin", email="boss@example.com", password="secret123", stdout=StringIO())
        user = User.objects.get(email="boss@example.com")
        self.assertTrue(user.is_super_admin())
        self.assertTrue(user.check_password("secret123"))

        call_command("create_super_admin", email="boss@example.com", password="another1", stdout=StringIO())
        user.refresh_from_db()
        self.assertTrue(user.check_password("another1"))
        self.assertEqual(User.objects.filter(email="boss@example.com").count(), 1)
