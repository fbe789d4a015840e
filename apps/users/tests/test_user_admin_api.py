from __future__ import annotations

from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.users.models import User


class UserAdminAPITests(APITestCase):
    def setUp(self) -> None:
        self.super_admin = User.objects.create_user(
            email="root@example.com",
            password="secret123",
            name="Super Admin",
            user_type=User.UserType.SUPER_ADMIN,
        )
        self.owner = User.objects.create_user(
            email="owner@example.com",
            phone="3101112233",
            password="secret123",
            name="Owner One",
            user_type=User.UserType.OWNER,
        )
        self.tenant = User.objects.create_user(email="tenant@example.com", password="secret123", name="Tenant")

    def test_only_super_admin_can_list(self) -> None:
        self.client.force_authenticate(self.tenant)
        response = self.client.get(reverse("users:user-list"))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

        self.client.force_authenticate(self.super_admin)
        response = self.client.get(reverse("users:user-list"), {"user_type": "owner"})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["count"], 1)
        self.assertEqual(response.data["results"][0]["email"], self.owner.email)

    def test_deactivate_and_activate(self) -> None:
        self.client.force_authenticate(self.super_admin)
        url = reverse("users:user-deactivate", args=[self.owner.pk])
        response = self.client.post(url)
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.owner.refresh_from_db()
        self.assertFalse(self.owner.is_active)

        response = self.client.post(url)
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        response = self.client.post(reverse("users:user-activate", args=[self.owner.pk]))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.owner.refresh_from_db()
        self.assertTrue(self.owner.is_active)

    def test_cannot_deactivate_self(self) -> None:
        self.client.force_authenticate(self.super_admin)
        response = self.client.post(reverse("users:user-deactivate", args=[self.super_admin.pk]))
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_update_plan(self) -> None:
        self.client.force_authenticate(self.super_admin)
        response = self.client.patch(
            reverse("users:user-detail", args=[self.owner.pk]), {"plan": "premium"}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.owner.refresh_from_db()
        self.assertEqual(self.owner.plan, User.Plan.PREMIUM)

    def test_stats(self) -> None:
        self.client.force_authenticate(self.super_admin)
        response = self.client.get(reverse("users:user-stats", args=[self.owner.pk]))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["properties"]["total"], 0)
        self.assertEqual(response.data["favorites"], 0)
