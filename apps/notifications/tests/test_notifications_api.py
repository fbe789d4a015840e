from __future__ import annotations

from django.core import mail
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.notifications import services
from apps.notifications.models import Notification
from apps.users.models import User


class NotificationServiceTests(APITestCase):
    def test_notify_creates_row_and_sends_email(self) -> None:
        user = User.objects.create_user(email="owner@example.com", password="secret123", name="Owner")
        notification = services.notify(
            user, Notification.Type.PAYMENT_REJECTED, "Pago rechazado", "Comprobante ilegible."
        )
        self.assertFalse(notification.is_read)
        self.assertEqual(len(mail.outbox), 1)
        self.assertIn("Pago rechazado", mail.outbox[0].subject)

    def test_admin_notifications_are_in_app_only(self) -> None:
        admin = User.objects.create_user(
            email="admin@example.com", password="secret123", name="Admin", user_type=User.UserType.ADMIN
        )
        User.objects.create_user(email="tenant@example.com", password="secret123", name="Tenant")
        created = services.notify_admins(Notification.Type.PAYMENT_SUBMITTED, "Nuevo comprobante", "Revisar")
        self.assertEqual([n.user_id for n in created], [admin.id])
        self.assertEqual(len(mail.outbox), 0)


class NotificationAPITests(APITestCase):
    def setUp(self) -> None:
        self.user = User.objects.create_user(email="me@example.com", password="secret123", name="Me")
        self.other = User.objects.create_user(email="other@example.com", password="secret123", name="Other")
        self.first = Notification.objects.create(
            user=self.user, type=Notification.Type.PROPERTY_APPROVED, title="Aprobado", message="ok"
        )
        self.second = Notification.objects.create(
            user=self.user, type=Notification.Type.PROPERTY_INTEREST, title="Interés", message="hola"
        )
        self.foreign = Notification.objects.create(
            user=self.other, type=Notification.Type.PROPERTY_APPROVED, title="Ajena", message="x"
        )
        self.client.force_authenticate(self.user)

    def test_list_only_own(self) -> None:
        response = self.client.get(reverse("notifications:notification-list"))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["count"], 2)

    def test_cannot_read_foreign(self) -> None:
        response = self.client.get(reverse("notifications:notification-detail", args=[self.foreign.pk]))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_mark_read_and_unread_count(self) -> None:
        response = self.client.post(reverse("notifications:notification-mark-read", args=[self.first.pk]))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data["is_read"])

        response = self.client.get(reverse("notifications:notification-unread-count"))
        self.assertEqual(response.data, {"count": 1})

        response = self.client.get(reverse("notifications:notification-list"), {"unread": "true"})
        self.assertEqual(response.data["count"], 1)

    def test_mark_all_read_and_delete_read(self) -> None:
        response = self.client.post(reverse("notifications:notification-mark-all-read"))
        self.assertEqual(response.data, {"updated": 2})
        self.foreign.refresh_from_db()
        self.assertFalse(self.foreign.is_read)

        response = self.client.delete(reverse("notifications:notification-delete-read"))
        self.assertEqual(response.data, {"deleted": 2})
        self.assertTrue(Notification.objects.filter(pk=self.foreign.pk).exists())

    def test_requires_authentication(self) -> None:
        self.client.force_authenticate(None)
        response = self.client.get(reverse("notifications:notification-list"))
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
