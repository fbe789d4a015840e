"""Tests for identity document submission and review."""

from __future__ import annotations

from django.db import connection
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.administration.models import ActivityLog
from apps.notifications.models import Notification
from apps.users.models import User
from apps.verification.models import VerificationDocuments

DOCUMENTS = {
    "id_front": "https://res.cloudinary.com/test/ids/front.jpg",
    "id_back": "https://res.cloudinary.com/test/ids/back.jpg",
    "selfie": "https://res.cloudinary.com/test/ids/selfie.jpg",
}


class VerificationSubmitTests(APITestCase):
    def setUp(self) -> None:
        self.tenant = User.objects.create_user(
            email="student@example.com", password="secret123", name="Sofía Estudiante"
        )
        self.owner = User.objects.create_user(
            email="owner@example.com",
            password="secret123",
            name="Jorge Dueño",
            user_type=User.UserType.OWNER,
        )

    def test_submit_sets_pending(self) -> None:
        self.client.force_authenticate(self.tenant)
        response = self.client.post(reverse("verification:verification-submit"), DOCUMENTS, format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.tenant.refresh_from_db()
        self.assertEqual(self.tenant.verification_status, User.VerificationStatus.PENDING)
        documents = VerificationDocuments.objects.get(user=self.tenant)
        self.assertEqual(documents.selfie, DOCUMENTS["selfie"])

    def test_documents_encrypted_at_rest(self) -> None:
        self.client.force_authenticate(self.tenant)
        self.client.post(reverse("verification:verification-submit"), DOCUMENTS, format="json")
        table = VerificationDocuments._meta.db_table
        with connection.cursor() as cursor:
            cursor.execute(f"SELECT id_front FROM {table} WHERE user_id = %s", [self.tenant.pk])
            raw = cursor.fetchone()[0]
        self.assertNotEqual(raw, DOCUMENTS["id_front"])
        self.assertNotIn("cloudinary", raw)

    def test_missing_document_rejected(self) -> None:
        self.client.force_authenticate(self.tenant)
        payload = dict(DOCUMENTS)
        payload.pop("selfie")
        response = self.client.post(reverse("verification:verification-submit"), payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["selfie"][0], "Debe adjuntar todos los documentos requeridos.")

    def test_owner_needs_utility_bill(self) -> None:
        self.client.force_authenticate(self.owner)
        response = self.client.post(reverse("verification:verification-submit"), DOCUMENTS, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("utility_bill", response.data)
        payload = {**DOCUMENTS, "utility_bill": "https://res.cloudinary.com/test/bills/agua.jpg"}
        response = self.client.post(reverse("verification:verification-submit"), payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)

    def test_status_of_current_user(self) -> None:
        self.client.force_authenticate(self.tenant)
        response = self.client.get(reverse("verification:verification-status"))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["verification_status"], "not_submitted")
        self.assertIsNone(response.data["submitted_at"])

    def test_rejected_user_can_resubmit(self) -> None:
        self.tenant.mark_verification_rejected("Foto borrosa")
        self.client.force_authenticate(self.tenant)
        response = self.client.post(reverse("verification:verification-submit"), DOCUMENTS, format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.tenant.refresh_from_db()
        self.assertEqual(self.tenant.verification_status, User.VerificationStatus.PENDING)
        self.assertEqual(self.tenant.verification_rejection_reason, "")


class VerificationReviewTests(APITestCase):
    def setUp(self) -> None:
        self.admin = User.objects.create_user(
            email="admin@example.com",
            password="secret123",
            name="Admin Revisor",
            user_type=User.UserType.ADMIN,
        )
        self.tenant = User.objects.create_user(
            email="student@example.com", password="secret123", name="Sofía Estudiante"
        )
        self.client.force_authenticate(self.tenant)
        self.client.post(reverse("verification:verification-submit"), DOCUMENTS, format="json")
        self.client.force_authenticate(self.admin)

    def test_pending_list_and_detail(self) -> None:
        response = self.client.get(reverse("verification:verification-pending"))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["count"], 1)
        detail = self.client.get(reverse("verification:verification-detail", args=[self.tenant.pk]))
        self.assertEqual(detail.status_code, status.HTTP_200_OK)
        self.assertEqual(detail.data["id_back"], DOCUMENTS["id_back"])

    def test_non_admin_cannot_review(self) -> None:
        self.client.force_authenticate(self.tenant)
        response = self.client.get(reverse("verification:verification-pending"))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_approve(self) -> None:
        response = self.client.post(reverse("verification:verification-approve", args=[self.tenant.pk]))
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.tenant.refresh_from_db()
        self.assertTrue(self.tenant.is_verified)
        self.assertEqual(self.tenant.verification_status, User.VerificationStatus.VERIFIED)
        self.assertTrue(
            Notification.objects.filter(user=self.tenant, type=Notification.Type.VERIFICATION_APPROVED).exists()
        )
        self.assertTrue(ActivityLog.objects.filter(type=ActivityLog.Type.VERIFICATION_APPROVED).exists())

    def test_reject_requires_reason(self) -> None:
        url = reverse("verification:verification-reject", args=[self.tenant.pk])
        response = self.client.post(url, {}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        response = self.client.post(url, {"reason": "El documento está vencido"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.tenant.refresh_from_db()
        self.assertEqual(self.tenant.verification_status, User.VerificationStatus.REJECTED)
        self.assertEqual(self.tenant.verification_rejection_reason, "El documento está vencido")
        notification = Notification.objects.get(user=self.tenant, type=Notification.Type.VERIFICATION_REJECTED)
        self.assertIn("vencido", notification.message)

    def test_review_without_documents_is_404(self) -> None:
        other = User.objects.create_user(email="other@example.com", password="secret123", name="Sin Docs")
        response = self.client.post(reverse("verification:verification-approve", args=[other.pk]))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        response = self.client.get(reverse("verification:verification-detail", args=[other.pk]))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
