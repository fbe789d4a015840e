"""Tests for payment proofs, premium activation and subscription expiry."""

from __future__ import annotations

import logging
from datetime import timedelta
from decimal import Decimal

from django.conf import settings
from django.test import SimpleTestCase
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from apps.administration.models import ActivityLog
from apps.finances.models import PaymentRequest, Subscription
from apps.finances.tasks import expire_subscriptions_task
from apps.notifications.models import Notification
from apps.users.models import User


class PaymentRequestAPITests(APITestCase):
    def setUp(self) -> None:
        self.owner = User.objects.create_user(
            email="owner@example.com",
            password="secret123",
            name="Marta Dueña",
            user_type=User.UserType.OWNER,
        )
        self.admin = User.objects.create_user(
            email="admin@example.com",
            password="secret123",
            name="Admin Pagos",
            user_type=User.UserType.ADMIN,
        )
        self.payload = {
            "amount": "30000",
            "plan_type": "monthly",
            "plan_duration": 30,
            "reference_code": "NEQUI-884512",
            "proof_image_url": "https://res.cloudinary.com/test/proofs/884512.jpg",
            "proof_image_public_id": "proofs/884512",
        }

    def _submit(self) -> PaymentRequest:
        self.client.force_authenticate(self.owner)
        response = self.client.post(reverse("finances:payment-list"), self.payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        return PaymentRequest.objects.get(pk=response.data["payment_request"]["id"])

    def test_submit_notifies_admins(self) -> None:
        payment_request = self._submit()
        self.assertEqual(payment_request.status, PaymentRequest.Status.PENDING)
        self.assertEqual(payment_request.user, self.owner)
        self.assertTrue(
            Notification.objects.filter(user=self.admin, type=Notification.Type.PAYMENT_SUBMITTED).exists()
        )

    def test_all_fields_required(self) -> None:
        self.client.force_authenticate(self.owner)
        payload = dict(self.payload)
        payload.pop("reference_code")
        response = self.client.post(reverse("finances:payment-list"), payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["reference_code"][0], "Todos los campos son obligatorios.")

    def test_anonymous_cannot_submit(self) -> None:
        response = self.client.post(reverse("finances:payment-list"), self.payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_users_only_see_own_requests(self) -> None:
        self._submit()
        stranger = User.objects.create_user(email="x@example.com", password="secret123", name="Pedro Pérez")
        self.client.force_authenticate(stranger)
        response = self.client.get(reverse("finances:payment-list"))
        self.assertEqual(response.data["count"], 0)
        self.client.force_authenticate(self.admin)
        response = self.client.get(reverse("finances:payment-list"), {"status": "pending"})
        self.assertEqual(response.data["count"], 1)

    def test_verify_activates_premium(self) -> None:
        payment_request = self._submit()
        self.client.force_authenticate(self.admin)
        response = self.client.post(reverse("finances:payment-verify", args=[payment_request.id]))
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)

        self.owner.refresh_from_db()
        self.assertEqual(self.owner.plan, User.Plan.PREMIUM)
        self.assertEqual(self.owner.plan_type, User.PlanType.MONTHLY)
        self.assertIsNotNone(self.owner.premium_since)
        delta = self.owner.plan_expires_at - self.owner.plan_started_at
        self.assertEqual(delta, timedelta(days=30))

        payment_request.refresh_from_db()
        self.assertEqual(payment_request.status, PaymentRequest.Status.VERIFIED)
        self.assertIsNotNone(payment_request.processed_at)
        subscription = Subscription.objects.get(user=self.owner)
        self.assertEqual(subscription.status, Subscription.Status.ACTIVE)
        self.assertEqual(subscription.payment_request, payment_request)
        self.assertTrue(
            Notification.objects.filter(user=self.owner, type=Notification.Type.PAYMENT_VERIFIED).exists()
        )
        self.assertTrue(ActivityLog.objects.filter(type=ActivityLog.Type.PAYMENT_VERIFIED).exists())

    def test_premium_since_kept_on_renewal(self) -> None:
        first_since = timezone.now() - timedelta(days=120)
        self.owner.premium_since = first_since
        self.owner.save(update_fields=["premium_since"])
        payment_request = self._submit()
        self.client.force_authenticate(self.admin)
        self.client.post(reverse("finances:payment-verify", args=[payment_request.id]))
        self.owner.refresh_from_db()
        self.assertEqual(self.owner.premium_since, first_since)

    def test_renewal_supersedes_active_subscription(self) -> None:
        first = self._submit()
        self.client.force_authenticate(self.admin)
        self.client.post(reverse("finances:payment-verify", args=[first.id]))

        self.payload["reference_code"] = "NEQUI-990001"
        second = self._submit()
        self.client.force_authenticate(self.admin)
        response = self.client.post(reverse("finances:payment-verify", args=[second.id]))
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)

        older = Subscription.objects.get(payment_request=first)
        newer = Subscription.objects.get(payment_request=second)
        self.assertEqual(older.status, Subscription.Status.CANCELLED)
        self.assertEqual(newer.status, Subscription.Status.ACTIVE)

        self.client.force_authenticate(self.owner)
        active = self.client.get(reverse("finances:subscription-active"))
        self.assertEqual(active.status_code, status.HTTP_200_OK, active.data)
        self.assertEqual(active.data["id"], newer.id)

    def test_processed_request_cannot_be_reviewed_again(self) -> None:
        payment_request = self._submit()
        self.client.force_authenticate(self.admin)
        self.client.post(reverse("finances:payment-verify", args=[payment_request.id]))
        response = self.client.post(reverse("finances:payment-reject", args=[payment_request.id]))
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("ya fue procesada", response.data["detail"])

    def test_reject_with_reason(self) -> None:
        payment_request = self._submit()
        self.client.force_authenticate(self.admin)
        response = self.client.post(
            reverse("finances:payment-reject", args=[payment_request.id]),
            {"reason": "El comprobante no es legible"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        payment_request.refresh_from_db()
        self.assertEqual(payment_request.status, PaymentRequest.Status.REJECTED)
        self.owner.refresh_from_db()
        self.assertEqual(self.owner.plan, User.Plan.FREE)
        notification = Notification.objects.get(user=self.owner, type=Notification.Type.PAYMENT_REJECTED)
        self.assertIn("no es legible", notification.message)

    def test_owner_cannot_verify(self) -> None:
        payment_request = self._submit()
        response = self.client.post(reverse("finances:payment-verify", args=[payment_request.id]))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)


class SubscriptionAPITests(APITestCase):
    def setUp(self) -> None:
        self.user = User.objects.create_user(
            email="premium@example.com", password="secret123", name="Ana Premium"
        )
        self.admin = User.objects.create_user(
            email="admin@example.com",
            password="secret123",
            name="Admin Pagos",
            user_type=User.UserType.ADMIN,
        )
        self.user.activate_premium(User.PlanType.WEEKLY, 7)
        self.subscription = Subscription.objects.create(
            user=self.user,
            plan_type=User.PlanType.WEEKLY,
            started_at=self.user.plan_started_at,
            expires_at=self.user.plan_expires_at,
        )

    def test_active_subscription(self) -> None:
        self.client.force_authenticate(self.user)
        response = self.client.get(reverse("finances:subscription-active"))
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["plan_type"], "weekly")
        self.assertIn(response.data["days_remaining"], (6, 7))

    def test_history(self) -> None:
        self.client.force_authenticate(self.user)
        response = self.client.get(reverse("finances:subscription-list"))
        self.assertEqual(response.data["count"], 1)

    def test_no_active_subscription(self) -> None:
        self.client.force_authenticate(self.admin)
        response = self.client.get(reverse("finances:subscription-active"))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_expiry_task_downgrades_user(self) -> None:
        Subscription.objects.filter(pk=self.subscription.pk).update(
            expires_at=timezone.now() - timedelta(hours=1)
        )
        result = expire_subscriptions_task()
        self.assertEqual(result, {"expired": 1})
        self.subscription.refresh_from_db()
        self.assertEqual(self.subscription.status, Subscription.Status.EXPIRED)
        self.user.refresh_from_db()
        self.assertEqual(self.user.plan, User.Plan.FREE)
        self.assertTrue(ActivityLog.objects.filter(type=ActivityLog.Type.SUBSCRIPTION_EXPIRED).exists())

    def test_manual_expiry_requires_admin(self) -> None:
        self.client.force_authenticate(self.user)
        response = self.client.post(reverse("finances:subscription-expire"))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.client.force_authenticate(self.admin)
        response = self.client.post(reverse("finances:subscription-expire"))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["expired"], 0)


class PaymentAmountTests(APITestCase):
    def test_amount_must_be_positive(self) -> None:
        user = User.objects.create_user(email="u@example.com", password="secret123", name="Usuario Uno")
        self.client.force_authenticate(user)
        response = self.client.post(
            reverse("finances:payment-list"),
            {
                "amount": str(Decimal("0")),
                "plan_type": "weekly",
                "plan_duration": 7,
                "reference_code": "PSE-1",
                "proof_image_url": "https://res.cloudinary.com/test/p.jpg",
            },
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("amount", response.data)


class FinanceLoggingTests(SimpleTestCase):
    def test_finance_events_reach_the_apps_logger_once(self) -> None:
        self.assertNotIn("apps.finances", settings.LOGGING["loggers"])
        with self.assertLogs("apps", level="INFO") as captured:
            logging.getLogger("apps.finances.services").info("Payment request 1 verified by 2")
        self.assertEqual(len(captured.records), 1)
