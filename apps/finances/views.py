"""API views for payment proofs and premium subscriptions.

Users upload a proof of payment (the image itself goes straight to
Cloudinary, the request stores its URL). Admins verify or reject the
request; verification grants the premium plan for ``plan_duration`` days.
"""

from __future__ import annotations

import logging

from django_filters.rest_framework import DjangoFilterBackend  # type: ignore
from rest_framework import mixins, permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore

from apps.users.permissions import IsPlatformAdmin, is_platform_admin
from . import services
from .models import PaymentRequest, Subscription
from .serializers import PaymentRejectSerializer, PaymentRequestSerializer, SubscriptionSerializer

logger = logging.getLogger(__name__)


class PaymentRequestViewSet(
    mixins.CreateModelMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    """
    - POST /api/v1/payments/ - upload a payment proof
    - GET /api/v1/payments/?status=pending - own requests, every request for admins
    - GET /api/v1/payments/pending/ - review queue (admins)
    - POST /api/v1/payments/{id}/verify/ (admins)
    - POST /api/v1/payments/{id}/reject/ (admins)
    """

    queryset = PaymentRequest.objects.select_related("user").all()
    serializer_class = PaymentRequestSerializer
    permission_classes = [permissions.IsAuthenticated]
    filter_backends = [DjangoFilterBackend]
    filterset_fields = ["status", "plan_type"]

    def get_permissions(self):  # type: ignore
        if self.action in {"pending", "verify", "reject"}:
            return [permissions.IsAuthenticated(), IsPlatformAdmin()]
        return super().get_permissions()

    def get_queryset(self):  # type: ignore
        qs = super().get_queryset()
        if self.action == "pending":
            return qs.filter(status=PaymentRequest.Status.PENDING).order_by("created_at")
        if is_platform_admin(self.request.user):
            return qs
        return qs.filter(user=self.request.user)

    def perform_create(self, serializer):  # type: ignore
        serializer.instance = services.submit_payment_request(self.request.user, serializer.validated_data)

    def create(self, request, *args, **kwargs):  # type: ignore
        response = super().create(request, *args, **kwargs)
        return Response(
            {
                "message": "Comprobante enviado. Un administrador lo revisará pronto.",
                "payment_request": response.data,
            },
            status=status.HTTP_201_CREATED,
        )

    @action(detail=False, methods=["get"], url_path="pending")
    def pending(self, request):  # type: ignore
        qs = self.get_queryset()
        page = self.paginate_queryset(qs)
        if page is not None:
            return self.get_paginated_response(self.get_serializer(page, many=True).data)
        return Response(self.get_serializer(qs, many=True).data)

    @action(detail=True, methods=["post"], url_path="verify")
    def verify(self, request, pk=None):  # type: ignore
        payment_request = self.get_object()
        try:
            subscription = services.verify_payment(payment_request, request.user)
        except services.PaymentAlreadyProcessedError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        payment_request.refresh_from_db()
        return Response(
            {
                "message": "Pago verificado. El plan premium quedó activo.",
                "payment_request": self.get_serializer(payment_request).data,
                "subscription": SubscriptionSerializer(subscription).data,
            },
            status=status.HTTP_200_OK,
        )

    @action(detail=True, methods=["post"], url_path="reject")
    def reject(self, request, pk=None):  # type: ignore
        payment_request = self.get_object()
        serializer = PaymentRejectSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            payment_request = services.reject_payment(
                payment_request, request.user, serializer.validated_data.get("reason", "")
            )
        except services.PaymentAlreadyProcessedError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(
            {"message": "Pago rechazado.", "payment_request": self.get_serializer(payment_request).data},
            status=status.HTTP_200_OK,
        )


class SubscriptionViewSet(mixins.ListModelMixin, viewsets.GenericViewSet):
    """
    - GET /api/v1/subscriptions/ - subscription history of the current user
    - GET /api/v1/subscriptions/active/
    - POST /api/v1/subscriptions/expire/ - run the expiry sweep now (admins)
    """

    serializer_class = SubscriptionSerializer
    permission_classes = [permissions.IsAuthenticated]

    def get_queryset(self):  # type: ignore
        return Subscription.objects.select_related("payment_request").filter(user=self.request.user)

    @action(detail=False, methods=["get"], url_path="active")
    def active(self, request):  # type: ignore
        subscription = services.active_subscription(request.user)
        if subscription is None:
            return Response(
                {"detail": "No tienes una suscripción activa.", "plan": request.user.plan},
                status=status.HTTP_404_NOT_FOUND,
            )
        return Response(self.get_serializer(subscription).data)

    @action(
        detail=False,
        methods=["post"],
        url_path="expire",
        permission_classes=[permissions.IsAuthenticated, IsPlatformAdmin],
    )
    def expire(self, request):  # type: ignore
        expired = services.expire_subscriptions()
        logger.info(f"Manual subscription expiry by {request.user.id}: {expired}")
        return Response({"expired": expired}, status=status.HTTP_200_OK)
