"""Back-office API: dashboard, activity feed and system configuration."""

from __future__ import annotations

import logging

from django_filters.rest_framework import DjangoFilterBackend  # type: ignore
from rest_framework import permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import APIView  # type: ignore

from apps.users.permissions import IsSuperAdmin
from . import services
from .models import ActivityLog
from .serializers import ActivityLogSerializer, PurgeLogsSerializer, SystemConfigSerializer

logger = logging.getLogger(__name__)


class DashboardView(APIView):
    """GET /api/v1/admin/dashboard/"""

    permission_classes = [permissions.IsAuthenticated, IsSuperAdmin]

    def get(self, request):  # type: ignore
        return Response(services.dashboard_statistics())


class ActivityLogViewSet(viewsets.ReadOnlyModelViewSet):
    """
    - GET /api/v1/admin/activity/?type=property_approved
    - GET /api/v1/admin/activity/statistics/
    - POST /api/v1/admin/activity/purge/ {"days": 90}
    """

    queryset = ActivityLog.objects.select_related("user", "property")
    serializer_class = ActivityLogSerializer
    permission_classes = [permissions.IsAuthenticated, IsSuperAdmin]
    filter_backends = [DjangoFilterBackend]
    filterset_fields = ["type", "user"]

    @action(detail=False, methods=["get"], url_path="statistics")
    def statistics(self, request):  # type: ignore
        return Response(services.activity_statistics())

    @action(detail=False, methods=["post"], url_path="purge")
    def purge(self, request):  # type: ignore
        serializer = PurgeLogsSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        days = serializer.validated_data["days"]
        deleted = services.purge_activity_logs(days)
        return Response(
            {"deleted": deleted, "message": f"Se eliminaron {deleted} registros anteriores a {days} días."},
            status=status.HTTP_200_OK,
        )


class SystemConfigView(APIView):
    """GET/PATCH /api/v1/admin/config/"""

    permission_classes = [permissions.IsAuthenticated, IsSuperAdmin]

    def get(self, request):  # type: ignore
        return Response(SystemConfigSerializer(services.get_system_config()).data)

    def patch(self, request):  # type: ignore
        config = services.get_system_config()
        serializer = SystemConfigSerializer(config, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        changed = ", ".join(sorted(serializer.validated_data)) or "-"
        services.log_activity(
            ActivityLog.Type.CONFIG_UPDATED,
            f"Configuración actualizada: {changed}",
            user=request.user,
        )
        return Response(serializer.data)
