"""Activity log screen, served identically under every employee namespace."""

from __future__ import annotations

from typing import Optional

import structlog
from django.db import DatabaseError
from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import status
from rest_framework.generics import GenericAPIView
from rest_framework.request import Request
from rest_framework.response import Response

from modules.accounts.constants import PermissionKey, Role
from modules.accounts.exceptions import PermissionDenied
from modules.accounts.services import admit_namespace
from modules.accounts.views import current_actor, default_permission_gate
from modules.audit.filters import ActivityLogFilter
from modules.audit.models import ActivityLog
from modules.audit.repositories import ActivityLogDjangoSink
from modules.audit.serializers import ActivityLogSerializer
from modules.audit.services import ActivityLogQueryService
from modules.core.pagination import StandardResultsSetPagination

logger = structlog.get_logger(__name__)


class ActivityLogDataView(GenericAPIView):
    """GET /Employee/<Role>/Logs/Data

    Newest first, paginated, narrowed by ``ActivityLogFilter``.
    Requires the ``logs`` permission key.
    """

    role: Optional[Role] = None

    queryset = ActivityLog.objects.none()
    serializer_class = ActivityLogSerializer
    filterset_class = ActivityLogFilter
    filter_backends = [DjangoFilterBackend]
    pagination_class = StandardResultsSetPagination

    def get(self, request: Request, *args, **kwargs) -> Response:
        try:
            actor = current_actor(request)
            admit_namespace(self.role, actor)
            default_permission_gate().require(actor, PermissionKey.LOGS)

            entries = ActivityLogQueryService(ActivityLogDjangoSink()).list_entries()
            page = self.paginate_queryset(self.filter_queryset(entries))
            serializer = self.get_serializer(page, many=True)
            return self.get_paginated_response(serializer.data)
        except PermissionDenied as exc:
            return self._failure(str(exc), status.HTTP_403_FORBIDDEN)
        except DatabaseError:
            logger.exception("activity_log.list_failed", namespace=str(self.role))
            return self._failure(
                "Activity logs could not be loaded. Please retry.",
                status.HTTP_503_SERVICE_UNAVAILABLE,
            )

    @staticmethod
    def _failure(message: str, code: int) -> Response:
        return Response({"success": False, "message": message}, status=code)
