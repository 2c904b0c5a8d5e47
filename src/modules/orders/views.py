"""Order screen views.

One set of view classes serves every employee namespace: the namespace
role and the screen status are bound at URL-configuration time and
passed to a ``RoleView``.  Domain exceptions are caught and translated
into HTTP status codes; the view never swallows generic exceptions.
"""

from __future__ import annotations

from typing import Optional

import structlog
from django.db import DatabaseError
from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import status
from rest_framework.filters import OrderingFilter
from rest_framework.generics import GenericAPIView
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from modules.accounts.constants import Role
from modules.accounts.exceptions import PermissionDenied
from modules.accounts.views import current_actor, default_permission_gate
from modules.audit.repositories import ActivityLogDjangoSink
from modules.audit.services import ActivityAuditLog
from modules.core.pagination import StandardResultsSetPagination
from modules.orders.constants import OrderEvent, OrderStatus
from modules.orders.dtos import TransitionResult
from modules.orders.exceptions import (
    ConcurrentModification,
    InvalidTransition,
    OperationFailed,
    OrderNotFound,
)
from modules.orders.filters import OrderFilter
from modules.orders.models import Order
from modules.orders.repositories import OrderDjangoRepository
from modules.orders.role_view import RoleView
from modules.orders.serializers import OrderSerializer
from modules.orders.services import OrderService
from modules.products.ledger import StockLedger

logger = structlog.get_logger(__name__)

ERROR_STATUS = {
    PermissionDenied: status.HTTP_403_FORBIDDEN,
    OrderNotFound: status.HTTP_404_NOT_FOUND,
    InvalidTransition: status.HTTP_400_BAD_REQUEST,
    ConcurrentModification: status.HTTP_409_CONFLICT,
    OperationFailed: status.HTTP_503_SERVICE_UNAVAILABLE,
}

DOMAIN_ERRORS = tuple(ERROR_STATUS)


def default_order_service() -> OrderService:
    return OrderService(
        order_repository=OrderDjangoRepository(),
        gate=default_permission_gate(),
        ledger=StockLedger(),
        audit_log=ActivityAuditLog(ActivityLogDjangoSink()),
    )


def failure_response(exc: Exception) -> Response:
    return Response(
        {"success": False, "message": str(exc)},
        status=ERROR_STATUS[type(exc)],
    )


def unavailable_response(event: str, message: str, **context) -> Response:
    logger.exception(event, **context)
    return failure_response(OperationFailed(message))


def success_response(result: TransitionResult, message: str) -> Response:
    return Response(
        {
            "success": True,
            "message": message,
            "order": {"id": result.order_id, "status": result.new_status.value},
        }
    )


class RoleScreenMixin:
    """Binds ``role`` and ``screen_status`` passed through ``as_view``."""

    role: Optional[Role] = None
    screen_status: Optional[OrderStatus] = None

    def get_role_view(self) -> RoleView:
        return RoleView(self.role, default_order_service())


class RoleOrderListView(RoleScreenMixin, GenericAPIView):
    """GET /Employee/<Role>/<Role>Orders<Status>"""

    queryset = Order.objects.none()
    serializer_class = OrderSerializer
    filterset_class = OrderFilter
    filter_backends = [DjangoFilterBackend, OrderingFilter]
    ordering_fields = ["created_at", "total_amount"]
    ordering = ["-created_at", "-id"]
    pagination_class = StandardResultsSetPagination
    throttle_scope = "order_listing"

    def get(self, request: Request, *args, **kwargs) -> Response:
        try:
            actor = current_actor(request)
            orders = self.get_role_view().list(self.screen_status, actor)
            page = self.paginate_queryset(self.filter_queryset(orders))
            serializer = self.get_serializer(page, many=True)
            return self.get_paginated_response(serializer.data)
        except DOMAIN_ERRORS as exc:
            return failure_response(exc)
        except DatabaseError:
            return unavailable_response(
                "order.list_failed",
                "Orders could not be loaded. Please retry.",
                status=str(self.screen_status),
            )


class RoleOrderTransitionView(RoleScreenMixin, APIView):
    """POST /Employee/<Role>/<Role>Orders<Status>/{Proceed,Cancel}/<order_id>"""

    event: Optional[OrderEvent] = None
    throttle_scope = "order_transition"

    def post(self, request: Request, order_id: int) -> Response:
        try:
            actor = current_actor(request)
            role_view = self.get_role_view()
            if self.event == OrderEvent.CANCEL:
                result = role_view.cancel(self.screen_status, order_id, actor)
            else:
                result = role_view.proceed(self.screen_status, order_id, actor)
        except DOMAIN_ERRORS as exc:
            return failure_response(exc)
        except DatabaseError:
            return unavailable_response(
                "order.transition_failed",
                "The operation could not be completed. Please retry.",
                order_id=order_id,
            )

        if self.event == OrderEvent.CANCEL:
            message = f"Order #{order_id} cancelled and stock restored."
        else:
            message = f"Order #{order_id} moved to {result.new_status.label}."
        return success_response(result, message)


class CustomerCancelOrderView(APIView):
    """PUT /api/customer/orders/<order_id>/cancel"""

    throttle_scope = "order_transition"

    def put(self, request: Request, order_id: int) -> Response:
        try:
            actor = current_actor(request)
            result = default_order_service().cancel_own_order(order_id, actor)
        except DOMAIN_ERRORS as exc:
            return failure_response(exc)
        except DatabaseError:
            return unavailable_response(
                "order.customer_cancel_failed",
                "The operation could not be completed. Please retry.",
                order_id=order_id,
            )
        return success_response(result, f"Order #{order_id} cancelled.")
