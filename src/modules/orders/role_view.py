"""One order-screen implementation shared by every employee namespace.

A ``RoleView`` is parameterised by the role of the namespace.  It
resolves the permission key of a status screen and the label written in
audit descriptions, then delegates to the single ``OrderService``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from modules.accounts.constants import EMPLOYEE_ROLES, Role
from modules.accounts.services import admit_namespace
from modules.orders.constants import OrderStatus
from modules.orders.permissions import status_permission

if TYPE_CHECKING:
    from django.db.models import QuerySet

    from modules.accounts.dtos import Actor
    from modules.orders.dtos import TransitionResult
    from modules.orders.models import Order
    from modules.orders.services import OrderService


class RoleView:
    def __init__(self, role: Role, service: OrderService) -> None:
        if role not in EMPLOYEE_ROLES:
            raise ValueError(f"{role} has no employee namespace.")
        self.role = Role(role)
        self._service = service

    @staticmethod
    def permission_key(status: str) -> str:
        return status_permission(status)

    @property
    def actor_label(self) -> str:
        return self.role.label

    @property
    def audit_prefix(self) -> str:
        return f"{self.actor_label}:"

    def admits(self, actor: Actor) -> None:
        admit_namespace(self.role, actor)

    def list(self, status: OrderStatus, actor: Actor) -> QuerySet[Order]:
        self.admits(actor)
        return self._service.list_by_status(status, actor)

    def proceed(self, status: OrderStatus, order_id: int, actor: Actor) -> TransitionResult:
        self.admits(actor)
        return self._service.proceed(
            order_id, actor, expected_status=status, channel=self.role
        )

    def cancel(self, status: OrderStatus, order_id: int, actor: Actor) -> TransitionResult:
        self.admits(actor)
        return self._service.cancel(
            order_id, actor, expected_status=status, channel=self.role
        )
