"""Permission keys guarding the order screens.

One key per status: it gates reading the status screen and moving
orders INTO that status.  Cancel always needs the ``cancelled`` key.
"""

from __future__ import annotations

from modules.accounts.constants import PermissionKey
from modules.orders.constants import OrderEvent, OrderStatus
from modules.orders.state_machine import OrderStateMachine

STATUS_PERMISSIONS: dict[str, str] = {
    OrderStatus.PENDING.value: PermissionKey.ORDERS_PENDING.value,
    OrderStatus.PROCESSING.value: PermissionKey.ORDERS_PROCESSING.value,
    OrderStatus.SHIPPING.value: PermissionKey.ORDERS_SHIPPING.value,
    OrderStatus.DELIVERY.value: PermissionKey.ORDERS_DELIVERY.value,
    OrderStatus.RECEIVED.value: PermissionKey.ORDERS_RECEIVED.value,
    OrderStatus.COMPLETED.value: PermissionKey.ORDERS_COMPLETED.value,
    OrderStatus.CANCELLED.value: PermissionKey.ORDERS_CANCELLED.value,
}


def status_permission(status: str) -> str:
    """Key required to list orders in *status*."""
    return STATUS_PERMISSIONS[str(status)]


def transition_permission(current: str, event: str) -> str:
    """Key required to apply *event* to an order in *current*.

    For an event that is illegal from *current* the key of *current*
    itself is required, so unauthorised callers learn nothing about the
    order before ``InvalidTransition`` is raised.
    """
    if event == OrderEvent.CANCEL:
        return STATUS_PERMISSIONS[OrderStatus.CANCELLED.value]
    target = OrderStateMachine.target_of(current, event)
    return STATUS_PERMISSIONS[str(target or current)]
