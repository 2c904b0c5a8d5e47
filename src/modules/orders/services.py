"""Order service layer (Use Cases).

Every mutating use case runs the same pipeline:

1. ``PermissionGate.require`` for the key of the transition.  Denial
   short-circuits before the order is even loaded.
2. Load the order (``OrderNotFound``).
3. ``OrderStateMachine.validate`` against the stored status
   (``InvalidTransition``).  A screen status that no longer matches
   the stored one is a ``ConcurrentModification``.
4. Conditional write guarded on the status just read
   (``ConcurrentModification`` when zero rows matched).
5. Audit entry, recorded by ``@audited`` after the commit.

Cancel additionally restores the stock of every line in the same
transaction as the status flip: either both are applied or neither.

``DatabaseError`` raised anywhere in a use case surfaces as
``OperationFailed``.
"""

from __future__ import annotations

import contextlib
from typing import TYPE_CHECKING, Iterator, List, Optional

import structlog
from django.db import DatabaseError, transaction

from modules.audit.constants import AuditAction
from modules.audit.services import audited
from modules.orders.constants import CANCELLABLE_STATES, OrderEvent, OrderStatus
from modules.orders.dtos import TransitionResult
from modules.orders.exceptions import (
    ConcurrentModification,
    InvalidTransition,
    OperationFailed,
    OrderNotFound,
)
from modules.orders.permissions import status_permission, transition_permission
from modules.orders.state_machine import OrderStateMachine
from modules.products.dtos import StockLine

if TYPE_CHECKING:
    from django.db.models import QuerySet

    from modules.accounts.constants import Role
    from modules.accounts.dtos import Actor
    from modules.accounts.services import PermissionGate
    from modules.audit.services import ActivityAuditLog
    from modules.orders.models import Order
    from modules.orders.repositories.interfaces import IOrderRepository
    from modules.products.ledger import StockLedger

logger = structlog.get_logger(__name__)


@contextlib.contextmanager
def _persistence(log: structlog.stdlib.BoundLogger) -> Iterator[None]:
    try:
        yield
    except DatabaseError as exc:
        log.exception("order.persistence_failed")
        raise OperationFailed("The operation could not be completed. Please retry.") from exc


class OrderService:
    """Application service for the order lifecycle.

    Receives its collaborators via constructor injection (DIP); nothing
    here reaches for module-level state.
    """

    def __init__(
        self,
        order_repository: IOrderRepository,
        gate: PermissionGate,
        ledger: StockLedger,
        audit_log: ActivityAuditLog,
    ) -> None:
        self._orders = order_repository
        self._gate = gate
        self._ledger = ledger
        self.audit_log = audit_log

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @audited(AuditAction.STATUS_CHANGE)
    def proceed(
        self,
        order_id: int,
        actor: Actor,
        expected_status: Optional[str] = None,
        channel: Optional[Role] = None,
    ) -> TransitionResult:
        """Advance an order one step along the fulfilment sequence.

        ``expected_status`` is the status the caller last saw (the status
        screen the request came from).  The transition is validated
        against the stored status first; only a legal transition from a
        screen that moved on yields ``ConcurrentModification``.

        Raises:
            PermissionDenied: actor lacks the key of the target status.
            OrderNotFound: order does not exist.
            InvalidTransition: order is Completed or Cancelled.
            ConcurrentModification: status changed since it was read.
            OperationFailed: persistence failure, nothing committed.
        """
        log = logger.bind(order_id=order_id, actor_id=actor.id, event=OrderEvent.PROCEED.value)
        with _persistence(log):
            order = self._authorize_and_load(
                order_id, actor, OrderEvent.PROCEED, expected_status
            )
            current = str(order.status)
            target = self._validate(log, current, OrderEvent.PROCEED)
            self._ensure_screen_current(log, order, expected_status)

            if not self._orders.compare_and_set_status(order.pk, {current}, target):
                log.warning("order.concurrent_modification", expected=current)
                raise ConcurrentModification(
                    f"Order #{order.pk} is no longer {current}."
                )

        log.info("order.proceeded", old_status=current, new_status=target.value)
        return TransitionResult(
            order_id=order.pk,
            actor_id=actor.id,
            actor_role=actor.role,
            channel=channel,
            old_status=OrderStatus(current),
            new_status=target,
        )

    @audited(AuditAction.CANCEL)
    def cancel(
        self,
        order_id: int,
        actor: Actor,
        expected_status: Optional[str] = None,
        channel: Optional[Role] = None,
    ) -> TransitionResult:
        """Cancel an order and restore the stock of each of its lines.

        Raises:
            PermissionDenied: actor lacks ``orders_orders_cancelled``.
            OrderNotFound: order does not exist.
            InvalidTransition: order is Received, Completed or Cancelled.
            ConcurrentModification: status changed since it was read.
            OperationFailed: persistence failure, nothing committed.
        """
        log = logger.bind(order_id=order_id, actor_id=actor.id, event=OrderEvent.CANCEL.value)
        with _persistence(log):
            order = self._authorize_and_load(
                order_id, actor, OrderEvent.CANCEL, expected_status
            )
            return self._cancel(log, order, actor, expected_status, channel)

    @audited(AuditAction.CANCEL)
    def cancel_own_order(self, order_id: int, actor: Actor) -> TransitionResult:
        """Customer-initiated cancellation.

        Ownership is the gate: an order placed by somebody else is
        reported as missing.
        """
        log = logger.bind(order_id=order_id, actor_id=actor.id, event="CancelOwn")
        with _persistence(log):
            order = self._orders.get_by_id(order_id)
            if order is None or order.customer_id != actor.id:
                log.info("order.not_found")
                raise OrderNotFound(f"Order #{order_id} not found.")
            return self._cancel(log, order, actor, None, None)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_by_status(self, status: str, actor: Actor) -> QuerySet[Order]:
        """Orders currently in *status* with their items (read only).

        Raises:
            PermissionDenied: actor lacks the key of *status*.
        """
        self._gate.require(actor, status_permission(status))
        return self._orders.list_by_status(status)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _authorize_and_load(
        self,
        order_id: int,
        actor: Actor,
        event: OrderEvent,
        expected_status: Optional[str],
    ) -> Order:
        if expected_status is not None:
            self._gate.require(actor, transition_permission(expected_status, event))

        order = self._orders.get_by_id(order_id)
        if order is None:
            logger.info("order.not_found", order_id=order_id)
            raise OrderNotFound(f"Order #{order_id} not found.")

        if expected_status is None:
            self._gate.require(actor, transition_permission(order.status, event))
        return order

    @staticmethod
    def _validate(log, current: str, event: OrderEvent) -> OrderStatus:
        try:
            return OrderStateMachine.validate(current, event)
        except InvalidTransition:
            log.warning("order.invalid_transition", current_status=current)
            raise

    @staticmethod
    def _ensure_screen_current(log, order: Order, expected_status: Optional[str]) -> None:
        if expected_status is None or str(expected_status) == str(order.status):
            return
        log.warning(
            "order.stale_screen",
            expected=str(expected_status),
            current_status=str(order.status),
        )
        raise ConcurrentModification(
            f"Order #{order.pk} is no longer {expected_status}; it is now {order.status}."
        )

    def _cancel(
        self,
        log,
        order: Order,
        actor: Actor,
        expected_status: Optional[str],
        channel: Optional[Role],
    ) -> TransitionResult:
        current = str(order.status)
        self._validate(log, current, OrderEvent.CANCEL)
        self._ensure_screen_current(log, order, expected_status)
        guard = {current} if expected_status is not None else CANCELLABLE_STATES

        lines: List[StockLine] = [
            StockLine(
                product_id=item.product_id,
                variation_id=item.variation_id,
                quantity=item.quantity,
            )
            for item in self._orders.items_for(order.pk)
        ]

        with transaction.atomic():
            if not self._orders.compare_and_set_status(
                order.pk, guard, OrderStatus.CANCELLED.value
            ):
                log.warning("order.concurrent_modification", expected=sorted(guard))
                raise ConcurrentModification(
                    f"Order #{order.pk} changed while it was being cancelled."
                )
            released = self._ledger.release(lines)

        log.info("order.cancelled", old_status=current, units_restored=released.units)
        return TransitionResult(
            order_id=order.pk,
            actor_id=actor.id,
            actor_role=actor.role,
            channel=channel,
            old_status=OrderStatus(current),
            new_status=OrderStatus.CANCELLED,
            restocked=released.lines,
        )
