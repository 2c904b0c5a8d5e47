"""Order status state machine.

Pure transition validation: no storage access, no side effects.

- ``Proceed`` advances one step along
  Pending -> Processing -> Shipping -> Delivery -> Received -> Completed.
- ``Cancel`` is allowed from Pending, Processing, Shipping and Delivery.
- Completed and Cancelled are terminal.
"""

from __future__ import annotations

from typing import Optional

from modules.orders.constants import (
    CANCELLABLE_STATES,
    PROCEED_TRANSITIONS,
    TERMINAL_STATES,
    OrderEvent,
    OrderStatus,
)
from modules.orders.exceptions import InvalidTransition


class OrderStateMachine:
    @staticmethod
    def next_status(current: str) -> Optional[OrderStatus]:
        """Status reached by ``Proceed`` from *current*, if any."""
        target = PROCEED_TRANSITIONS.get(str(current))
        return OrderStatus(target) if target else None

    @staticmethod
    def can_cancel(current: str) -> bool:
        return str(current) in CANCELLABLE_STATES

    @staticmethod
    def is_terminal(current: str) -> bool:
        return str(current) in TERMINAL_STATES

    @classmethod
    def target_of(cls, current: str, event: str) -> Optional[OrderStatus]:
        """Status *event* would lead to from *current*, ``None`` if illegal."""
        if str(current) not in OrderStatus.values:
            return None
        if event == OrderEvent.PROCEED:
            return cls.next_status(current)
        if event == OrderEvent.CANCEL:
            return OrderStatus.CANCELLED if cls.can_cancel(current) else None
        return None

    @classmethod
    def validate(cls, current: str, event: str) -> OrderStatus:
        """Return the next status or raise ``InvalidTransition``."""
        target = cls.target_of(current, event)
        if target is None:
            raise InvalidTransition(current, event)
        return target
