"""Order domain exceptions.

Raised by the Service Layer when business rules are violated.
The API layer (Views) catches these and translates them into
appropriate HTTP responses.
"""

from __future__ import annotations


class OrderNotFound(Exception):
    """The requested order does not exist."""


class InvalidTransition(Exception):
    """The event is not allowed from the order's current status."""

    def __init__(self, current_status: str, event: str) -> None:
        super().__init__(f"Cannot {str(event).lower()} an order in status {current_status}.")
        self.current_status = str(current_status)
        self.event = str(event)


class ConcurrentModification(Exception):
    """The order status changed between read and conditional write."""


class OperationFailed(Exception):
    """Persistence failed; nothing was committed and the caller may retry."""
