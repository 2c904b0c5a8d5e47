"""Order repository interface.

Extends ``IRepository[Order]`` with the reads the order screens need and
the single conditional write the lifecycle uses.

The Service Layer depends exclusively on this contract (DIP).
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from django.db.models import QuerySet

    from modules.orders.models import Order, OrderItem


class IOrderRepository(IRepository["Order"]):
    """Repository contract for the Order aggregate root."""

    @abstractmethod
    def get_by_id(self, id: int) -> Optional[Order]:
        """Retrieve an order, ``None`` when it does not exist."""

    @abstractmethod
    def list(self, filters: Optional[Dict[str, Any]] = None) -> QuerySet[Order]:
        """List orders with optional ORM filters."""

    @abstractmethod
    def list_by_status(self, status: str) -> QuerySet[Order]:
        """Orders currently in *status*, items eager-loaded."""

    @abstractmethod
    def items_for(self, order_id: int) -> List[OrderItem]:
        """Line items of an order."""

    @abstractmethod
    def compare_and_set_status(
        self, order_id: int, expected: Iterable[str], new_status: str
    ) -> bool:
        """Set ``status`` to *new_status* only if it is one of *expected*.

        Returns ``False`` when no row matched (missing order or a status
        changed concurrently).
        """
