"""Django ORM implementation of the Order repository.

Satisfies ``IOrderRepository`` using Django's QuerySet API.

Status writes are a single conditional ``UPDATE ... WHERE id = ? AND
status IN (...)``: whichever writer commits first wins, the other sees
zero affected rows.  No row lock is held between read and write.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional

import structlog
from django.db.models import QuerySet
from django.utils import timezone

from modules.orders.models import Order, OrderItem
from modules.orders.repositories.interfaces import IOrderRepository

logger = structlog.get_logger(__name__)


class OrderDjangoRepository(IOrderRepository):
    """Concrete Order repository backed by Django ORM."""

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get_by_id(self, id: int) -> Optional[Order]:
        return Order.objects.filter(pk=id).first()

    def list(self, filters: Optional[Dict[str, Any]] = None) -> QuerySet[Order]:
        """List orders with eager-loaded customer and items.

        ``select_related`` for the customer FK (single JOIN) and
        ``prefetch_related`` for items with their product and variation
        (batched queries).  Prevents N+1 on the order screens.
        """
        queryset = Order.objects.select_related("customer").prefetch_related(
            "items__product", "items__variation"
        )
        if filters:
            queryset = queryset.filter(**filters)
        return queryset

    def list_by_status(self, status: str) -> QuerySet[Order]:
        return self.list({"status": str(status)})

    def items_for(self, order_id: int) -> List[OrderItem]:
        return list(OrderItem.objects.filter(order_id=order_id).order_by("id"))

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    def compare_and_set_status(
        self, order_id: int, expected: Iterable[str], new_status: str
    ) -> bool:
        expected_values = sorted(str(status) for status in expected)
        updated = Order.objects.filter(
            pk=order_id, status__in=expected_values
        ).update(status=str(new_status), updated_at=timezone.now())

        log = logger.bind(
            order_id=order_id, expected=expected_values, new_status=str(new_status)
        )
        if not updated:
            log.info("order.status_cas_missed")
            return False
        log.info("order.status_updated")
        return True
