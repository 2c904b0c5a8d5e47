"""Order DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
DTOs are immutable (``frozen=True``).

- ``TransitionResult``: outcome of a Proceed / Cancel use case; knows how
  to describe itself as an ``ActivityLogEntry``.
"""

from __future__ import annotations

from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict

from modules.accounts.constants import Role
from modules.audit.constants import AuditAction
from modules.audit.dtos import ActivityLogEntry
from modules.orders.constants import OrderStatus
from modules.products.dtos import StockLine


class TransitionResult(BaseModel):
    """Immutable record of one committed status change.

    ``channel`` is the role namespace the request came through; it only
    affects the audit description prefix.  ``restocked`` is empty for
    ``Proceed``.
    """

    model_config = ConfigDict(frozen=True)

    order_id: int
    actor_id: int
    actor_role: Role
    old_status: OrderStatus
    new_status: OrderStatus
    channel: Optional[Role] = None
    restocked: Tuple[StockLine, ...] = ()

    @property
    def actor_label(self) -> str:
        return Role(self.channel or self.actor_role).label

    def as_audit_entry(self, action: AuditAction) -> ActivityLogEntry:
        if action == AuditAction.CANCEL:
            verb = "cancelled"
        else:
            verb = f"moved from {self.old_status.value} to {self.new_status.value}"
        return ActivityLogEntry(
            actor_id=self.actor_id,
            actor_role=str(self.actor_role),
            action=action,
            table_affected="orders",
            record_id=str(self.order_id),
            description=f"{self.actor_label}: order #{self.order_id} {verb}",
            changes={
                "status": {
                    "before": str(self.old_status),
                    "after": str(self.new_status),
                },
                "stock": [
                    {
                        "product_id": line.product_id,
                        "variation_id": line.variation_id,
                        "quantity": line.quantity,
                    }
                    for line in self.restocked
                ],
            },
        )
