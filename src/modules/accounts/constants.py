"""Roles, permission keys and role default allow-lists.

Every administrative capability is a string key stored in the
``user_permissions`` table.  When a user has no override row for a key,
the role default below decides.
"""

from __future__ import annotations

from typing import Dict, FrozenSet

from django.db import models


class Role(models.TextChoices):
    ADMIN = "Admin", "Admin"
    INVENTORY_MANAGER = "InventoryManager", "Inventory Manager"
    TRANSACTION_MANAGER = "TransactionManager", "Transaction Manager"
    USER_MANAGER = "UserManager", "User Manager"
    ORDER_SUPPORT = "OrderSupport", "Order Support"
    CUSTOMER = "Customer", "Customer"


EMPLOYEE_ROLES: tuple[Role, ...] = (
    Role.ADMIN,
    Role.INVENTORY_MANAGER,
    Role.TRANSACTION_MANAGER,
    Role.USER_MANAGER,
    Role.ORDER_SUPPORT,
)


class PermissionKey(models.TextChoices):
    ORDERS_PENDING = "orders_orders_pending", "Orders: pending"
    ORDERS_PROCESSING = "orders_orders_processing", "Orders: processing"
    ORDERS_SHIPPING = "orders_orders_shipping", "Orders: shipping"
    ORDERS_DELIVERY = "orders_orders_delivery", "Orders: delivery"
    ORDERS_RECEIVED = "orders_orders_received", "Orders: received"
    ORDERS_COMPLETED = "orders_orders_completed", "Orders: completed"
    ORDERS_CANCELLED = "orders_orders_cancelled", "Orders: cancelled"
    LOGS = "logs", "Activity logs"


ORDER_KEYS: FrozenSet[str] = frozenset(
    key for key in PermissionKey.values if key.startswith("orders_")
)

# Keys and roles are plain strings, matching the values stored in the database.
ROLE_DEFAULTS: Dict[str, FrozenSet[str]] = {
    Role.ADMIN.value: frozenset(PermissionKey.values),
    Role.TRANSACTION_MANAGER.value: ORDER_KEYS | {PermissionKey.LOGS.value},
    Role.ORDER_SUPPORT.value: ORDER_KEYS | {PermissionKey.LOGS.value},
    Role.INVENTORY_MANAGER.value: frozenset(
        {
            PermissionKey.ORDERS_PENDING.value,
            PermissionKey.ORDERS_PROCESSING.value,
            PermissionKey.ORDERS_SHIPPING.value,
            PermissionKey.LOGS.value,
        }
    ),
    Role.USER_MANAGER.value: frozenset({PermissionKey.LOGS.value}),
    Role.CUSTOMER.value: frozenset(),
}
