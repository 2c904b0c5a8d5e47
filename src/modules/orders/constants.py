"""Order domain constants.

Defines the fixed status enum, the two lifecycle events and the
transition tables consumed by ``OrderStateMachine``.
"""

from typing import Dict, FrozenSet

from django.db import models


class OrderStatus(models.TextChoices):
    PENDING = "Pending", "Pending"
    PROCESSING = "Processing", "Processing"
    SHIPPING = "Shipping", "Shipping"
    DELIVERY = "Delivery", "Out for delivery"
    RECEIVED = "Received", "Received"
    COMPLETED = "Completed", "Completed"
    CANCELLED = "Cancelled", "Cancelled"


class OrderEvent(models.TextChoices):
    PROCEED = "Proceed", "Proceed"
    CANCEL = "Cancel", "Cancel"


class DeliveryType(models.TextChoices):
    PICKUP = "pickup", "Pick up"
    STANDARD = "standard", "Standard delivery"
    EXPRESS = "express", "Express delivery"


class PaymentStatus(models.TextChoices):
    PENDING = "pending", "Pending"
    PAID = "paid", "Paid"
    REFUNDED = "refunded", "Refunded"


PROCEED_TRANSITIONS: Dict[str, str] = {
    OrderStatus.PENDING.value: OrderStatus.PROCESSING.value,
    OrderStatus.PROCESSING.value: OrderStatus.SHIPPING.value,
    OrderStatus.SHIPPING.value: OrderStatus.DELIVERY.value,
    OrderStatus.DELIVERY.value: OrderStatus.RECEIVED.value,
    OrderStatus.RECEIVED.value: OrderStatus.COMPLETED.value,
}

CANCELLABLE_STATES: FrozenSet[str] = frozenset(
    {
        OrderStatus.PENDING.value,
        OrderStatus.PROCESSING.value,
        OrderStatus.SHIPPING.value,
        OrderStatus.DELIVERY.value,
    }
)

TERMINAL_STATES: FrozenSet[str] = frozenset(
    {OrderStatus.COMPLETED.value, OrderStatus.CANCELLED.value}
)
