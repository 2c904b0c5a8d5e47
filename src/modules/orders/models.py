"""Order and OrderItem models.

Business rules implemented:
- ``status`` is always one of ``OrderStatus`` (CHECK constraint).
- Orders are created by the external checkout with stock already
  reserved, and are never hard-deleted, only transitioned.
- OrderItem snapshots the price at purchase and is immutable once created.
- Status writes go through ``OrderDjangoRepository.compare_and_set_status``.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models

from modules.core.models import TimestampedModel
from modules.orders.constants import DeliveryType, OrderStatus, PaymentStatus


class Order(TimestampedModel):
    customer: models.ForeignKey = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="orders",
    )
    status: models.CharField = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
        default=OrderStatus.PENDING,
    )
    total_amount: models.DecimalField = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0.00"),
    )
    delivery_type: models.CharField = models.CharField(
        max_length=20,
        choices=DeliveryType.choices,
        default=DeliveryType.STANDARD,
    )
    payment_status: models.CharField = models.CharField(
        max_length=20,
        choices=PaymentStatus.choices,
        default=PaymentStatus.PENDING,
    )

    class Meta:
        db_table = "orders"
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["status"], name="orders_status_idx"),
            models.Index(fields=["-created_at"], name="orders_created_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(status__in=OrderStatus.values),
                name="orders_status_valid",
            ),
        ]

    def __str__(self) -> str:
        return f"#{self.pk} ({self.status})"


class OrderItem(TimestampedModel):
    """Line item linking an Order to a Product (and optional variation)."""

    order: models.ForeignKey = models.ForeignKey(
        "orders.Order",
        on_delete=models.PROTECT,
        related_name="items",
    )
    product: models.ForeignKey = models.ForeignKey(
        "products.Product",
        on_delete=models.PROTECT,
        related_name="order_items",
    )
    variation: models.ForeignKey = models.ForeignKey(
        "products.ProductVariation",
        on_delete=models.PROTECT,
        related_name="order_items",
        null=True,
        blank=True,
    )
    quantity: models.PositiveIntegerField = models.PositiveIntegerField(
        validators=[MinValueValidator(1)],
    )
    price_at_purchase: models.DecimalField = models.DecimalField(
        max_digits=10,
        decimal_places=2,
    )

    class Meta:
        db_table = "order_items"
        ordering = ["id"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gte=1),
                name="order_items_quantity_positive",
            ),
        ]

    def save(self, *args: Any, **kwargs: Any) -> None:
        if not self._state.adding:
            raise ValueError(f"OrderItem {self.pk} is immutable once created.")
        super().save(*args, **kwargs)

    @property
    def subtotal(self) -> Decimal:
        return self.quantity * self.price_at_purchase

    def __str__(self) -> str:
        return f"{self.product_id} x{self.quantity}"
