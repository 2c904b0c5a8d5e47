"""Product and ProductVariation models with stock counters.

Business rules implemented:
- SKU must be unique in the system (normalised to uppercase).
- ``stock_quantity`` / ``quantity`` are non-negative integers; every write
  goes through ``StockLedger`` which clamps at zero.
- A variation belongs to exactly one product; its counter is tracked
  independently of the parent's counter.
- Products are archived (soft delete via ``deleted_at``), never removed,
  because order items keep pointing at them.
"""

from __future__ import annotations

from decimal import Decimal

import structlog
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models

from modules.core.models import SoftDeleteModel, TimestampedModel

logger = structlog.get_logger(__name__)


class Product(SoftDeleteModel):
    sku = models.CharField(max_length=64, unique=True)
    name = models.CharField(max_length=255)
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
        default=Decimal("0.00"),
    )
    stock_quantity = models.PositiveIntegerField(default=0)
    is_active = models.BooleanField(default=True)

    class Meta:
        db_table = "products"
        ordering = ["name"]
        indexes = [
            models.Index(fields=["is_active"], name="products_active_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(stock_quantity__gte=0),
                name="products_stock_non_negative",
            ),
        ]

    def clean(self) -> None:
        super().clean()
        if self.sku:
            self.sku = self.sku.strip().upper()
        if self.stock_quantity is not None and self.stock_quantity < 0:
            raise ValidationError(
                {"stock_quantity": "Stock quantity cannot be negative."}
            )

    def save(self, *args, **kwargs) -> None:
        is_new = self._state.adding
        if self.sku:
            self.sku = self.sku.strip().upper()
        super().save(*args, **kwargs)
        if is_new:
            logger.info(
                "product.created",
                product_id=self.pk,
                sku=self.sku,
                name=self.name,
            )

    def __str__(self) -> str:
        return f"{self.sku} - {self.name}"


class ProductVariation(TimestampedModel):
    """Sellable variant (size, colour, finish) with its own counter."""

    product = models.ForeignKey(
        "products.Product",
        on_delete=models.PROTECT,
        related_name="variations",
    )
    name = models.CharField(max_length=255)
    quantity = models.PositiveIntegerField(default=0)
    is_active = models.BooleanField(default=True)

    class Meta:
        db_table = "product_variations"
        ordering = ["product_id", "name"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gte=0),
                name="product_variations_quantity_non_negative",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.product_id}/{self.name}"
