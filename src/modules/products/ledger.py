"""Authoritative inventory counters (StockLedger).

Deduction / restoration policy:
- A line carrying ``variation_id`` adjusts BOTH the variation ``quantity``
  and the parent product ``stock_quantity``.
- A line without ``variation_id`` adjusts only the product counter.
- Every adjustment is a single ``UPDATE ... SET x = MAX(x + delta, 0)``
  statement: an atomic read-modify-write that clamps at zero instead of
  failing, so concurrent writers on the same product never lose updates.

Rows are touched in (product_id, variation_id) order so concurrent
multi-line operations acquire row locks in the same order.
"""

from __future__ import annotations

from collections import defaultdict
from typing import Dict, Iterable, List, Optional

import structlog
from django.db import models, transaction
from django.db.models import F, Value
from django.db.models.functions import Greatest
from django.utils import timezone

from modules.products.dtos import Released, Reserved, StockLine
from modules.products.exceptions import (
    InactiveProduct,
    InsufficientStock,
    ProductNotFound,
)
from modules.products.models import Product, ProductVariation

logger = structlog.get_logger(__name__)


def _clamped(field: str, delta: int) -> Greatest:
    return Greatest(
        F(field) + delta,
        Value(0),
        output_field=models.IntegerField(),
    )


class StockLedger:
    """Reserve / release stock for order lines."""

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def reserve(self, lines: Iterable[StockLine], strict: bool = True) -> Reserved:
        """Deduct stock for *lines* (used by the checkout flow).

        With ``strict=True`` the affected rows are locked (SELECT FOR
        UPDATE) and validated first; any missing, inactive or short line
        aborts the whole reservation.  With ``strict=False`` deductions are
        applied directly and clamp at zero.

        Raises:
            ProductNotFound: a product or variation does not exist.
            InactiveProduct: a product or variation is inactive.
            InsufficientStock: requested more than available.
        """
        ordered = self._ordered(lines)
        if strict:
            self._validate_availability(ordered)

        for line in ordered:
            self.adjust(line.product_id, line.variation_id, -line.quantity)

        logger.info(
            "stock.reserved",
            line_count=len(ordered),
            units=sum(line.quantity for line in ordered),
            strict=strict,
        )
        return Reserved(lines=tuple(ordered))

    @transaction.atomic
    def release(self, lines: Iterable[StockLine]) -> Released:
        """Restore stock for *lines* (order cancellation).

        Not idempotent: the caller guarantees a single invocation per
        cancelled order.
        """
        ordered = self._ordered(lines)
        for line in ordered:
            self.adjust(line.product_id, line.variation_id, line.quantity)
            logger.info(
                "stock.released",
                product_id=line.product_id,
                variation_id=line.variation_id,
                quantity=line.quantity,
            )
        return Released(lines=tuple(ordered))

    def adjust(self, product_id: int, variation_id: Optional[int], delta: int) -> None:
        """Apply *delta* to the counters of one line, clamping at zero."""
        now = timezone.now()
        updated = Product.objects.filter(pk=product_id).update(
            stock_quantity=_clamped("stock_quantity", delta),
            updated_at=now,
        )
        if not updated:
            logger.warning("stock.product_missing", product_id=product_id, delta=delta)

        if variation_id is None:
            return

        updated = ProductVariation.objects.filter(pk=variation_id).update(
            quantity=_clamped("quantity", delta),
            updated_at=now,
        )
        if not updated:
            logger.warning(
                "stock.variation_missing", variation_id=variation_id, delta=delta
            )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def available(self, product_id: int, variation_id: Optional[int] = None) -> int:
        """Current counter for a product, or for a variation when given."""
        if variation_id is not None:
            value = (
                ProductVariation.objects.filter(pk=variation_id)
                .values_list("quantity", flat=True)
                .first()
            )
        else:
            value = (
                Product.objects.filter(pk=product_id)
                .values_list("stock_quantity", flat=True)
                .first()
            )
        if value is None:
            raise ProductNotFound(
                f"Product {product_id}"
                + (f" / variation {variation_id}" if variation_id else "")
                + " not found."
            )
        return value

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    @staticmethod
    def _ordered(lines: Iterable[StockLine]) -> List[StockLine]:
        return sorted(lines, key=lambda line: line.sort_key)

    @staticmethod
    def _validate_availability(lines: List[StockLine]) -> None:
        product_demand: Dict[int, int] = defaultdict(int)
        variation_demand: Dict[int, int] = defaultdict(int)
        for line in lines:
            product_demand[line.product_id] += line.quantity
            if line.variation_id is not None:
                variation_demand[line.variation_id] += line.quantity

        products = {
            product.pk: product
            for product in Product.objects.select_for_update()
            .alive()
            .filter(pk__in=product_demand)
            .order_by("pk")
        }
        variations = {
            variation.pk: variation
            for variation in ProductVariation.objects.select_for_update()
            .filter(pk__in=variation_demand)
            .order_by("pk")
        }

        for line in lines:
            product = products.get(line.product_id)
            if product is None:
                raise ProductNotFound(f"Product {line.product_id} not found.")
            if not product.is_active:
                raise InactiveProduct(f"Product {product.sku} is inactive.")
            if line.variation_id is None:
                continue
            variation = variations.get(line.variation_id)
            if variation is None or variation.product_id != product.pk:
                raise ProductNotFound(
                    f"Variation {line.variation_id} not found for product "
                    f"{line.product_id}."
                )
            if not variation.is_active:
                raise InactiveProduct(f"Variation {variation.pk} is inactive.")

        for product_id, demand in product_demand.items():
            product = products[product_id]
            if product.stock_quantity < demand:
                raise InsufficientStock(
                    f"Product {product.sku}: requested {demand}, "
                    f"available {product.stock_quantity}."
                )
        for variation_id, demand in variation_demand.items():
            variation = variations[variation_id]
            if variation.quantity < demand:
                raise InsufficientStock(
                    f"Variation {variation_id}: requested {demand}, "
                    f"available {variation.quantity}."
                )
