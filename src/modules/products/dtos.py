"""Stock DTOs exchanged with ``StockLedger``.

- ``StockLine``: one (product, optional variation, quantity) movement.
- ``Reserved`` / ``Released``: outcome of a ledger operation.
"""

from __future__ import annotations

from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, field_validator


class StockLine(BaseModel):
    model_config = ConfigDict(frozen=True)

    product_id: int
    variation_id: Optional[int] = None
    quantity: int

    @field_validator("quantity")
    @classmethod
    def quantity_must_be_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Quantity must be at least 1.")
        return v

    @property
    def sort_key(self) -> Tuple[int, int]:
        return (self.product_id, self.variation_id or 0)


class Reserved(BaseModel):
    model_config = ConfigDict(frozen=True)

    lines: Tuple[StockLine, ...]


class Released(BaseModel):
    model_config = ConfigDict(frozen=True)

    lines: Tuple[StockLine, ...]

    @property
    def units(self) -> int:
        return sum(line.quantity for line in self.lines)
