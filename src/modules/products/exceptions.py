"""Product / stock domain exceptions.

Raised by ``StockLedger`` during strict reservation.  Restoration and
clamped deduction never raise for availability reasons.
"""

from __future__ import annotations


class ProductNotFound(Exception):
    """A product or variation referenced by a stock line does not exist."""


class InactiveProduct(Exception):
    """A product or variation referenced by a stock line is inactive."""


class InsufficientStock(Exception):
    """Not enough stock to reserve the requested quantity."""
