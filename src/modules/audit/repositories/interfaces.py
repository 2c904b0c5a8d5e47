"""Audit sink interface.

Writes are best-effort and happen outside the business transaction.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from modules.audit.dtos import ActivityLogEntry


class IAuditSink(ABC):
    @abstractmethod
    def write(self, entry: ActivityLogEntry) -> None:
        """Persist *entry*.  May raise; the caller absorbs failures."""
