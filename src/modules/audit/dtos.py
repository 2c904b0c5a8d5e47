"""Audit DTOs.

``ActivityLogEntry`` is what services hand to ``ActivityAuditLog``; the
sink decides how it is persisted.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Protocol

from pydantic import BaseModel, ConfigDict, Field

from modules.audit.constants import AuditAction


class ActivityLogEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    actor_id: Optional[int]
    actor_role: str = ""
    action: AuditAction
    table_affected: str
    record_id: str
    description: str = ""
    changes: Dict[str, Any] = Field(default_factory=dict)


class Auditable(Protocol):
    """Result of a mutating use case that can describe itself for the log."""

    def as_audit_entry(self, action: AuditAction) -> ActivityLogEntry: ...
