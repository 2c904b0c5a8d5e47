"""Activity audit log (best-effort, append-only).

``record`` is always invoked after the primary mutation has committed.
A failing sink is logged on the operational channel and swallowed: the
business operation that triggered it still reports success.

``audited`` wraps service methods so the entry is recorded once per
successful call instead of at every call site.
"""

from __future__ import annotations

import functools
from typing import TYPE_CHECKING, Any, Callable, Dict, Optional, TypeVar

import structlog

from modules.audit.constants import AuditAction

if TYPE_CHECKING:
    from django.db.models import QuerySet

    from modules.audit.dtos import ActivityLogEntry, Auditable
    from modules.audit.models import ActivityLog
    from modules.audit.repositories.django_repository import ActivityLogDjangoSink
    from modules.audit.repositories.interfaces import IAuditSink

logger = structlog.get_logger(__name__)

R = TypeVar("R", bound="Auditable")


class ActivityAuditLog:
    """Application service fronting an ``IAuditSink``."""

    def __init__(self, sink: IAuditSink) -> None:
        self._sink = sink

    def record(self, entry: ActivityLogEntry) -> None:
        log = logger.bind(
            action=str(entry.action),
            table_affected=entry.table_affected,
            record_id=entry.record_id,
            actor_id=entry.actor_id,
        )
        try:
            self._sink.write(entry)
        except Exception:
            log.exception("audit.write_failed")
            return
        log.info("audit.recorded")


class ActivityLogQueryService:
    """Read side of the activity log (log screens)."""

    def __init__(self, sink: ActivityLogDjangoSink) -> None:
        self._sink = sink

    def list_entries(
        self, filters: Optional[Dict[str, Any]] = None
    ) -> QuerySet[ActivityLog]:
        return self._sink.list(filters)


def audited(action: AuditAction) -> Callable[[Callable[..., R]], Callable[..., R]]:
    """Record an ``ActivityLogEntry`` after the wrapped use case returns.

    The wrapped method must belong to an object exposing ``audit_log``
    (an ``ActivityAuditLog``) and return an ``Auditable`` result.  Nothing
    is recorded when the method raises.
    """

    def decorator(method: Callable[..., R]) -> Callable[..., R]:
        @functools.wraps(method)
        def wrapper(service: Any, *args: Any, **kwargs: Any) -> R:
            result = method(service, *args, **kwargs)
            try:
                entry = result.as_audit_entry(action)
            except Exception:
                logger.exception("audit.entry_build_failed", action=str(action))
                return result
            service.audit_log.record(entry)
            return result

        return wrapper

    return decorator
