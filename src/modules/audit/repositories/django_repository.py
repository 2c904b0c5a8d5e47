"""Django ORM implementation of the audit sink."""

from __future__ import annotations

from typing import Any, Dict, Optional

from django.db import transaction
from django.db.models import Q, QuerySet

from modules.audit.dtos import ActivityLogEntry
from modules.audit.models import ActivityLog
from modules.audit.repositories.interfaces import IAuditSink


class ActivityLogDjangoSink(IAuditSink):
    """Concrete sink writing to the ``activity_logs`` table."""

    def write(self, entry: ActivityLogEntry) -> None:
        # Own savepoint: a failed insert must not poison an enclosing
        # transaction that the caller has already finished with.
        with transaction.atomic():
            ActivityLog.objects.create(
                actor_id=entry.actor_id,
                actor_role=entry.actor_role,
                action=entry.action,
                table_affected=entry.table_affected,
                record_id=entry.record_id,
                description=entry.description,
                changes=entry.changes,
            )

    def list(self, filters: Optional[Dict[str, Any]] = None) -> QuerySet[ActivityLog]:
        """Entries newest first, optionally narrowed by ORM look-ups."""
        queryset = ActivityLog.objects.select_related("actor")
        if filters:
            queryset = queryset.filter(Q(**filters))
        return queryset
