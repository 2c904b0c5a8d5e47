"""ActivityLog: append-only record of every mutating action.

Entries are advisory; business state lives in the tables they describe.
``actor`` is nullable so that removing a user account keeps its history
(``actor_role`` preserves who they were acting as).
"""

from __future__ import annotations

from django.conf import settings
from django.db import models

from modules.audit.constants import AuditAction
from modules.core.models import AppendOnlyModel


class ActivityLog(AppendOnlyModel):
    actor: models.ForeignKey = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="activity_logs",
    )
    actor_role: models.CharField = models.CharField(max_length=32, blank=True, default="")
    action: models.CharField = models.CharField(max_length=32, choices=AuditAction.choices)
    table_affected: models.CharField = models.CharField(max_length=64)
    record_id: models.CharField = models.CharField(max_length=64)
    description: models.TextField = models.TextField(blank=True, default="")
    changes: models.JSONField = models.JSONField(default=dict, blank=True)

    class Meta:
        db_table = "activity_logs"
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(
                fields=["table_affected", "record_id"],
                name="activity_logs_record_idx",
            ),
            models.Index(fields=["-created_at"], name="activity_logs_created_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.action} {self.table_affected}#{self.record_id} by {self.actor_id}"
