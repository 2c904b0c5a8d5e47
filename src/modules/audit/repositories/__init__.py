"""Audit repositories package."""

from modules.audit.repositories.django_repository import ActivityLogDjangoSink
from modules.audit.repositories.interfaces import IAuditSink

__all__ = ["ActivityLogDjangoSink", "IAuditSink"]
