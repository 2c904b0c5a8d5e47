"""Access-control exceptions.

Raised by the PermissionGate (and role namespaces) before any state is
touched.  Views translate them into 403 responses; they are never retried.
"""

from __future__ import annotations


class PermissionDenied(Exception):
    """The actor lacks the permission key required for the operation."""

    def __init__(self, message: str, permission_key: str | None = None) -> None:
        super().__init__(message)
        self.permission_key = permission_key
