"""Permission store interface.

The PermissionGate depends exclusively on this contract (DIP); the
concrete store reads the ``user_permissions`` / ``employee_profiles``
tables.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Dict, Optional

from modules.accounts.constants import Role


class IPermissionStore(ABC):
    """Source of per-user overrides and role assignments."""

    @abstractmethod
    def resolve(self, user_id: int, permission_key: str) -> Optional[bool]:
        """Return the override for *permission_key*, or ``None`` if absent."""

    @abstractmethod
    def overrides_for(self, user_id: int) -> Dict[str, bool]:
        """Return every override recorded for *user_id*."""

    @abstractmethod
    def role_of(self, user_id: int) -> Role:
        """Return the role *user_id* acts under."""

    @abstractmethod
    def set_override(self, user_id: int, permission_key: str, can_access: bool) -> None:
        """Create or replace the override for (*user_id*, *permission_key*)."""
