"""Employee role assignment and per-user permission overrides.

Business rules implemented:
- A user with an ``EmployeeProfile`` acts under exactly one employee role.
- A user without a profile is a customer (superusers act as Admin).
- ``UserPermission`` rows override the role default for a single key;
  at most one row per (user, key).
"""

from __future__ import annotations

from django.conf import settings
from django.db import models

from modules.accounts.constants import EMPLOYEE_ROLES, PermissionKey, Role
from modules.core.models import TimestampedModel


class EmployeeProfile(TimestampedModel):
    user: models.OneToOneField = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="employee_profile",
    )
    role: models.CharField = models.CharField(
        max_length=32,
        choices=[(role.value, role.label) for role in EMPLOYEE_ROLES],
    )
    is_active: models.BooleanField = models.BooleanField(default=True)

    class Meta:
        db_table = "employee_profiles"
        indexes = [
            models.Index(fields=["role"], name="employee_profiles_role_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.user} ({self.role})"

    @property
    def role_choice(self) -> Role:
        return Role(self.role)


class UserPermission(TimestampedModel):
    """Per-user override of a role default (``CanAccess`` flag)."""

    user: models.ForeignKey = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="permission_overrides",
    )
    permission_name: models.CharField = models.CharField(
        max_length=64,
        choices=PermissionKey.choices,
    )
    can_access: models.BooleanField = models.BooleanField(default=False)

    class Meta:
        db_table = "user_permissions"
        constraints = [
            models.UniqueConstraint(
                fields=["user", "permission_name"],
                name="user_permissions_user_key_unique",
            ),
        ]

    def __str__(self) -> str:
        verdict = "allow" if self.can_access else "deny"
        return f"{self.user_id}:{self.permission_name}={verdict}"
