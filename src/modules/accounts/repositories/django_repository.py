"""Django ORM implementation of the permission store."""

from __future__ import annotations

from typing import Dict, Optional

import structlog
from django.contrib.auth import get_user_model

from modules.accounts.constants import Role
from modules.accounts.models import EmployeeProfile, UserPermission
from modules.accounts.repositories.interfaces import IPermissionStore

logger = structlog.get_logger(__name__)


class PermissionDjangoStore(IPermissionStore):
    """Concrete permission store backed by Django ORM."""

    def resolve(self, user_id: int, permission_key: str) -> Optional[bool]:
        return (
            UserPermission.objects.filter(
                user_id=user_id, permission_name=permission_key
            )
            .values_list("can_access", flat=True)
            .first()
        )

    def overrides_for(self, user_id: int) -> Dict[str, bool]:
        rows = UserPermission.objects.filter(user_id=user_id).values_list(
            "permission_name", "can_access"
        )
        return {name: bool(can_access) for name, can_access in rows}

    def role_of(self, user_id: int) -> Role:
        """Resolve the acting role.

        Active employee profile wins; superusers without a profile act as
        Admin; everybody else is a customer.
        """
        profile = (
            EmployeeProfile.objects.filter(user_id=user_id, is_active=True)
            .values_list("role", flat=True)
            .first()
        )
        if profile:
            return Role(profile)
        is_superuser = (
            get_user_model()
            .objects.filter(pk=user_id, is_superuser=True)
            .exists()
        )
        return Role.ADMIN if is_superuser else Role.CUSTOMER

    def set_override(self, user_id: int, permission_key: str, can_access: bool) -> None:
        UserPermission.objects.update_or_create(
            user_id=user_id,
            permission_name=permission_key,
            defaults={"can_access": can_access},
        )
        logger.info(
            "permission.override_set",
            user_id=user_id,
            permission_key=permission_key,
            can_access=can_access,
        )
