"""Accounts repositories package."""

from modules.accounts.repositories.django_repository import PermissionDjangoStore
from modules.accounts.repositories.interfaces import IPermissionStore

__all__ = ["IPermissionStore", "PermissionDjangoStore"]
