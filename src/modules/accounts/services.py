"""Permission gate and request actor resolution (Use Cases).

Resolution order for a single key:
1. A per-user override for the key, when one exists, decides.
2. Otherwise the role default allow-list decides.

Checks are pure reads.  ``require`` raises ``PermissionDenied`` so callers
short-circuit before loading or mutating anything.
"""

from __future__ import annotations

import enum
from typing import TYPE_CHECKING, FrozenSet

import structlog

from modules.accounts.constants import ROLE_DEFAULTS, PermissionKey, Role
from modules.accounts.dtos import Actor
from modules.accounts.exceptions import PermissionDenied

if TYPE_CHECKING:
    from rest_framework.request import Request

    from modules.accounts.repositories.interfaces import IPermissionStore

logger = structlog.get_logger(__name__)


class Decision(enum.Enum):
    ALLOWED = "allowed"
    DENIED = "denied"

    @property
    def allowed(self) -> bool:
        return self is Decision.ALLOWED


class PermissionGate:
    """Resolves whether an actor may perform an operation.

    Receives an ``IPermissionStore`` via constructor injection (DIP).
    """

    def __init__(self, store: IPermissionStore) -> None:
        self._store = store

    # ------------------------------------------------------------------
    # Checks
    # ------------------------------------------------------------------

    def check(self, actor: Actor, permission_key: str) -> Decision:
        """Return ``ALLOWED`` or ``DENIED`` for *permission_key*.

        A bound actor (capabilities resolved earlier in the request) is
        answered from its capability set without touching the store.
        """
        key = str(permission_key)
        if actor.capabilities is not None:
            allowed = key in actor.capabilities
        else:
            override = self._store.resolve(actor.id, key)
            if override is not None:
                allowed = bool(override)
            else:
                allowed = key in ROLE_DEFAULTS.get(str(actor.role), frozenset())
        return Decision.ALLOWED if allowed else Decision.DENIED

    def require(self, actor: Actor, permission_key: str) -> None:
        """Raise ``PermissionDenied`` unless *actor* holds *permission_key*."""
        if self.check(actor, permission_key).allowed:
            return
        logger.warning(
            "permission.denied",
            actor_id=actor.id,
            role=str(actor.role),
            permission_key=str(permission_key),
        )
        raise PermissionDenied(
            f"Access denied. Missing permission '{permission_key}'.",
            permission_key=str(permission_key),
        )

    # ------------------------------------------------------------------
    # Capability sets
    # ------------------------------------------------------------------

    def capabilities(self, actor: Actor) -> FrozenSet[str]:
        """Every key *actor* holds: role defaults with overrides applied."""
        granted = set(ROLE_DEFAULTS.get(str(actor.role), frozenset()))
        for key, can_access in self._store.overrides_for(actor.id).items():
            if can_access:
                granted.add(key)
            else:
                granted.discard(key)
        return frozenset(key for key in granted if key in PermissionKey.values)

    def bind(self, actor: Actor) -> Actor:
        """Return *actor* carrying its resolved capability set."""
        return actor.with_capabilities(self.capabilities(actor))


class AuthContext:
    """Maps the authenticated request user onto an ``Actor``.

    Authentication itself (session or bearer token) happens in DRF's
    authentication classes; this only resolves role and capabilities.
    """

    def __init__(self, store: IPermissionStore, gate: PermissionGate) -> None:
        self._store = store
        self._gate = gate

    def current_actor(self, request: Request) -> Actor:
        user = request.user
        if not getattr(user, "is_authenticated", False):
            raise PermissionDenied("Authentication required.")
        actor = Actor(id=user.pk, role=self._store.role_of(user.pk))
        return self._gate.bind(actor)


def admit_namespace(namespace: Role, actor: Actor) -> None:
    """Only the namespace's own role, or Admin, may use an employee area."""
    if actor.role in (namespace, Role.ADMIN):
        return
    logger.warning(
        "permission.namespace_denied",
        actor_id=actor.id,
        role=str(actor.role),
        namespace=str(namespace),
    )
    raise PermissionDenied(
        f"Access denied. The {Role(namespace).label} area is not available "
        f"to {actor.label}."
    )
