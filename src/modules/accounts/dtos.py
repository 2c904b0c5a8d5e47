"""Actor DTO passed from the HTTP layer into every use case.

An ``Actor`` is the authenticated principal plus, once resolved, the
capability set it holds for the duration of one request.
"""

from __future__ import annotations

from typing import FrozenSet, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from modules.accounts.constants import EMPLOYEE_ROLES, Role


class Actor(BaseModel):
    """Immutable principal performing an operation.

    ``capabilities`` is ``None`` until ``PermissionGate.bind`` resolves it;
    the gate falls back to per-key look-ups for unbound actors.
    """

    model_config = ConfigDict(frozen=True)

    id: int
    role: Role
    capabilities: Optional[FrozenSet[str]] = None

    @field_validator("capabilities")
    @classmethod
    def capabilities_as_plain_strings(
        cls, v: Optional[FrozenSet[str]]
    ) -> Optional[FrozenSet[str]]:
        if v is None:
            return v
        return frozenset(str(key) for key in v)

    @property
    def is_employee(self) -> bool:
        return self.role in EMPLOYEE_ROLES

    @property
    def label(self) -> str:
        return Role(self.role).label

    def with_capabilities(self, capabilities: FrozenSet[str]) -> Actor:
        keys = frozenset(str(key) for key in capabilities)
        return self.model_copy(update={"capabilities": keys})
