"""Actor resolution for the HTTP layer and the ``/api/v1/me`` endpoint."""

from __future__ import annotations

from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from modules.accounts.dtos import Actor
from modules.accounts.exceptions import PermissionDenied
from modules.accounts.repositories import PermissionDjangoStore
from modules.accounts.services import AuthContext, PermissionGate


def default_permission_gate() -> PermissionGate:
    return PermissionGate(PermissionDjangoStore())


def current_actor(request: Request) -> Actor:
    """Resolve role and capabilities once per request."""
    store = PermissionDjangoStore()
    return AuthContext(store, PermissionGate(store)).current_actor(request)


class MeView(APIView):
    """GET /api/v1/me: who the caller acts as and what it may do."""

    def get(self, request: Request) -> Response:
        try:
            actor = current_actor(request)
        except PermissionDenied as exc:
            return Response(
                {"success": False, "message": str(exc)},
                status=status.HTTP_403_FORBIDDEN,
            )
        return Response(
            {
                "id": actor.id,
                "username": request.user.get_username(),
                "role": actor.role.value,
                "role_label": actor.label,
                "is_employee": actor.is_employee,
                "capabilities": sorted(actor.capabilities or ()),
            }
        )
