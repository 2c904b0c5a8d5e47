"""Unit tests for PermissionGate and the Django permission store.

Covers:
- Override beats role default, in both directions.
- Role defaults (Admin holds every key, customers hold none).
- Capability sets resolved once and consulted without the store.
- AuthContext resolves role from the employee profile.
"""

from __future__ import annotations

from types import SimpleNamespace
from typing import Dict, Optional

import pytest

from modules.accounts.constants import ORDER_KEYS, PermissionKey, Role
from modules.accounts.dtos import Actor
from modules.accounts.exceptions import PermissionDenied
from modules.accounts.models import EmployeeProfile, UserPermission
from modules.accounts.repositories import IPermissionStore, PermissionDjangoStore
from modules.accounts.services import AuthContext, Decision, PermissionGate

pytestmark = pytest.mark.unit


class InMemoryStore(IPermissionStore):
    def __init__(self, overrides: Optional[Dict[str, bool]] = None, role=Role.CUSTOMER):
        self.overrides = overrides or {}
        self.role = role
        self.lookups = 0

    def resolve(self, user_id, permission_key):
        self.lookups += 1
        return self.overrides.get(permission_key)

    def overrides_for(self, user_id):
        return dict(self.overrides)

    def role_of(self, user_id):
        return self.role

    def set_override(self, user_id, permission_key, can_access):
        self.overrides[permission_key] = can_access


class TestCheck:
    def test_role_default_applies_without_override(self):
        gate = PermissionGate(InMemoryStore())
        actor = Actor(id=1, role=Role.INVENTORY_MANAGER)

        assert gate.check(actor, PermissionKey.ORDERS_PENDING) is Decision.ALLOWED
        assert gate.check(actor, PermissionKey.ORDERS_CANCELLED) is Decision.DENIED

    def test_override_grants_beyond_default(self):
        gate = PermissionGate(InMemoryStore({"orders_orders_cancelled": True}))
        actor = Actor(id=1, role=Role.USER_MANAGER)

        assert gate.check(actor, "orders_orders_cancelled").allowed

    def test_override_revokes_admin_default(self):
        gate = PermissionGate(InMemoryStore({"logs": False}))
        admin = Actor(id=1, role=Role.ADMIN)

        assert not gate.check(admin, "logs").allowed
        assert gate.check(admin, "orders_orders_pending").allowed

    def test_customer_holds_nothing(self):
        gate = PermissionGate(InMemoryStore())
        customer = Actor(id=1, role=Role.CUSTOMER)

        assert all(not gate.check(customer, key).allowed for key in PermissionKey.values)

    def test_require_raises_with_key(self):
        gate = PermissionGate(InMemoryStore())
        actor = Actor(id=1, role=Role.USER_MANAGER)

        with pytest.raises(PermissionDenied) as exc_info:
            gate.require(actor, PermissionKey.ORDERS_SHIPPING)
        assert exc_info.value.permission_key == "orders_orders_shipping"


class TestCapabilities:
    def test_admin_defaults_to_every_key(self):
        gate = PermissionGate(InMemoryStore())
        assert gate.capabilities(Actor(id=1, role=Role.ADMIN)) == frozenset(
            PermissionKey.values
        )

    def test_overrides_applied_to_defaults(self):
        store = InMemoryStore(
            {"orders_orders_pending": False, "orders_orders_received": True}
        )
        caps = PermissionGate(store).capabilities(Actor(id=1, role=Role.INVENTORY_MANAGER))

        assert "orders_orders_pending" not in caps
        assert "orders_orders_received" in caps
        assert "logs" in caps

    def test_unknown_override_keys_ignored(self):
        store = InMemoryStore({"materials_edit": True})
        caps = PermissionGate(store).capabilities(Actor(id=1, role=Role.USER_MANAGER))
        assert caps == frozenset({"logs"})

    def test_bound_actor_answers_without_store(self):
        store = InMemoryStore()
        gate = PermissionGate(store)
        actor = gate.bind(Actor(id=1, role=Role.TRANSACTION_MANAGER))

        assert actor.capabilities == ORDER_KEYS | {"logs"}
        assert gate.check(actor, "orders_orders_completed").allowed
        assert store.lookups == 0


class TestPermissionDjangoStore:
    def test_resolve_reads_override_row(self, make_user):
        user = make_user()
        UserPermission.objects.create(user=user, permission_name="logs", can_access=False)
        store = PermissionDjangoStore()

        assert store.resolve(user.pk, "logs") is False
        assert store.resolve(user.pk, "orders_orders_pending") is None

    def test_set_override_updates_in_place(self, make_user):
        user = make_user()
        store = PermissionDjangoStore()

        store.set_override(user.pk, "logs", True)
        store.set_override(user.pk, "logs", False)

        assert UserPermission.objects.filter(user=user).count() == 1
        assert store.overrides_for(user.pk) == {"logs": False}

    def test_role_of(self, make_user, make_employee):
        store = PermissionDjangoStore()
        employee = make_employee(Role.ORDER_SUPPORT)
        superuser = make_user(is_superuser=True, is_staff=True)
        plain = make_user()

        assert store.role_of(employee.pk) == Role.ORDER_SUPPORT
        assert store.role_of(superuser.pk) == Role.ADMIN
        assert store.role_of(plain.pk) == Role.CUSTOMER

    def test_inactive_profile_falls_back_to_customer(self, make_employee):
        employee = make_employee(Role.ORDER_SUPPORT)
        EmployeeProfile.objects.filter(user=employee).update(is_active=False)

        assert PermissionDjangoStore().role_of(employee.pk) == Role.CUSTOMER


class TestAuthContext:
    def test_current_actor_is_bound(self, make_employee):
        employee = make_employee(Role.USER_MANAGER)
        store = PermissionDjangoStore()
        context = AuthContext(store, PermissionGate(store))

        actor = context.current_actor(SimpleNamespace(user=employee))

        assert actor.id == employee.pk
        assert actor.role == Role.USER_MANAGER
        assert actor.capabilities == frozenset({"logs"})

    def test_anonymous_rejected(self):
        store = PermissionDjangoStore()
        context = AuthContext(store, PermissionGate(store))

        with pytest.raises(PermissionDenied):
            context.current_actor(SimpleNamespace(user=SimpleNamespace(is_authenticated=False)))
