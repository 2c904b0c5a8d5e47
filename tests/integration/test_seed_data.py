import pytest
from django.core.management import call_command

from modules.accounts.constants import EMPLOYEE_ROLES
from modules.accounts.models import EmployeeProfile, UserPermission
from modules.orders.constants import OrderStatus
from modules.orders.models import Order

pytestmark = pytest.mark.integration


def test_seed_creates_every_role_and_status():
    call_command("seed_data")

    assert set(EmployeeProfile.objects.values_list("role", flat=True)) == {
        role.value for role in EMPLOYEE_ROLES
    }
    assert set(Order.objects.values_list("status", flat=True)) == set(OrderStatus.values)
    assert UserPermission.objects.filter(permission_name="orders_orders_delivery").exists()


def test_seed_is_rerunnable():
    call_command("seed_data")
    call_command("seed_data")

    assert Order.objects.count() == 2 * len(OrderStatus.values)
