"""Order URL configuration.

Every employee namespace gets the same screens, generated from the role
and status enums:

- ``Employee/<Role>/<Role>Orders<Status>``: list
- ``.../Proceed/<order_id>`` and ``.../Cancel/<order_id>``: transitions
"""

from __future__ import annotations

from django.urls import path

from modules.accounts.constants import EMPLOYEE_ROLES
from modules.orders.constants import OrderEvent, OrderStatus
from modules.orders.views import (
    CustomerCancelOrderView,
    RoleOrderListView,
    RoleOrderTransitionView,
)


def screen_path(role: str, status: str) -> str:
    return f"Employee/{role}/{role}Orders{status}"


def role_urlpatterns(role) -> list:
    patterns = []
    for order_status in OrderStatus:
        screen = screen_path(role.value, order_status.value)
        name = f"{role.value}-orders-{order_status.value.lower()}"
        patterns.append(
            path(
                screen,
                RoleOrderListView.as_view(role=role, screen_status=order_status),
                name=name,
            )
        )
        for event in OrderEvent:
            patterns.append(
                path(
                    f"{screen}/{event.value}/<int:order_id>",
                    RoleOrderTransitionView.as_view(
                        role=role, screen_status=order_status, event=event
                    ),
                    name=f"{name}-{event.value.lower()}",
                )
            )
    return patterns


urlpatterns = [
    path(
        "api/customer/orders/<int:order_id>/cancel",
        CustomerCancelOrderView.as_view(),
        name="customer-order-cancel",
    ),
]
for _role in EMPLOYEE_ROLES:
    urlpatterns += role_urlpatterns(_role)
