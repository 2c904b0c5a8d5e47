"""Audit URL configuration: one logs screen per employee namespace."""

from __future__ import annotations

from django.urls import path

from modules.accounts.constants import EMPLOYEE_ROLES
from modules.audit.views import ActivityLogDataView

urlpatterns = [
    path(
        f"Employee/{role.value}/Logs/Data",
        ActivityLogDataView.as_view(role=role),
        name=f"{role.value}-logs-data",
    )
    for role in EMPLOYEE_ROLES
]
