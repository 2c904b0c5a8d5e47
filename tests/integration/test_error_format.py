"""Integration tests for standardized error responses."""

from unittest.mock import patch

import pytest
from django.db import DatabaseError

from modules.accounts.constants import Role
from modules.audit.services import ActivityLogQueryService

pytestmark = pytest.mark.integration


class TestFrameworkErrors:
    def test_auth_error_has_standard_format(self, api_client):
        response = api_client.get("/api/v1/me")
        assert response.status_code == 401
        data = response.json()
        assert data["success"] is False
        assert data["type"] == "not_authenticated"
        assert data["errors"][0]["code"] == "not_authenticated"
        assert data["message"] == data["errors"][0]["detail"]

    def test_method_not_allowed_has_standard_format(self, make_employee, client_for):
        client = client_for(make_employee(Role.ADMIN))
        response = client.delete("/Employee/Admin/AdminOrdersPending")
        assert response.status_code == 405
        assert response.json()["type"] == "method_not_allowed"

    def test_invalid_filter_has_field_errors(self, make_employee, client_for):
        client = client_for(make_employee(Role.ADMIN))
        response = client.get("/Employee/Admin/AdminOrdersPending", {"min_total": "abc"})
        assert response.status_code == 400
        data = response.json()
        assert data["success"] is False
        assert data["errors"][0]["field"] == "min_total"


class TestDomainErrors:
    def test_domain_error_has_success_and_message(self, make_employee, client_for):
        client = client_for(make_employee(Role.ADMIN))
        response = client.post("/Employee/Admin/AdminOrdersPending/Cancel/123456")
        assert response.status_code == 404
        assert response.json() == {"success": False, "message": "Order #123456 not found."}


class TestStorageUnavailable:
    """Database failures outside the order service still answer 503."""

    def test_transition_when_actor_lookup_fails(self, make_employee, client_for):
        client = client_for(make_employee(Role.ADMIN))
        with patch("modules.orders.views.current_actor", side_effect=DatabaseError("gone")):
            response = client.post("/Employee/Admin/AdminOrdersPending/Proceed/1")

        assert response.status_code == 503
        assert response.json()["success"] is False

    def test_customer_cancel_when_actor_lookup_fails(self, customer, client_for):
        with patch("modules.orders.views.current_actor", side_effect=DatabaseError("gone")):
            response = client_for(customer).put("/api/customer/orders/1/cancel")

        assert response.status_code == 503
        assert response.json()["success"] is False

    def test_activity_logs_when_listing_fails(self, make_employee, client_for):
        client = client_for(make_employee(Role.ADMIN))
        with patch.object(
            ActivityLogQueryService, "list_entries", side_effect=DatabaseError("gone")
        ):
            response = client.get("/Employee/Admin/Logs/Data")

        assert response.status_code == 503
        assert response.json() == {
            "success": False,
            "message": "Activity logs could not be loaded. Please retry.",
        }

    def test_activity_logs_when_actor_lookup_fails(self, make_employee, client_for):
        client = client_for(make_employee(Role.ADMIN))
        with patch("modules.audit.views.current_actor", side_effect=DatabaseError("gone")):
            response = client.get("/Employee/Admin/Logs/Data")

        assert response.status_code == 503
