"""Integration tests for authentication and the current-actor endpoint.

Validates:
  - /health is public (plain Django view, no DRF).
  - Protected DRF endpoints return 401 without or with a bad token.
  - SimpleJWT tokens obtained from the token endpoint are accepted.
  - /api/v1/me reports role and resolved capabilities.
"""

import pytest

from modules.accounts.constants import Role

pytestmark = pytest.mark.integration


class TestPublicEndpoints:
    def test_health_is_public(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestProtectedEndpoints:
    """All DRF endpoints require authentication by default (Fail Closed)."""

    def test_no_token_returns_401(self, api_client):
        response = api_client.get("/api/v1/me")
        assert response.status_code == 401

    def test_invalid_token_returns_401(self, api_client):
        api_client.credentials(HTTP_AUTHORIZATION="Bearer invalid.token.here")
        response = api_client.get("/api/v1/me")
        assert response.status_code == 401

    def test_employee_screen_requires_auth(self, api_client):
        response = api_client.get("/Employee/Admin/AdminOrdersPending")
        assert response.status_code == 401

    def test_401_includes_www_authenticate_header(self, api_client):
        response = api_client.get("/api/v1/me")
        assert "Bearer" in response.get("WWW-Authenticate", "")


class TestJwtFlow:
    def test_token_grants_access(self, api_client, make_employee):
        make_employee(Role.ORDER_SUPPORT, username="support")

        token = api_client.post(
            "/api/v1/auth/token/",
            {"username": "support", "password": "test-pass-123"},
            format="json",
        )
        assert token.status_code == 200

        api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {token.json()['access']}")
        response = api_client.get("/api/v1/me")

        assert response.status_code == 200
        assert response.json()["role"] == "OrderSupport"


class TestMe:
    def test_reports_capabilities(self, make_employee, client_for):
        client = client_for(make_employee(Role.INVENTORY_MANAGER))

        body = client.get("/api/v1/me").json()

        assert body["role_label"] == "Inventory Manager"
        assert body["is_employee"] is True
        assert body["capabilities"] == [
            "logs",
            "orders_orders_pending",
            "orders_orders_processing",
            "orders_orders_shipping",
        ]

    def test_customer_has_no_capabilities(self, customer, client_for):
        body = client_for(customer).get("/api/v1/me").json()

        assert body["role"] == "Customer"
        assert body["capabilities"] == []
