import logging
import uuid

from config.settings import mask_sensitive_data


class TestCorrelationIdMiddleware:
    def test_returns_provided_request_id(self, client):
        custom_id = "my-custom-request-id-123"
        response = client.get("/health", HTTP_X_REQUEST_ID=custom_id)
        assert response["X-Request-ID"] == custom_id

    def test_generates_uuid_when_no_request_id(self, client):
        response = client.get("/health")
        request_id = response["X-Request-ID"]
        parsed = uuid.UUID(request_id, version=4)
        assert str(parsed) == request_id

    def test_correlation_id_in_logs(self, client, caplog):
        custom_id = "log-test-correlation-456"
        with caplog.at_level(logging.INFO):
            client.get("/health", HTTP_X_REQUEST_ID=custom_id)
        found = any(custom_id in record.getMessage() for record in caplog.records)
        assert found, (
            f"correlation_id '{custom_id}' not found in log records: "
            f"{[r.getMessage() for r in caplog.records]}"
        )

    def test_namespace_bound_for_employee_paths(self, api_client_with_correlation, caplog):
        api_client, _ = api_client_with_correlation
        with caplog.at_level(logging.INFO):
            api_client.get("/Employee/OrderSupport/OrderSupportOrdersPending")
        assert any("OrderSupport" in record.getMessage() for record in caplog.records)


class TestSensitiveDataMasking:
    def test_email_masked(self):
        result = mask_sensitive_data(None, None, {"event": "test", "user": "ana@example.com"})
        assert "ana@example.com" not in result["user"]
        assert "***MASKED***" in result["user"]

    def test_card_number_masked(self):
        result = mask_sensitive_data(None, None, {"event": "test", "card": "4111 1111 1111 1111"})
        assert "4111" not in result["card"]

    def test_password_masked(self):
        result = mask_sensitive_data(None, None, {"event": "test", "data": "password='s3cret123'"})
        assert "s3cret123" not in result["data"]
        assert "***MASKED***" in result["data"]

    def test_token_masked(self):
        result = mask_sensitive_data(None, None, {"event": "test", "header": "token=abc123xyz"})
        assert "abc123xyz" not in result["header"]

    def test_non_sensitive_data_unchanged(self):
        event_dict = {"event": "order.cancelled", "order_id": "100", "status": "Cancelled"}
        result = mask_sensitive_data(None, None, dict(event_dict))
        assert result == event_dict
