"""
Unit tests for the shared service skeleton.
"""

import pytest
from unittest.mock import patch
from fastapi.testclient import TestClient

from shared.base_service import BaseService
from shared.errors import NotFoundError


class TestBaseService:
    """Test cases for BaseService middleware and handlers."""

    @pytest.fixture
    def service(self):
        service = BaseService("navigation", 8021)

        @service.app.get("/missing")
        async def missing():
            raise NotFoundError("Nothing here", {"code": "S404"})

        @service.app.get("/broken")
        async def broken():
            raise RuntimeError("handler failed")

        return service

    def test_known_error_uses_its_status_code(self, service):
        client = TestClient(service.app)

        response = client.get("/missing", headers={"X-Request-Id": "req-1"})

        assert response.status_code == 404
        assert response.json() == {
            "request_id": "req-1",
            "code": "NOT_FOUND",
            "message": "Nothing here",
            "details": {"code": "S404"},
        }

    def test_failed_request_is_counted_and_context_cleared(self, service):
        client = TestClient(service.app, raise_server_exceptions=False)

        with patch("shared.base_service.clear_context") as clear_context:
            response = client.get("/broken")

        assert response.status_code == 500
        clear_context.assert_called_once()
        assert service.metrics.registry.get_sample_value(
            "http_requests_total",
            {"method": "GET", "endpoint": "/broken", "status_code": "500"}
        ) == 1.0

    def test_successful_request_is_counted(self, service):
        client = TestClient(service.app)

        client.get("/health")

        assert service.metrics.registry.get_sample_value(
            "http_requests_total",
            {"method": "GET", "endpoint": "/health", "status_code": "200"}
        ) == 1.0
