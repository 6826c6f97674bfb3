"""
Unit tests for the shared error taxonomy.
"""

import pytest

from shared.errors import (
    AuthorizationError, ClinicAccessException, ConflictError, NotFoundError,
    StoreError, ValidationError
)
from shared.logging import clear_context, set_request_id


class TestErrors:
    """Test cases for ClinicAccessException subclasses."""

    @pytest.mark.parametrize("exc,status_code,code", [
        (ValidationError(), 422, "VALIDATION_ERROR"),
        (AuthorizationError(), 403, "AUTHORIZATION_ERROR"),
        (AuthorizationError(code="PROTECTED_ENTITY"), 403, "PROTECTED_ENTITY"),
        (NotFoundError(), 404, "NOT_FOUND"),
        (ConflictError(code="AMBIGUOUS_MATCH"), 409, "AMBIGUOUS_MATCH"),
        (StoreError(), 503, "STORE_ERROR"),
    ])
    def test_status_codes(self, exc, status_code, code):
        assert isinstance(exc, ClinicAccessException)
        assert exc.status_code == status_code
        assert exc.code == code

    def test_response_carries_request_id(self):
        set_request_id("req-42")
        try:
            response = NotFoundError("Status not found", {"code": "S404"}).to_response()
        finally:
            clear_context()

        assert response.request_id == "req-42"
        assert response.code == "NOT_FOUND"
        assert response.details == {"code": "S404"}

    def test_details_default_to_empty(self):
        assert ConflictError().to_response().details == {}
