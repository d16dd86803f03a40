"""
Unit tests for the error taxonomy and response envelope.
"""

import json
import os

import pytest

os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-for-testing-purposes-only-32chars")


class TestErrorTaxonomy:
    """Tests for application error codes and status mapping."""

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "factory,code,status_code",
        [
            (lambda e: e.ValidationError("bad"), "VALIDATION_ERROR", 400),
            (lambda e: e.InvalidCredentialsError(), "INVALID_CREDENTIALS", 400),
            (lambda e: e.UnauthorizedError(), "UNAUTHORIZED", 401),
            (lambda e: e.ForbiddenError(), "FORBIDDEN", 403),
            (lambda e: e.NotFoundError(), "NOT_FOUND", 404),
            (lambda e: e.AlreadyPaidError(), "ALREADY_PAID", 400),
            (lambda e: e.VerificationError(), "VERIFICATION_FAILED", 400),
            (lambda e: e.ConfigurationError("x"), "CONFIGURATION_ERROR", 500),
            (lambda e: e.PaymentGatewayError("x"), "PAYMENT_GATEWAY_ERROR", 500),
            (lambda e: e.StorageError("x"), "STORAGE_ERROR", 500),
        ],
    )
    def test_codes_and_statuses(self, factory, code, status_code):
        from app.core import exceptions

        error = factory(exceptions)

        assert isinstance(error, exceptions.OpenShelfError)
        assert error.error_code == code
        assert exceptions.STATUS_CODE_MAP[code] == status_code

    @pytest.mark.unit
    def test_default_messages(self):
        from app.core.exceptions import InvalidCredentialsError, NotFoundError

        assert InvalidCredentialsError().message == "wrong email or password"
        assert NotFoundError("Book not found", resource_id="b1").details == {
            "resource_id": "b1"
        }


class TestErrorResponse:
    """Tests for the error envelope."""

    @pytest.mark.unit
    def test_envelope_fields(self):
        from app.core.exceptions import create_error_response

        response = create_error_response(404, "Book not found", "NOT_FOUND")
        body = json.loads(response.body)

        assert response.status_code == 404
        assert body["status"] == "error"
        assert body["message"] == "Book not found"
        assert body["code"] == "NOT_FOUND"
        assert len(body["error_id"]) == 8
        assert "details" not in body

    @pytest.mark.unit
    def test_details_included_when_present(self):
        from app.core.exceptions import create_error_response

        response = create_error_response(
            400, "Missing file or image", "VALIDATION_ERROR", details={"missing": ["file"]}
        )

        assert json.loads(response.body)["details"] == {"missing": ["file"]}
