"""
Tests for the base application exceptions.
"""

from core.exceptions import (
    BaseApplicationError,
    ConflictError,
    ExternalServiceError,
    NotFoundError,
    ValidationError,
)


class TestBaseApplicationError:
    def test_defaults(self):
        error = BaseApplicationError("Something failed")

        assert error.message == "Something failed"
        assert error.error_code == "APPLICATION_ERROR"
        assert error.details == {}

    def test_to_dict_omits_empty_details(self):
        error = NotFoundError("Connected account acct_1 not found")

        assert error.to_dict() == {
            "error": "Connected account acct_1 not found",
            "error_code": "NOT_FOUND",
        }

    def test_to_dict_with_details(self):
        error = ConflictError(
            "Stripe account is not ready to receive transfers",
            error_code="ACCOUNT_NOT_SETTLEMENT_READY",
            details={"account_id": "acct_1", "transfers": "pending"},
        )

        assert error.to_dict() == {
            "error": "Stripe account is not ready to receive transfers",
            "error_code": "ACCOUNT_NOT_SETTLEMENT_READY",
            "details": {"account_id": "acct_1", "transfers": "pending"},
        }

    def test_str_includes_code(self):
        assert str(ValidationError("bad amount")) == "[VALIDATION_ERROR] bad amount"

    def test_subclass_default_codes(self):
        assert ExternalServiceError("down").error_code == "EXTERNAL_SERVICE_ERROR"
        assert ConflictError("busy").error_code == "CONFLICT"
