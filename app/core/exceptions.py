"""
Domain error base classes.

Views catch BaseApplicationError and answer with to_dict(); the HTTP status
comes from the subclass (see payments.views.error_status_for).

Exception Hierarchy:
    BaseApplicationError
    ├── ValidationError - bad input that got past the serializer (400)
    ├── NotFoundError - no local record (404)
    ├── ConflictError - record exists but is in the wrong state (409)
    └── ExternalServiceError - Stripe or another provider failed (502/503)

Usage:
    from core.exceptions import NotFoundError

    raise NotFoundError(
        "No connected account for chapter 42",
        error_code="CONNECTED_ACCOUNT_NOT_FOUND",
        details={"owner_role": "chapter", "owner_id": "42"},
    )
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing import Any


class BaseApplicationError(Exception):
    """
    Error carrying a stable code and structured context.

    Attributes:
        message: Text shown to API clients
        error_code: Stable code clients branch on; defaults per subclass
        details: JSON-safe context such as account ids or observed status
    """

    default_error_code: str = "APPLICATION_ERROR"

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.error_code = error_code or self.default_error_code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """
        API error body; details is omitted when empty.

        Example:
            {
                "error": "Stripe account is not ready to receive transfers",
                "error_code": "ACCOUNT_NOT_SETTLEMENT_READY",
                "details": {"account_id": "acct_123", "transfers": "pending"}
            }
        """
        body: dict[str, Any] = {"error": self.message, "error_code": self.error_code}
        if self.details:
            body["details"] = self.details
        return body

    def __str__(self) -> str:
        return f"[{self.error_code}] {self.message}"

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}({self.message!r}, "
            f"error_code={self.error_code!r}, details={self.details!r})"
        )


class ValidationError(BaseApplicationError):
    """
    Input rejected by a service.

    Request bodies are validated by DRF serializers first; this covers
    callers that reach a service directly, e.g. negative cents.
    """

    default_error_code: str = "VALIDATION_ERROR"


class NotFoundError(BaseApplicationError):
    default_error_code: str = "NOT_FOUND"


class ConflictError(BaseApplicationError):
    default_error_code: str = "CONFLICT"


class ExternalServiceError(BaseApplicationError):
    """A provider call failed; the provider's raw message stays in the logs."""

    default_error_code: str = "EXTERNAL_SERVICE_ERROR"
