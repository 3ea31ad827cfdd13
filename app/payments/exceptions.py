"""
Payment-specific exceptions for payment operations.

This module provides the exception hierarchy for checkout, Connect account
and webhook operations, including the domain translations of Stripe SDK
errors.

Exception Hierarchy:
    PaymentError (base for payment domain)
    ├── PaymentNotFoundError - Local record lookup failures (404)
    ├── PaymentValidationError - Invalid amounts or parameters (400)
    ├── AccountNotSettlementReadyError - Account exists but cannot receive transfers (409)
    ├── SignatureInvalidError - Webhook failed authentication (400)
    └── PaymentProcessingError - Payment processing failures
        └── StripeError - Base for all Stripe errors (provider errors, 502/503)
            ├── StripeCardDeclinedError - Card declined (permanent)
            ├── StripeInvalidAccountError - Invalid Stripe account (permanent)
            │   └── AccountInvalidError - Destination account missing or revoked (422)
            ├── StripeInvalidRequestError - Invalid request params (permanent)
            ├── StripeRateLimitError - Rate limited (transient)
            ├── StripeAPIUnavailableError - API unavailable (transient)
            └── StripeTimeoutError - Request timeout (transient)

Usage:
    from payments.exceptions import (
        AccountInvalidError,
        AccountNotSettlementReadyError,
        StripeError,
    )

    try:
        session = builder.create_product_checkout(request)
    except AccountNotSettlementReadyError as e:
        # Seller must finish onboarding before the listing can sell
        notify_reonboarding(e.account_id)
    except StripeError as e:
        if e.is_retryable:
            ...
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from core.exceptions import (
    BaseApplicationError,
    ConflictError,
    ExternalServiceError,
    NotFoundError,
    ValidationError,
)

if TYPE_CHECKING:
    from typing import Any


# =============================================================================
# Payment Domain Exceptions
# =============================================================================


class PaymentError(BaseApplicationError):
    """
    Base exception for all payment operations.

    All payment-specific exceptions inherit from this class,
    which itself inherits from BaseApplicationError for
    consistent API error responses.
    """

    default_error_code: str = "PAYMENT_ERROR"


class PaymentNotFoundError(PaymentError, NotFoundError):
    """
    Raised when a local payment record cannot be found.

    Use for:
    - No ConnectedAccount registered for a seller/chapter/steward
    - Unknown stripe_account_id in an onboarding request

    Example:
        account = ConnectedAccount.objects.for_owner(role, owner_id)
        if not account:
            raise PaymentNotFoundError(
                f"No connected account for {role} {owner_id}",
                details={"owner_role": role, "owner_id": owner_id},
            )
    """

    default_error_code: str = "PAYMENT_NOT_FOUND"


class PaymentValidationError(PaymentError, ValidationError):
    """
    Raised when payment validation fails.

    Use for:
    - Negative or non-integer cent amounts
    - Missing destination account ids
    - Malformed secret keys passed to helpers
    """

    default_error_code: str = "PAYMENT_VALIDATION_ERROR"


class AccountNotSettlementReadyError(PaymentError, ConflictError):
    """
    The account exists but its transfers capability is not active.

    Distinct from AccountInvalidError so callers can send the owner back
    through onboarding instead of treating the account as gone.

    Attributes:
        account_id: The Stripe account id that was checked
        transfers_status: Observed capability status (unrequested/pending)
    """

    default_error_code: str = "ACCOUNT_NOT_SETTLEMENT_READY"

    def __init__(
        self,
        message: str,
        account_id: str,
        transfers_status: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        details = {
            **(details or {}),
            "account_id": account_id,
            "transfers": transfers_status,
        }
        super().__init__(message, error_code=error_code, details=details)
        self.account_id = account_id
        self.transfers_status = transfers_status


class SignatureInvalidError(PaymentError):
    """
    Raised when a webhook payload fails authentication.

    Covers a missing signature header, a missing endpoint secret,
    a signature mismatch, an expired timestamp, and a verified body that
    is not a JSON event. The payload must not be processed.
    """

    default_error_code: str = "SIGNATURE_INVALID"


class PaymentProcessingError(PaymentError):
    """
    Raised when payment processing fails.

    Use for:
    - Stripe API errors
    - Payment gateway failures
    - Processing timeouts
    """

    default_error_code: str = "PAYMENT_PROCESSING_ERROR"


# =============================================================================
# Stripe-Specific Exceptions
# =============================================================================


class StripeError(PaymentProcessingError, ExternalServiceError):
    """
    Base exception for all Stripe-related errors.

    Provides common attributes for Stripe error handling:
    - stripe_code: Stripe's internal error code
    - decline_code: Card decline code (if applicable)
    - is_retryable: Whether the operation can be retried

    Nothing in this service retries automatically. is_retryable is exposed
    so API responses can tell the caller whether resubmitting (with the
    same Idempotency-Key) makes sense.
    """

    default_error_code: str = "STRIPE_ERROR"
    is_retryable: bool = False

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        stripe_code: str | None = None,
        decline_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        details = details or {}
        if stripe_code:
            details["stripe_code"] = stripe_code
        if decline_code:
            details["decline_code"] = decline_code
        super().__init__(message, error_code=error_code, details=details)
        self.stripe_code = stripe_code
        self.decline_code = decline_code


# -----------------------------------------------------------------------------
# Permanent Errors (do not retry)
# -----------------------------------------------------------------------------


class StripeCardDeclinedError(StripeError):
    """
    Card was declined by the issuing bank.

    Checkout collects cards on the Stripe-hosted page, so this only
    surfaces from direct API use. The decline_code attribute contains
    the specific reason.
    """

    default_error_code: str = "CARD_DECLINED"
    is_retryable: bool = False


class StripeInvalidAccountError(StripeError):
    """
    Invalid Stripe Connect account.

    Raised when Stripe rejects a request because of the connected
    account: not found, access revoked, or unable to receive funds.
    """

    default_error_code: str = "INVALID_STRIPE_ACCOUNT"
    is_retryable: bool = False


class AccountInvalidError(StripeInvalidAccountError):
    """
    A destination account id cannot be used at all.

    Raised by the account directory when the id is blank, unknown to
    Stripe, or no longer accessible to the platform. Checkout never falls
    back to another account.

    Example:
        except AccountInvalidError as e:
            alert_admin(f"Chapter account unusable: {e.details['account_id']}")
    """

    default_error_code: str = "ACCOUNT_INVALID"


class StripeInvalidRequestError(StripeError):
    """
    Invalid request parameters sent to Stripe.

    This is a permanent error - the request itself is malformed
    and will never succeed with the same parameters.

    Note:
        This usually indicates a bug in our code, not a user error.
        Log these errors for developer investigation.
    """

    default_error_code: str = "INVALID_STRIPE_REQUEST"
    is_retryable: bool = False


# -----------------------------------------------------------------------------
# Transient Errors (safe to resubmit)
# -----------------------------------------------------------------------------


class StripeRateLimitError(StripeError):
    """
    Rate limited by Stripe API.

    Stripe allows 100 requests/second in live mode, 25/second in test mode.
    """

    default_error_code: str = "STRIPE_RATE_LIMITED"
    is_retryable: bool = True


class StripeAPIUnavailableError(StripeError):
    """
    Stripe API is temporarily unavailable.

    This covers network connectivity issues, Stripe server errors (5xx),
    and DNS or TLS failures.
    """

    default_error_code: str = "STRIPE_UNAVAILABLE"
    is_retryable: bool = True


class StripeTimeoutError(StripeError):
    """
    Stripe API call timed out.

    The request was sent but no response was received within
    STRIPE_API_TIMEOUT_SECONDS.

    IMPORTANT: The operation may have succeeded on Stripe's side.
    Resubmitting a checkout without an idempotency key can create a
    second session.
    """

    default_error_code: str = "STRIPE_TIMEOUT"
    is_retryable: bool = True


# =============================================================================
# Exports
# =============================================================================

__all__ = [
    # Payment domain
    "PaymentError",
    "PaymentNotFoundError",
    "PaymentValidationError",
    "PaymentProcessingError",
    "AccountNotSettlementReadyError",
    "SignatureInvalidError",
    # Stripe-specific
    "StripeError",
    "StripeCardDeclinedError",
    "StripeInvalidAccountError",
    "AccountInvalidError",
    "StripeInvalidRequestError",
    "StripeRateLimitError",
    "StripeAPIUnavailableError",
    "StripeTimeoutError",
]
