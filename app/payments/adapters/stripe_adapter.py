"""
Stripe API adapter for Connect and Checkout operations.

This module provides the StripeAdapter class which encapsulates all
Stripe API interactions. All Stripe calls go through this adapter to
ensure consistent error handling, timeouts, idempotency and observability.

Each adapter wraps one stripe.StripeClient. The client carries the API key,
HTTP timeout and retry policy, so nothing here touches the SDK's global
state and two adapters with different keys can coexist in one process.

Features:
- Configurable timeout on all API calls (STRIPE_API_TIMEOUT_SECONDS)
- Automatic error translation to domain exceptions
- Structured logging with timing metrics
- Optional idempotency keys on object creation

Configuration (via settings):
- STRIPE_SECRET_KEY: Stripe API secret key
- STRIPE_API_TIMEOUT_SECONDS: API call timeout (default: 10)
- STRIPE_MAX_NETWORK_RETRIES: SDK-level network retries (default: 0)
- STRIPE_API_VERSION: Pinned API version (default: account default)

Usage:
    from payments.adapters import StripeAdapter, get_stripe_client

    adapter = StripeAdapter(get_stripe_client())
    account = adapter.retrieve_account("acct_123")
    if account.capabilities["transfers"] == CapabilityStatus.ACTIVE:
        ...

    # Tests inject a mocked client
    adapter = StripeAdapter(client=MagicMock())
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import stripe
from django.conf import settings
from django.core.exceptions import ImproperlyConfigured

from payments.constants import CapabilityStatus
from payments.exceptions import (
    StripeAPIUnavailableError,
    StripeCardDeclinedError,
    StripeInvalidAccountError,
    StripeInvalidRequestError,
    StripeRateLimitError,
    StripeTimeoutError,
)

if TYPE_CHECKING:
    from collections.abc import Callable


# Prefixes of keys that may authenticate server-side API calls
SECRET_KEY_PREFIXES = ("sk_test_", "sk_live_", "rk_test_", "rk_live_")
MIN_SECRET_KEY_LENGTH = 32

# Fragments Stripe uses in messages about accounts the platform cannot reach
_INACCESSIBLE_ACCOUNT_MARKERS = (
    "no such account",
    "no such destination",
    "application access may have been revoked",
)

# Request params that carry a connected account id
_ACCOUNT_PARAMS = ("account", "destination", "transfer_data[destination]", "on_behalf_of")


# =============================================================================
# Configuration
# =============================================================================


def validate_secret_key(secret_key: str | None) -> None:
    """
    Check that a Stripe secret key is usable for server-side calls.

    Rules:
    - must be present
    - must not be a publishable key (pk_...)
    - must start with sk_test_, sk_live_, rk_test_ or rk_live_
    - must be at least 32 characters long

    Raises:
        ImproperlyConfigured: With a message naming the broken rule
    """
    if not secret_key:
        raise ImproperlyConfigured("STRIPE_SECRET_KEY is not set")

    if secret_key.startswith("pk_"):
        raise ImproperlyConfigured(
            "STRIPE_SECRET_KEY is a publishable key (pk_...); "
            "use the secret key (sk_...) from the Stripe dashboard"
        )

    if not secret_key.startswith(SECRET_KEY_PREFIXES):
        raise ImproperlyConfigured(
            "STRIPE_SECRET_KEY must start with sk_test_, sk_live_, rk_test_ or rk_live_"
        )

    if len(secret_key) < MIN_SECRET_KEY_LENGTH:
        raise ImproperlyConfigured(
            f"STRIPE_SECRET_KEY is too short to be a real key "
            f"(expected at least {MIN_SECRET_KEY_LENGTH} characters)"
        )


def get_stripe_client(secret_key: str | None = None) -> stripe.StripeClient:
    """
    Build a StripeClient from Django settings.

    Args:
        secret_key: Override for STRIPE_SECRET_KEY (e.g. a restricted key)

    Returns:
        A client with the configured timeout and retry policy
    """
    api_key = secret_key or settings.STRIPE_SECRET_KEY
    timeout = getattr(settings, "STRIPE_API_TIMEOUT_SECONDS", 10)

    return stripe.StripeClient(
        api_key,
        stripe_version=getattr(settings, "STRIPE_API_VERSION", None),
        max_network_retries=getattr(settings, "STRIPE_MAX_NETWORK_RETRIES", 0),
        http_client=stripe.RequestsClient(timeout=timeout),
    )


def normalize_capability_status(value: Any) -> CapabilityStatus:
    """
    Map a Stripe capability value onto CapabilityStatus.

    Account objects report capabilities as plain strings; capability
    objects carry a status attribute. Both forms are accepted.
    """
    status = getattr(value, "status", value)
    if isinstance(status, dict):
        status = status.get("status")

    if status == "active":
        return CapabilityStatus.ACTIVE
    if status == "pending":
        return CapabilityStatus.PENDING
    return CapabilityStatus.UNREQUESTED


# =============================================================================
# Data Types
# =============================================================================


@dataclass
class CreateConnectAccountParams:
    """
    Parameters for creating a Stripe Connect Express account.

    Attributes:
        email: Contact e-mail prefilled on the onboarding form
        country: ISO-3166 alpha-2 country code (default: 'US')
        metadata: Key-value pairs to attach to the account
        idempotency_key: Optional key for idempotent creation
    """

    email: str
    country: str = "US"
    metadata: dict[str, str] = field(default_factory=dict)
    idempotency_key: str | None = None

    def __post_init__(self) -> None:
        if not self.email:
            raise ValueError("email is required")
        if len(self.country or "") != 2:
            raise ValueError("country must be an ISO-3166 alpha-2 code")
        self.country = self.country.upper()


@dataclass
class CreateCheckoutSessionParams:
    """
    Parameters for creating a Stripe Checkout session.

    Attributes:
        line_items: Checkout line items (may be empty)
        customer_email: Buyer e-mail prefilled on the hosted page
        success_url: Redirect after successful payment
        cancel_url: Redirect when the buyer abandons checkout
        metadata: String key-value pairs attached to the session
        payment_intent_data: Fee/destination instructions for the charge
        idempotency_key: Optional key for idempotent creation
    """

    line_items: list[dict[str, Any]]
    customer_email: str
    success_url: str
    cancel_url: str
    metadata: dict[str, str] = field(default_factory=dict)
    payment_intent_data: dict[str, Any] | None = None
    idempotency_key: str | None = None

    def __post_init__(self) -> None:
        if not self.success_url or not self.cancel_url:
            raise ValueError("success_url and cancel_url are required")


@dataclass
class AccountResult:
    """
    Result from Stripe Account operations.

    Attributes:
        id: Account ID (acct_xxx)
        country: ISO-3166 alpha-2 country
        email: Contact e-mail on the account
        charges_enabled: Whether the account can accept charges
        payouts_enabled: Whether Stripe pays out to the account's bank
        details_submitted: Whether onboarding forms were completed
        capabilities: card_payments/transfers mapped to CapabilityStatus
        metadata: Attached metadata
    """

    id: str
    country: str | None = None
    email: str | None = None
    charges_enabled: bool = False
    payouts_enabled: bool = False
    details_submitted: bool = False
    capabilities: dict[str, CapabilityStatus] = field(default_factory=dict)
    metadata: dict[str, str] = field(default_factory=dict)


@dataclass
class AccountLinkResult:
    """Hosted onboarding link and its expiry (unix seconds)."""

    url: str
    expires_at: int | None = None


@dataclass
class CheckoutSessionResult:
    """
    Result from Stripe Checkout session creation.

    Attributes:
        id: Session ID (cs_xxx)
        url: Hosted checkout page the buyer is redirected to
        amount_total: Session total in cents, as computed by Stripe
        metadata: Attached metadata
    """

    id: str
    url: str | None
    amount_total: int | None = None
    metadata: dict[str, str] = field(default_factory=dict)


# =============================================================================
# Stripe Adapter
# =============================================================================


class StripeAdapter:
    """
    Adapter for Stripe API operations.

    Holds no state besides the injected StripeClient, so one instance can
    serve many requests.

    Usage:
        adapter = StripeAdapter()                   # client from settings
        adapter = StripeAdapter(client=my_client)   # injected client
    """

    TRACKED_CAPABILITIES = ("card_payments", "transfers")

    def __init__(self, client: stripe.StripeClient | None = None):
        self.client = client if client is not None else get_stripe_client()

    @classmethod
    def get_logger(cls) -> logging.Logger:
        """Get logger for this adapter."""
        return logging.getLogger(f"{cls.__module__}.{cls.__name__}")

    # =========================================================================
    # Connect Accounts
    # =========================================================================

    def retrieve_account(self, account_id: str) -> AccountResult:
        """
        Retrieve a Connect account.

        Raises:
            StripeInvalidAccountError: Account unknown or not accessible
            StripeAPIUnavailableError: Stripe service unavailable
        """
        log_context = {
            "operation": "retrieve_account",
            "account_id": account_id,
        }

        account = self._execute(
            log_context,
            lambda: self.client.accounts.retrieve(account_id),
        )
        return self._to_account_result(account)

    def create_connect_account(self, params: CreateConnectAccountParams) -> AccountResult:
        """
        Create an Express account with card_payments and transfers requested.

        Raises:
            StripeInvalidRequestError: Invalid parameters (e.g. unsupported country)
            StripeAPIUnavailableError: Stripe service unavailable
        """
        log_context = {
            "operation": "create_connect_account",
            "country": params.country,
            "idempotency_key": params.idempotency_key,
        }

        request = {
            "type": "express",
            "country": params.country,
            "email": params.email,
            "capabilities": {
                "card_payments": {"requested": True},
                "transfers": {"requested": True},
            },
            "metadata": params.metadata,
        }

        account = self._execute(
            log_context,
            lambda: self.client.accounts.create(
                params=request,
                options=self._request_options(params.idempotency_key),
            ),
        )
        return self._to_account_result(account)

    def create_account_link(
        self,
        account_id: str,
        return_url: str,
        refresh_url: str,
    ) -> AccountLinkResult:
        """
        Create a hosted onboarding link for an account.

        Links are single-use and expire after a few minutes; create a new
        one each time the owner opens onboarding.
        """
        log_context = {
            "operation": "create_account_link",
            "account_id": account_id,
        }

        link = self._execute(
            log_context,
            lambda: self.client.account_links.create(
                params={
                    "account": account_id,
                    "refresh_url": refresh_url,
                    "return_url": return_url,
                    "type": "account_onboarding",
                }
            ),
        )
        return AccountLinkResult(url=link.url, expires_at=getattr(link, "expires_at", None))

    def request_transfers_capability(self, account_id: str) -> CapabilityStatus:
        """
        Request the transfers capability on an existing account.

        Accounts created before transfers was requested at creation time
        need this before they can be a destination.

        Returns:
            The capability status Stripe reports after the request
        """
        log_context = {
            "operation": "request_transfers_capability",
            "account_id": account_id,
        }

        capability = self._execute(
            log_context,
            lambda: self.client.accounts.capabilities.update(
                account_id,
                "transfers",
                params={"requested": True},
            ),
        )
        return normalize_capability_status(capability)

    # =========================================================================
    # Checkout
    # =========================================================================

    def create_checkout_session(
        self,
        params: CreateCheckoutSessionParams,
    ) -> CheckoutSessionResult:
        """
        Create a card-only, one-time-payment Checkout session.

        The session is created on the platform account; destination
        charges move funds through payment_intent_data.transfer_data.

        Raises:
            StripeInvalidAccountError: Stripe rejected a destination account
            StripeInvalidRequestError: Invalid parameters
            StripeRateLimitError: Rate limited
            StripeAPIUnavailableError: Stripe service unavailable
            StripeTimeoutError: Request timed out
        """
        log_context = {
            "operation": "create_checkout_session",
            "line_item_count": len(params.line_items),
            "metadata": params.metadata,
            "idempotency_key": params.idempotency_key,
        }

        request: dict[str, Any] = {
            "payment_method_types": ["card"],
            "line_items": params.line_items,
            "mode": "payment",
            "customer_email": params.customer_email,
            "success_url": params.success_url,
            "cancel_url": params.cancel_url,
            "metadata": params.metadata,
        }
        if params.payment_intent_data is not None:
            request["payment_intent_data"] = params.payment_intent_data

        session = self._execute(
            log_context,
            lambda: self.client.checkout.sessions.create(
                params=request,
                options=self._request_options(params.idempotency_key),
            ),
        )

        return CheckoutSessionResult(
            id=session.id,
            url=session.url,
            amount_total=getattr(session, "amount_total", None),
            metadata=dict(getattr(session, "metadata", None) or {}),
        )

    # =========================================================================
    # Internals
    # =========================================================================

    @staticmethod
    def _request_options(idempotency_key: str | None) -> dict[str, str]:
        return {"idempotency_key": idempotency_key} if idempotency_key else {}

    def _execute(self, log_context: dict[str, Any], call: Callable[[], Any]) -> Any:
        """Run one SDK call with timing, logging and error translation."""
        logger = self.get_logger()

        start_time = time.time()
        logger.info("Starting Stripe operation", extra=log_context)

        try:
            result = call()
        except stripe.StripeError as e:
            duration_ms = (time.time() - start_time) * 1000
            self._handle_stripe_error(e, log_context, duration_ms)
            raise  # Never reached, _handle_stripe_error always raises

        duration_ms = (time.time() - start_time) * 1000
        logger.info(
            "Stripe operation completed",
            extra={
                **log_context,
                "stripe_object_id": getattr(result, "id", None),
                "duration_ms": duration_ms,
            },
        )
        return result

    @classmethod
    def _to_account_result(cls, account: Any) -> AccountResult:
        capabilities = getattr(account, "capabilities", None) or {}
        return AccountResult(
            id=account.id,
            country=getattr(account, "country", None),
            email=getattr(account, "email", None),
            charges_enabled=bool(getattr(account, "charges_enabled", False)),
            payouts_enabled=bool(getattr(account, "payouts_enabled", False)),
            details_submitted=bool(getattr(account, "details_submitted", False)),
            capabilities={
                name: normalize_capability_status(capabilities.get(name))
                for name in cls.TRACKED_CAPABILITIES
            },
            metadata=dict(getattr(account, "metadata", None) or {}),
        )

    # =========================================================================
    # Error Handling
    # =========================================================================

    @classmethod
    def _is_inaccessible_account(
        cls, error: stripe.StripeError, account_id: str | None = None
    ) -> bool:
        """
        Whether Stripe rejected the call because of the connected account.

        Platform-side failures (restricted key scopes, restrictions on the
        platform's own account) are not account errors even when their
        message mentions an account.
        """
        message = str(error).lower()
        names_account = bool(account_id) and account_id.lower() in message

        if isinstance(error, stripe.PermissionError):
            return names_account

        if error.code == "account_invalid":
            return True
        if error.code == "resource_missing" and (
            names_account or error.param in _ACCOUNT_PARAMS
        ):
            return True
        return any(marker in message for marker in _INACCESSIBLE_ACCOUNT_MARKERS)

    @classmethod
    def _handle_stripe_error(
        cls,
        error: stripe.StripeError,
        log_context: dict[str, Any],
        duration_ms: float,
    ) -> None:
        """
        Translate Stripe exceptions to domain exceptions.

        Raises:
            StripeCardDeclinedError: Card was declined
            StripeInvalidAccountError: Connect account unknown or inaccessible
            StripeInvalidRequestError: Invalid request parameters or bad API key
            StripeRateLimitError: Rate limited
            StripeTimeoutError: Request timed out
            StripeAPIUnavailableError: API unavailable or unexpected error
        """
        logger = cls.get_logger()
        log_context = {**log_context, "duration_ms": duration_ms}

        if isinstance(error, stripe.CardError):
            decline_code = getattr(error, "decline_code", None)
            logger.warning(
                "Card error from Stripe",
                extra={**log_context, "decline_code": decline_code},
            )
            raise StripeCardDeclinedError(
                str(error.user_message or error),
                stripe_code=error.code,
                decline_code=decline_code,
            )

        elif isinstance(error, (stripe.InvalidRequestError, stripe.PermissionError)):
            logger.error(
                "Invalid request to Stripe",
                extra={**log_context, "stripe_code": error.code},
            )

            if cls._is_inaccessible_account(error, log_context.get("account_id")):
                raise StripeInvalidAccountError(
                    str(error.user_message or error),
                    stripe_code=error.code or "account_invalid",
                )

            raise StripeInvalidRequestError(
                str(error.user_message or error),
                stripe_code=error.code,
            )

        elif isinstance(error, stripe.RateLimitError):
            logger.warning("Rate limited by Stripe", extra=log_context)
            raise StripeRateLimitError(
                "Stripe rate limit exceeded. Please retry.",
                stripe_code="rate_limit",
            )

        elif isinstance(error, stripe.APIConnectionError):
            logger.error(
                "Connection error to Stripe",
                extra=log_context,
                exc_info=True,
            )
            if "timed out" in str(error).lower():
                raise StripeTimeoutError(
                    "Stripe did not respond in time. The request may have succeeded.",
                    stripe_code="timeout",
                )
            raise StripeAPIUnavailableError(
                "Could not connect to Stripe. Please retry.",
                stripe_code="api_connection_error",
            )

        elif isinstance(error, stripe.AuthenticationError):
            # Invalid API key - permanent, operational issue
            logger.critical(
                "Stripe authentication failed - check API key",
                extra=log_context,
            )
            raise StripeInvalidRequestError(
                "Stripe authentication failed",
                stripe_code="authentication_error",
            )

        elif isinstance(error, stripe.APIError):
            logger.error("Stripe API error", extra=log_context, exc_info=True)
            raise StripeAPIUnavailableError(
                "Stripe service error. Please retry.",
                stripe_code="api_error",
            )

        else:
            logger.error(
                f"Unexpected error from Stripe: {type(error).__name__}",
                extra=log_context,
                exc_info=True,
            )
            raise StripeAPIUnavailableError(
                f"Unexpected Stripe error: {error}",
                stripe_code="unknown_error",
            )
