"""
Pytest fixtures for Stripe adapter tests.

This module provides fixtures for testing the Stripe adapter, including
a mocked StripeClient, mock Stripe API responses, and error conditions.

Sections:
    - Mock Stripe Client Fixtures
    - Mock Stripe Response Fixtures
    - Error Response Fixtures
"""

import uuid
from dataclasses import dataclass
from typing import Any
from unittest.mock import MagicMock

import pytest
import stripe

from payments.adapters import StripeAdapter


# =============================================================================
# Mock Stripe Client Fixtures
# =============================================================================


@pytest.fixture
def stripe_client():
    """MagicMock standing in for stripe.StripeClient."""
    return MagicMock()


@pytest.fixture
def adapter(stripe_client):
    """StripeAdapter wired to the mocked client."""
    return StripeAdapter(client=stripe_client)


@pytest.fixture
def idempotency_key():
    """Generate an idempotency key for testing."""
    return f"test-{uuid.uuid4()}"


# =============================================================================
# Mock Stripe Response Fixtures
# =============================================================================


@dataclass
class MockStripeObject:
    """Mock Stripe API object with to_dict support."""

    data: dict[str, Any]

    def __getattr__(self, name: str) -> Any:
        if name == "data":
            return self.__dict__["data"]
        return self.data.get(name)

    def to_dict(self) -> dict[str, Any]:
        return self.data


@pytest.fixture
def mock_account():
    """Create a mock Account response."""

    def _create(
        id: str = "acct_test123456",
        country: str = "US",
        email: str | None = "owner@example.com",
        charges_enabled: bool = True,
        payouts_enabled: bool = True,
        details_submitted: bool = True,
        capabilities: dict | None = None,
        metadata: dict | None = None,
    ) -> MockStripeObject:
        return MockStripeObject(
            {
                "id": id,
                "object": "account",
                "country": country,
                "email": email,
                "charges_enabled": charges_enabled,
                "payouts_enabled": payouts_enabled,
                "details_submitted": details_submitted,
                "capabilities": (
                    capabilities
                    if capabilities is not None
                    else {"card_payments": "active", "transfers": "active"}
                ),
                "metadata": metadata or {},
            }
        )

    return _create


@pytest.fixture
def mock_checkout_session():
    """Create a mock Checkout Session response."""

    def _create(
        id: str = "cs_test123456",
        url: str | None = "https://checkout.stripe.com/c/pay/cs_test123456",
        amount_total: int | None = 5000,
        metadata: dict | None = None,
    ) -> MockStripeObject:
        return MockStripeObject(
            {
                "id": id,
                "object": "checkout.session",
                "url": url,
                "amount_total": amount_total,
                "metadata": metadata or {},
            }
        )

    return _create


@pytest.fixture
def mock_account_link():
    def _create(
        url: str = "https://connect.stripe.com/setup/e/acct_test123456/abc",
        expires_at: int = 1_700_000_300,
    ) -> MockStripeObject:
        return MockStripeObject(
            {"object": "account_link", "url": url, "expires_at": expires_at}
        )

    return _create


# =============================================================================
# Error Response Fixtures
# =============================================================================


@pytest.fixture
def card_error():
    """Create a Stripe CardError."""
    return stripe.CardError(
        message="Your card was declined.",
        param="card",
        code="card_declined",
    )


@pytest.fixture
def no_such_account_error():
    """InvalidRequestError Stripe returns for an unknown account id."""
    return stripe.InvalidRequestError(
        message="No such account: 'acct_missing'",
        param="account",
        code="resource_missing",
    )


@pytest.fixture
def invalid_request_error():
    """InvalidRequestError unrelated to any account."""
    return stripe.InvalidRequestError(
        message="Invalid currency: xyz",
        param="currency",
        code="parameter_invalid",
    )


@pytest.fixture
def permission_error():
    """PermissionError Stripe returns once the platform lost access."""
    return stripe.PermissionError(
        message=(
            "The provided key does not have access to account 'acct_revoked' "
            "(or that account does not exist). Application access may have "
            "been revoked."
        ),
    )


@pytest.fixture
def rate_limit_error():
    """Create a Stripe RateLimitError."""
    return stripe.RateLimitError(message="Too many requests")


@pytest.fixture
def api_connection_error():
    """Create a Stripe APIConnectionError."""
    return stripe.APIConnectionError(message="Network error")


@pytest.fixture
def timeout_error():
    """APIConnectionError raised when the HTTP client times out."""
    return stripe.APIConnectionError(message="Request timed out")


@pytest.fixture
def authentication_error():
    """Create a Stripe AuthenticationError."""
    return stripe.AuthenticationError(message="Invalid API Key provided")


@pytest.fixture
def api_error():
    """Create a Stripe APIError."""
    return stripe.APIError(message="Internal server error")
