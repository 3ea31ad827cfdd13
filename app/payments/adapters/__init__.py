"""
Payment adapters for external services.

All Stripe API calls go through StripeAdapter to ensure consistent error
handling, timeouts, idempotency and observability.

Usage:
    from payments.adapters import StripeAdapter, get_stripe_client

    adapter = StripeAdapter(get_stripe_client())
    account = adapter.retrieve_account("acct_123")
"""

from payments.adapters.stripe_adapter import (
    AccountLinkResult,
    AccountResult,
    CheckoutSessionResult,
    CreateCheckoutSessionParams,
    CreateConnectAccountParams,
    StripeAdapter,
    get_stripe_client,
    normalize_capability_status,
    validate_secret_key,
)

__all__ = [
    "AccountLinkResult",
    "AccountResult",
    "CheckoutSessionResult",
    "CreateCheckoutSessionParams",
    "CreateConnectAccountParams",
    "StripeAdapter",
    "get_stripe_client",
    "normalize_capability_status",
    "validate_secret_key",
]
