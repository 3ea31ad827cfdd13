"""
Payment services.

- AccountDirectory: live, validated lookups of Stripe Connect accounts
- FeeResolver / DirectSaleFeePolicy: platform fee policies
- CheckoutSessionBuilder: product and steward-claim checkout sessions
- ConnectOnboardingService: account creation and onboarding links

Usage:
    from payments.services import CheckoutSessionBuilder, FeeResolver
"""

from payments.services.account_directory import AccountDirectory, ConnectAccount
from payments.services.checkout_builder import (
    CheckoutSession,
    CheckoutSessionBuilder,
    ProductCheckoutRequest,
    StewardClaimCheckoutRequest,
)
from payments.services.fee_resolver import DirectSaleFeePolicy, FeeResolver
from payments.services.onboarding import ConnectOnboardingService

__all__ = [
    "AccountDirectory",
    "CheckoutSession",
    "CheckoutSessionBuilder",
    "ConnectAccount",
    "ConnectOnboardingService",
    "DirectSaleFeePolicy",
    "FeeResolver",
    "ProductCheckoutRequest",
    "StewardClaimCheckoutRequest",
]
