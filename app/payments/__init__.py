"""
Payments app for the chapter marketplace.

This app handles:
- Stripe Connect Express accounts for sellers, chapters and stewards
- Checkout sessions for direct product sales (8% application fee)
- Checkout sessions for steward claims (configurable platform fee)
- Webhook verification and checkout-completed signals

Related apps:
    - core: Base models, exceptions and service helpers

Usage:
    from payments.services import CheckoutSessionBuilder, FeeResolver

    fee_cents = FeeResolver().resolve_steward_claim_fee(1500, 2000)
    session = CheckoutSessionBuilder().create_steward_claim_checkout(request)
"""
