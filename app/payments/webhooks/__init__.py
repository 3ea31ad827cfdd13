"""
Webhook handling for payment events from Stripe.

This module provides the signature verifier, the view and the handlers
for Stripe webhooks. Deliveries are verified, stored once per Stripe
event id, and handled in-process.

Usage:
    # In urls.py
    from payments.webhooks.views import stripe_webhook

    urlpatterns = [
        path("webhooks/stripe/", stripe_webhook, name="stripe_webhook"),
    ]
"""

from payments.webhooks.handlers import dispatch_webhook, register_handler
from payments.webhooks.verifier import WebhookVerifier
from payments.webhooks.views import stripe_webhook

__all__ = [
    "WebhookVerifier",
    "dispatch_webhook",
    "register_handler",
    "stripe_webhook",
]
