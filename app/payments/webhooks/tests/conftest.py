"""
Pytest fixtures for webhook tests.

Provides event envelopes and checkout.session objects; see helpers.py
for request signing.
"""

import pytest

from payments.webhooks.tests.helpers import WEBHOOK_SECRET


@pytest.fixture
def webhook_secret(settings):
    settings.STRIPE_WEBHOOK_SECRET = WEBHOOK_SECRET
    return WEBHOOK_SECRET


@pytest.fixture
def make_event():
    """Build a Stripe event envelope around a data object."""

    def _create(
        event_type: str = "checkout.session.completed",
        data_object: dict | None = None,
        event_id: str = "evt_test_1",
    ) -> dict:
        return {
            "id": event_id,
            "object": "event",
            "type": event_type,
            "data": {"object": data_object or {}},
        }

    return _create


@pytest.fixture
def steward_session():
    """checkout.session object for a steward claim."""
    return {
        "id": "cs_steward_1",
        "object": "checkout.session",
        "amount_total": 3675,
        "customer_email": "buyer@example.com",
        "payment_intent": "pi_123",
        "metadata": {
            "listing_id": "91",
            "type": "steward_claim",
            "steward_account_id": "acct_steward",
            "chapter_account_id": "acct_chapter",
            "chapter_donation_cents": "2000",
            "shipping_cents": "1500",
        },
    }


@pytest.fixture
def product_session():
    """checkout.session object for a direct product sale."""
    return {
        "id": "cs_product_1",
        "object": "checkout.session",
        "amount_total": 4500,
        "customer_email": None,
        "customer_details": {"email": "buyer@example.com"},
        "payment_intent": "pi_456",
        "metadata": {"product_id": "17", "chapter_id": ""},
    }
