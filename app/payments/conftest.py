"""
Pytest fixtures shared by all payments test packages.

This module provides fixtures for users, registered Connect accounts and
a mocked Stripe adapter for code that sits above the adapter.

Usage:
    def test_checkout_for_seller(seller_account, mock_stripe_adapter):
        ...
"""

from unittest.mock import MagicMock

import pytest

from payments.adapters import StripeAdapter
from payments.constants import OwnerRole
from payments.tests.factories import (
    ConnectedAccountFactory,
    UserFactory,
    make_account_result,
)


# =============================================================================
# User Fixtures
# =============================================================================


@pytest.fixture
def user(db):
    """Create a test user."""
    return UserFactory()


@pytest.fixture
def staff_user(db):
    """Create a staff user for Connect management endpoints."""
    return UserFactory(is_staff=True)


# =============================================================================
# Connected Account Fixtures
# =============================================================================


@pytest.fixture
def seller_account(db):
    """Registered seller account."""
    return ConnectedAccountFactory(
        owner_role=OwnerRole.SELLER,
        owner_id="8",
        stripe_account_id="acct_seller",
    )


@pytest.fixture
def chapter_account(db):
    """Registered chapter account."""
    return ConnectedAccountFactory(
        owner_role=OwnerRole.CHAPTER,
        owner_id="42",
        stripe_account_id="acct_chapter",
    )


@pytest.fixture
def steward_account(db):
    """Registered steward account."""
    return ConnectedAccountFactory(
        owner_role=OwnerRole.STEWARD,
        owner_id="7",
        stripe_account_id="acct_steward",
    )


# =============================================================================
# Stripe Fixtures
# =============================================================================


@pytest.fixture
def mock_stripe_adapter():
    """
    StripeAdapter mock whose retrieve_account reports every account
    as settlement ready.
    """
    adapter = MagicMock(spec=StripeAdapter)
    adapter.retrieve_account.side_effect = lambda account_id: make_account_result(
        account_id
    )
    return adapter
