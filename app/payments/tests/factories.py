"""
Factory Boy factories for payment test data.

This module provides factories for creating test instances of payment models.
Factories generate realistic test data while allowing easy customization.

Usage:
    from payments.tests.factories import (
        ConnectedAccountFactory,
        PlatformSettingFactory,
        WebhookEventFactory,
    )

    # Chapter account that finished onboarding
    account = ConnectedAccountFactory(
        owner_role=OwnerRole.CHAPTER,
        onboarding_status=OnboardingStatus.COMPLETE,
    )

    # Steward fee configured as a percentage
    PlatformSettingFactory(key=STEWARD_FEE_PERCENTAGE_KEY, value="0.10")
"""

import uuid

import factory

from payments.adapters import AccountResult
from payments.constants import (
    CapabilityStatus,
    OnboardingStatus,
    OwnerRole,
    WebhookEventStatus,
)
from payments.models import ConnectedAccount, PlatformSetting, WebhookEvent


def make_account_result(
    account_id: str = "acct_test",
    transfers: CapabilityStatus = CapabilityStatus.ACTIVE,
    card_payments: CapabilityStatus = CapabilityStatus.ACTIVE,
    **kwargs,
) -> AccountResult:
    """Build an AccountResult as StripeAdapter.retrieve_account returns it."""
    kwargs.setdefault("country", "US")
    kwargs.setdefault("charges_enabled", True)
    kwargs.setdefault("details_submitted", True)
    return AccountResult(
        id=account_id,
        capabilities={"card_payments": card_payments, "transfers": transfers},
        **kwargs,
    )


class UserFactory(factory.django.DjangoModelFactory):
    """Factory for creating User instances for payment API tests."""

    class Meta:
        model = "auth.User"
        skip_postgeneration_save = True

    username = factory.Sequence(lambda n: f"user{n}")
    email = factory.Sequence(lambda n: f"user{n}@example.com")
    password = factory.PostGenerationMethodCall("set_password", "testpass123")
    is_active = True


class ConnectedAccountFactory(factory.django.DjangoModelFactory):
    """
    Factory for creating ConnectedAccount instances.

    Generates a unique acct_ id and a seller owner by default.
    """

    class Meta:
        model = ConnectedAccount

    owner_role = OwnerRole.SELLER
    owner_id = factory.Sequence(lambda n: str(n + 1))
    stripe_account_id = factory.LazyFunction(lambda: f"acct_{uuid.uuid4().hex[:16]}")
    country = "US"
    onboarding_status = OnboardingStatus.NOT_STARTED
    charges_enabled = False
    payouts_enabled = False
    metadata = factory.LazyFunction(dict)


class PlatformSettingFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = PlatformSetting
        django_get_or_create = ("key",)

    key = factory.Sequence(lambda n: f"setting_{n}")
    value = "1"
    description = ""


class WebhookEventFactory(factory.django.DjangoModelFactory):
    """
    Factory for creating WebhookEvent instances.

    The payload follows Stripe's event envelope with an empty object;
    pass payload=... to supply one.
    """

    class Meta:
        model = WebhookEvent

    stripe_event_id = factory.LazyFunction(lambda: f"evt_{uuid.uuid4().hex[:24]}")
    event_type = "checkout.session.completed"
    status = WebhookEventStatus.PENDING
    payload = factory.LazyAttribute(
        lambda o: {
            "id": o.stripe_event_id,
            "type": o.event_type,
            "data": {"object": {}},
        }
    )
