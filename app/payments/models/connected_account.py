"""
ConnectedAccount model for Stripe Connect integration.

Registry of which Stripe Connect account belongs to which marketplace
party (seller, chapter or steward). Checkout endpoints use it to find
destination account ids; whether an account can actually receive money
is always checked against Stripe by the AccountDirectory.

Usage:
    from payments.constants import OwnerRole
    from payments.models import ConnectedAccount

    account = ConnectedAccount.objects.for_owner(OwnerRole.CHAPTER, "42")
    if account is None:
        ...  # chapter never started onboarding
"""

from __future__ import annotations

from django.db import models

from core.models import BaseModel
from core.model_mixins import UUIDPrimaryKeyMixin

from payments.constants import OnboardingStatus, OwnerRole


class ConnectedAccountManager(models.Manager):
    def for_owner(self, owner_role: str, owner_id: str) -> ConnectedAccount | None:
        """Return the account registered for a party, or None."""
        return self.filter(owner_role=owner_role, owner_id=str(owner_id)).first()


class ConnectedAccount(UUIDPrimaryKeyMixin, BaseModel):
    """
    A Stripe Connect Express account owned by a marketplace party.

    Fields:
        owner_role: Which kind of party owns the account
        owner_id: The party's id in the marketplace (opaque string)
        stripe_account_id: Unique Stripe Account ID (acct_xxx)
        country: ISO-3166 alpha-2 country the account was created in
        onboarding_status: Last known onboarding state (display only)
        charges_enabled: Last reported charges_enabled flag (display only)
        payouts_enabled: Last reported payouts_enabled flag (display only)
        metadata: Flexible JSON storage for additional data

    Note:
        The status fields are a snapshot from account.updated webhooks.
        They are never used to decide whether a checkout may settle.
    """

    owner_role = models.CharField(
        max_length=20,
        choices=OwnerRole.choices,
        db_index=True,
        help_text="Kind of marketplace party that owns this account",
    )

    owner_id = models.CharField(
        max_length=64,
        help_text="Marketplace id of the owning seller, chapter or steward",
    )

    stripe_account_id = models.CharField(
        max_length=255,
        unique=True,
        db_index=True,
        help_text="Stripe Connect account ID (acct_xxx)",
    )

    country = models.CharField(
        max_length=2,
        default="US",
        help_text="ISO-3166 alpha-2 country code",
    )

    onboarding_status = models.CharField(
        max_length=20,
        choices=OnboardingStatus.choices,
        default=OnboardingStatus.NOT_STARTED,
        help_text="Last known Stripe onboarding state",
    )

    charges_enabled = models.BooleanField(
        default=False,
        help_text="Last reported charges_enabled flag from Stripe",
    )

    payouts_enabled = models.BooleanField(
        default=False,
        help_text="Last reported payouts_enabled flag from Stripe",
    )

    metadata = models.JSONField(
        default=dict,
        blank=True,
        help_text="Additional metadata",
    )

    objects = ConnectedAccountManager()

    class Meta:
        ordering = ["-created_at"]
        verbose_name = "Connected Account"
        verbose_name_plural = "Connected Accounts"
        constraints = [
            models.UniqueConstraint(
                fields=["owner_role", "owner_id"],
                name="unique_connected_account_per_owner",
            ),
        ]

    def __str__(self) -> str:
        return f"ConnectedAccount({self.owner_role}:{self.owner_id}, {self.stripe_account_id})"
