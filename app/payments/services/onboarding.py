"""
Stripe Connect onboarding for sellers, chapters and stewards.

Creates Express accounts, hands out hosted onboarding links, and repairs
accounts created before the transfers capability was requested.

Usage:
    from payments.constants import OwnerRole
    from payments.services import ConnectOnboardingService

    service = ConnectOnboardingService()
    account, created = service.create_account(
        OwnerRole.CHAPTER, "42", email="treasurer@chapter.org"
    )
    link = service.create_onboarding_link(account.stripe_account_id)
    # redirect the chapter treasurer to link.url
"""

from __future__ import annotations

from django.conf import settings
from django.db import IntegrityError

from core.services import BaseService

from payments.adapters import AccountLinkResult, CreateConnectAccountParams, StripeAdapter
from payments.constants import CapabilityStatus, OnboardingStatus, OwnerRole
from payments.exceptions import PaymentNotFoundError, PaymentValidationError
from payments.models import ConnectedAccount
from payments.services.account_directory import AccountDirectory, ConnectAccount


class ConnectOnboardingService(BaseService):
    """
    Provisions Connect accounts and keeps the local registry in step.

    One ConnectedAccount exists per (owner_role, owner_id). Creating an
    account for a party that already has one returns the existing row.
    """

    def __init__(
        self,
        stripe_adapter: StripeAdapter | None = None,
        account_directory: AccountDirectory | None = None,
    ):
        self.stripe = stripe_adapter if stripe_adapter is not None else StripeAdapter()
        self.accounts = (
            account_directory
            if account_directory is not None
            else AccountDirectory(self.stripe)
        )

    def create_account(
        self,
        owner_role: OwnerRole | str,
        owner_id: str,
        email: str,
        country: str | None = None,
    ) -> tuple[ConnectedAccount, bool]:
        """
        Create an Express account for a party unless one is registered.

        The Stripe idempotency key is derived from the party, so two
        concurrent requests for the same party get the same Stripe account.

        Returns:
            (ConnectedAccount, created)

        Raises:
            PaymentValidationError: Unknown role or malformed email/country
            StripeError: Account creation failed
        """
        logger = self.get_logger()

        if owner_role not in OwnerRole.values:
            raise PaymentValidationError(
                f"Unknown owner role: {owner_role}",
                details={"owner_role": str(owner_role)},
            )
        owner_role = OwnerRole(owner_role)
        owner_id = str(owner_id)

        existing = ConnectedAccount.objects.for_owner(owner_role, owner_id)
        if existing:
            logger.info(
                "Connected account already registered",
                extra={
                    "owner_role": owner_role.value,
                    "owner_id": owner_id,
                    "account_id": existing.stripe_account_id,
                },
            )
            return existing, False

        try:
            params = CreateConnectAccountParams(
                email=email,
                country=country or settings.STRIPE_CONNECT_DEFAULT_COUNTRY,
                metadata={"owner_role": owner_role.value, "owner_id": owner_id},
                idempotency_key=f"connect-account:{owner_role.value}:{owner_id}",
            )
        except ValueError as e:
            raise PaymentValidationError(str(e)) from e

        result = self.stripe.create_connect_account(params)

        try:
            with self.atomic():
                account = ConnectedAccount.objects.create(
                    owner_role=owner_role,
                    owner_id=owner_id,
                    stripe_account_id=result.id,
                    country=result.country or params.country,
                )
        except IntegrityError:
            # A concurrent request registered the same party first
            account = ConnectedAccount.objects.for_owner(owner_role, owner_id)
            if account is None:
                raise
            return account, False

        logger.info(
            "Created connected account",
            extra={
                "owner_role": owner_role.value,
                "owner_id": owner_id,
                "account_id": account.stripe_account_id,
            },
        )
        return account, True

    def create_onboarding_link(
        self,
        stripe_account_id: str,
        return_url: str | None = None,
        refresh_url: str | None = None,
    ) -> AccountLinkResult:
        """
        Create a hosted onboarding link for a registered account.

        Defaults both URLs to the frontend's onboarding pages.

        Raises:
            PaymentNotFoundError: The account is not registered here
            StripeError: Link creation failed
        """
        account = self._get_registered(stripe_account_id)

        frontend_url = settings.FRONTEND_URL.rstrip("/")
        link = self.stripe.create_account_link(
            account.stripe_account_id,
            return_url=return_url or f"{frontend_url}/onboarding/complete",
            refresh_url=refresh_url or f"{frontend_url}/onboarding/refresh",
        )

        if account.onboarding_status == OnboardingStatus.NOT_STARTED:
            account.onboarding_status = OnboardingStatus.IN_PROGRESS
            account.save(update_fields=["onboarding_status", "updated_at"])

        return link

    def request_transfers_capability(self, stripe_account_id: str) -> CapabilityStatus:
        """
        Ask Stripe to enable transfers on an already registered account.

        Raises:
            PaymentNotFoundError: The account is not registered here
            StripeError: The capability request failed
        """
        account = self._get_registered(stripe_account_id)
        status = self.stripe.request_transfers_capability(account.stripe_account_id)

        self.get_logger().info(
            "Requested transfers capability",
            extra={"account_id": account.stripe_account_id, "transfers": status.value},
        )
        return status

    def get_settlement_status(self, stripe_account_id: str) -> ConnectAccount:
        """Live account state from Stripe for a registered account."""
        account = self._get_registered(stripe_account_id)
        return self.accounts.get_account(account.stripe_account_id)

    def _get_registered(self, stripe_account_id: str) -> ConnectedAccount:
        account = ConnectedAccount.objects.filter(
            stripe_account_id=stripe_account_id
        ).first()
        if not account:
            raise PaymentNotFoundError(
                f"Connected account {stripe_account_id} not found",
                details={"stripe_account_id": stripe_account_id},
            )
        return account
