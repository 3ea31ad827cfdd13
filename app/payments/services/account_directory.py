"""
Validated, read-only view over Stripe Connect accounts.

Every lookup goes to Stripe: an account's capabilities can change at any
moment (Stripe may pause transfers pending verification), so a cached
answer could route money to an account that can no longer receive it.

Usage:
    from payments.services import AccountDirectory

    directory = AccountDirectory()
    account = directory.resolve_settlement_account("acct_123")
    # account.capabilities["transfers"] == CapabilityStatus.ACTIVE
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from payments.adapters import AccountResult, StripeAdapter
from payments.constants import CapabilityStatus, OwnerRole
from payments.exceptions import (
    AccountInvalidError,
    AccountNotSettlementReadyError,
    StripeInvalidAccountError,
    StripeInvalidRequestError,
)


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConnectAccount:
    """
    A Stripe Connect account as seen at lookup time.

    Attributes:
        id: Stripe account id (acct_xxx)
        owner_role: Owning party, when recorded in the account metadata
        country: ISO-3166 alpha-2 country
        capabilities: card_payments/transfers status
        charges_enabled: Stripe's charges_enabled flag
        details_submitted: Whether onboarding forms were completed
    """

    id: str
    owner_role: OwnerRole | None = None
    country: str | None = None
    capabilities: dict[str, CapabilityStatus] = field(default_factory=dict)
    charges_enabled: bool = False
    details_submitted: bool = False

    @property
    def transfers_status(self) -> CapabilityStatus:
        return self.capabilities.get("transfers", CapabilityStatus.UNREQUESTED)

    @property
    def is_settlement_ready(self) -> bool:
        """Only accounts with an active transfers capability may receive funds."""
        return self.transfers_status == CapabilityStatus.ACTIVE

    @classmethod
    def from_account_result(cls, result: AccountResult) -> ConnectAccount:
        role = result.metadata.get("owner_role")
        return cls(
            id=result.id,
            owner_role=OwnerRole(role) if role in OwnerRole.values else None,
            country=result.country,
            capabilities=dict(result.capabilities),
            charges_enabled=result.charges_enabled,
            details_submitted=result.details_submitted,
        )


class AccountDirectory:
    """
    Looks up Connect accounts and decides whether they can settle funds.

    The directory has no side effects and keeps no state besides the
    injected adapter.
    """

    def __init__(self, stripe_adapter: StripeAdapter | None = None):
        self.stripe = stripe_adapter if stripe_adapter is not None else StripeAdapter()

    def get_account(self, account_id: str) -> ConnectAccount:
        """
        Fetch an account without judging settlement readiness.

        Raises:
            AccountInvalidError: Blank id, unknown account, or access revoked
            StripeError: Any other provider failure, unchanged
        """
        if not account_id or not account_id.strip():
            raise AccountInvalidError(
                "Stripe account id is missing",
                details={"account_id": account_id},
            )

        try:
            result = self.stripe.retrieve_account(account_id)
        except StripeInvalidAccountError as e:
            logger.warning(
                "Stripe account not accessible",
                extra={"account_id": account_id, "stripe_code": e.stripe_code},
            )
            raise AccountInvalidError(
                "Stripe account not found",
                stripe_code=e.stripe_code,
                details={"account_id": account_id},
            ) from e
        except StripeInvalidRequestError as e:
            if e.stripe_code != "resource_missing":
                raise
            raise AccountInvalidError(
                "Stripe account not found",
                stripe_code=e.stripe_code,
                details={"account_id": account_id},
            ) from e

        return ConnectAccount.from_account_result(result)

    def resolve_settlement_account(self, account_id: str) -> ConnectAccount:
        """
        Return the account if it can be a settlement destination.

        Raises:
            AccountInvalidError: The account cannot be used at all
            AccountNotSettlementReadyError: transfers capability is not active
            StripeError: Any other provider failure, unchanged
        """
        account = self.get_account(account_id)

        if not account.is_settlement_ready:
            logger.info(
                "Stripe account not ready for transfers",
                extra={
                    "account_id": account_id,
                    "transfers": account.transfers_status.value,
                },
            )
            raise AccountNotSettlementReadyError(
                "Stripe account is not ready to receive transfers",
                account_id=account_id,
                transfers_status=account.transfers_status.value,
            )

        return account
