"""
Checkout session construction for the two marketplace sale flows.

Direct product sale:
    One line item for the product. The charge is a destination charge:
    the seller's account receives the price minus an 8% application fee
    that stays with the platform.

Steward claim:
    Up to three line items (Shipping, Platform Fee, Chapter Donation),
    omitting any that are zero. The platform fee arrives pre-quoted from
    FeeResolver; the chapter and steward account ids travel in the
    session metadata for fulfillment to settle.

Both flows confirm every destination account with the AccountDirectory
before anything is sent to Stripe.

Usage:
    from payments.services import CheckoutSessionBuilder, ProductCheckoutRequest

    builder = CheckoutSessionBuilder()
    session = builder.create_product_checkout(
        ProductCheckoutRequest(
            product_id="17",
            product_name="Crest Hoodie",
            price_cents=4500,
            destination_account_id="acct_seller",
            buyer_email="buyer@example.com",
            success_url="https://example.com/ok",
            cancel_url="https://example.com/cancel",
        )
    )
    # redirect the buyer to session.url
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from django.conf import settings

from payments.adapters import CreateCheckoutSessionParams, StripeAdapter
from payments.constants import (
    CHAPTER_DONATION_LINE_ITEM,
    PLATFORM_FEE_LINE_ITEM,
    SHIPPING_LINE_ITEM,
    STEWARD_CLAIM_CHECKOUT_TYPE,
)
from payments.money import require_cents
from payments.services.account_directory import AccountDirectory
from payments.services.fee_resolver import DirectSaleFeePolicy


logger = logging.getLogger(__name__)


# =============================================================================
# Data Types
# =============================================================================


@dataclass
class ProductCheckoutRequest:
    """
    A buyer's request to purchase one product from a seller.

    Attributes:
        product_id: Marketplace product id (sent as metadata)
        product_name: Line item name shown on the hosted page
        price_cents: Product price in cents
        destination_account_id: Seller's Stripe account (acct_xxx)
        buyer_email: Prefilled on the hosted page
        success_url: Redirect after payment
        cancel_url: Redirect on abandonment
        chapter_id: Chapter credited with the sale, if any
        idempotency_key: Optional key making repeated submissions return
            the same session
    """

    product_id: str
    product_name: str
    price_cents: int
    destination_account_id: str
    buyer_email: str
    success_url: str
    cancel_url: str
    chapter_id: str | None = None
    idempotency_key: str | None = None

    def __post_init__(self) -> None:
        require_cents("price_cents", self.price_cents)
        if not self.product_name:
            raise ValueError("product_name is required")


@dataclass
class StewardClaimCheckoutRequest:
    """
    A buyer's request to claim a steward listing.

    Attributes:
        listing_id: Marketplace listing id (sent as metadata)
        listing_name: Listing name, used for logging
        shipping_cents: Shipping charged to the buyer
        chapter_donation_cents: Donation routed to the chapter
        platform_fee_cents: Fee quoted by FeeResolver
        destination_chapter_account_id: Chapter's Stripe account
        destination_steward_account_id: Steward's Stripe account
        buyer_email: Prefilled on the hosted page
        success_url: Redirect after payment
        cancel_url: Redirect on abandonment
        idempotency_key: Optional key for idempotent creation
    """

    listing_id: str
    listing_name: str
    shipping_cents: int
    chapter_donation_cents: int
    platform_fee_cents: int
    destination_chapter_account_id: str
    destination_steward_account_id: str
    buyer_email: str
    success_url: str
    cancel_url: str
    idempotency_key: str | None = None

    def __post_init__(self) -> None:
        require_cents("shipping_cents", self.shipping_cents)
        require_cents("chapter_donation_cents", self.chapter_donation_cents)
        require_cents("platform_fee_cents", self.platform_fee_cents)

    @property
    def total_cents(self) -> int:
        return self.shipping_cents + self.platform_fee_cents + self.chapter_donation_cents


@dataclass(frozen=True)
class CheckoutSession:
    """Session id and hosted-page URL relayed to the caller."""

    id: str
    url: str | None


# =============================================================================
# Builder
# =============================================================================


class CheckoutSessionBuilder:
    """
    Builds and creates Stripe Checkout sessions.

    Collaborators are injected so tests can pass mocks; by default one
    StripeAdapter is shared with the AccountDirectory.
    """

    def __init__(
        self,
        account_directory: AccountDirectory | None = None,
        stripe_adapter: StripeAdapter | None = None,
        direct_sale_fee_policy: DirectSaleFeePolicy | None = None,
        currency: str | None = None,
    ):
        self.stripe = stripe_adapter if stripe_adapter is not None else StripeAdapter()
        self.accounts = (
            account_directory
            if account_directory is not None
            else AccountDirectory(self.stripe)
        )
        self.direct_sale_fee_policy = direct_sale_fee_policy or DirectSaleFeePolicy()
        self.currency = currency or getattr(settings, "STRIPE_CHECKOUT_CURRENCY", "usd")

    def create_product_checkout(self, request: ProductCheckoutRequest) -> CheckoutSession:
        """
        Create a destination-charge session for a direct product sale.

        Raises:
            AccountInvalidError: The seller account cannot be used
            AccountNotSettlementReadyError: The seller account cannot receive transfers
            StripeError: Session creation failed; not retried
        """
        destination = self.accounts.resolve_settlement_account(
            request.destination_account_id
        ).id
        application_fee = self.direct_sale_fee_policy.application_fee(request.price_cents)

        params = CreateCheckoutSessionParams(
            line_items=[self._line_item(request.product_name, request.price_cents)],
            customer_email=request.buyer_email,
            success_url=request.success_url,
            cancel_url=request.cancel_url,
            payment_intent_data={
                "application_fee_amount": application_fee,
                "on_behalf_of": destination,
                "transfer_data": {"destination": destination},
            },
            metadata={
                "product_id": str(request.product_id),
                "chapter_id": str(request.chapter_id) if request.chapter_id else "",
            },
            idempotency_key=request.idempotency_key,
        )

        result = self.stripe.create_checkout_session(params)

        logger.info(
            "Created product checkout session",
            extra={
                "checkout_session_id": result.id,
                "product_id": str(request.product_id),
                "destination_account_id": destination,
                "price_cents": request.price_cents,
                "application_fee_cents": application_fee,
            },
        )
        return CheckoutSession(id=result.id, url=result.url)

    def create_steward_claim_checkout(
        self,
        request: StewardClaimCheckoutRequest,
    ) -> CheckoutSession:
        """
        Create a session for a steward-listing claim.

        Zero-amount components produce no line item; a claim where every
        component is zero still creates a session with no line items.

        Raises:
            AccountInvalidError: Chapter or steward account cannot be used
            AccountNotSettlementReadyError: An account cannot receive transfers
            StripeError: Session creation failed; not retried
        """
        chapter_account = self.accounts.resolve_settlement_account(
            request.destination_chapter_account_id
        )
        steward_account = self.accounts.resolve_settlement_account(
            request.destination_steward_account_id
        )

        line_items = [
            self._line_item(name, amount)
            for name, amount in (
                (SHIPPING_LINE_ITEM, request.shipping_cents),
                (PLATFORM_FEE_LINE_ITEM, request.platform_fee_cents),
                (CHAPTER_DONATION_LINE_ITEM, request.chapter_donation_cents),
            )
            if amount > 0
        ]

        params = CreateCheckoutSessionParams(
            line_items=line_items,
            customer_email=request.buyer_email,
            success_url=request.success_url,
            cancel_url=request.cancel_url,
            metadata={
                "listing_id": str(request.listing_id),
                "type": STEWARD_CLAIM_CHECKOUT_TYPE,
                "steward_account_id": steward_account.id,
                "chapter_account_id": chapter_account.id,
                "chapter_donation_cents": str(request.chapter_donation_cents),
                "shipping_cents": str(request.shipping_cents),
            },
            idempotency_key=request.idempotency_key,
        )

        result = self.stripe.create_checkout_session(params)

        logger.info(
            "Created steward claim checkout session",
            extra={
                "checkout_session_id": result.id,
                "listing_id": str(request.listing_id),
                "listing_name": request.listing_name,
                "line_item_count": len(line_items),
                "total_cents": request.total_cents,
            },
        )
        return CheckoutSession(id=result.id, url=result.url)

    def _line_item(self, name: str, amount_cents: int) -> dict[str, Any]:
        return {
            "price_data": {
                "currency": self.currency,
                "product_data": {"name": name},
                "unit_amount": amount_cents,
            },
            "quantity": 1,
        }
