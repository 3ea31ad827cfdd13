"""
DRF serializers for payments app.

This module provides serializers for:
- Product and steward-claim checkout requests
- Steward-claim fee quotes
- Connect account onboarding requests
- Response bodies for the above (used by the OpenAPI schema)

Related files:
    - views.py: Payment API views
    - services/: Business logic the views delegate to

Usage:
    serializer = ProductCheckoutSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data
"""

from __future__ import annotations

from rest_framework import serializers

from payments.constants import OwnerRole


# =============================================================================
# Checkout
# =============================================================================


class ProductCheckoutSerializer(serializers.Serializer):
    """
    Request body for a direct product sale.

    Fields:
        product_id: Marketplace product id
        product_name: Name shown on the hosted checkout page
        price_cents: Product price in cents
        seller_id: Marketplace id of the seller receiving the sale
        chapter_id: Chapter credited with the sale (optional)
        buyer_email: Defaults to the authenticated user's e-mail
        success_url/cancel_url: Override the frontend redirect pages
    """

    product_id = serializers.CharField(max_length=64)
    product_name = serializers.CharField(max_length=250)
    price_cents = serializers.IntegerField(min_value=0)
    seller_id = serializers.CharField(max_length=64)
    chapter_id = serializers.CharField(
        max_length=64, required=False, allow_blank=True, allow_null=True
    )
    buyer_email = serializers.EmailField(required=False)
    success_url = serializers.URLField(required=False)
    cancel_url = serializers.URLField(required=False)


class StewardClaimCheckoutSerializer(serializers.Serializer):
    """
    Request body for claiming a steward listing.

    The platform fee is not accepted from the client; it is quoted
    server-side from platform settings.
    """

    listing_id = serializers.CharField(max_length=64)
    listing_name = serializers.CharField(max_length=250)
    shipping_cents = serializers.IntegerField(min_value=0)
    chapter_donation_cents = serializers.IntegerField(min_value=0)
    chapter_id = serializers.CharField(max_length=64)
    steward_id = serializers.CharField(max_length=64)
    buyer_email = serializers.EmailField(required=False)
    success_url = serializers.URLField(required=False)
    cancel_url = serializers.URLField(required=False)


class StewardFeeQuoteQuerySerializer(serializers.Serializer):
    """Query parameters for a steward-claim fee quote."""

    shipping_cents = serializers.IntegerField(min_value=0)
    chapter_donation_cents = serializers.IntegerField(min_value=0)


class StewardFeeQuoteSerializer(serializers.Serializer):
    shipping_cents = serializers.IntegerField()
    chapter_donation_cents = serializers.IntegerField()
    platform_fee_cents = serializers.IntegerField()
    total_cents = serializers.IntegerField()


class CheckoutSessionSerializer(serializers.Serializer):
    """Session id and hosted-page URL returned to the buyer's client."""

    session_id = serializers.CharField()
    checkout_url = serializers.CharField(allow_null=True)


# =============================================================================
# Connect Onboarding
# =============================================================================


class ConnectAccountCreateSerializer(serializers.Serializer):
    owner_role = serializers.ChoiceField(choices=OwnerRole.choices)
    owner_id = serializers.CharField(max_length=64)
    email = serializers.EmailField()
    country = serializers.CharField(min_length=2, max_length=2, required=False)

    def validate_country(self, value: str) -> str:
        if not value.isalpha():
            raise serializers.ValidationError("Country must be an ISO-3166 alpha-2 code.")
        return value.upper()


class ConnectedAccountSerializer(serializers.Serializer):
    """Locally registered Connect account (snapshot fields are display only)."""

    stripe_account_id = serializers.CharField()
    owner_role = serializers.CharField()
    owner_id = serializers.CharField()
    country = serializers.CharField()
    onboarding_status = serializers.CharField()
    charges_enabled = serializers.BooleanField()
    payouts_enabled = serializers.BooleanField()


class OnboardingLinkRequestSerializer(serializers.Serializer):
    return_url = serializers.URLField(required=False)
    refresh_url = serializers.URLField(required=False)


class OnboardingLinkSerializer(serializers.Serializer):
    url = serializers.CharField()
    expires_at = serializers.IntegerField(allow_null=True)


class CapabilityStatusSerializer(serializers.Serializer):
    stripe_account_id = serializers.CharField()
    transfers = serializers.CharField()


class SettlementStatusSerializer(serializers.Serializer):
    """
    Live readiness of an account, read from Stripe.

    Fields:
        settlement_ready: True only when the transfers capability is active
        capabilities: card_payments/transfers status
    """

    stripe_account_id = serializers.CharField()
    owner_role = serializers.CharField(allow_null=True)
    country = serializers.CharField(allow_null=True)
    charges_enabled = serializers.BooleanField()
    details_submitted = serializers.BooleanField()
    transfers = serializers.CharField()
    settlement_ready = serializers.BooleanField()
    capabilities = serializers.DictField(child=serializers.CharField())
