"""
DRF views for payments app.

This module provides API views for:
- Direct product checkout sessions
- Steward-claim checkout sessions and fee quotes
- Stripe Connect account creation, onboarding links and status

Related files:
    - services/: CheckoutSessionBuilder, FeeResolver, ConnectOnboardingService
    - serializers.py: Request/response serializers
    - urls.py: URL routing
    - webhooks/views.py: Stripe webhook endpoint

Endpoints:
    POST /api/v1/payments/checkout/products/ - Direct sale checkout
    POST /api/v1/payments/checkout/steward-claims/ - Steward claim checkout
    GET  /api/v1/payments/checkout/steward-claims/fee-quote/ - Fee quote
    POST /api/v1/payments/connect/accounts/ - Create Connect account
    POST /api/v1/payments/connect/accounts/{id}/onboarding-link/ - Onboarding link
    POST /api/v1/payments/connect/accounts/{id}/transfers-capability/ - Request transfers
    GET  /api/v1/payments/connect/accounts/{id}/status/ - Settlement readiness

Security:
    - All endpoints require authentication except the webhook
    - Connect account management is limited to staff users
"""

from __future__ import annotations

import logging

from django.conf import settings
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import IsAdminUser, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from core.exceptions import (
    BaseApplicationError,
    ConflictError,
    ExternalServiceError,
    NotFoundError,
)

from payments.constants import OwnerRole
from payments.exceptions import (
    AccountInvalidError,
    PaymentNotFoundError,
    PaymentValidationError,
    StripeError,
)
from payments.models import ConnectedAccount
from payments.serializers import (
    CapabilityStatusSerializer,
    CheckoutSessionSerializer,
    ConnectAccountCreateSerializer,
    ConnectedAccountSerializer,
    OnboardingLinkRequestSerializer,
    OnboardingLinkSerializer,
    ProductCheckoutSerializer,
    SettlementStatusSerializer,
    StewardClaimCheckoutSerializer,
    StewardFeeQuoteQuerySerializer,
    StewardFeeQuoteSerializer,
)
from payments.services import (
    CheckoutSessionBuilder,
    ConnectOnboardingService,
    FeeResolver,
    ProductCheckoutRequest,
    StewardClaimCheckoutRequest,
)

logger = logging.getLogger(__name__)

IDEMPOTENCY_KEY_HEADER = "Idempotency-Key"

IDEMPOTENCY_KEY_PARAMETER = OpenApiParameter(
    name=IDEMPOTENCY_KEY_HEADER,
    type=OpenApiTypes.STR,
    location=OpenApiParameter.HEADER,
    required=False,
    description=(
        "Optional key; resubmitting with the same key returns the same "
        "Stripe session instead of creating a second one."
    ),
)


# =============================================================================
# Service factories (patched in tests)
# =============================================================================


def get_checkout_builder() -> CheckoutSessionBuilder:
    return CheckoutSessionBuilder()


def get_fee_resolver() -> FeeResolver:
    return FeeResolver()


def get_onboarding_service() -> ConnectOnboardingService:
    return ConnectOnboardingService()


# =============================================================================
# Error translation
# =============================================================================


def error_status_for(exc: BaseApplicationError) -> int:
    """
    HTTP status for a domain error.

    AccountInvalidError is checked before StripeError because it is one.
    """
    if isinstance(exc, AccountInvalidError):
        return status.HTTP_422_UNPROCESSABLE_ENTITY
    if isinstance(exc, StripeError):
        if exc.is_retryable:
            return status.HTTP_503_SERVICE_UNAVAILABLE
        return status.HTTP_502_BAD_GATEWAY
    if isinstance(exc, ExternalServiceError):
        return status.HTTP_502_BAD_GATEWAY
    if isinstance(exc, NotFoundError):
        return status.HTTP_404_NOT_FOUND
    if isinstance(exc, ConflictError):
        return status.HTTP_409_CONFLICT
    return status.HTTP_400_BAD_REQUEST


def error_response(exc: BaseApplicationError) -> Response:
    response_status = error_status_for(exc)
    log = logger.error if response_status >= 500 else logger.warning
    log(
        f"Payment request failed: {exc.error_code}",
        extra={"error_code": exc.error_code, "details": exc.details},
    )
    body = exc.to_dict()
    if isinstance(exc, StripeError):
        body["retryable"] = exc.is_retryable
    return Response(body, status=response_status)


def _get_owner_account(owner_role: OwnerRole, owner_id: str) -> ConnectedAccount:
    account = ConnectedAccount.objects.for_owner(owner_role, owner_id)
    if account is None:
        raise PaymentNotFoundError(
            f"No connected account for {owner_role.label.lower()} {owner_id}",
            error_code="CONNECTED_ACCOUNT_NOT_FOUND",
            details={"owner_role": owner_role.value, "owner_id": str(owner_id)},
        )
    return account


def _buyer_email(request, data: dict) -> str:
    email = data.get("buyer_email") or getattr(request.user, "email", "")
    if not email:
        raise PaymentValidationError(
            "A buyer e-mail is required",
            details={"buyer_email": ["This field is required."]},
        )
    return email


def _frontend_url() -> str:
    return settings.FRONTEND_URL.rstrip("/")


# =============================================================================
# Checkout
# =============================================================================


class ProductCheckoutView(APIView):
    """
    Create a Checkout session for a direct product sale.

    POST /api/v1/payments/checkout/products/

    Request body:
        {
            "product_id": "17",
            "product_name": "Crest Hoodie",
            "price_cents": 4500,
            "seller_id": "8",
            "chapter_id": "42"
        }

    Returns:
        {"session_id": "cs_xxx", "checkout_url": "https://checkout.stripe.com/..."}
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="create_product_checkout",
        summary="Create product checkout session",
        description=(
            "Create a destination-charge Checkout session. The seller's Stripe "
            "account receives the price minus an 8% platform fee. Fails when "
            "the seller's account cannot receive transfers."
        ),
        request=ProductCheckoutSerializer,
        parameters=[IDEMPOTENCY_KEY_PARAMETER],
        responses={
            201: OpenApiResponse(response=CheckoutSessionSerializer),
            400: OpenApiResponse(description="Validation error"),
            404: OpenApiResponse(description="Seller has no connected account"),
            409: OpenApiResponse(description="Seller account cannot receive transfers"),
            422: OpenApiResponse(description="Seller account is invalid"),
            502: OpenApiResponse(description="Stripe rejected the request"),
            503: OpenApiResponse(description="Stripe temporarily unavailable"),
        },
        tags=["Payments - Checkout"],
    )
    def post(self, request):
        serializer = ProductCheckoutSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        data = serializer.validated_data

        try:
            seller_account = _get_owner_account(OwnerRole.SELLER, data["seller_id"])
            checkout_request = ProductCheckoutRequest(
                product_id=data["product_id"],
                product_name=data["product_name"],
                price_cents=data["price_cents"],
                destination_account_id=seller_account.stripe_account_id,
                buyer_email=_buyer_email(request, data),
                success_url=data.get("success_url")
                or (
                    f"{_frontend_url()}/checkout/{data['product_id']}/success"
                    "?session_id={CHECKOUT_SESSION_ID}"
                ),
                cancel_url=data.get("cancel_url")
                or f"{_frontend_url()}/products/{data['product_id']}",
                chapter_id=data.get("chapter_id") or None,
                idempotency_key=request.headers.get(IDEMPOTENCY_KEY_HEADER) or None,
            )
            session = get_checkout_builder().create_product_checkout(checkout_request)
        except BaseApplicationError as e:
            return error_response(e)

        return Response(
            CheckoutSessionSerializer(
                {"session_id": session.id, "checkout_url": session.url}
            ).data,
            status=status.HTTP_201_CREATED,
        )


class StewardClaimCheckoutView(APIView):
    """
    Create a Checkout session for claiming a steward listing.

    POST /api/v1/payments/checkout/steward-claims/

    Request body:
        {
            "listing_id": "91",
            "listing_name": "Founders' Paddle",
            "shipping_cents": 1500,
            "chapter_donation_cents": 2000,
            "chapter_id": "42",
            "steward_id": "7"
        }

    The platform fee is quoted from platform settings on every request.
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="create_steward_claim_checkout",
        summary="Create steward claim checkout session",
        description=(
            "Create a Checkout session with Shipping, Platform Fee and Chapter "
            "Donation line items (zero amounts omitted). Both the chapter and "
            "the steward must have accounts able to receive transfers."
        ),
        request=StewardClaimCheckoutSerializer,
        parameters=[IDEMPOTENCY_KEY_PARAMETER],
        responses={
            201: OpenApiResponse(response=CheckoutSessionSerializer),
            400: OpenApiResponse(description="Validation error"),
            404: OpenApiResponse(description="Chapter or steward has no connected account"),
            409: OpenApiResponse(description="An account cannot receive transfers"),
            422: OpenApiResponse(description="An account is invalid"),
            502: OpenApiResponse(description="Stripe rejected the request"),
            503: OpenApiResponse(description="Stripe temporarily unavailable"),
        },
        tags=["Payments - Checkout"],
    )
    def post(self, request):
        serializer = StewardClaimCheckoutSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        data = serializer.validated_data
        listing_id = data["listing_id"]

        try:
            chapter_account = _get_owner_account(OwnerRole.CHAPTER, data["chapter_id"])
            steward_account = _get_owner_account(OwnerRole.STEWARD, data["steward_id"])
            platform_fee_cents = get_fee_resolver().resolve_steward_claim_fee(
                data["shipping_cents"], data["chapter_donation_cents"]
            )
            checkout_request = StewardClaimCheckoutRequest(
                listing_id=listing_id,
                listing_name=data["listing_name"],
                shipping_cents=data["shipping_cents"],
                chapter_donation_cents=data["chapter_donation_cents"],
                platform_fee_cents=platform_fee_cents,
                destination_chapter_account_id=chapter_account.stripe_account_id,
                destination_steward_account_id=steward_account.stripe_account_id,
                buyer_email=_buyer_email(request, data),
                success_url=data.get("success_url")
                or (
                    f"{_frontend_url()}/steward-checkout/{listing_id}/success"
                    "?session_id={CHECKOUT_SESSION_ID}"
                ),
                cancel_url=data.get("cancel_url")
                or f"{_frontend_url()}/steward-listing/{listing_id}",
                idempotency_key=request.headers.get(IDEMPOTENCY_KEY_HEADER) or None,
            )
            session = get_checkout_builder().create_steward_claim_checkout(
                checkout_request
            )
        except BaseApplicationError as e:
            return error_response(e)

        return Response(
            CheckoutSessionSerializer(
                {"session_id": session.id, "checkout_url": session.url}
            ).data,
            status=status.HTTP_201_CREATED,
        )


class StewardFeeQuoteView(APIView):
    """
    Quote the platform fee for a steward claim.

    GET /api/v1/payments/checkout/steward-claims/fee-quote/?shipping_cents=1500&chapter_donation_cents=2000
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="quote_steward_claim_fee",
        summary="Quote steward claim fee",
        parameters=[StewardFeeQuoteQuerySerializer],
        responses={
            200: OpenApiResponse(response=StewardFeeQuoteSerializer),
            400: OpenApiResponse(description="Validation error"),
        },
        tags=["Payments - Checkout"],
    )
    def get(self, request):
        serializer = StewardFeeQuoteQuerySerializer(data=request.query_params)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        shipping_cents = serializer.validated_data["shipping_cents"]
        donation_cents = serializer.validated_data["chapter_donation_cents"]

        try:
            fee_cents = get_fee_resolver().resolve_steward_claim_fee(
                shipping_cents, donation_cents
            )
        except BaseApplicationError as e:
            return error_response(e)

        return Response(
            StewardFeeQuoteSerializer(
                {
                    "shipping_cents": shipping_cents,
                    "chapter_donation_cents": donation_cents,
                    "platform_fee_cents": fee_cents,
                    "total_cents": shipping_cents + donation_cents + fee_cents,
                }
            ).data
        )


# =============================================================================
# Connect Onboarding
# =============================================================================


class ConnectAccountCreateView(APIView):
    """
    Create (or return) the Express account of a marketplace party.

    POST /api/v1/payments/connect/accounts/

    Returns 201 when an account was created, 200 when the party
    already had one.
    """

    permission_classes = [IsAdminUser]

    @extend_schema(
        operation_id="create_connect_account",
        summary="Create Connect account",
        request=ConnectAccountCreateSerializer,
        responses={
            200: OpenApiResponse(
                response=ConnectedAccountSerializer,
                description="Party already had an account",
            ),
            201: OpenApiResponse(response=ConnectedAccountSerializer),
            400: OpenApiResponse(description="Validation error"),
            502: OpenApiResponse(description="Stripe rejected the request"),
        },
        tags=["Payments - Connect"],
    )
    def post(self, request):
        serializer = ConnectAccountCreateSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        data = serializer.validated_data

        try:
            account, created = get_onboarding_service().create_account(
                owner_role=data["owner_role"],
                owner_id=data["owner_id"],
                email=data["email"],
                country=data.get("country"),
            )
        except BaseApplicationError as e:
            return error_response(e)

        return Response(
            ConnectedAccountSerializer(account).data,
            status=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
        )


class OnboardingLinkView(APIView):
    """
    Create a hosted onboarding link for a registered account.

    POST /api/v1/payments/connect/accounts/{stripe_account_id}/onboarding-link/
    """

    permission_classes = [IsAdminUser]

    @extend_schema(
        operation_id="create_onboarding_link",
        summary="Create onboarding link",
        request=OnboardingLinkRequestSerializer,
        responses={
            201: OpenApiResponse(response=OnboardingLinkSerializer),
            404: OpenApiResponse(description="Account not registered"),
            502: OpenApiResponse(description="Stripe rejected the request"),
        },
        tags=["Payments - Connect"],
    )
    def post(self, request, stripe_account_id):
        serializer = OnboardingLinkRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        try:
            link = get_onboarding_service().create_onboarding_link(
                stripe_account_id,
                return_url=serializer.validated_data.get("return_url"),
                refresh_url=serializer.validated_data.get("refresh_url"),
            )
        except BaseApplicationError as e:
            return error_response(e)

        return Response(
            OnboardingLinkSerializer(link).data,
            status=status.HTTP_201_CREATED,
        )


class TransfersCapabilityView(APIView):
    """
    Request the transfers capability on a registered account.

    POST /api/v1/payments/connect/accounts/{stripe_account_id}/transfers-capability/

    For accounts created before transfers were requested at creation.
    """

    permission_classes = [IsAdminUser]

    @extend_schema(
        operation_id="request_transfers_capability",
        summary="Request transfers capability",
        request=None,
        responses={
            200: OpenApiResponse(response=CapabilityStatusSerializer),
            404: OpenApiResponse(description="Account not registered"),
            422: OpenApiResponse(description="Account is invalid"),
        },
        tags=["Payments - Connect"],
    )
    def post(self, request, stripe_account_id):
        try:
            capability = get_onboarding_service().request_transfers_capability(
                stripe_account_id
            )
        except BaseApplicationError as e:
            return error_response(e)

        return Response(
            CapabilityStatusSerializer(
                {"stripe_account_id": stripe_account_id, "transfers": capability.value}
            ).data
        )


class SettlementStatusView(APIView):
    """
    Report whether a registered account can currently receive funds.

    GET /api/v1/payments/connect/accounts/{stripe_account_id}/status/

    Always reads the account from Stripe.
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="get_settlement_status",
        summary="Get settlement readiness",
        responses={
            200: OpenApiResponse(response=SettlementStatusSerializer),
            404: OpenApiResponse(description="Account not registered"),
            422: OpenApiResponse(description="Account is invalid"),
        },
        tags=["Payments - Connect"],
    )
    def get(self, request, stripe_account_id):
        try:
            account = get_onboarding_service().get_settlement_status(stripe_account_id)
        except BaseApplicationError as e:
            return error_response(e)

        return Response(
            SettlementStatusSerializer(
                {
                    "stripe_account_id": account.id,
                    "owner_role": account.owner_role.value if account.owner_role else None,
                    "country": account.country,
                    "charges_enabled": account.charges_enabled,
                    "details_submitted": account.details_submitted,
                    "transfers": account.transfers_status.value,
                    "settlement_ready": account.is_settlement_ready,
                    "capabilities": {
                        name: capability.value
                        for name, capability in account.capabilities.items()
                    },
                }
            ).data
        )
