"""
URL configuration for the payments app.

Routes:
    - POST checkout/products/ - Direct product checkout
    - POST checkout/steward-claims/ - Steward claim checkout
    - GET  checkout/steward-claims/fee-quote/ - Steward claim fee quote
    - POST connect/accounts/ - Create Connect account
    - POST connect/accounts/<id>/onboarding-link/ - Onboarding link
    - POST connect/accounts/<id>/transfers-capability/ - Request transfers
    - GET  connect/accounts/<id>/status/ - Settlement readiness
    - POST webhooks/stripe/ - Stripe webhook endpoint

All routes are prefixed with /api/v1/payments/ when included in the main URLconf.

Usage:
    # In config/urls.py
    api_v1_patterns = [
        path("payments/", include("payments.urls")),
    ]
"""

from django.urls import path

from payments import views
from payments.webhooks.views import stripe_webhook

app_name = "payments"

urlpatterns = [
    # Checkout
    path(
        "checkout/products/",
        views.ProductCheckoutView.as_view(),
        name="product_checkout",
    ),
    path(
        "checkout/steward-claims/",
        views.StewardClaimCheckoutView.as_view(),
        name="steward_claim_checkout",
    ),
    path(
        "checkout/steward-claims/fee-quote/",
        views.StewardFeeQuoteView.as_view(),
        name="steward_fee_quote",
    ),
    # Connect onboarding
    path(
        "connect/accounts/",
        views.ConnectAccountCreateView.as_view(),
        name="connect_account_create",
    ),
    path(
        "connect/accounts/<str:stripe_account_id>/onboarding-link/",
        views.OnboardingLinkView.as_view(),
        name="connect_onboarding_link",
    ),
    path(
        "connect/accounts/<str:stripe_account_id>/transfers-capability/",
        views.TransfersCapabilityView.as_view(),
        name="connect_transfers_capability",
    ),
    path(
        "connect/accounts/<str:stripe_account_id>/status/",
        views.SettlementStatusView.as_view(),
        name="connect_settlement_status",
    ),
    # Webhook endpoints
    path("webhooks/stripe/", stripe_webhook, name="stripe_webhook"),
]
