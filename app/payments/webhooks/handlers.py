"""
Webhook event handlers for Stripe events.

This module provides a handler registry and implementations for the
Stripe events this service reacts to:

- checkout.session.completed: hand the paid session to fulfillment via
  Django signals (payments.signals)
- account.updated: refresh the display snapshot on ConnectedAccount

Unregistered event types are acknowledged and ignored.

Usage:
    from payments.webhooks.handlers import dispatch_webhook, register_handler

    @register_handler("checkout.session.expired")
    def handle_expired(webhook_event: WebhookEvent) -> ServiceResult:
        ...

    result = dispatch_webhook(webhook_event)
"""

from __future__ import annotations

import logging
from typing import Callable

from core.services import ServiceResult

from payments.constants import OnboardingStatus, STEWARD_CLAIM_CHECKOUT_TYPE
from payments.models import ConnectedAccount, WebhookEvent
from payments.signals import product_checkout_completed, steward_claim_checkout_completed


logger = logging.getLogger(__name__)


# =============================================================================
# Handler Registry
# =============================================================================


# Maps event type strings to handler functions
WEBHOOK_HANDLERS: dict[str, Callable[[WebhookEvent], ServiceResult]] = {}


def register_handler(event_type: str) -> Callable:
    """
    Decorator to register a webhook event handler.

    Args:
        event_type: The Stripe event type (e.g., "checkout.session.completed")
    """

    def decorator(func: Callable[[WebhookEvent], ServiceResult]) -> Callable:
        WEBHOOK_HANDLERS[event_type] = func
        logger.debug(f"Registered webhook handler for {event_type}")
        return func

    return decorator


def dispatch_webhook(webhook_event: WebhookEvent) -> ServiceResult:
    """
    Dispatch a webhook event to the appropriate handler.

    Returns success when no handler is registered so Stripe stops
    redelivering events this service does not care about.
    """
    handler = WEBHOOK_HANDLERS.get(webhook_event.event_type)

    if not handler:
        logger.info(
            f"No handler registered for event type: {webhook_event.event_type}",
            extra={"stripe_event_id": webhook_event.stripe_event_id},
        )
        return ServiceResult.ok(None)

    logger.info(
        f"Dispatching {webhook_event.event_type} to handler",
        extra={"stripe_event_id": webhook_event.stripe_event_id},
    )

    return handler(webhook_event)


# =============================================================================
# Checkout Handlers
# =============================================================================


@register_handler("checkout.session.completed")
def handle_checkout_session_completed(webhook_event: WebhookEvent) -> ServiceResult:
    """
    Announce a completed checkout to fulfillment.

    Steward claims are recognised by metadata type=steward_claim; direct
    sales by the presence of product_id. Sessions carrying neither were
    not created by this service and are ignored.
    """
    session = webhook_event.get_object()
    session_id = session.get("id")

    if not session_id:
        logger.error(
            "checkout.session.completed: Could not extract session id",
            extra={"stripe_event_id": webhook_event.stripe_event_id},
        )
        return ServiceResult.failure(
            "Could not extract checkout session id from webhook",
            error_code="INVALID_WEBHOOK_PAYLOAD",
        )

    metadata = session.get("metadata") or {}
    common = {
        "session_id": session_id,
        "amount_total": session.get("amount_total"),
        "customer_email": session.get("customer_email")
        or (session.get("customer_details") or {}).get("email"),
        "payment_intent_id": session.get("payment_intent"),
    }

    if metadata.get("type") == STEWARD_CLAIM_CHECKOUT_TYPE:
        steward_claim_checkout_completed.send(
            sender=WebhookEvent,
            listing_id=metadata.get("listing_id"),
            chapter_account_id=metadata.get("chapter_account_id"),
            steward_account_id=metadata.get("steward_account_id"),
            chapter_donation_cents=_as_cents(metadata.get("chapter_donation_cents")),
            shipping_cents=_as_cents(metadata.get("shipping_cents")),
            **common,
        )
        logger.info(
            "Steward claim checkout completed",
            extra={
                "stripe_event_id": webhook_event.stripe_event_id,
                "checkout_session_id": session_id,
                "listing_id": metadata.get("listing_id"),
            },
        )
        return ServiceResult.ok(session_id)

    if metadata.get("product_id"):
        product_checkout_completed.send(
            sender=WebhookEvent,
            product_id=metadata.get("product_id"),
            chapter_id=metadata.get("chapter_id") or None,
            **common,
        )
        logger.info(
            "Product checkout completed",
            extra={
                "stripe_event_id": webhook_event.stripe_event_id,
                "checkout_session_id": session_id,
                "product_id": metadata.get("product_id"),
            },
        )
        return ServiceResult.ok(session_id)

    logger.info(
        "Ignoring checkout session without marketplace metadata",
        extra={
            "stripe_event_id": webhook_event.stripe_event_id,
            "checkout_session_id": session_id,
        },
    )
    return ServiceResult.ok(None)


# =============================================================================
# Connect Account Handlers
# =============================================================================


@register_handler("account.updated")
def handle_account_updated(webhook_event: WebhookEvent) -> ServiceResult:
    """
    Refresh the onboarding snapshot of a registered account.

    Accounts not registered here (e.g. created by hand in the dashboard)
    are ignored.
    """
    account_data = webhook_event.get_object()
    stripe_account_id = account_data.get("id")

    connected_account = ConnectedAccount.objects.filter(
        stripe_account_id=stripe_account_id
    ).first()
    if not connected_account:
        logger.info(
            "account.updated for unregistered account",
            extra={
                "stripe_event_id": webhook_event.stripe_event_id,
                "account_id": stripe_account_id,
            },
        )
        return ServiceResult.ok(None)

    charges_enabled = bool(account_data.get("charges_enabled"))
    payouts_enabled = bool(account_data.get("payouts_enabled"))

    if charges_enabled and payouts_enabled:
        onboarding_status = OnboardingStatus.COMPLETE
    elif account_data.get("details_submitted"):
        onboarding_status = OnboardingStatus.IN_PROGRESS
    else:
        onboarding_status = connected_account.onboarding_status

    connected_account.charges_enabled = charges_enabled
    connected_account.payouts_enabled = payouts_enabled
    connected_account.onboarding_status = onboarding_status
    connected_account.save(
        update_fields=[
            "charges_enabled",
            "payouts_enabled",
            "onboarding_status",
            "updated_at",
        ]
    )

    logger.info(
        "Updated connected account snapshot",
        extra={
            "stripe_event_id": webhook_event.stripe_event_id,
            "account_id": stripe_account_id,
            "onboarding_status": onboarding_status,
        },
    )
    return ServiceResult.ok(connected_account)


def _as_cents(value: str | None) -> int | None:
    if value is None or not str(value).isdigit():
        return None
    return int(value)
