"""
Webhook endpoint view for Stripe.

The view:
1. Verifies the webhook signature (WebhookVerifier)
2. Creates/retrieves the WebhookEvent record (duplicate suppression)
3. Dispatches the event to its handler in-process
4. Returns 200 once handled, 500 if the handler failed so Stripe redelivers

Usage:
    # In urls.py
    from payments.webhooks.views import stripe_webhook

    urlpatterns = [
        path("webhooks/stripe/", stripe_webhook, name="stripe_webhook"),
    ]
"""

from __future__ import annotations

import logging

from django.conf import settings
from django.db import transaction
from django.http import HttpRequest, HttpResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_POST

from payments.exceptions import SignatureInvalidError
from payments.models import WebhookEvent
from payments.webhooks.handlers import dispatch_webhook
from payments.webhooks.verifier import WebhookVerifier


logger = logging.getLogger(__name__)


def get_webhook_verifier() -> WebhookVerifier:
    return WebhookVerifier(tolerance=settings.STRIPE_WEBHOOK_TOLERANCE_SECONDS)


@csrf_exempt
@require_POST
def stripe_webhook(request: HttpRequest) -> HttpResponse:
    """
    Receive, authenticate and handle a Stripe webhook event.

    Security:
    - Signature verification prevents spoofed webhooks
    - CSRF exemption required for external webhooks
    - Only POST requests accepted

    Idempotency:
    - WebhookEvent.stripe_event_id is unique
    - Already processed events return 200 without reprocessing

    Returns:
        HttpResponse with status:
        - 200: Event handled (new, duplicate, or of an ignored type)
        - 400: Missing or invalid signature
        - 500: Handler failed; Stripe will redeliver
    """
    payload = request.body
    signature = request.headers.get("Stripe-Signature", "")

    if not signature:
        logger.warning("Webhook received without Stripe-Signature header")
        return HttpResponse("Missing signature", status=400)

    # Step 1: Verify signature
    try:
        event = get_webhook_verifier().verify(
            payload, signature, settings.STRIPE_WEBHOOK_SECRET
        )
    except SignatureInvalidError as e:
        logger.warning(
            "Webhook signature verification failed",
            extra={"error": str(e)},
        )
        return HttpResponse("Invalid signature", status=400)

    logger.info(
        f"Received Stripe webhook: {event.type}",
        extra={"stripe_event_id": event.id, "event_type": event.type},
    )

    # Step 2: Create/get WebhookEvent
    webhook_event, created = WebhookEvent.objects.get_or_create(
        stripe_event_id=event.id,
        defaults={"event_type": event.type, "payload": event.payload},
    )

    if not created and webhook_event.is_processed:
        logger.info(
            "Webhook already processed, returning success",
            extra={"stripe_event_id": event.id},
        )
        return HttpResponse("Already processed", status=200)

    # Redelivery carries the authoritative event body
    if not created:
        webhook_event.event_type = event.type
        webhook_event.payload = event.payload

    # Step 3: Handle
    webhook_event.mark_processing()
    webhook_event.save(
        update_fields=["event_type", "payload", "status", "attempt_count", "updated_at"]
    )

    try:
        with transaction.atomic():
            result = dispatch_webhook(webhook_event)
    except Exception as e:
        logger.error(
            f"Webhook handler raised: {type(e).__name__}",
            extra={"stripe_event_id": event.id},
            exc_info=True,
        )
        webhook_event.mark_failed(str(e))
        webhook_event.save(update_fields=["status", "error_message", "updated_at"])
        return HttpResponse("Handler error", status=500)

    if not result.success:
        logger.warning(
            "Webhook handler reported failure",
            extra={"stripe_event_id": event.id, "error_code": result.error_code},
        )
        webhook_event.mark_failed(result.error or "Handler failed")
        webhook_event.save(update_fields=["status", "error_message", "updated_at"])
        return HttpResponse("Handler failed", status=500)

    webhook_event.mark_processed()
    webhook_event.save(
        update_fields=["status", "processed_at", "error_message", "updated_at"]
    )
    return HttpResponse("Processed", status=200)
