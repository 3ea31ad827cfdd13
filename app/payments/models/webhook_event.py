"""
WebhookEvent model for Stripe webhook event tracking.

Stores every verified webhook event so redelivered events are not handed
to fulfillment twice. Stripe delivers at least once; the unique
stripe_event_id is what makes handling effectively once.

Usage:
    from payments.models import WebhookEvent

    event, created = WebhookEvent.objects.get_or_create(
        stripe_event_id="evt_1234567890",
        defaults={"event_type": "checkout.session.completed", "payload": data},
    )
    if not created and event.is_processed:
        return HttpResponse(status=200)
"""

from __future__ import annotations

from django.db import models
from django.utils import timezone

from core.models import BaseModel
from core.model_mixins import UUIDPrimaryKeyMixin

from payments.constants import WebhookEventStatus


class WebhookEvent(UUIDPrimaryKeyMixin, BaseModel):
    """
    A Stripe delivery that passed signature verification.

    Lifecycle (driven by payments.webhooks.views.stripe_webhook):
        pending -> processing -> processed
        pending -> processing -> failed -> processing on redelivery

    A processed row short-circuits later deliveries of the same event id.
    The mark_* methods only set fields; the view saves.
    """

    stripe_event_id = models.CharField(
        max_length=255,
        unique=True,
        db_index=True,
        help_text="Stripe Event ID (evt_xxx)",
    )

    event_type = models.CharField(
        max_length=100,
        db_index=True,
        help_text="Stripe event type (e.g., 'checkout.session.completed')",
    )

    payload = models.JSONField(
        help_text="Verified event body as sent by Stripe",
    )

    status = models.CharField(
        max_length=20,
        choices=WebhookEventStatus.choices,
        default=WebhookEventStatus.PENDING,
        db_index=True,
        help_text="Where this delivery is in handling",
    )

    processed_at = models.DateTimeField(
        null=True,
        blank=True,
        help_text="Set when a handler finished without failure",
    )

    error_message = models.TextField(
        null=True,
        blank=True,
        help_text="Last handler failure, cleared on success",
    )

    attempt_count = models.PositiveSmallIntegerField(
        default=0,
        help_text="Deliveries that reached a handler",
    )

    class Meta:
        ordering = ["-created_at"]
        verbose_name = "Webhook Event"
        verbose_name_plural = "Webhook Events"
        indexes = [
            models.Index(
                fields=["status", "created_at"],
                name="payments_we_status_5c1e2b_idx",
            ),
            models.Index(
                fields=["event_type", "created_at"],
                name="payments_we_event_t_8a0f4d_idx",
            ),
        ]

    def __str__(self) -> str:
        return f"WebhookEvent({self.stripe_event_id}, {self.event_type})"

    @property
    def is_processed(self) -> bool:
        return self.status == WebhookEventStatus.PROCESSED

    def mark_processing(self) -> None:
        self.status = WebhookEventStatus.PROCESSING
        self.attempt_count += 1

    def mark_processed(self) -> None:
        self.status = WebhookEventStatus.PROCESSED
        self.processed_at = timezone.now()
        self.error_message = None

    def mark_failed(self, error_message: str) -> None:
        self.status = WebhookEventStatus.FAILED
        self.error_message = error_message

    def get_object(self) -> dict:
        """Return payload.data.object, or an empty dict when absent."""
        data = self.payload.get("data") if isinstance(self.payload, dict) else None
        obj = data.get("object") if isinstance(data, dict) else None
        return obj if isinstance(obj, dict) else {}
