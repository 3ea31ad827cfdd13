"""
Webhook signature verification.

Stripe signs each delivery with the endpoint's secret:
    Stripe-Signature: t=<unix ts>,v1=<hex HMAC-SHA256 of "<t>.<raw body>">

The check itself is the Stripe library's; this module adds the domain
error, the JSON parsing, and nothing else. It performs no I/O.

Usage:
    from payments.webhooks.verifier import WebhookVerifier

    event = WebhookVerifier().verify(request.body, signature, secret)
    event.type   # "checkout.session.completed"
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

import stripe

from payments.exceptions import SignatureInvalidError

DEFAULT_TOLERANCE_SECONDS = 300


@dataclass(frozen=True)
class WebhookEvent:
    """An authenticated Stripe event (not the WebhookEvent model)."""

    id: str
    type: str
    payload: dict[str, Any] = field(default_factory=dict)


class WebhookVerifier:
    """
    Authenticates raw webhook bodies.

    Attributes:
        tolerance: Maximum signature age in seconds
    """

    def __init__(self, tolerance: int = DEFAULT_TOLERANCE_SECONDS):
        self.tolerance = tolerance

    def verify(
        self,
        raw_payload: bytes | str,
        signature_header: str | None,
        endpoint_secret: str | None,
    ) -> WebhookEvent:
        """
        Verify a delivery and return the parsed event.

        The body is parsed only after the signature matches.

        Raises:
            SignatureInvalidError: Missing header or secret, bad or stale
                signature, or a verified body that is not an event
        """
        if not signature_header:
            raise SignatureInvalidError("Missing Stripe-Signature header")
        if not endpoint_secret:
            raise SignatureInvalidError(
                "Webhook endpoint secret is not configured",
                error_code="WEBHOOK_SECRET_MISSING",
            )

        try:
            payload_text = (
                raw_payload.decode("utf-8")
                if isinstance(raw_payload, (bytes, bytearray))
                else raw_payload
            )
        except UnicodeDecodeError as e:
            raise SignatureInvalidError("Webhook body is not UTF-8") from e

        try:
            stripe.WebhookSignature.verify_header(
                payload_text,
                signature_header,
                endpoint_secret,
                self.tolerance,
            )
        except stripe.SignatureVerificationError as e:
            raise SignatureInvalidError(
                "Invalid webhook signature",
                details={"reason": str(e.user_message or e)},
            ) from e

        try:
            data = json.loads(payload_text)
        except ValueError as e:
            raise SignatureInvalidError("Webhook body is not valid JSON") from e

        if not isinstance(data, dict) or not data.get("id") or not data.get("type"):
            raise SignatureInvalidError("Webhook body is not a Stripe event")

        return WebhookEvent(id=data["id"], type=data["type"], payload=data)
