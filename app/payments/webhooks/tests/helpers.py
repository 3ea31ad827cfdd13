"""
Signing helpers for webhook tests.

Signatures are produced the way Stripe produces them:
    Stripe-Signature: t=<timestamp>,v1=<hex HMAC-SHA256(secret, "<t>.<body>")>
"""

import hashlib
import hmac
import json
import time

WEBHOOK_SECRET = "whsec_test_secret"


def sign(payload: str, secret: str = WEBHOOK_SECRET, timestamp: int | None = None) -> str:
    """Build a Stripe-Signature header for payload."""
    timestamp = int(time.time()) if timestamp is None else timestamp
    signed = f"{timestamp}.{payload}".encode("utf-8")
    digest = hmac.new(secret.encode("utf-8"), signed, hashlib.sha256).hexdigest()
    return f"t={timestamp},v1={digest}"


def dumps(event: dict) -> str:
    return json.dumps(event, separators=(",", ":"))
