"""
Payment domain models.

This module contains all payment-related models:
- PlatformSetting: Operator-editable key/value settings (steward fee)
- ConnectedAccount: Stripe Connect accounts owned by sellers, chapters, stewards
- WebhookEvent: Stripe webhook event tracking for duplicate suppression
"""

from payments.models.connected_account import ConnectedAccount
from payments.models.platform_setting import PlatformSetting
from payments.models.webhook_event import WebhookEvent

__all__ = [
    "ConnectedAccount",
    "PlatformSetting",
    "WebhookEvent",
]
