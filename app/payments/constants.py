"""
Choices and fixed values for the payments domain.

Usage:
    from payments.constants import CapabilityStatus, OwnerRole

    ConnectedAccount.objects.for_owner(OwnerRole.CHAPTER, chapter_id)
"""

from __future__ import annotations

from decimal import Decimal

from django.db import models


class OwnerRole(models.TextChoices):
    """
    Marketplace party that owns a Stripe Connect account.

    - SELLER: receives direct product sales
    - CHAPTER: receives steward-claim donations
    - STEWARD: hands off a steward listing
    """

    SELLER = "seller", "Seller"
    CHAPTER = "chapter", "Chapter"
    STEWARD = "steward", "Steward"


class CapabilityStatus(models.TextChoices):
    """
    Status of a Connect account capability as seen by this service.

    Stripe reports active, pending or inactive. Anything that is neither
    active nor pending, including a capability that was never requested,
    is UNREQUESTED here.
    """

    UNREQUESTED = "unrequested", "Unrequested"
    PENDING = "pending", "Pending"
    ACTIVE = "active", "Active"


class OnboardingStatus(models.TextChoices):
    """
    Snapshot of Stripe Connect onboarding for a ConnectedAccount.

    Updated from account.updated webhooks for display in the admin.
    Checkout never relies on it; settlement readiness is always read
    from Stripe.
    """

    NOT_STARTED = "not_started", "Not Started"
    IN_PROGRESS = "in_progress", "In Progress"
    COMPLETE = "complete", "Complete"


class WebhookEventStatus(models.TextChoices):
    """
    Processing status for WebhookEvent.

    State Flow:
        PENDING → PROCESSING → PROCESSED
        PENDING → PROCESSING → FAILED (reprocessed on redelivery)
    """

    PENDING = "pending", "Pending"
    PROCESSING = "processing", "Processing"
    PROCESSED = "processed", "Processed"
    FAILED = "failed", "Failed"


# Value of the "type" metadata key on steward-claim checkout sessions
STEWARD_CLAIM_CHECKOUT_TYPE = "steward_claim"


# =============================================================================
# Platform Setting Keys
# =============================================================================

STEWARD_FEE_PERCENTAGE_KEY = "steward_platform_fee_percentage"
STEWARD_FEE_FLAT_CENTS_KEY = "steward_platform_fee_flat_cents"

# =============================================================================
# Fee Rates
# =============================================================================

# Platform cut on direct product sales; not configurable
DIRECT_SALE_FEE_RATE = Decimal("0.08")

# Steward-claim fee when neither platform setting is usable
DEFAULT_STEWARD_FEE_RATE = Decimal("0.05")

# =============================================================================
# Checkout Line Item Names
# =============================================================================

SHIPPING_LINE_ITEM = "Shipping"
PLATFORM_FEE_LINE_ITEM = "Platform Fee"
CHAPTER_DONATION_LINE_ITEM = "Chapter Donation"
