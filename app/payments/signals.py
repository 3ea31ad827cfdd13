"""
Django signals emitted by the payments app.

Order fulfillment subscribes to these; this service never marks orders
paid or ships anything itself.

Signals:
    product_checkout_completed:
        Sent when a direct-sale checkout session completes.
        kwargs: session_id, product_id, chapter_id, amount_total,
                customer_email, payment_intent_id
    steward_claim_checkout_completed:
        Sent when a steward-claim checkout session completes.
        kwargs: session_id, listing_id, chapter_account_id,
                steward_account_id, chapter_donation_cents, shipping_cents,
                amount_total, customer_email, payment_intent_id

Usage:
    from django.dispatch import receiver
    from payments.signals import steward_claim_checkout_completed

    @receiver(steward_claim_checkout_completed)
    def mark_claim_paid(sender, session_id, listing_id, **kwargs):
        StewardClaim.objects.filter(stripe_session_id=session_id).update(status="PAID")
"""

from django.dispatch import Signal

product_checkout_completed = Signal()
steward_claim_checkout_completed = Signal()
