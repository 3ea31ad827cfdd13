"""
Payments app configuration.

This app provides the marketplace payment flows:
- Stripe Connect onboarding for sellers, chapters and stewards
- Checkout sessions for direct sales and steward claims
- Webhook handling
"""

from django.apps import AppConfig
from django.conf import settings


class PaymentsConfig(AppConfig):
    """Configuration for the payments application."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "payments"
    verbose_name = "Payments"

    def ready(self):
        """
        Validate the Stripe secret key and register webhook handlers.

        An unusable key fails startup with ImproperlyConfigured instead of
        failing the first checkout. Set STRIPE_VALIDATE_SECRET_KEY=False
        for tooling runs that have no key (collectstatic, schema export).
        """
        from payments.adapters import validate_secret_key

        if getattr(settings, "STRIPE_VALIDATE_SECRET_KEY", True):
            validate_secret_key(settings.STRIPE_SECRET_KEY)

        # Registers handlers via @register_handler
        import payments.webhooks.handlers  # noqa: F401
