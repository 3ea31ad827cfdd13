"""
Tests for startup configuration checks.

PaymentsConfig.ready() refuses to start with an unusable Stripe key.
"""

import pytest
from django.apps import apps
from django.core.exceptions import ImproperlyConfigured

from payments.adapters import validate_secret_key
from payments.webhooks.handlers import WEBHOOK_HANDLERS


VALID_KEY = "sk_test_" + "a" * 32


class TestValidateSecretKey:
    """Tests for validate_secret_key."""

    @pytest.mark.parametrize(
        "key",
        [
            VALID_KEY,
            "sk_live_" + "b" * 32,
            "rk_test_" + "c" * 32,
            "rk_live_" + "d" * 32,
        ],
    )
    def test_accepts_secret_and_restricted_keys(self, key):
        validate_secret_key(key)

    @pytest.mark.parametrize("key", [None, ""])
    def test_rejects_missing_key(self, key):
        with pytest.raises(ImproperlyConfigured, match="not set"):
            validate_secret_key(key)

    def test_rejects_publishable_key(self):
        """Should name the publishable-key mistake explicitly."""
        with pytest.raises(ImproperlyConfigured, match="publishable key"):
            validate_secret_key("pk_test_" + "a" * 32)

    def test_rejects_unknown_prefix(self):
        with pytest.raises(ImproperlyConfigured, match="must start with"):
            validate_secret_key("whsec_" + "a" * 32)

    def test_rejects_short_key(self):
        with pytest.raises(ImproperlyConfigured, match="too short"):
            validate_secret_key("sk_test_abc")

    def test_minimum_length_is_inclusive(self):
        validate_secret_key("sk_test_" + "x" * 24)


class TestPaymentsConfigReady:
    """Tests for PaymentsConfig.ready()."""

    def test_rejects_publishable_key_at_startup(self, settings):
        """Should raise ImproperlyConfigured when the key is a publishable key."""
        settings.STRIPE_SECRET_KEY = "pk_live_" + "a" * 32
        settings.STRIPE_VALIDATE_SECRET_KEY = True

        with pytest.raises(ImproperlyConfigured):
            apps.get_app_config("payments").ready()

    def test_validation_can_be_disabled(self, settings):
        """Should start without a key when validation is switched off."""
        settings.STRIPE_SECRET_KEY = ""
        settings.STRIPE_VALIDATE_SECRET_KEY = False

        apps.get_app_config("payments").ready()

    def test_registers_webhook_handlers(self):
        assert "checkout.session.completed" in WEBHOOK_HANDLERS
        assert "account.updated" in WEBHOOK_HANDLERS
