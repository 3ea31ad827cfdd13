"""
Tests for the platform fee policies.

FeeResolver precedence:
    1. steward_platform_fee_percentage in (0, 1]
    2. steward_platform_fee_flat_cents, a non-negative integer
    3. 5% of the basis

DirectSaleFeePolicy is a fixed 8% and ignores platform settings.
"""

import logging

import pytest

from payments.constants import STEWARD_FEE_FLAT_CENTS_KEY, STEWARD_FEE_PERCENTAGE_KEY
from payments.exceptions import PaymentValidationError
from payments.services import DirectSaleFeePolicy, FeeResolver
from payments.tests.factories import PlatformSettingFactory


class InMemorySettingsStore:
    """Settings store backed by a dict; records every lookup."""

    def __init__(self, values=None):
        self.values = dict(values or {})
        self.lookups = []

    def get_platform_setting(self, key):
        self.lookups.append(key)
        if key not in self.values:
            return None
        return {"key": key, "value": self.values[key]}


def resolver_with(**values):
    store = InMemorySettingsStore(
        {
            {"percentage": STEWARD_FEE_PERCENTAGE_KEY, "flat": STEWARD_FEE_FLAT_CENTS_KEY}[
                name
            ]: value
            for name, value in values.items()
        }
    )
    return FeeResolver(settings_store=store), store


# =============================================================================
# FeeResolver
# =============================================================================


class TestFeeResolverPrecedence:
    """Tests for the percentage → flat → default chain."""

    def test_percentage_wins_over_flat(self):
        """Should use the percentage when both settings are valid."""
        resolver, _ = resolver_with(percentage="0.10", flat="250")

        assert resolver.resolve_platform_fee(3500) == 350

    def test_percentage_short_circuits_flat_lookup(self):
        """Should not read the flat setting once a percentage is usable."""
        resolver, store = resolver_with(percentage="0.10", flat="250")

        resolver.resolve_platform_fee(3500)

        assert store.lookups == [STEWARD_FEE_PERCENTAGE_KEY]

    def test_flat_used_without_percentage(self):
        resolver, _ = resolver_with(flat="250")

        assert resolver.resolve_platform_fee(3500) == 250

    def test_flat_is_independent_of_basis(self):
        resolver, _ = resolver_with(flat="250")

        assert resolver.resolve_platform_fee(0) == 250
        assert resolver.resolve_platform_fee(100000) == 250

    def test_zero_flat_fee_is_allowed(self):
        resolver, _ = resolver_with(flat="0")

        assert resolver.resolve_platform_fee(3500) == 0

    def test_default_five_percent(self):
        """Should charge 5% when neither setting exists."""
        resolver, _ = resolver_with()

        assert resolver.resolve_platform_fee(3500) == 175

    def test_default_rounds_half_up(self):
        resolver, _ = resolver_with()

        assert resolver.resolve_platform_fee(50) == 3  # 2.5

    def test_full_percentage_allowed(self):
        resolver, _ = resolver_with(percentage="1")

        assert resolver.resolve_platform_fee(1234) == 1234

    def test_percentage_rounds_half_up(self):
        resolver, _ = resolver_with(percentage="0.07")

        assert resolver.resolve_platform_fee(1950) == 137  # 136.5


class TestFeeResolverInvalidSettings:
    """Unusable values count as absent and are logged."""

    @pytest.mark.parametrize("raw", ["0", "-0.1", "1.5", "abc", "NaN", "Infinity", ""])
    def test_unusable_percentage_falls_back_to_flat(self, raw):
        resolver, _ = resolver_with(percentage=raw, flat="300")

        assert resolver.resolve_platform_fee(3500) == 300

    @pytest.mark.parametrize("raw", ["-5", "2.50", "abc", "1e3", ""])
    def test_unusable_flat_falls_back_to_default(self, raw):
        resolver, _ = resolver_with(flat=raw)

        assert resolver.resolve_platform_fee(3500) == 175

    def test_null_values_fall_back_to_default(self):
        resolver, _ = resolver_with(percentage=None, flat=None)

        assert resolver.resolve_platform_fee(2000) == 100

    def test_whitespace_is_trimmed(self):
        resolver, _ = resolver_with(percentage=" 0.10 ")

        assert resolver.resolve_platform_fee(1000) == 100

    def test_invalid_percentage_is_logged(self, caplog):
        resolver, _ = resolver_with(percentage="abc")

        with caplog.at_level(logging.WARNING, logger="payments.services.fee_resolver"):
            resolver.resolve_platform_fee(1000)

        assert "Ignoring unusable steward fee percentage" in caplog.text

    def test_invalid_flat_is_logged(self, caplog):
        resolver, _ = resolver_with(flat="-5")

        with caplog.at_level(logging.WARNING, logger="payments.services.fee_resolver"):
            resolver.resolve_platform_fee(1000)

        assert "Ignoring unusable steward flat fee" in caplog.text


class TestFeeResolverValidation:
    @pytest.mark.parametrize("basis", [-1, 10.5, "100", None])
    def test_rejects_invalid_basis(self, basis):
        resolver, _ = resolver_with()

        with pytest.raises(PaymentValidationError):
            resolver.resolve_platform_fee(basis)

    def test_steward_claim_fee_uses_shipping_plus_donation(self):
        """Should use shipping plus chapter donation as the basis."""
        resolver, _ = resolver_with(percentage="0.10")

        assert resolver.resolve_steward_claim_fee(1500, 2000) == 350

    @pytest.mark.parametrize(
        ("values", "expected"),
        [
            ({"percentage": "0.10"}, 300),
            ({}, 150),
        ],
        ids=["ten_percent", "default_five_percent"],
    )
    def test_steward_claim_fee_for_ten_dollar_shipping_twenty_dollar_donation(
        self, values, expected
    ):
        resolver, _ = resolver_with(**values)

        assert resolver.resolve_steward_claim_fee(1000, 2000) == expected

    def test_steward_claim_fee_rejects_negative_component(self):
        resolver, _ = resolver_with()

        with pytest.raises(PaymentValidationError) as exc_info:
            resolver.resolve_steward_claim_fee(-100, 2000)

        assert "shipping_cents" in exc_info.value.details

    def test_settings_read_on_every_call(self):
        """Should apply a changed setting to the next quote."""
        resolver, store = resolver_with(percentage="0.10")
        assert resolver.resolve_platform_fee(1000) == 100

        store.values[STEWARD_FEE_PERCENTAGE_KEY] = "0.20"

        assert resolver.resolve_platform_fee(1000) == 200


@pytest.mark.django_db
class TestFeeResolverWithPlatformSettings:
    """FeeResolver reading PlatformSetting rows by default."""

    def test_reads_percentage_from_database(self):
        PlatformSettingFactory(key=STEWARD_FEE_PERCENTAGE_KEY, value="0.08")

        assert FeeResolver().resolve_platform_fee(2500) == 200

    def test_reads_flat_from_database(self):
        PlatformSettingFactory(key=STEWARD_FEE_FLAT_CENTS_KEY, value="199")

        assert FeeResolver().resolve_platform_fee(2500) == 199

    def test_default_with_empty_table(self):
        assert FeeResolver().resolve_platform_fee(2500) == 125


# =============================================================================
# DirectSaleFeePolicy
# =============================================================================


class TestDirectSaleFeePolicy:
    @pytest.mark.parametrize(
        "price,fee",
        [
            (10000, 800),
            (4500, 360),
            (1999, 160),
            (0, 0),
            (1, 0),
            (7, 1),  # 0.56
        ],
    )
    def test_eight_percent_half_up(self, price, fee):
        assert DirectSaleFeePolicy().application_fee(price) == fee

    @pytest.mark.django_db
    def test_ignores_platform_settings(self):
        """Should not be affected by the steward fee settings."""
        PlatformSettingFactory(key=STEWARD_FEE_PERCENTAGE_KEY, value="0.50")
        PlatformSettingFactory(key=STEWARD_FEE_FLAT_CENTS_KEY, value="999")

        assert DirectSaleFeePolicy().application_fee(10000) == 800

    def test_rejects_negative_price(self):
        with pytest.raises(ValueError):
            DirectSaleFeePolicy().application_fee(-1)
