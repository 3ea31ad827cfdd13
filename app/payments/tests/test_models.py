"""
Tests for payment domain models.

Covers the PlatformSetting settings-store lookup, ConnectedAccount owner
lookups and uniqueness, and WebhookEvent status helpers.
"""

import pytest
from django.db import IntegrityError

from payments.constants import OwnerRole, WebhookEventStatus
from payments.models import ConnectedAccount, PlatformSetting
from payments.tests.factories import (
    ConnectedAccountFactory,
    PlatformSettingFactory,
    WebhookEventFactory,
)


# =============================================================================
# PlatformSetting
# =============================================================================


@pytest.mark.django_db
class TestPlatformSettingManager:
    """Tests for PlatformSettingManager.get_platform_setting."""

    def test_returns_key_and_value(self):
        """Should return a mapping with the stored key and raw value."""
        PlatformSettingFactory(key="steward_platform_fee_percentage", value="0.07")

        row = PlatformSetting.objects.get_platform_setting(
            "steward_platform_fee_percentage"
        )

        assert row == {"key": "steward_platform_fee_percentage", "value": "0.07"}

    def test_returns_none_when_absent(self):
        """Should return None for a key that has no row."""
        assert PlatformSetting.objects.get_platform_setting("missing") is None

    def test_null_value_is_returned_as_none(self):
        """Should return the row with value None when the value is unset."""
        PlatformSettingFactory(key="steward_platform_fee_flat_cents", value=None)

        row = PlatformSetting.objects.get_platform_setting(
            "steward_platform_fee_flat_cents"
        )

        assert row["value"] is None

    def test_str(self):
        setting = PlatformSettingFactory(key="k", value="v")
        assert str(setting) == "k='v'"


# =============================================================================
# ConnectedAccount
# =============================================================================


@pytest.mark.django_db
class TestConnectedAccount:
    """Tests for ConnectedAccount."""

    def test_for_owner_finds_account(self):
        """Should find the account registered for a role and owner id."""
        account = ConnectedAccountFactory(owner_role=OwnerRole.CHAPTER, owner_id="42")

        assert ConnectedAccount.objects.for_owner(OwnerRole.CHAPTER, "42") == account

    def test_for_owner_accepts_int_owner_id(self):
        """Should compare owner ids as strings."""
        account = ConnectedAccountFactory(owner_role=OwnerRole.STEWARD, owner_id="7")

        assert ConnectedAccount.objects.for_owner(OwnerRole.STEWARD, 7) == account

    def test_for_owner_respects_role(self):
        """Should not return another role's account with the same owner id."""
        ConnectedAccountFactory(owner_role=OwnerRole.SELLER, owner_id="42")

        assert ConnectedAccount.objects.for_owner(OwnerRole.CHAPTER, "42") is None

    def test_one_account_per_owner(self):
        """Should reject a second account for the same role and owner id."""
        ConnectedAccountFactory(owner_role=OwnerRole.SELLER, owner_id="8")

        with pytest.raises(IntegrityError):
            ConnectedAccountFactory(owner_role=OwnerRole.SELLER, owner_id="8")

    def test_stripe_account_id_unique(self):
        """Should reject a Stripe account registered twice."""
        ConnectedAccountFactory(stripe_account_id="acct_dup")

        with pytest.raises(IntegrityError):
            ConnectedAccountFactory(stripe_account_id="acct_dup")

    def test_str_includes_owner_and_account(self):
        account = ConnectedAccountFactory(
            owner_role=OwnerRole.CHAPTER, owner_id="42", stripe_account_id="acct_1"
        )

        assert "chapter:42" in str(account)
        assert "acct_1" in str(account)


# =============================================================================
# WebhookEvent
# =============================================================================


@pytest.mark.django_db
class TestWebhookEvent:
    """Tests for WebhookEvent status helpers."""

    def test_mark_processing_counts_attempts(self):
        """Should move to PROCESSING and count the attempt."""
        event = WebhookEventFactory()

        event.mark_processing()
        event.mark_processing()

        assert event.status == WebhookEventStatus.PROCESSING
        assert event.attempt_count == 2

    def test_mark_processed_clears_error(self):
        """Should record processed_at and clear a previous error."""
        event = WebhookEventFactory(
            status=WebhookEventStatus.FAILED, error_message="boom"
        )

        event.mark_processed()

        assert event.is_processed
        assert event.processed_at is not None
        assert event.error_message is None

    def test_mark_failed_records_error(self):
        event = WebhookEventFactory()

        event.mark_failed("handler exploded")

        assert event.status == WebhookEventStatus.FAILED
        assert event.error_message == "handler exploded"
        assert not event.is_processed

    def test_get_object_returns_data_object(self):
        """Should return payload.data.object."""
        event = WebhookEventFactory(
            payload={"id": "evt_1", "data": {"object": {"id": "cs_1"}}}
        )

        assert event.get_object() == {"id": "cs_1"}

    @pytest.mark.parametrize(
        "payload",
        [
            {},
            {"data": None},
            {"data": {"object": "not-a-dict"}},
        ],
    )
    def test_get_object_tolerates_malformed_payload(self, payload):
        """Should return an empty dict when the envelope is malformed."""
        event = WebhookEventFactory(payload=payload)

        assert event.get_object() == {}
