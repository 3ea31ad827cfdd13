"""
Tests for payments admin configuration.
"""

import pytest
from django.contrib import admin

from payments.admin import ConnectedAccountAdmin, WebhookEventAdmin
from payments.models import ConnectedAccount, WebhookEvent
from payments.tests.factories import WebhookEventFactory


@pytest.fixture
def webhook_admin():
    return WebhookEventAdmin(WebhookEvent, admin.site)


def test_models_registered():
    assert isinstance(admin.site._registry[ConnectedAccount], ConnectedAccountAdmin)
    assert isinstance(admin.site._registry[WebhookEvent], WebhookEventAdmin)


@pytest.mark.django_db
class TestWebhookEventAdmin:
    def test_data_object_id(self, webhook_admin):
        event = WebhookEventFactory(
            payload={"data": {"object": {"id": "cs_test_1", "object": "checkout.session"}}}
        )

        assert webhook_admin.data_object_id(event) == "cs_test_1"

    def test_data_object_id_missing(self, webhook_admin):
        event = WebhookEventFactory(payload={})

        assert webhook_admin.data_object_id(event) == ""

    def test_events_cannot_be_added_or_deleted(self, webhook_admin, rf):
        request = rf.get("/admin/")

        assert webhook_admin.has_add_permission(request) is False
        assert webhook_admin.has_delete_permission(request) is False
