"""
Payment admin configuration.

Registers the payment domain models with the Django admin. PlatformSetting
is where operators set the steward-claim fee.
"""

from django.contrib import admin

from payments.models import ConnectedAccount, PlatformSetting, WebhookEvent

__all__ = [
    "ConnectedAccountAdmin",
    "PlatformSettingAdmin",
    "WebhookEventAdmin",
]


@admin.register(PlatformSetting)
class PlatformSettingAdmin(admin.ModelAdmin):
    """
    Admin configuration for PlatformSetting.

    Changes take effect on the next fee quote; no restart needed.
    """

    list_display = ["key", "value", "updated_at"]
    search_fields = ["key", "description"]
    readonly_fields = ["created_at", "updated_at"]
    ordering = ["key"]

    fieldsets = (
        (
            None,
            {
                "fields": ("key", "value", "description"),
            },
        ),
        (
            "Timestamps",
            {
                "fields": ("created_at", "updated_at"),
            },
        ),
    )


@admin.register(ConnectedAccount)
class ConnectedAccountAdmin(admin.ModelAdmin):
    """
    Registry of seller, chapter and steward Stripe accounts.

    Rows are created by ConnectOnboardingService. Status columns mirror the
    last account.updated webhook and are not used by checkout.
    """

    list_display = [
        "stripe_account_id",
        "owner_role",
        "owner_id",
        "onboarding_status",
        "payouts_enabled",
        "charges_enabled",
        "created_at",
    ]
    list_filter = ["owner_role", "onboarding_status", "payouts_enabled", "charges_enabled"]
    search_fields = ["id", "stripe_account_id", "owner_id"]
    readonly_fields = [
        "id",
        "stripe_account_id",
        "onboarding_status",
        "payouts_enabled",
        "charges_enabled",
        "created_at",
        "updated_at",
    ]
    ordering = ["-created_at"]

    fieldsets = (
        (
            None,
            {
                "fields": ("id", "owner_role", "owner_id", "stripe_account_id", "country"),
            },
        ),
        (
            "Status",
            {
                "fields": ("onboarding_status", "payouts_enabled", "charges_enabled"),
                "description": "Last reported by Stripe; display only.",
            },
        ),
        (
            "Metadata",
            {
                "fields": ("metadata",),
                "classes": ("collapse",),
            },
        ),
        (
            "Timestamps",
            {
                "fields": ("created_at", "updated_at"),
            },
        ),
    )

    def has_add_permission(self, request) -> bool:
        """Accounts are created through the onboarding service."""
        return False


@admin.register(WebhookEvent)
class WebhookEventAdmin(admin.ModelAdmin):
    """
    Read-only log of Stripe deliveries.

    A failed event is retried by Stripe's redelivery, not from here.
    """

    list_display = [
        "stripe_event_id",
        "event_type",
        "data_object_id",
        "status",
        "attempt_count",
        "processed_at",
        "created_at",
    ]
    list_filter = ["status", "event_type", "created_at"]
    search_fields = ["id", "stripe_event_id", "event_type"]
    readonly_fields = [
        "id",
        "created_at",
        "updated_at",
        "stripe_event_id",
        "event_type",
        "payload",
        "status",
        "processed_at",
        "attempt_count",
        "error_message",
    ]
    date_hierarchy = "created_at"
    ordering = ["-created_at"]

    fieldsets = (
        (
            None,
            {
                "fields": ("id", "stripe_event_id", "event_type", "status"),
            },
        ),
        (
            "Processing",
            {
                "fields": ("processed_at", "attempt_count"),
            },
        ),
        (
            "Error Info",
            {
                "fields": ("error_message",),
                "classes": ("collapse",),
            },
        ),
        (
            "Payload",
            {
                "fields": ("payload",),
                "classes": ("collapse",),
            },
        ),
        (
            "Timestamps",
            {
                "fields": ("created_at", "updated_at"),
            },
        ),
    )

    @admin.display(description="Object")
    def data_object_id(self, obj: WebhookEvent) -> str:
        """Id of the checkout session or account the event is about."""
        return obj.get_object().get("id", "")

    def has_delete_permission(self, request, obj=None) -> bool:
        return False

    def has_add_permission(self, request) -> bool:
        return False
