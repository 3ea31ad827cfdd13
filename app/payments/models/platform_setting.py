"""
PlatformSetting model: operator-editable key/value configuration.

The steward-claim fee is configured here rather than in Django settings so
operators can change it from the admin without a deploy.

Usage:
    from payments.models import PlatformSetting

    PlatformSetting.objects.get_platform_setting("steward_platform_fee_percentage")
    # {"key": "steward_platform_fee_percentage", "value": "0.07"} or None
"""

from __future__ import annotations

from django.db import models

from core.models import BaseModel


class PlatformSettingManager(models.Manager):
    """Manager exposing the settings-store lookup used by FeeResolver."""

    def get_platform_setting(self, key: str) -> dict[str, str | None] | None:
        """
        Return {"key", "value"} for a setting, or None when the row is absent.

        The value is returned as stored; callers decide whether it parses.
        """
        return self.filter(key=key).values("key", "value").first()


class PlatformSetting(BaseModel):
    """
    A single named platform setting.

    Fields:
        key: Unique setting name (e.g. steward_platform_fee_percentage)
        value: Raw string value; NULL means "unset"
        description: Free text shown in the admin
    """

    key = models.CharField(
        max_length=100,
        unique=True,
        help_text="Setting name",
    )

    value = models.TextField(
        null=True,
        blank=True,
        help_text="Raw value; parsed by the code that reads the setting",
    )

    description = models.TextField(
        blank=True,
        default="",
        help_text="What this setting controls",
    )

    objects = PlatformSettingManager()

    class Meta:
        ordering = ["key"]
        verbose_name = "Platform Setting"
        verbose_name_plural = "Platform Settings"

    def __str__(self) -> str:
        return f"{self.key}={self.value!r}"
