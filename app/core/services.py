"""
Service layer building blocks.

ServiceResult is returned where the caller branches on an expected outcome;
webhook handlers use it so the webhook view can record a failure and answer
500 without an exception crossing the transaction. Everything else raises
from core.exceptions.

Usage:
    from core.services import BaseService, ServiceResult

    class OnboardingService(BaseService):
        def register(self, owner_id: str) -> ConnectedAccount:
            with self.atomic():
                account = ConnectedAccount.objects.create(...)
            self.get_logger().info("Registered account", extra={"owner_id": owner_id})
            return account
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING, Generic, TypeVar

from django.db import transaction

if TYPE_CHECKING:
    from collections.abc import Generator


T = TypeVar("T")


@dataclass
class ServiceResult(Generic[T]):
    """
    Outcome of an operation that can fail without raising.

    Attributes:
        success: True when the operation completed
        data: Payload on success, e.g. the checkout session id a handler acted on
        error: Message stored on the WebhookEvent when success is False
        error_code: Stable code for logs and tests

    Usage:
        result = dispatch_webhook(event)
        if not result:
            event.mark_failed(result.error)
    """

    success: bool
    data: T | None = None
    error: str | None = None
    error_code: str | None = None

    @classmethod
    def ok(cls, data: T | None = None) -> ServiceResult[T]:
        return cls(success=True, data=data)

    @classmethod
    def failure(cls, error: str, error_code: str | None = None) -> ServiceResult[T]:
        return cls(success=False, error=error, error_code=error_code)

    def __bool__(self) -> bool:
        return self.success


class BaseService:
    """
    Base for classes in payments.services.

    Subclasses take their Stripe collaborators in __init__ so tests can
    inject mocks.
    """

    @classmethod
    def get_logger(cls) -> logging.Logger:
        """Logger named module.ClassName, under the payments logger tree."""
        return logging.getLogger(f"{cls.__module__}.{cls.__name__}")

    @classmethod
    @contextmanager
    def atomic(cls) -> Generator[None, None, None]:
        """Run the block in a database transaction."""
        with transaction.atomic():
            yield
