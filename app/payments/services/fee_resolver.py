"""
Platform fee policies.

Two policies exist and are deliberately separate:

- DirectSaleFeePolicy: fixed 8% of a product price. Never configurable.
- FeeResolver: the steward-claim fee, read from platform settings with a
  fallback chain:
    1. steward_platform_fee_percentage, a decimal in (0, 1]
    2. steward_platform_fee_flat_cents, a non-negative integer
    3. 5% of the basis

Unusable setting values (unparseable, out of range, negative) count as
absent and are logged; they never fail the checkout.

Usage:
    from payments.services import FeeResolver

    fee_cents = FeeResolver().resolve_platform_fee(shipping_cents + donation_cents)
"""

from __future__ import annotations

import logging
import re
from decimal import Decimal, InvalidOperation
from typing import TYPE_CHECKING, Protocol

from payments.constants import (
    DEFAULT_STEWARD_FEE_RATE,
    DIRECT_SALE_FEE_RATE,
    STEWARD_FEE_FLAT_CENTS_KEY,
    STEWARD_FEE_PERCENTAGE_KEY,
)
from payments.exceptions import PaymentValidationError
from payments.money import percent_of, require_cents

if TYPE_CHECKING:
    from collections.abc import Mapping


logger = logging.getLogger(__name__)

_FLAT_CENTS_PATTERN = re.compile(r"[0-9]+")


class SettingsStore(Protocol):
    """Anything that can look up a platform setting by key."""

    def get_platform_setting(self, key: str) -> Mapping[str, str | None] | None: ...


class DirectSaleFeePolicy:
    """Application fee on direct product sales."""

    rate: Decimal = DIRECT_SALE_FEE_RATE

    def application_fee(self, price_cents: int) -> int:
        return percent_of(require_cents("price_cents", price_cents), self.rate)


class FeeResolver:
    """
    Computes the steward-claim platform fee from platform settings.

    Settings are read on every call, so an operator's change applies to
    the next quote without a restart.
    """

    def __init__(self, settings_store: SettingsStore | None = None):
        if settings_store is None:
            from payments.models import PlatformSetting

            settings_store = PlatformSetting.objects
        self.settings_store = settings_store

    def resolve_platform_fee(self, basis_cents: int) -> int:
        """
        Return the platform fee in cents for a basis amount.

        Args:
            basis_cents: Shipping plus chapter donation, in cents

        Raises:
            PaymentValidationError: basis_cents is negative or not an int
        """
        try:
            require_cents("basis_cents", basis_cents)
        except ValueError as e:
            raise PaymentValidationError(
                str(e), details={"basis_cents": repr(basis_cents)}
            ) from e

        percentage = self._read_percentage()
        if percentage is not None:
            return percent_of(basis_cents, percentage)

        flat_cents = self._read_flat_cents()
        if flat_cents is not None:
            return flat_cents

        return percent_of(basis_cents, DEFAULT_STEWARD_FEE_RATE)

    def resolve_steward_claim_fee(
        self,
        shipping_cents: int,
        chapter_donation_cents: int,
    ) -> int:
        """Fee for a steward claim; the basis is shipping plus donation."""
        for name, value in (
            ("shipping_cents", shipping_cents),
            ("chapter_donation_cents", chapter_donation_cents),
        ):
            try:
                require_cents(name, value)
            except ValueError as e:
                raise PaymentValidationError(str(e), details={name: repr(value)}) from e
        return self.resolve_platform_fee(shipping_cents + chapter_donation_cents)

    # =========================================================================
    # Setting readers
    # =========================================================================

    def _read_value(self, key: str) -> str | None:
        row = self.settings_store.get_platform_setting(key)
        if not row:
            return None
        value = row.get("value")
        if value is None:
            return None
        return str(value).strip() or None

    def _read_percentage(self) -> Decimal | None:
        raw = self._read_value(STEWARD_FEE_PERCENTAGE_KEY)
        if raw is None:
            return None

        try:
            percentage = Decimal(raw)
        except InvalidOperation:
            percentage = None

        if percentage is None or not percentage.is_finite() or not 0 < percentage <= 1:
            logger.warning(
                "Ignoring unusable steward fee percentage",
                extra={"setting_key": STEWARD_FEE_PERCENTAGE_KEY, "raw_value": raw},
            )
            return None
        return percentage

    def _read_flat_cents(self) -> int | None:
        raw = self._read_value(STEWARD_FEE_FLAT_CENTS_KEY)
        if raw is None:
            return None

        if not _FLAT_CENTS_PATTERN.fullmatch(raw):
            logger.warning(
                "Ignoring unusable steward flat fee",
                extra={"setting_key": STEWARD_FEE_FLAT_CENTS_KEY, "raw_value": raw},
            )
            return None
        return int(raw)
