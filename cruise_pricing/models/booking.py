"""Booking context captured at pricing time."""

from __future__ import annotations

import datetime
from dataclasses import dataclass, field
from decimal import Decimal

from cruise_pricing.core.money import to_decimal


class InvalidBookingContext(ValueError):
    """Raised when a booking context cannot be constructed."""


@dataclass(frozen=True, slots=True)
class Extra:
    """Optional add-on purchased with the cruise (excursions, packages)."""

    id: str
    name: str
    unit_price: Decimal
    quantity: int = 1

    def __post_init__(self) -> None:
        try:
            object.__setattr__(self, "unit_price", to_decimal(self.unit_price))
        except ValueError as exc:
            raise InvalidBookingContext(f"Extra {self.id}: {exc}") from exc
        if self.quantity < 0:
            raise InvalidBookingContext(
                f"Extra {self.id}: quantity must be >= 0, got {self.quantity}"
            )

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity


@dataclass(frozen=True, slots=True)
class BookingContext:
    """Immutable snapshot of a cart used for one pricing evaluation.

    ``adult_count``, ``child_count`` and ``senior_count`` may all be left at
    zero when the caller only knows the head count; otherwise they must add up
    to ``guest_count``.
    """

    guest_count: int
    departure_date: datetime.date
    adult_count: int = 0
    child_count: int = 0
    senior_count: int = 0
    cruise_line: str = ""
    destination: str = ""
    cabin_type: str = ""
    extras: tuple[Extra, ...] = field(default_factory=tuple)
    entered_coupon_code: str | None = None

    def __post_init__(self) -> None:
        counts = {
            "guest_count": self.guest_count,
            "adult_count": self.adult_count,
            "child_count": self.child_count,
            "senior_count": self.senior_count,
        }
        for name, value in counts.items():
            if value < 0:
                raise InvalidBookingContext(f"{name} must be >= 0, got {value}")

        breakdown = self.adult_count + self.child_count + self.senior_count
        if breakdown and breakdown != self.guest_count:
            raise InvalidBookingContext(
                f"guest_count {self.guest_count} does not match "
                f"adults + children + seniors ({breakdown})"
            )

        if isinstance(self.departure_date, datetime.datetime):
            object.__setattr__(self, "departure_date", self.departure_date.date())
        object.__setattr__(self, "extras", tuple(self.extras))

        code = self.entered_coupon_code
        if code is not None:
            code = code.strip() or None
        object.__setattr__(self, "entered_coupon_code", code)

    @property
    def coupon_key(self) -> str | None:
        """Entered coupon code normalized for case-insensitive comparison."""
        if self.entered_coupon_code is None:
            return None
        return self.entered_coupon_code.casefold()
