"""Promotion rules and pricing result value objects."""

from __future__ import annotations

import datetime
import enum
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

from cruise_pricing.core.money import ZERO, to_decimal

BASE_CURRENCY = "USD"


class InvalidPromotionRule(ValueError):
    """Raised when a promotion rule definition is inconsistent."""


class DiscountType(str, enum.Enum):
    """Kinds of discounts supported by the pricing engine."""

    PERCENTAGE = "percentage"
    FIXED = "fixed"

    @classmethod
    def _missing_(cls, value: object) -> DiscountType | None:
        # Stored promotion rows use "fixed_amount" and "percent" spellings.
        aliases = {"fixed_amount": cls.FIXED, "amount": cls.FIXED, "percent": cls.PERCENTAGE}
        if isinstance(value, str):
            return aliases.get(value.strip().lower())
        return None


def _as_utc(value: datetime.date | datetime.datetime, *, end_of_day: bool) -> datetime.datetime:
    if isinstance(value, datetime.datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=datetime.UTC)
        return value.astimezone(datetime.UTC)
    bound = datetime.time.max if end_of_day else datetime.time.min
    return datetime.datetime.combine(value, bound, tzinfo=datetime.UTC)


def _non_negative(owner: str, name: str, value: Any) -> Decimal:
    try:
        number = to_decimal(value)
    except ValueError as exc:
        raise InvalidPromotionRule(f"{owner}: {name} {exc}") from exc
    if not number.is_finite() or number < 0:
        raise InvalidPromotionRule(f"{owner}: {name} must be a non-negative number")
    return number


@dataclass(frozen=True, slots=True)
class PromotionConditions:
    """Optional predicates a booking must satisfy for a promotion to apply."""

    min_booking_amount: Decimal | None = None
    max_booking_amount: Decimal | None = None
    min_guests: int | None = None
    max_guests: int | None = None
    min_seniors: int | None = None
    max_children: int | None = None
    early_booking_days: int | None = None
    last_minute_days: int | None = None
    required_coupon_code: str | None = None
    cruise_lines: tuple[str, ...] = ()
    destinations: tuple[str, ...] = ()
    cabin_types: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        for name in ("min_booking_amount", "max_booking_amount"):
            value = getattr(self, name)
            if value is not None:
                object.__setattr__(self, name, _non_negative("conditions", name, value))
        for name in (
            "min_guests",
            "max_guests",
            "min_seniors",
            "max_children",
            "early_booking_days",
            "last_minute_days",
        ):
            value = getattr(self, name)
            if value is None:
                continue
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidPromotionRule(
                    f"conditions: {name} must be an integer, got {value!r}"
                )
            if value < 0:
                raise InvalidPromotionRule(f"conditions: {name} must be >= 0")

        if (
            self.min_guests is not None
            and self.max_guests is not None
            and self.min_guests > self.max_guests
        ):
            raise InvalidPromotionRule("conditions: min_guests exceeds max_guests")
        if (
            self.min_booking_amount is not None
            and self.max_booking_amount is not None
            and self.min_booking_amount > self.max_booking_amount
        ):
            raise InvalidPromotionRule(
                "conditions: min_booking_amount exceeds max_booking_amount"
            )

        code = self.required_coupon_code
        if code is not None:
            code = code.strip() or None
        object.__setattr__(self, "required_coupon_code", code)
        for name in ("cruise_lines", "destinations", "cabin_types"):
            object.__setattr__(self, name, tuple(getattr(self, name) or ()))


@dataclass(frozen=True, slots=True)
class PromotionRule:
    """An offer definable by staff, validated when constructed.

    ``valid_from`` and ``valid_to`` accept dates or datetimes. Naive values are
    read as UTC, and a plain ``valid_to`` date covers that whole day.
    ``current_uses`` is a read-only snapshot; the engine never increments it.
    """

    id: str
    name: str
    discount_type: DiscountType
    discount_value: Decimal
    valid_from: datetime.datetime
    valid_to: datetime.datetime
    description: str = ""
    max_discount: Decimal | None = None
    conditions: PromotionConditions = field(default_factory=PromotionConditions)
    is_active: bool = True
    is_combinable: bool = False
    priority: int = 0
    max_uses: int | None = None
    current_uses: int = 0

    def __post_init__(self) -> None:
        owner = f"promotion {self.id}"
        try:
            object.__setattr__(self, "discount_type", DiscountType(self.discount_type))
        except ValueError as exc:
            raise InvalidPromotionRule(
                f"{owner}: unknown discount type {self.discount_type!r}"
            ) from exc

        value = _non_negative(owner, "discount_value", self.discount_value)
        if self.discount_type is DiscountType.PERCENTAGE and value > 100:
            raise InvalidPromotionRule(f"{owner}: percentage discount exceeds 100")
        object.__setattr__(self, "discount_value", value)

        if self.max_discount is not None:
            if self.discount_type is not DiscountType.PERCENTAGE:
                raise InvalidPromotionRule(
                    f"{owner}: max_discount only applies to percentage discounts"
                )
            object.__setattr__(
                self, "max_discount", _non_negative(owner, "max_discount", self.max_discount)
            )

        valid_from = _as_utc(self.valid_from, end_of_day=False)
        valid_to = _as_utc(self.valid_to, end_of_day=True)
        if valid_from > valid_to:
            raise InvalidPromotionRule(f"{owner}: valid_from is after valid_to")
        object.__setattr__(self, "valid_from", valid_from)
        object.__setattr__(self, "valid_to", valid_to)

        if self.max_uses is not None and self.max_uses < 0:
            raise InvalidPromotionRule(f"{owner}: max_uses must be >= 0")
        if self.current_uses < 0:
            raise InvalidPromotionRule(f"{owner}: current_uses must be >= 0")

    @property
    def sort_key(self) -> tuple[int, datetime.datetime, str]:
        """Deterministic ordering: priority, then earliest start, then id."""
        return (self.priority, self.valid_from, self.id)


@dataclass(frozen=True, slots=True)
class FareBreakdown:
    """Cart subtotal and its taxed and tipped components."""

    base_cruise_fare: Decimal
    cabin_upgrade: Decimal
    extras_total: Decimal
    subtotal: Decimal
    tax_amount: Decimal
    gratuity_amount: Decimal

    @property
    def gross_total(self) -> Decimal:
        return self.subtotal + self.tax_amount + self.gratuity_amount


@dataclass(frozen=True, slots=True)
class EligibilityResult:
    """Outcome of evaluating one promotion against one booking."""

    eligible: bool
    reason: str | None = None
    raw_discount: Decimal | None = None

    @classmethod
    def rejected(cls, reason: str) -> EligibilityResult:
        return cls(eligible=False, reason=reason)


@dataclass(frozen=True, slots=True)
class AppliedPromotion:
    """A promotion that contributed to the final price."""

    id: str
    name: str
    discount_type: DiscountType
    discount_value: Decimal
    discount_amount: Decimal


@dataclass(frozen=True, slots=True)
class IneligiblePromotion:
    """A candidate promotion that did not apply, with the display reason."""

    id: str
    name: str
    reason: str


@dataclass(frozen=True, slots=True)
class PricingBreakdown:
    """Aggregate pricing output for one evaluation."""

    base_cruise_fare: Decimal
    cabin_upgrade: Decimal
    extras_total: Decimal
    subtotal: Decimal
    tax_amount: Decimal
    gratuity_amount: Decimal
    discount_amount: Decimal = ZERO
    final_total: Decimal = ZERO
    applied_promotions: tuple[AppliedPromotion, ...] = ()
    ineligible_promotions: tuple[IneligiblePromotion, ...] = ()
    selected_promotion_id: str | None = None
    selected_promotion_reason: str | None = None
    currency: str = BASE_CURRENCY

    @property
    def selected_promotion_applied(self) -> bool:
        return self.selected_promotion_id is not None and any(
            promo.id == self.selected_promotion_id for promo in self.applied_promotions
        )
