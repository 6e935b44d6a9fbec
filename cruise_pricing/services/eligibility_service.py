"""Promotion eligibility checks against a booking context."""

from __future__ import annotations

import datetime
import logging
from decimal import Decimal

from cruise_pricing.core.money import to_decimal, to_money
from cruise_pricing.models import (
    BASE_CURRENCY,
    BookingContext,
    DiscountType,
    EligibilityResult,
    PromotionRule,
)
from cruise_pricing.services.currency_service import format_currency

logger = logging.getLogger(__name__)

REASON_INACTIVE = "promotion inactive"
REASON_NOT_STARTED = "promotion not yet active"
REASON_EXPIRED = "promotion expired"
REASON_USAGE_LIMIT = "promotion usage limit reached"
REASON_COUPON = "Invalid or missing coupon code"

_ONE_DAY = datetime.timedelta(days=1)


def resolve_now(now: datetime.datetime | None = None) -> datetime.datetime:
    """Return ``now`` as an aware UTC datetime, defaulting to the current time."""
    if now is None:
        return datetime.datetime.now(datetime.UTC)
    if now.tzinfo is None:
        return now.replace(tzinfo=datetime.UTC)
    return now.astimezone(datetime.UTC)


def days_until_departure(departure_date: datetime.date, now: datetime.datetime) -> int:
    """Whole days until departure, rounded up; departure counts from 00:00 UTC."""
    departure = datetime.datetime.combine(
        departure_date, datetime.time.min, tzinfo=datetime.UTC
    )
    return -((now - departure) // _ONE_DAY)


def _format_list(values: tuple[str, ...]) -> str:
    return ", ".join(values)


def _check_conditions(
    rule: PromotionRule,
    context: BookingContext,
    subtotal: Decimal,
    now: datetime.datetime,
    currency: str,
) -> str | None:
    conditions = rule.conditions

    minimum = conditions.min_booking_amount
    if minimum is not None and subtotal < minimum:
        return (
            f"Minimum booking amount of {format_currency(minimum, currency)} "
            f"required. Current: {format_currency(subtotal, currency)}"
        )
    maximum = conditions.max_booking_amount
    if maximum is not None and subtotal > maximum:
        return (
            f"Maximum booking amount of {format_currency(maximum, currency)} "
            f"exceeded. Current: {format_currency(subtotal, currency)}"
        )

    guests = context.guest_count
    if conditions.min_guests is not None and guests < conditions.min_guests:
        return f"This deal requires {conditions.min_guests} guests, you have {guests}"
    if conditions.max_guests is not None and guests > conditions.max_guests:
        return (
            f"This deal allows at most {conditions.max_guests} guests, you have {guests}"
        )
    if conditions.min_seniors is not None and context.senior_count < conditions.min_seniors:
        return (
            f"This deal requires {conditions.min_seniors} senior guests, "
            f"you have {context.senior_count}"
        )
    if conditions.max_children is not None and context.child_count > conditions.max_children:
        return (
            f"This deal allows at most {conditions.max_children} children, "
            f"you have {context.child_count}"
        )

    if conditions.early_booking_days is not None or conditions.last_minute_days is not None:
        days = days_until_departure(context.departure_date, now)
        if conditions.early_booking_days is not None and days < conditions.early_booking_days:
            return (
                "Early booking deal requires booking at least "
                f"{conditions.early_booking_days} days in advance. "
                f"Current: {days} days until departure"
            )
        if conditions.last_minute_days is not None and days > conditions.last_minute_days:
            return (
                "Last minute deal requires booking within "
                f"{conditions.last_minute_days} days of departure. "
                f"Current: {days} days until departure"
            )

    if conditions.required_coupon_code is not None:
        if context.coupon_key != conditions.required_coupon_code.casefold():
            return REASON_COUPON

    if conditions.cruise_lines and context.cruise_line not in conditions.cruise_lines:
        return f"Deal only valid for {_format_list(conditions.cruise_lines)} cruise lines"
    if conditions.destinations and context.destination not in conditions.destinations:
        return f"Deal only valid for {_format_list(conditions.destinations)} destinations"
    if conditions.cabin_types and context.cabin_type not in conditions.cabin_types:
        return f"Deal only valid for {_format_list(conditions.cabin_types)} cabins"
    return None


def _clamp_subtotal(subtotal: Decimal | float | int | str) -> Decimal:
    try:
        number = to_decimal(subtotal)
    except ValueError:
        logger.warning("Subtotal %r is not numeric; treating as 0", subtotal)
        return Decimal("0")
    if not number.is_finite() or number < 0:
        logger.warning("Subtotal %s clamped to 0", number)
        return Decimal("0")
    return number


def raw_discount(rule: PromotionRule, subtotal: Decimal | float | int | str) -> Decimal:
    """Discount a rule yields on ``subtotal`` before aggregation-level clipping."""
    subtotal = _clamp_subtotal(subtotal)
    if rule.discount_type is DiscountType.PERCENTAGE:
        amount = subtotal * rule.discount_value / Decimal("100")
        if rule.max_discount is not None:
            amount = min(amount, rule.max_discount)
    else:
        amount = rule.discount_value
    amount = max(Decimal("0"), min(amount, subtotal))
    return to_money(amount)


def evaluate(
    rule: PromotionRule,
    context: BookingContext,
    subtotal: Decimal | float | int | str,
    *,
    now: datetime.datetime | None = None,
    currency: str = BASE_CURRENCY,
) -> EligibilityResult:
    """Decide whether ``rule`` applies to the booking and what it is worth.

    Checks run in a fixed order and stop at the first failure, whose reason
    is ready to show to the guest, with amounts in ``currency``. Nothing is
    mutated, so repeated calls with the same inputs return equal results.
    A negative, non-finite or non-numeric ``subtotal`` is treated as 0.
    """

    now = resolve_now(now)
    subtotal = _clamp_subtotal(subtotal)

    if not rule.is_active:
        reason: str | None = REASON_INACTIVE
    elif now < rule.valid_from:
        reason = REASON_NOT_STARTED
    elif now > rule.valid_to:
        reason = REASON_EXPIRED
    elif rule.max_uses is not None and rule.current_uses >= rule.max_uses:
        reason = REASON_USAGE_LIMIT
    else:
        reason = _check_conditions(rule, context, subtotal, now, currency)

    if reason is not None:
        logger.debug("Promotion %s rejected: %s", rule.id, reason)
        return EligibilityResult.rejected(reason)
    return EligibilityResult(eligible=True, raw_discount=raw_discount(rule, subtotal))


def format_discount_text(rule: PromotionRule, currency: str = BASE_CURRENCY) -> str:
    """Short badge text for a promotion, e.g. ``30% OFF`` or ``$100 OFF``."""
    if rule.discount_type is DiscountType.PERCENTAGE:
        return f"{rule.discount_value.normalize():f}% OFF"
    return f"{format_currency(rule.discount_value, currency).removesuffix('.00')} OFF"
