"""Pricing engine entry point for checkout quotes."""

from __future__ import annotations

import datetime
import logging
from collections.abc import Iterable, Mapping
from decimal import Decimal

from cruise_pricing.models import (
    BASE_CURRENCY,
    BookingContext,
    PricingBreakdown,
    PromotionRule,
)
from cruise_pricing.services import currency_service, discount_service, fare_service

logger = logging.getLogger(__name__)


def quote(
    *,
    base_cruise_price: Decimal | float | str,
    cabin_price_modifier: Decimal | float | str,
    context: BookingContext,
    candidates: Iterable[PromotionRule] = (),
    selected_promotion_id: str | None = None,
    currency: str | None = None,
    now: datetime.datetime | None = None,
    tax_rate: Decimal = fare_service.TAX_RATE,
    gratuity_rate: Decimal = fare_service.GRATUITY_RATE,
    base_currency: str = BASE_CURRENCY,
    exchange_rates: Mapping[str, Decimal] | None = None,
) -> PricingBreakdown:
    """Produce a full pricing breakdown for a cart.

    Pricing runs in ``base_currency``; when ``currency`` differs, the finished
    breakdown is converted for display.
    """

    fare = fare_service.compute_fare(
        base_cruise_price,
        cabin_price_modifier,
        context.guest_count,
        context.extras,
        tax_rate=tax_rate,
        gratuity_rate=gratuity_rate,
    )
    breakdown = discount_service.aggregate(
        context,
        fare,
        candidates,
        selected_promotion_id,
        now=now,
        currency=base_currency,
    )
    logger.debug(
        "Quoted %s subtotal=%s discount=%s total=%s",
        base_currency,
        breakdown.subtotal,
        breakdown.discount_amount,
        breakdown.final_total,
    )
    if currency is None:
        return breakdown
    return currency_service.convert_breakdown(breakdown, currency, exchange_rates)
