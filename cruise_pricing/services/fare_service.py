"""Fare calculation: cruise fare, cabin upgrade, extras, tax and gratuity."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from decimal import Decimal

from cruise_pricing.core.money import to_decimal, to_money
from cruise_pricing.models import Extra, FareBreakdown

logger = logging.getLogger(__name__)

# Canonical rates. Older checkout pages charged 10% tax and 15% gratuity.
TAX_RATE = Decimal("0.095")
GRATUITY_RATE = Decimal("0.12")


def _clamp(name: str, value: Decimal | float | int | str | None) -> Decimal:
    try:
        number = to_decimal(value)
    except ValueError:
        logger.warning("Fare input %s=%r is not numeric; treating as 0", name, value)
        return Decimal("0")
    if not number.is_finite() or number < 0:
        logger.warning("Fare input %s=%s clamped to 0", name, number)
        return Decimal("0")
    return number


def compute_fare(
    base_cruise_price: Decimal | float | int | str,
    cabin_price_modifier: Decimal | float | int | str,
    guest_count: int,
    extras: Iterable[Extra] = (),
    *,
    tax_rate: Decimal = TAX_RATE,
    gratuity_rate: Decimal = GRATUITY_RATE,
) -> FareBreakdown:
    """Derive the subtotal and taxed/tipped components from raw cart inputs.

    Every derived amount is computed from unrounded inputs and rounded once,
    so ``subtotal`` may differ by a cent from the sum of its rounded parts.
    """

    price = _clamp("base_cruise_price", base_cruise_price)
    modifier = _clamp("cabin_price_modifier", cabin_price_modifier)
    guests = _clamp("guest_count", guest_count)

    base_fare = price * guests
    upgrade = price * (modifier - 1) * guests if modifier > 1 else Decimal("0")

    extras_total = Decimal("0")
    for extra in extras:
        if extra.quantity <= 0:
            continue
        extras_total += _clamp(f"extras[{extra.id}].unit_price", extra.unit_price) * extra.quantity

    subtotal = base_fare + upgrade + extras_total
    return FareBreakdown(
        base_cruise_fare=to_money(base_fare),
        cabin_upgrade=to_money(upgrade),
        extras_total=to_money(extras_total),
        subtotal=to_money(subtotal),
        tax_amount=to_money(subtotal * _clamp("tax_rate", tax_rate)),
        gratuity_amount=to_money(subtotal * _clamp("gratuity_rate", gratuity_rate)),
    )
