"""Display-currency conversion and payment amount checks.

Pricing always runs in the base currency; these helpers are applied to the
finished breakdown.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from dataclasses import dataclass
from decimal import Decimal

from cruise_pricing.core.money import to_decimal, to_money
from cruise_pricing.models import BASE_CURRENCY, PricingBreakdown

DEFAULT_EXCHANGE_RATES: dict[str, Decimal] = {
    "USD": Decimal("1"),
    "EUR": Decimal("0.85"),
    "SGD": Decimal("1.35"),
    "THB": Decimal("32.5"),
}

# Card processor limits per currency, in major units.
PAYMENT_LIMITS: dict[str, tuple[Decimal, Decimal]] = {
    "USD": (Decimal("0.50"), Decimal("999999.99")),
    "EUR": (Decimal("0.50"), Decimal("999999.99")),
    "SGD": (Decimal("0.50"), Decimal("999999.99")),
    "THB": (Decimal("20"), Decimal("999999.99")),
}

CURRENCY_SYMBOLS = {"USD": "$", "EUR": "€", "SGD": "S$", "THB": "฿"}

_MONEY_FIELDS = (
    "base_cruise_fare",
    "cabin_upgrade",
    "extras_total",
    "subtotal",
    "tax_amount",
    "gratuity_amount",
    "discount_amount",
    "final_total",
)


class UnsupportedCurrency(ValueError):
    """Raised when no exchange rate or payment limit exists for a currency."""


@dataclass(frozen=True, slots=True)
class PaymentAmountCheck:
    """Result of validating a payable amount against processor limits."""

    valid: bool
    error: str | None = None


def supported_currencies(rates: Mapping[str, Decimal] | None = None) -> list[str]:
    return sorted((rates or DEFAULT_EXCHANGE_RATES).keys())


def get_rate(currency: str, rates: Mapping[str, Decimal] | None = None) -> Decimal:
    rates = rates or DEFAULT_EXCHANGE_RATES
    code = currency.strip().upper()
    try:
        return to_decimal(rates[code])
    except KeyError as exc:
        raise UnsupportedCurrency(f"Unsupported currency: {currency}") from exc


def convert_breakdown(
    breakdown: PricingBreakdown,
    currency: str,
    rates: Mapping[str, Decimal] | None = None,
) -> PricingBreakdown:
    """Return a copy of ``breakdown`` expressed in ``currency``.

    Amounts are converted from the breakdown's own currency and each is
    rounded on its own, so converted totals can drift by a cent from the sum
    of converted parts.
    """

    target = currency.strip().upper()
    if target == breakdown.currency:
        return breakdown
    factor = get_rate(target, rates) / get_rate(breakdown.currency, rates)

    changes: dict[str, object] = {
        name: to_money(getattr(breakdown, name) * factor) for name in _MONEY_FIELDS
    }
    changes["applied_promotions"] = tuple(
        dataclasses.replace(promo, discount_amount=to_money(promo.discount_amount * factor))
        for promo in breakdown.applied_promotions
    )
    changes["currency"] = target
    return dataclasses.replace(breakdown, **changes)


def validate_payment_amount(amount: Decimal, currency: str) -> PaymentAmountCheck:
    code = currency.strip().upper()
    limits = PAYMENT_LIMITS.get(code)
    if limits is None:
        return PaymentAmountCheck(False, f"Unsupported currency: {currency}")
    minimum, maximum = limits
    if amount < minimum:
        return PaymentAmountCheck(False, f"Amount too small. Minimum {code} {minimum}")
    if amount > maximum:
        return PaymentAmountCheck(False, f"Amount too large. Maximum {code} {maximum}")
    return PaymentAmountCheck(True)


def to_minor_units(amount: Decimal) -> int:
    """Amount in cents (or the currency's smallest unit) for the payment layer."""
    quantized = to_money(amount)
    return int((quantized * 100).to_integral_value())


def format_currency(amount: Decimal, currency: str = BASE_CURRENCY) -> str:
    code = currency.strip().upper()
    symbol = CURRENCY_SYMBOLS.get(code)
    if symbol is None:
        return f"{code} {to_money(amount):,.2f}"
    return f"{symbol}{to_money(amount):,.2f}"
