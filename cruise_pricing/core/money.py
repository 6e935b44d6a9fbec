"""Decimal money helpers shared by the pricing services."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

MONEY_PLACES = Decimal("0.01")
ZERO = Decimal("0.00")


def to_decimal(value: Decimal | float | int | str | None) -> Decimal:
    """Coerce a numeric input to ``Decimal`` without losing float intent."""

    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(repr(value))
    try:
        return Decimal(str(value).strip())
    except InvalidOperation as exc:
        raise ValueError(f"Not a number: {value!r}") from exc


def to_money(value: Decimal | float | int | str) -> Decimal:
    return to_decimal(value).quantize(MONEY_PLACES, rounding=ROUND_HALF_UP)
