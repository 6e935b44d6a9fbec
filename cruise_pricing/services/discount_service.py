"""Promotion selection, stacking and final total computation."""

from __future__ import annotations

import datetime
import logging
from collections.abc import Iterable
from decimal import Decimal

from cruise_pricing.core.money import ZERO, to_money
from cruise_pricing.models import (
    BASE_CURRENCY,
    AppliedPromotion,
    BookingContext,
    EligibilityResult,
    FareBreakdown,
    IneligiblePromotion,
    PricingBreakdown,
    PromotionRule,
)
from cruise_pricing.services import eligibility_service

logger = logging.getLogger(__name__)

REASON_NOT_FOUND = "promotion not found"


def _coupon_matched(rule: PromotionRule, context: BookingContext) -> bool:
    required = rule.conditions.required_coupon_code
    return required is not None and context.coupon_key == required.casefold()


def _choose_exclusive(
    exclusive: list[PromotionRule],
    context: BookingContext,
    *,
    selected: PromotionRule | None,
    selection_requested: bool,
) -> PromotionRule | None:
    if selected is not None and not selected.is_combinable:
        return selected
    coupon_matched = [rule for rule in exclusive if _coupon_matched(rule, context)]
    if coupon_matched:
        return min(coupon_matched, key=lambda rule: rule.sort_key)
    if selection_requested or not exclusive:
        return None
    return min(exclusive, key=lambda rule: rule.sort_key)


def _clip(
    ordered: list[PromotionRule],
    results: dict[str, EligibilityResult],
    subtotal: Decimal,
) -> list[AppliedPromotion]:
    applied: list[AppliedPromotion] = []
    remaining = subtotal
    for rule in ordered:
        amount = min(results[rule.id].raw_discount or ZERO, remaining)
        if amount <= 0:
            logger.debug("Promotion %s contributes nothing after clipping", rule.id)
            continue
        remaining -= amount
        applied.append(
            AppliedPromotion(
                id=rule.id,
                name=rule.name,
                discount_type=rule.discount_type,
                discount_value=rule.discount_value,
                discount_amount=to_money(amount),
            )
        )
    return applied


def aggregate(
    context: BookingContext,
    fare: FareBreakdown,
    candidates: Iterable[PromotionRule],
    selected_promotion_id: str | None = None,
    *,
    now: datetime.datetime | None = None,
    currency: str = BASE_CURRENCY,
) -> PricingBreakdown:
    """Pick the promotions that apply to a booking and compute the final price.

    At most one exclusive promotion is applied: the selected one, else one
    unlocked by the entered coupon, else (only when nothing was selected) the
    lowest-priority eligible one. Every eligible combinable promotion stacks
    on top. The summed discount never exceeds the subtotal; later promotions
    absorb the clipping first.
    """

    now = eligibility_service.resolve_now(now)
    subtotal = fare.subtotal

    rules: dict[str, PromotionRule] = {}
    for rule in candidates:
        if rule.id in rules:
            logger.warning("Duplicate promotion id %s ignored", rule.id)
            continue
        rules[rule.id] = rule

    selected: PromotionRule | None = None
    selected_reason: str | None = None
    results: dict[str, EligibilityResult] = {}

    if selected_promotion_id is not None:
        candidate = rules.get(selected_promotion_id)
        if candidate is None:
            selected_reason = REASON_NOT_FOUND
        else:
            result = eligibility_service.evaluate(
                candidate, context, subtotal, now=now, currency=currency
            )
            results[candidate.id] = result
            if result.eligible:
                selected = candidate
            else:
                selected_reason = result.reason
        if selected_reason is not None:
            logger.info(
                "Selected promotion %s not applied: %s",
                selected_promotion_id,
                selected_reason,
            )

    ineligible: list[IneligiblePromotion] = []
    combinable: list[PromotionRule] = []
    exclusive: list[PromotionRule] = []
    for rule in rules.values():
        result = results.get(rule.id)
        if result is None:
            result = eligibility_service.evaluate(
                rule, context, subtotal, now=now, currency=currency
            )
            results[rule.id] = result
        if not result.eligible:
            ineligible.append(
                IneligiblePromotion(id=rule.id, name=rule.name, reason=result.reason or "")
            )
        elif rule is not selected:
            (combinable if rule.is_combinable else exclusive).append(rule)

    chosen = _choose_exclusive(
        exclusive,
        context,
        selected=selected,
        selection_requested=selected_promotion_id is not None,
    )

    ordered: list[PromotionRule] = []
    if selected is not None:
        ordered.append(selected)
    if chosen is not None and chosen is not selected:
        ordered.append(chosen)
    ordered.extend(sorted(combinable, key=lambda rule: rule.sort_key))

    applied = _clip(ordered, results, subtotal)
    discount_amount = to_money(sum((promo.discount_amount for promo in applied), ZERO))
    final_total = max(ZERO, to_money(fare.gross_total - discount_amount))

    return PricingBreakdown(
        base_cruise_fare=fare.base_cruise_fare,
        cabin_upgrade=fare.cabin_upgrade,
        extras_total=fare.extras_total,
        subtotal=subtotal,
        tax_amount=fare.tax_amount,
        gratuity_amount=fare.gratuity_amount,
        discount_amount=discount_amount,
        final_total=final_total,
        applied_promotions=tuple(applied),
        ineligible_promotions=tuple(ineligible),
        selected_promotion_id=selected_promotion_id,
        selected_promotion_reason=selected_reason,
        currency=currency,
    )
