"""Pricing-related API endpoints."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from cruise_pricing.api import deps
from cruise_pricing.core.config import Settings
from cruise_pricing.models import PromotionRule
from cruise_pricing.schemas.pricing import (
    PaymentCheckRead,
    PricingQuoteRead,
    PricingQuoteRequest,
)
from cruise_pricing.services import currency_service, pricing_service
from cruise_pricing.services.promotion_catalog import PromotionCatalog

router = APIRouter(prefix="/pricing", tags=["pricing"])


def _resolve_candidates(
    payload: PricingQuoteRequest, catalog: PromotionCatalog
) -> list[PromotionRule]:
    if payload.promotions is None:
        return catalog.all()
    return [promotion.to_domain() for promotion in payload.promotions]


@router.post("/quote", response_model=PricingQuoteRead, summary="Quote cruise pricing")
async def quote_cruise_pricing(
    payload: PricingQuoteRequest,
    settings: Annotated[Settings, Depends(deps.get_app_settings)],
    catalog: Annotated[PromotionCatalog, Depends(deps.get_promotion_catalog)],
) -> PricingQuoteRead:
    try:
        context = payload.booking.to_domain()
        candidates = _resolve_candidates(payload, catalog)
        breakdown = pricing_service.quote(
            base_cruise_price=payload.base_cruise_price,
            cabin_price_modifier=payload.cabin_price_modifier,
            context=context,
            candidates=candidates,
            selected_promotion_id=payload.selected_promotion_id,
            currency=payload.currency,
            tax_rate=settings.tax_rate,
            gratuity_rate=settings.gratuity_rate,
            base_currency=settings.base_currency,
            exchange_rates=settings.exchange_rates,
        )
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)
        ) from exc

    check = currency_service.validate_payment_amount(
        breakdown.final_total, breakdown.currency
    )
    response = PricingQuoteRead.model_validate(breakdown)
    response.display_total = currency_service.format_currency(
        breakdown.final_total, breakdown.currency
    )
    response.payment_check = PaymentCheckRead(
        valid=check.valid,
        error=check.error,
        amount_minor_units=currency_service.to_minor_units(breakdown.final_total),
    )
    return response
