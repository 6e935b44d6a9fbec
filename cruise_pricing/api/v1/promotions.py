"""Promotion listing and eligibility endpoints."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from cruise_pricing.api import deps
from cruise_pricing.core.config import Settings
from cruise_pricing.schemas.pricing import EligibilityRead, PromotionValidateRequest
from cruise_pricing.schemas.promotion import PromotionRead
from cruise_pricing.services import eligibility_service, fare_service
from cruise_pricing.services.promotion_catalog import PromotionCatalog

router = APIRouter(prefix="/promotions", tags=["promotions"])


@router.get("", response_model=list[PromotionRead], summary="List active promotions")
async def list_active_promotions(
    settings: Annotated[Settings, Depends(deps.get_app_settings)],
    catalog: Annotated[PromotionCatalog, Depends(deps.get_promotion_catalog)],
) -> list[PromotionRead]:
    return [
        PromotionRead.from_rule(rule, settings.base_currency)
        for rule in catalog.list_active()
    ]


@router.post(
    "/validate",
    response_model=EligibilityRead,
    summary="Check whether a promotion applies to a cart",
)
async def validate_promotion(
    payload: PromotionValidateRequest,
    settings: Annotated[Settings, Depends(deps.get_app_settings)],
    catalog: Annotated[PromotionCatalog, Depends(deps.get_promotion_catalog)],
) -> EligibilityRead:
    if (payload.promotion_id is None) == (payload.promotion is None):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Provide exactly one of promotion_id or promotion",
        )
    try:
        if payload.promotion is not None:
            rule = payload.promotion.to_domain()
        else:
            found = catalog.get(payload.promotion_id or "")
            if found is None:
                raise HTTPException(
                    status_code=status.HTTP_404_NOT_FOUND, detail="Promotion not found"
                )
            rule = found
        context = payload.booking.to_domain()
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)
        ) from exc

    fare = fare_service.compute_fare(
        payload.base_cruise_price,
        payload.cabin_price_modifier,
        context.guest_count,
        context.extras,
        tax_rate=settings.tax_rate,
        gratuity_rate=settings.gratuity_rate,
    )
    result = eligibility_service.evaluate(
        rule, context, fare.subtotal, currency=settings.base_currency
    )
    return EligibilityRead(
        promotion_id=rule.id,
        eligible=result.eligible,
        reason=result.reason,
        raw_discount=result.raw_discount,
        subtotal=fare.subtotal,
    )
