"""Health check endpoints."""

from datetime import UTC, datetime
from typing import Annotated

from fastapi import APIRouter, Depends

from cruise_pricing.api import deps
from cruise_pricing.core.config import Settings
from cruise_pricing.services import currency_service
from cruise_pricing.services.promotion_catalog import PromotionCatalog

router = APIRouter()


@router.get("", summary="Service health status")
async def healthcheck(
    settings: Annotated[Settings, Depends(deps.get_app_settings)],
    catalog: Annotated[PromotionCatalog, Depends(deps.get_promotion_catalog)],
) -> dict[str, str | int | list[str]]:
    """Return service metadata and the size of the loaded promotion catalog."""
    return {
        "status": "ok",
        "service": settings.app_name,
        "timestamp": datetime.now(UTC).isoformat(),
        "environment": settings.app_env,
        "base_currency": settings.base_currency,
        "currencies": currency_service.supported_currencies(settings.exchange_rates),
        "promotions_loaded": len(catalog),
    }
