"""Common API dependencies."""

from __future__ import annotations

import logging

from fastapi import HTTPException, status

from cruise_pricing.core.config import Settings, get_settings
from cruise_pricing.services.promotion_catalog import (
    PromotionCatalog,
    PromotionCatalogError,
    get_catalog,
)

logger = logging.getLogger(__name__)


def get_app_settings() -> Settings:
    """Provide the cached application settings."""
    return get_settings()


def get_promotion_catalog() -> PromotionCatalog:
    """Provide the configured promotion catalog."""
    try:
        return get_catalog()
    except PromotionCatalogError as exc:
        logger.exception("Promotion catalog unavailable")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Promotion catalog unavailable",
        ) from exc
