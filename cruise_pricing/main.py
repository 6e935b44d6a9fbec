"""FastAPI application entrypoint."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from secure import Secure
from asgi_correlation_id import CorrelationIdMiddleware

from cruise_pricing.api import api_router
from cruise_pricing.core.config import get_settings
from cruise_pricing.security import logging_filters
from cruise_pricing.services.promotion_catalog import PromotionCatalogError, get_catalog

logger = logging.getLogger(__name__)

settings = get_settings()

_ALLOWED_ORIGINS = [origin for origin in settings.cors_allow_origins if origin]


@asynccontextmanager
async def lifespan(_: FastAPI):
    try:
        catalog = get_catalog()
    except PromotionCatalogError:
        # Quotes with inline promotions still work; catalog routes report 503.
        logger.exception("Failed to load promotion catalog")
    else:
        logger.info("Promotion catalog ready with %d promotion(s)", len(catalog))
    yield


app = FastAPI(title=settings.app_name, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_ALLOWED_ORIGINS,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "X-Request-ID"],
    expose_headers=["X-Request-ID"],
)
app.add_middleware(CorrelationIdMiddleware, header_name="X-Request-ID")

_secure_headers = Secure()


@app.middleware("http")
async def _apply_security_headers(request, call_next):
    response = await call_next(request)
    _secure_headers.set_headers(response)
    return response


logging.getLogger("cruise_pricing").setLevel(settings.log_level.upper())
logging_filters.install()

app.include_router(api_router)


@app.get("/", include_in_schema=False)
async def root() -> dict[str, str]:
    """Return a simple welcome message."""
    return {"message": settings.app_name}
