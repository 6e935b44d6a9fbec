"""Test fixtures for the cruise pricing engine."""
from __future__ import annotations

import datetime
import os
from collections.abc import AsyncIterator, Callable, Iterator
from decimal import Decimal
from typing import Any

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

os.environ.setdefault("APP_ENV", "test")
os.environ.pop("PROMOTIONS_FILE", None)

from cruise_pricing.api import deps
from cruise_pricing.core.config import Settings
from cruise_pricing.main import app
from cruise_pricing.models import (
    BookingContext,
    DiscountType,
    Extra,
    PromotionConditions,
    PromotionRule,
)
from cruise_pricing.services.promotion_catalog import PromotionCatalog

NOW = datetime.datetime(2025, 1, 1, 12, 0, tzinfo=datetime.UTC)


@pytest.fixture()
def now() -> datetime.datetime:
    """Fixed evaluation time so date-window checks are reproducible."""
    return NOW


@pytest.fixture()
def make_rule() -> Callable[..., PromotionRule]:
    """Factory for promotion rules valid throughout 2025 by default."""

    def _make(
        rule_id: str = "promo",
        *,
        discount_type: DiscountType | str = DiscountType.FIXED,
        discount_value: Decimal | str = "100",
        conditions: PromotionConditions | None = None,
        **overrides: Any,
    ) -> PromotionRule:
        fields: dict[str, Any] = {
            "id": rule_id,
            "name": rule_id.replace("-", " ").title(),
            "discount_type": discount_type,
            "discount_value": Decimal(discount_value),
            "valid_from": datetime.date(2024, 12, 1),
            "valid_to": datetime.date(2025, 12, 31),
            "conditions": conditions or PromotionConditions(),
        }
        fields.update(overrides)
        return PromotionRule(**fields)

    return _make


@pytest.fixture()
def make_context() -> Callable[..., BookingContext]:
    """Factory for booking contexts departing 90 days after ``NOW``."""

    def _make(**overrides: Any) -> BookingContext:
        fields: dict[str, Any] = {
            "guest_count": 2,
            "adult_count": 2,
            "departure_date": (NOW + datetime.timedelta(days=90)).date(),
            "cruise_line": "Phoenix Cruise Lines",
            "destination": "Caribbean",
            "cabin_type": "Balcony",
        }
        fields.update(overrides)
        return BookingContext(**fields)

    return _make


@pytest.fixture()
def sample_extras() -> tuple[Extra, ...]:
    return (
        Extra(id="wifi", name="Unlimited Wi-Fi", unit_price=Decimal("49.99"), quantity=2),
        Extra(id="spa", name="Spa Package", unit_price=Decimal("120.00"), quantity=1),
        Extra(id="snorkel", name="Snorkel Tour", unit_price=Decimal("75.00"), quantity=0),
    )


@pytest.fixture()
def catalog_rows() -> list[dict[str, Any]]:
    """Catalog rows whose validity window covers any realistic test run."""
    return [
        {
            "id": "promo-early-bird",
            "name": "Early Bird Special",
            "description": "Book 6 months ahead",
            "discount_type": "percentage",
            "discount_value": "30",
            "max_discount": "400",
            "conditions": {"early_booking_days": 180},
            "valid_from": "2000-01-01",
            "valid_to": "2999-12-31",
            "priority": 10,
        },
        {
            "id": "promo-onboard-credit",
            "name": "Onboard Credit",
            "discount_type": "fixed_amount",
            "discount_value": "100",
            "valid_from": "2000-01-01",
            "valid_to": "2999-12-31",
            "is_combinable": True,
            "priority": 50,
        },
        {
            "id": "promo-retired",
            "name": "Retired Offer",
            "discount_type": "fixed",
            "discount_value": "500",
            "valid_from": "2000-01-01",
            "valid_to": "2999-12-31",
            "is_active": False,
        },
    ]


@pytest.fixture()
def catalog(catalog_rows: list[dict[str, Any]]) -> PromotionCatalog:
    return PromotionCatalog.from_rows(catalog_rows)


@pytest_asyncio.fixture()
async def client(catalog: PromotionCatalog) -> AsyncIterator[AsyncClient]:
    """Async client against the app with the test catalog injected."""
    app.dependency_overrides[deps.get_promotion_catalog] = lambda: catalog
    transport = ASGITransport(app=app)
    try:
        async with AsyncClient(transport=transport, base_url="http://test") as http_client:
            yield http_client
    finally:
        app.dependency_overrides.pop(deps.get_promotion_catalog, None)


@pytest.fixture()
def euro_base_currency() -> Iterator[Settings]:
    """Run the app with EUR as the configured base currency."""
    settings = Settings(base_currency="EUR")
    app.dependency_overrides[deps.get_app_settings] = lambda: settings
    try:
        yield settings
    finally:
        app.dependency_overrides.pop(deps.get_app_settings, None)
