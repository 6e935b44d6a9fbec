"""API tests for promotion listing and validation."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Any

import pytest
from httpx import AsyncClient

from cruise_pricing.api import deps
from cruise_pricing.main import app
from cruise_pricing.services.promotion_catalog import PromotionCatalog, PromotionCatalogError

pytestmark = pytest.mark.asyncio

VALIDATE_URL = "/api/v1/promotions/validate"


def _request(departure_days: int = 200, **overrides: Any) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "base_cruise_price": "1000",
        "booking": {
            "guest_count": 2,
            "departure_date": (datetime.now(UTC) + timedelta(days=departure_days))
            .date()
            .isoformat(),
        },
    }
    payload.update(overrides)
    return payload


async def test_list_active_promotions(client: AsyncClient) -> None:
    response = await client.get("/api/v1/promotions")

    assert response.status_code == 200
    body = response.json()
    assert [promo["id"] for promo in body] == ["promo-early-bird", "promo-onboard-credit"]
    assert body[0]["display_text"] == "30% OFF"
    assert body[1]["display_text"] == "$100 OFF"
    assert body[1]["discount_type"] == "fixed"
    assert body[0]["conditions"]["early_booking_days"] == 180


async def test_listing_hides_coupon_codes(
    client: AsyncClient, catalog_rows: list[dict[str, Any]]
) -> None:
    catalog_rows[1]["conditions"] = {"required_coupon_code": "SECRET42"}
    app.dependency_overrides[deps.get_promotion_catalog] = lambda: PromotionCatalog.from_rows(
        catalog_rows
    )

    response = await client.get("/api/v1/promotions")

    assert "SECRET42" not in response.text
    credit = next(promo for promo in response.json() if promo["id"] == "promo-onboard-credit")
    assert credit["requires_coupon"] is True
    assert credit["conditions"]["required_coupon_code"] is None


async def test_validate_catalog_promotion(client: AsyncClient) -> None:
    response = await client.post(VALIDATE_URL, json=_request(promotion_id="promo-early-bird"))

    assert response.status_code == 200
    assert response.json() == {
        "promotion_id": "promo-early-bird",
        "eligible": True,
        "reason": None,
        "raw_discount": "400.00",
        "subtotal": "2000.00",
    }


async def test_validate_reports_reason(client: AsyncClient) -> None:
    response = await client.post(
        VALIDATE_URL, json=_request(departure_days=10, promotion_id="promo-early-bird")
    )

    body = response.json()
    assert body["eligible"] is False
    assert body["raw_discount"] is None
    assert body["reason"].startswith("Early booking deal requires booking at least 180 days")


async def test_validate_inline_promotion(client: AsyncClient) -> None:
    promotion = {
        "id": "save20",
        "name": "Save 20",
        "discount_type": "percent",
        "discount_value": "20",
        "conditions": {"required_coupon_code": "SAVE20"},
        "valid_from": "2000-01-01",
        "valid_to": "2999-12-31",
    }
    payload = _request(promotion=promotion)
    payload["booking"]["entered_coupon_code"] = "WRONG"

    response = await client.post(VALIDATE_URL, json=payload)

    assert response.status_code == 200
    assert response.json()["reason"] == "Invalid or missing coupon code"


async def test_validate_unknown_promotion_returns_404(client: AsyncClient) -> None:
    response = await client.post(VALIDATE_URL, json=_request(promotion_id="promo-ghost"))

    assert response.status_code == 404


@pytest.mark.parametrize(
    "extra",
    [
        {},
        {
            "promotion_id": "promo-early-bird",
            "promotion": {
                "id": "x",
                "name": "X",
                "discount_type": "fixed",
                "discount_value": "1",
                "valid_from": "2000-01-01",
                "valid_to": "2999-12-31",
            },
        },
    ],
)
async def test_validate_requires_exactly_one_source(
    client: AsyncClient, extra: dict[str, Any]
) -> None:
    response = await client.post(VALIDATE_URL, json=_request(**extra))

    assert response.status_code == 400


async def test_unknown_condition_keys_are_rejected(client: AsyncClient) -> None:
    promotion = {
        "id": "x",
        "name": "X",
        "discount_type": "fixed",
        "discount_value": "1",
        "conditions": {"minimum_spend": 10},
        "valid_from": "2000-01-01",
        "valid_to": "2999-12-31",
    }

    response = await client.post(VALIDATE_URL, json=_request(promotion=promotion))

    assert response.status_code == 422


async def test_catalog_failure_returns_503(
    client: AsyncClient, monkeypatch: pytest.MonkeyPatch
) -> None:
    def _broken() -> PromotionCatalog:
        raise PromotionCatalogError("Malformed promotions file")

    app.dependency_overrides.pop(deps.get_promotion_catalog, None)
    monkeypatch.setattr(deps, "get_catalog", _broken)

    response = await client.get("/api/v1/promotions")

    assert response.status_code == 503
    assert response.json()["detail"] == "Promotion catalog unavailable"


@pytest.mark.usefixtures("euro_base_currency")
async def test_reasons_and_badges_use_base_currency(client: AsyncClient) -> None:
    promotion = {
        "id": "big-spender",
        "name": "Big Spender",
        "discount_type": "fixed",
        "discount_value": "100",
        "conditions": {"min_booking_amount": "2500"},
        "valid_from": "2000-01-01",
        "valid_to": "2999-12-31",
    }

    validated = await client.post(VALIDATE_URL, json=_request(promotion=promotion))
    listing = await client.get("/api/v1/promotions")

    assert validated.json()["reason"] == (
        "Minimum booking amount of €2,500.00 required. Current: €2,000.00"
    )
    credit = next(promo for promo in listing.json() if promo["id"] == "promo-onboard-credit")
    assert credit["display_text"] == "€100 OFF"
