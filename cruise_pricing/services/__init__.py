"""Service layer exports."""
from cruise_pricing.services import (
    eligibility_service,
    fare_service,
    currency_service,
    discount_service,
    pricing_service,
)

__all__ = [
    "currency_service",
    "discount_service",
    "eligibility_service",
    "fare_service",
    "pricing_service",
]
