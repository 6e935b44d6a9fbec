"""Domain value objects for the pricing engine."""

from cruise_pricing.models.booking import BookingContext, Extra, InvalidBookingContext
from cruise_pricing.models.pricing import (
    BASE_CURRENCY,
    AppliedPromotion,
    DiscountType,
    EligibilityResult,
    FareBreakdown,
    IneligiblePromotion,
    InvalidPromotionRule,
    PricingBreakdown,
    PromotionConditions,
    PromotionRule,
)

__all__ = [
    "AppliedPromotion",
    "BASE_CURRENCY",
    "BookingContext",
    "DiscountType",
    "EligibilityResult",
    "Extra",
    "FareBreakdown",
    "IneligiblePromotion",
    "InvalidBookingContext",
    "InvalidPromotionRule",
    "PricingBreakdown",
    "PromotionConditions",
    "PromotionRule",
]
