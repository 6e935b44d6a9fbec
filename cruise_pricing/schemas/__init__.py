"""Schema exports."""

from cruise_pricing.schemas.pricing import (
    AppliedPromotionRead,
    BookingContextIn,
    EligibilityRead,
    ExtraIn,
    FareIn,
    IneligiblePromotionRead,
    PaymentCheckRead,
    PricingQuoteRead,
    PricingQuoteRequest,
    PromotionValidateRequest,
)
from cruise_pricing.schemas.promotion import (
    PromotionConditionsIn,
    PromotionRead,
    PromotionRuleIn,
)

__all__ = [
    "AppliedPromotionRead",
    "BookingContextIn",
    "EligibilityRead",
    "ExtraIn",
    "FareIn",
    "IneligiblePromotionRead",
    "PaymentCheckRead",
    "PricingQuoteRead",
    "PricingQuoteRequest",
    "PromotionConditionsIn",
    "PromotionRead",
    "PromotionRuleIn",
    "PromotionValidateRequest",
]
