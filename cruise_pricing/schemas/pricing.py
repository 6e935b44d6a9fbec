"""Pricing schema definitions."""

from __future__ import annotations

import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from cruise_pricing.models import BookingContext, DiscountType, Extra
from cruise_pricing.schemas.promotion import PromotionRuleIn


class ExtraIn(BaseModel):
    """Add-on line in the cart."""

    id: str
    name: str
    unit_price: Decimal = Field(ge=Decimal("0"))
    quantity: int = Field(default=1, ge=0)


class BookingContextIn(BaseModel):
    """Cart snapshot used to evaluate promotions."""

    guest_count: int = Field(ge=0)
    adult_count: int = Field(default=0, ge=0)
    child_count: int = Field(default=0, ge=0)
    senior_count: int = Field(default=0, ge=0)
    departure_date: datetime.date
    cruise_line: str = ""
    destination: str = ""
    cabin_type: str = ""
    extras: list[ExtraIn] = Field(default_factory=list)
    entered_coupon_code: str | None = None

    def to_domain(self) -> BookingContext:
        """Build the domain context; raises ``InvalidBookingContext``."""
        return BookingContext(
            guest_count=self.guest_count,
            adult_count=self.adult_count,
            child_count=self.child_count,
            senior_count=self.senior_count,
            departure_date=self.departure_date,
            cruise_line=self.cruise_line,
            destination=self.destination,
            cabin_type=self.cabin_type,
            extras=tuple(
                Extra(
                    id=extra.id,
                    name=extra.name,
                    unit_price=extra.unit_price,
                    quantity=extra.quantity,
                )
                for extra in self.extras
            ),
            entered_coupon_code=self.entered_coupon_code,
        )


class FareIn(BaseModel):
    """Cruise fare inputs shared by quote and validation requests."""

    base_cruise_price: Decimal = Field(ge=Decimal("0"))
    cabin_price_modifier: Decimal = Field(default=Decimal("1"), ge=Decimal("0"))
    booking: BookingContextIn


class PricingQuoteRequest(FareIn):
    """Input payload for generating a checkout quote.

    When ``promotions`` is omitted the configured promotion catalog supplies
    the candidates.
    """

    promotions: list[PromotionRuleIn] | None = None
    selected_promotion_id: str | None = None
    currency: str | None = Field(default=None, min_length=3, max_length=3)


class AppliedPromotionRead(BaseModel):
    """Promotion that contributed to the quote."""

    id: str
    name: str
    discount_type: DiscountType
    discount_value: Decimal
    discount_amount: Decimal

    model_config = ConfigDict(from_attributes=True)


class IneligiblePromotionRead(BaseModel):
    """Candidate promotion that did not apply."""

    id: str
    name: str
    reason: str

    model_config = ConfigDict(from_attributes=True)


class PaymentCheckRead(BaseModel):
    """Whether the payable amount is acceptable to the card processor."""

    valid: bool
    error: str | None = None
    amount_minor_units: int

    model_config = ConfigDict(from_attributes=True)


class PricingQuoteRead(BaseModel):
    """Itemized pricing response."""

    base_cruise_fare: Decimal
    cabin_upgrade: Decimal
    extras_total: Decimal
    subtotal: Decimal
    tax_amount: Decimal
    gratuity_amount: Decimal
    discount_amount: Decimal
    final_total: Decimal
    currency: str
    applied_promotions: list[AppliedPromotionRead]
    ineligible_promotions: list[IneligiblePromotionRead]
    selected_promotion_id: str | None = None
    selected_promotion_reason: str | None = None
    selected_promotion_applied: bool = False
    display_total: str | None = None
    payment_check: PaymentCheckRead | None = None

    model_config = ConfigDict(from_attributes=True)


class PromotionValidateRequest(FareIn):
    """Check one promotion against a cart, by catalog id or inline."""

    promotion_id: str | None = None
    promotion: PromotionRuleIn | None = None


class EligibilityRead(BaseModel):
    """Eligibility outcome for a single promotion."""

    promotion_id: str
    eligible: bool
    reason: str | None = None
    raw_discount: Decimal | None = None
    subtotal: Decimal
