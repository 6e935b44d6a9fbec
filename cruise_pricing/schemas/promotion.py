"""Pydantic schemas for promotion rules."""

from __future__ import annotations

import datetime
from decimal import Decimal
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from cruise_pricing.models import (
    BASE_CURRENCY,
    DiscountType,
    PromotionConditions,
    PromotionRule,
)
from cruise_pricing.services.eligibility_service import format_discount_text


class PromotionConditionsIn(BaseModel):
    """Optional eligibility predicates of a promotion."""

    min_booking_amount: Decimal | None = Field(default=None, ge=Decimal("0"))
    max_booking_amount: Decimal | None = Field(default=None, ge=Decimal("0"))
    min_guests: int | None = Field(default=None, ge=0)
    max_guests: int | None = Field(default=None, ge=0)
    min_seniors: int | None = Field(default=None, ge=0)
    max_children: int | None = Field(default=None, ge=0)
    early_booking_days: int | None = Field(default=None, ge=0)
    last_minute_days: int | None = Field(default=None, ge=0)
    required_coupon_code: str | None = Field(
        default=None,
        validation_alias=AliasChoices("required_coupon_code", "coupon_code"),
    )
    cruise_lines: list[str] = Field(default_factory=list)
    destinations: list[str] = Field(default_factory=list)
    cabin_types: list[str] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid", from_attributes=True)

    def to_domain(self) -> PromotionConditions:
        return PromotionConditions(
            min_booking_amount=self.min_booking_amount,
            max_booking_amount=self.max_booking_amount,
            min_guests=self.min_guests,
            max_guests=self.max_guests,
            min_seniors=self.min_seniors,
            max_children=self.max_children,
            early_booking_days=self.early_booking_days,
            last_minute_days=self.last_minute_days,
            required_coupon_code=self.required_coupon_code,
            cruise_lines=tuple(self.cruise_lines),
            destinations=tuple(self.destinations),
            cabin_types=tuple(self.cabin_types),
        )


class PromotionRuleIn(BaseModel):
    """Promotion definition supplied inline or loaded from the catalog."""

    id: str = Field(min_length=1)
    name: str
    description: str = ""
    discount_type: DiscountType
    discount_value: Decimal = Field(ge=Decimal("0"))
    max_discount: Decimal | None = Field(default=None, ge=Decimal("0"))
    conditions: PromotionConditionsIn = Field(default_factory=PromotionConditionsIn)
    valid_from: datetime.datetime | datetime.date
    valid_to: datetime.datetime | datetime.date
    is_active: bool = True
    is_combinable: bool = False
    priority: int = 0
    max_uses: int | None = Field(default=None, ge=0)
    current_uses: int = Field(default=0, ge=0)

    @field_validator("discount_type", mode="before")
    @classmethod
    def _parse_discount_type(cls, value: Any) -> Any:
        if isinstance(value, str):
            return DiscountType(value)
        return value

    @field_validator("valid_from", "valid_to", mode="before")
    @classmethod
    def _parse_plain_date(cls, value: Any) -> Any:
        # "2025-06-30" is a whole day, not midnight.
        if isinstance(value, str) and len(value.strip()) == 10:
            return datetime.date.fromisoformat(value.strip())
        return value

    def to_domain(self) -> PromotionRule:
        """Build the validated domain rule; raises ``InvalidPromotionRule``."""
        return PromotionRule(
            id=self.id,
            name=self.name,
            description=self.description,
            discount_type=self.discount_type,
            discount_value=self.discount_value,
            max_discount=self.max_discount,
            conditions=self.conditions.to_domain(),
            valid_from=self.valid_from,
            valid_to=self.valid_to,
            is_active=self.is_active,
            is_combinable=self.is_combinable,
            priority=self.priority,
            max_uses=self.max_uses,
            current_uses=self.current_uses,
        )


class PromotionRead(BaseModel):
    """Serialized promotion for listings."""

    id: str
    name: str
    description: str
    discount_type: DiscountType
    discount_value: Decimal
    max_discount: Decimal | None = None
    conditions: PromotionConditionsIn
    valid_from: datetime.datetime
    valid_to: datetime.datetime
    is_combinable: bool
    priority: int
    requires_coupon: bool
    display_text: str

    @classmethod
    def from_rule(cls, rule: PromotionRule, currency: str = BASE_CURRENCY) -> PromotionRead:
        # Listings never expose coupon codes.
        conditions = PromotionConditionsIn.model_validate(rule.conditions).model_copy(
            update={"required_coupon_code": None}
        )
        return cls(
            id=rule.id,
            name=rule.name,
            description=rule.description,
            discount_type=rule.discount_type,
            discount_value=rule.discount_value,
            max_discount=rule.max_discount,
            conditions=conditions,
            valid_from=rule.valid_from,
            valid_to=rule.valid_to,
            is_combinable=rule.is_combinable,
            priority=rule.priority,
            requires_coupon=rule.conditions.required_coupon_code is not None,
            display_text=format_discount_text(rule, currency),
        )
