"""Application configuration via pydantic settings."""

from decimal import Decimal
from functools import lru_cache
from pathlib import Path

from typing import Annotated, Any

from pydantic import Field
from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from cruise_pricing.models import BASE_CURRENCY


class Settings(BaseSettings):
    """Typed application configuration."""

    app_env: str = Field("local", alias="APP_ENV")
    app_name: str = Field("Cruise Pricing API", alias="APP_NAME")
    api_v1_prefix: str = Field("/api/v1", alias="API_V1_PREFIX")
    log_level: str = Field("INFO", alias="LOG_LEVEL")

    tax_rate: Decimal = Field(Decimal("0.095"), ge=Decimal("0"), alias="TAX_RATE")
    gratuity_rate: Decimal = Field(
        Decimal("0.12"), ge=Decimal("0"), alias="GRATUITY_RATE"
    )
    base_currency: str = Field(BASE_CURRENCY, alias="BASE_CURRENCY")
    exchange_rates: dict[str, Decimal] = Field(
        default_factory=lambda: {
            "USD": Decimal("1"),
            "EUR": Decimal("0.85"),
            "SGD": Decimal("1.35"),
            "THB": Decimal("32.5"),
        },
        alias="EXCHANGE_RATES",
    )

    promotions_file: Path | None = Field(default=None, alias="PROMOTIONS_FILE")

    cors_allow_origins: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: [
            "http://localhost:5173",
            "http://localhost:5000",
        ],
        alias="CORS_ALLOW_ORIGINS",
    )
    cors_allow_credentials: bool = Field(default=False, alias="CORS_ALLOW_CREDENTIALS")

    model_config = SettingsConfigDict(
        env_file=Path(__file__).resolve().parents[2] / ".env",
        case_sensitive=False,
        populate_by_name=True,
    )

    @field_validator("cors_allow_origins", mode="before")
    @classmethod
    def _split_origins(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value

    @field_validator("exchange_rates")
    @classmethod
    def _normalize_rates(cls, value: dict[str, Decimal]) -> dict[str, Decimal]:
        normalized = {code.upper(): rate for code, rate in value.items()}
        for code, rate in normalized.items():
            if rate <= 0:
                raise ValueError(f"Exchange rate for {code} must be positive")
        return normalized

    @field_validator("base_currency")
    @classmethod
    def _upper_currency(cls, value: str) -> str:
        return value.strip().upper()

    @model_validator(mode="after")
    def _base_currency_has_rate(self) -> "Settings":
        if self.base_currency not in self.exchange_rates:
            raise ValueError(f"No exchange rate configured for {self.base_currency}")
        return self


@lru_cache
def get_settings() -> Settings:
    """Return a cached settings instance."""
    return Settings()
