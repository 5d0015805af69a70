"""Application configuration via pydantic settings."""

from functools import lru_cache
from pathlib import Path

from typing import Any

from pydantic import Field
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Typed application configuration."""

    app_env: str = Field("local", alias="APP_ENV")
    app_name: str = "ShareNest API"
    api_v1_prefix: str = "/api/v1"

    database_url: str = Field(..., alias="DATABASE_URL")
    sync_database_url: str | None = Field(default=None, alias="SYNC_DATABASE_URL")
    database_timeout_seconds: float = Field(10.0, alias="DATABASE_TIMEOUT_SECONDS")

    secret_key: str = Field(..., alias="SECRET_KEY")
    jwt_secret_key: str = Field(default="", alias="JWT_SECRET_KEY")
    jwt_algorithm: str = Field("HS256", alias="JWT_ALGORITHM")
    access_token_expire_minutes: int = Field(60, alias="ACCESS_TOKEN_EXPIRE_MINUTES")

    redis_url: str | None = Field(default=None, alias="REDIS_URL")

    stripe_publishable_key: str | None = Field(
        default=None, alias="STRIPE_PUBLISHABLE_KEY"
    )
    stripe_secret_key: str | None = Field(default=None, alias="STRIPE_SECRET_KEY")
    payment_currency: str = Field("jpy", alias="PAYMENT_CURRENCY")
    payment_minimum_amount: int = Field(50, ge=0, alias="PAYMENT_MINIMUM_AMOUNT")
    payment_gateway_timeout_seconds: float = Field(
        10.0, gt=0, alias="PAYMENT_GATEWAY_TIMEOUT_SECONDS"
    )
    payment_gateway_max_retries: int = Field(
        1, ge=0, le=3, alias="PAYMENT_GATEWAY_MAX_RETRIES"
    )

    insurance_flat_fee: int = Field(1000, ge=0, alias="INSURANCE_FLAT_FEE")
    default_pickup_point: str = Field("Kyoto Station", alias="DEFAULT_PICKUP_POINT")
    booking_start_offset_hours: int = Field(
        24, ge=0, alias="BOOKING_START_OFFSET_HOURS"
    )
    booking_requires_verified_license: bool = Field(
        default=False, alias="BOOKING_REQUIRES_VERIFIED_LICENSE"
    )

    admin_primary_email: str | None = Field(default=None, alias="ADMIN_PRIMARY_EMAIL")

    cors_allow_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:3000"],
        alias="CORS_ALLOW_ORIGINS",
    )
    cors_allow_credentials: bool = Field(default=False, alias="CORS_ALLOW_CREDENTIALS")
    cors_allowlist: list[str] = Field(
        default_factory=lambda: ["http://localhost:3000"], alias="CORS_ALLOWLIST"
    )

    rate_limit_default: str = Field("100/minute", alias="RATE_LIMIT_DEFAULT")
    rate_limit_login: str = Field("10/minute", alias="RATE_LIMIT_LOGIN")

    model_config = SettingsConfigDict(
        env_file=Path(__file__).resolve().parents[3] / ".env",
        case_sensitive=False,
        extra="ignore",
    )

    def model_post_init(self, __context: Any) -> None:
        """Populate JWT secret from the generic secret when not provided."""

        if not self.jwt_secret_key:
            object.__setattr__(self, "jwt_secret_key", self.secret_key)

    @field_validator("cors_allow_origins", "cors_allowlist", mode="before")
    @classmethod
    def _split_origins(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value

    @field_validator("payment_currency", mode="after")
    @classmethod
    def _lower_currency(cls, value: str) -> str:
        return value.lower()


@lru_cache
def get_settings() -> Settings:
    """Return a cached settings instance."""
    return Settings()  # type: ignore[call-arg]
