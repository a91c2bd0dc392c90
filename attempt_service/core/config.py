"""
Application configuration settings.
"""

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Literal, Self


CredentialCarrierName = Literal["header", "cookie"]


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    APP_NAME: str = "Attempt Service API"
    APP_VERSION: str = "0.1.0"
    ENV: str = "development"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"

    # API
    API_V1_PREFIX: str = "/v1"

    # CORS
    CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
    ]

    # Security
    # IMPORTANT: Must be set in .env file - no default for security
    JWT_SECRET_KEY: str = Field(..., description="JWT signing secret key (required)")
    JWT_ALGORITHM: str = "HS256"
    # Claim holding the principal's identity in issued tokens
    JWT_IDENTITY_CLAIM: str = "id"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    # Credential carriers, searched in order. The first carrier that yields a
    # non-empty credential wins.
    AUTH_CREDENTIAL_CARRIERS: List[CredentialCarrierName] = ["header", "cookie"]
    AUTH_COOKIE_NAME: str = "token"

    # Attempt lifecycle guards (both off to match the legacy client contract)
    ENFORCE_SINGLE_ACTIVE_ATTEMPT: bool = Field(
        default=False,
        description="Reject creating an active attempt while another one exists",
    )
    ENFORCE_ATTEMPT_OWNERSHIP: bool = Field(
        default=False,
        description="Reject requests whose user_id differs from the token identity",
    )

    # Sentry Error Tracking
    SENTRY_DSN: str = Field(
        default="",
        description="Sentry DSN for error tracking (leave empty to disable)",
    )
    SENTRY_TRACES_SAMPLE_RATE: float = Field(
        default=0.1,
        ge=0.0,
        le=1.0,
        description="Sentry traces sample rate (0.0-1.0, 0.1 = 10% of transactions)",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",  # Ignore extra fields from .env not defined in Settings
    )

    @field_validator("CORS_ORIGINS")
    @classmethod
    def normalize_cors_origins(cls, v: List[str]) -> List[str]:
        """Strip trailing slashes so 'https://x.app/' and 'https://x.app' match."""
        return [origin.rstrip("/") for origin in v]

    @model_validator(mode="after")
    def validate_credential_carriers(self) -> Self:
        """Validate AUTH_CREDENTIAL_CARRIERS: non-empty, no duplicates."""
        carriers = self.AUTH_CREDENTIAL_CARRIERS
        if not carriers:
            raise ValueError("AUTH_CREDENTIAL_CARRIERS must name at least one carrier")
        if len(set(carriers)) != len(carriers):
            raise ValueError(
                f"AUTH_CREDENTIAL_CARRIERS must not repeat a carrier, got {carriers}"
            )
        return self


# mypy doesn't understand that pydantic_settings loads required fields from env vars
settings = Settings()  # type: ignore[call-arg]
