"""
Centralized configuration for the Identa backend.

All settings are loaded from environment variables (and an optional .env file)
exactly once at startup. Keys without a default are required: a missing key
stops the process before it serves a single request.
"""

from functools import lru_cache
from typing import Optional

from pydantic import ValidationError as PydanticValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigurationError


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    # Application
    app_name: str = "Identa API"
    app_version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = 8080
    reload: bool = False

    # CORS settings
    cors_origins: list[str] = ["*"]
    cors_allow_credentials: bool = False
    cors_allow_methods: list[str] = ["GET", "POST", "PATCH", "DELETE"]
    cors_allow_headers: list[str] = ["*"]

    # Storage
    mongo_uri: str
    mongo_db_name: str
    redis_uri: str

    # Session tokens
    api_url: str = "http://localhost:3000"
    api_tokens_signing_key: str
    api_tokens_expiration_time: int = 86400  # seconds
    session_renew_grace_seconds: int = 30

    # Email verification
    email_verification_token_ttl: int = 86400  # seconds
    email_verification_url: str = "http://localhost:3000/api/me/emails/verify"
    enable_email_integration: bool = False

    # Lemon Squeezy
    lemonsqueezy_webhook_signature_key: str
    pro_product_id: int
    pro_monthly_variant_id: int
    pro_annually_variant_id: int

    # Brevo
    brevo_api_key: str = ""
    brevo_customers_list_id: Optional[int] = None
    brevo_email_verification_template_id: int = 1
    sender_email: str = "no-reply@localhost"
    sender_name: str = "Identa"

    # Google OAuth
    google_client_id: str = ""
    google_client_secret: str = ""
    google_redirect_url: str = ""

    # Outbound HTTP
    http_timeout_seconds: float = 10.0


def load_settings(**overrides) -> Settings:
    """
    Build a Settings instance, aggregating every problem into one error.

    Pydantic already collects all missing and malformed keys in a single
    ValidationError; this turns it into a ConfigurationError that names
    the environment variables instead of the model fields.

    Raises:
        ConfigurationError: If any required key is missing or invalid
    """
    try:
        settings = Settings(**overrides)
    except PydanticValidationError as e:
        missing = []
        invalid = []
        for error in e.errors():
            key = ".".join(str(part) for part in error["loc"]).upper()
            if error["type"] == "missing":
                missing.append(key)
            else:
                invalid.append(key)
        raise ConfigurationError(missing=missing, invalid=invalid) from e

    if not settings.api_tokens_signing_key:
        raise ConfigurationError(invalid=["API_TOKENS_SIGNING_KEY"])
    if not settings.lemonsqueezy_webhook_signature_key:
        raise ConfigurationError(invalid=["LEMONSQUEEZY_WEBHOOK_SIGNATURE_KEY"])

    return settings


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return load_settings()
