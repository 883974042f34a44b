"""
Application configuration.
Values come from environment variables, falling back to a local .env file so
development works without exporting anything.
"""
import logging
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    APP_ENV: str = "development"
    DATABASE_URL: str
    JWT_SECRET_KEY: str = ""
    LOG_LEVEL: str = "INFO"

    # Twilio SMS (booking confirmations / cancellations)
    TWILIO_ACCOUNT_SID: str = ""
    TWILIO_AUTH_TOKEN: str = ""
    TWILIO_PHONE_NUMBER: str = ""

    # Scheduling defaults
    DEFAULT_TIMEZONE: str = "UTC"
    DEFAULT_APPOINTMENT_DURATION: int = 60
    MAX_RECURRENCE_DAYS: int = 730

    class Config:
        env_file = ".env"


settings = Settings()

# Validate critical security settings
if not settings.JWT_SECRET_KEY:
    raise ValueError(
        "JWT_SECRET_KEY is not set. It must exist as a JWT_SECRET_KEY environment variable "
        "or in the .env file. "
        "Generate one with: python -c 'import secrets; print(secrets.token_urlsafe(32))'"
    )
