"""
India Disaster Response - Configuration Management
Centralized configuration using pydantic-settings.
"""

from functools import lru_cache
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_env: str = "development"
    debug: bool = True
    log_level: str = "INFO"

    # Twilio (primary SMS provider)
    twilio_account_sid: Optional[str] = None
    twilio_auth_token: Optional[str] = None
    twilio_phone_number: Optional[str] = None

    # Fast2SMS (secondary SMS provider, bulk only)
    fast2sms_api_key: Optional[str] = None
    fast2sms_url: str = "https://www.fast2sms.com/dev/bulkV2"

    # Comma-separated numbers alerted for SMS-originated reports
    rescue_crew_numbers: str = ""

    # AI image verification (OpenAI-compatible chat completions gateway)
    ai_gateway_api_key: Optional[str] = None
    ai_gateway_url: str = "https://ai.gateway.lovable.dev/v1/chat/completions"
    ai_model: str = "google/gemini-2.5-flash"

    # Database
    database_url: Optional[str] = None

    # Phone numbering plan
    country_code: str = "91"

    # Network timeouts
    sms_timeout_seconds: float = 15.0
    verification_timeout_seconds: float = 30.0

    # API Settings
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    @property
    def rescue_numbers(self) -> List[str]:
        """Configured rescue-crew numbers, blanks removed."""
        return [n.strip() for n in self.rescue_crew_numbers.split(",") if n.strip()]

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()
