"""
Configuration management for the eCFR agency statistics system.
"""

from typing import Optional
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
        populate_by_name=True,
    )

    # eCFR repository
    base_url: str = Field("https://www.ecfr.gov", alias="ECFR_BASE_URL")
    request_timeout: float = Field(30.0, alias="ECFR_REQUEST_TIMEOUT")
    user_agent: str = Field("EcfrAgencyStats/1.0", alias="ECFR_USER_AGENT")

    # Process cache; None keeps every entry for the life of the process
    cache_max_entries: Optional[int] = Field(None, alias="CACHE_MAX_ENTRIES")

    # Aggregation
    fetch_max_workers: int = Field(1, ge=1, alias="FETCH_MAX_WORKERS")
    paragraph_tag: str = Field("P", alias="PARAGRAPH_TAG")

    # Logging
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_json: bool = Field(True, alias="LOG_JSON")

    @property
    def api_root(self) -> str:
        """Base URL with any trailing slash removed."""
        return self.base_url.rstrip("/")


# Global settings instance
settings = Settings()
