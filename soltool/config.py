"""
Service configuration.

Priority: Environment variables > Pydantic defaults
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Process-level settings. The request pipeline reads none of these."""

    model_config = SettingsConfigDict(
        case_sensitive=False,
        extra="ignore",
    )

    host: str = Field(default="0.0.0.0")
    port: int = Field(
        default=3000,
        ge=1,
        le=65535,
        description="Listening port (env PORT)",
    )
    log_level: str = Field(default="info")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        allowed = ["debug", "info", "warning", "error", "critical"]
        v_lower = v.lower()
        if v_lower not in allowed:
            raise ValueError(f"Invalid log_level. Must be one of: {allowed}")
        return v_lower


@lru_cache
def get_settings() -> Settings:
    """Get singleton settings instance."""
    return Settings()
