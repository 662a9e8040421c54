"""
Guard configuration using Pydantic Settings.
"""

from functools import lru_cache
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class GuardSettings(BaseSettings):
    """Resource guard settings."""

    model_config = SettingsConfigDict(
        env_prefix="GUARD_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # User resolution
    default_resolver: str = Field(
        default="default",
        description="Registered name of the resolver used with the call's Authentication",
    )
    authentication_params: list[str] = Field(
        default=["authentication", "auth", "principal"],
        description="Parameter names searched for the Authentication of a guarded call",
    )

    # Logging
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="text", description="json or text")

    # HTTP integration
    deny_status_code: int = Field(default=403, ge=400, le=499)
    expose_reason: bool = Field(
        default=False,
        description="Include the denial reason in HTTP responses",
    )

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        allowed = {"json", "text"}
        if v not in allowed:
            raise ValueError(f"log_format must be one of {allowed}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        v = v.upper()
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v not in allowed:
            raise ValueError(f"log_level must be one of {allowed}")
        return v


@lru_cache
def get_settings() -> GuardSettings:
    """Get cached settings instance."""
    return GuardSettings()
