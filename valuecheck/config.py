from typing import Final

from pydantic import Field, computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import DEFAULT_LOG_DIR, DEFAULT_SLEEP_FALLBACK_MS

_LOG_LEVELS: Final = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


class Settings(BaseSettings):
    """Library settings loaded from environment variables and .env files."""

    # Application configuration
    app_name: str = Field(default="valuecheck", description="Library name")
    version: str = Field(default="0.1.0", description="Library version")
    debug: bool = Field(default=False, description="Enable debug mode")

    # Logging configuration
    log_level: str | None = Field(
        default=None, description="Log level override (defaults from debug mode)"
    )
    log_to_file: bool = Field(
        default=False, description="Force logging to file even in debug mode"
    )
    log_dir: str = Field(
        default=DEFAULT_LOG_DIR, description="Directory for the log file"
    )

    # Helper configuration
    sleep_fallback_ms: int = Field(
        default=DEFAULT_SLEEP_FALLBACK_MS,
        ge=1,
        description="Delay used by sleep() when given an invalid duration "
        "in lenient mode",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str | None) -> str | None:
        """Normalize the log level name and reject unknown ones."""
        if v is None:
            return v
        level = v.strip().upper()
        if level not in _LOG_LEVELS:
            raise ValueError(
                f"log_level must be one of {', '.join(sorted(_LOG_LEVELS))}"
            )
        return level

    # Pydantic Settings configuration
    model_config = SettingsConfigDict(
        env_prefix="VALUECHECK_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @computed_field  # type: ignore[prop-decorator]
    @property
    def effective_log_level(self) -> str:
        """Get the log level in effect, falling back to the debug flag."""
        if self.log_level:
            return self.log_level
        return "DEBUG" if self.debug else "INFO"


# Global settings instance
settings: Final = Settings()
