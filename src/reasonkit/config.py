"""Configuration management for reasonkit using Pydantic settings.

This module handles runtime configuration, loading from environment
variables (prefixed with ``REASONKIT_``) and .env files with sensible
defaults.
"""

from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Main configuration settings for reasonkit.

    Settings are loaded from environment variables and .env files.
    Environment variables take precedence over .env file values.
    """

    model_config = SettingsConfigDict(
        env_prefix="REASONKIT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level for the library",
    )
    log_file: Path | None = Field(
        default=None,
        description="Optional file path to write logs (defaults to console only)",
    )
    log_json: bool = Field(
        default=False,
        description="Render console logs as JSON instead of the colored dev format",
    )

    # Module defaults
    react_max_steps: int = Field(
        default=10,
        description="Default step budget for the ReAct control loop",
        ge=1,
        le=100,
    )
    predict_max_retries: int = Field(
        default=3,
        description="Default request-level retry budget passed to the adapter",
        ge=0,
        le=20,
    )
    predict_max_output_retries: int = Field(
        default=0,
        description="Default output-validation retry budget passed to the adapter",
        ge=0,
        le=20,
    )

    # Trajectory rendering
    observation_max_items: int = Field(
        default=100,
        description="Maximum container elements shown when inspecting a tool observation",
        ge=1,
    )
    observation_max_chars: int = Field(
        default=2000,
        description="Maximum characters kept when inspecting a non-text tool observation",
        ge=16,
    )

    @field_validator("log_file", mode="before")
    @classmethod
    def expand_paths(cls, v: str | Path | None) -> Path | None:
        """Expand relative paths to absolute paths."""
        if v is None or v == "":
            return None
        path = Path(v)
        return path.expanduser().resolve()

    def model_dump_safe(self) -> dict[str, str | int | bool]:
        """Dump settings as a flat dictionary suitable for display."""
        return {
            "log_level": self.log_level,
            "log_file": str(self.log_file) if self.log_file else "-",
            "log_json": self.log_json,
            "react_max_steps": self.react_max_steps,
            "predict_max_retries": self.predict_max_retries,
            "predict_max_output_retries": self.predict_max_output_retries,
            "observation_max_items": self.observation_max_items,
            "observation_max_chars": self.observation_max_chars,
        }


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get the global settings instance.

    Creates and caches the settings on first call.

    Returns:
        Settings: The global settings instance
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reload_settings() -> Settings:
    """Reload settings from environment/files.

    Useful for testing or when configuration changes at runtime.

    Returns:
        Settings: The newly loaded settings instance
    """
    global _settings
    _settings = Settings()
    return _settings
