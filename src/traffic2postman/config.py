"""Configuration management with pydantic-settings."""

from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

POSTMAN_SCHEMA_URL = "https://schema.getpostman.com/json/collection/v2.1.0/collection.json"


class Traffic2PostmanSettings(BaseSettings):
    """traffic2postman application settings loaded from environment variables.

    All settings use the TRAFFIC2POSTMAN_ prefix for environment variables.
    """

    # Logging configuration
    log_level: str = Field(default="WARNING", description="Logging level")
    log_format: str = Field(
        default="console",
        description="Log output format: console or json",
    )

    # Output configuration
    output_file: str = Field(
        default="postman_out.json",
        description="Default path for the generated Postman collection",
    )
    schema_url: str = Field(
        default=POSTMAN_SCHEMA_URL,
        description="Postman collection schema URL written into collection info",
    )
    json_indent: int = Field(
        default=2,
        description="Indentation used when writing the collection JSON",
    )

    # Input discovery
    sniff_bytes: int = Field(
        default=256,
        description="Leading bytes of an .xml file inspected for the Burp signature",
    )

    model_config = SettingsConfigDict(
        env_prefix="TRAFFIC2POSTMAN_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    def __init__(self, **kwargs: Any) -> None:
        """Initialize settings and validate the log format."""
        super().__init__(**kwargs)
        if self.log_format not in {"console", "json"}:
            raise ValueError(
                f"Unsupported log format: {self.log_format}. Supported: console, json"
            )


# Global settings instance
_settings: Traffic2PostmanSettings | None = None


def get_settings() -> Traffic2PostmanSettings:
    """Get or create the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Traffic2PostmanSettings()
    return _settings


def reset_settings() -> None:
    """Reset the global settings instance (useful for testing)."""
    global _settings
    _settings = None
