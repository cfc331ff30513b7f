"""Application configuration using Pydantic Settings."""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ControlSettings(BaseSettings):
    """Defaults applied to control properties left blank by the form designer."""

    model_config = SettingsConfigDict(env_prefix="CONTROL_")

    default_json_path: str = "$."
    default_headers: str = '{ "Accept" : "application/json" }'
    default_message: str = "Please select an option"
    dropdown_placeholder: str = "Select an option"


class HttpSettings(BaseSettings):
    """Outgoing HTTP settings."""

    model_config = SettingsConfigDict(env_prefix="HTTP_")

    verify_ssl: bool = True


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application
    app_name: str = "WebApi Controls"
    app_version: str = "2.0.0"
    debug: bool = False
    environment: Literal["development", "staging", "production"] = "development"

    # API
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    api_prefix: str = "/api/v1"
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])

    # Logging
    log_level: str = "INFO"
    log_format: Literal["json", "console"] = "console"

    # Sub-settings
    control: ControlSettings = Field(default_factory=ControlSettings)
    http: HttpSettings = Field(default_factory=HttpSettings)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
