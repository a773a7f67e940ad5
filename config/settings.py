"""
Configuration Settings

Centralized configuration management using Pydantic and environment variables.
"""
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Vebra credentials should be stored in the .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Vebra API credentials
    vebra_username: Optional[str] = None
    vebra_password: Optional[str] = None
    vebra_datafeed_id: Optional[str] = None

    # Vebra API settings
    vebra_base_url: str = "http://webservices.vebra.com/export"
    vebra_api_version: str = "v10"
    request_timeout: float = 30.0

    # Logging settings
    log_level: str = "INFO"
    log_format: str = "json"

    # Application settings
    environment: str = "development"
    debug: bool = False


# Singleton instance
settings = Settings()
