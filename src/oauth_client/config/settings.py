"""Configuration Settings for the OAuth client service

Manages environment variables and application configuration.
"""

from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Service info
    service_name: str = "ozwillo-oauth-client"
    service_version: str = "1.0.0"
    environment: str = "development"

    # Server configuration
    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False

    # OAuth client registration
    oauth_provider: str = "ozwillo"
    oauth_client_id: Optional[str] = None
    oauth_client_secret: Optional[str] = None
    oauth_redirect_uri: Optional[str] = None
    oauth_scopes: list[str] = []  # added after the provider's default scopes

    # Ozwillo accounts host (preprod by default)
    ozwillo_base_url: str = "https://accounts.ozwillo-preprod.eu"

    # CORS (browser front-ends calling /login/initiate)
    cors_origins: list[str] = ["*"]
    cors_allow_credentials: bool = True
    cors_allow_methods: list[str] = ["*"]
    cors_allow_headers: list[str] = ["*"]

    # HTTP transport
    http_timeout_seconds: float = 30.0
    http_verify_tls: bool = True

    # Logging
    log_level: str = "INFO"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance

    Returns:
        Settings instance
    """
    return Settings()
