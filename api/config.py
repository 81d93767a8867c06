"""
API server configuration settings.
"""

from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class APIConfig(BaseSettings):
    """HTTP server settings."""

    # API Settings
    api_title: str = "Bookstore API"
    api_version: str = "1.0.0"
    api_description: str = "CRUD API for a book catalog with token-based authentication"

    # Server Settings
    host: str = "0.0.0.0"
    port: int = 8000
    reload: bool = False

    # CORS Settings
    cors_origins: List[str] = ["*"]
    cors_allow_credentials: bool = False
    cors_allow_methods: List[str] = ["*"]
    cors_allow_headers: List[str] = ["*"]

    model_config = SettingsConfigDict(
        env_prefix="API_",
        env_file=".env",
        extra="ignore",
        frozen=True,
    )
