"""
Configuration management using environment variables.
Handles database, token signing, seeding and logging settings with validation and defaults.
"""

from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEVELOPMENT = "Development"
PRODUCTION = "Production"


class BookstoreConfig(BaseSettings):
    """
    Configuration class for the bookstore service.
    Uses pydantic BaseSettings for environment variable management.

    Built once by the entry point and handed to every component that needs it.
    """

    # Database Configuration
    database_url: str = Field(default="sqlite+aiosqlite:///./bookstore.db")
    database_echo: bool = Field(default=False)
    database_auto_create: bool = Field(default=True)

    # Token Configuration
    jwt_secret: str = Field(default="change-me-to-a-long-random-secret-value")
    jwt_issuer: str = Field(default="bookstore-api")
    jwt_audience: str = Field(default="bookstore-clients")
    jwt_algorithm: str = Field(default="HS256")
    token_lifetime_minutes: int = Field(default=60)

    # Seeding Configuration
    admin_username: str = Field(default="admin")
    admin_password: str = Field(default="Admin123!")
    admin_email: str = Field(default="admin@bookstore.local")
    seed_books_csv: Optional[str] = Field(default=None)

    # Runtime
    environment: str = Field(default=PRODUCTION)

    # Logging Configuration
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="json")
    log_file: Optional[str] = Field(default=None)

    model_config = SettingsConfigDict(
        env_prefix="BOOKSTORE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    @field_validator("jwt_secret")
    @classmethod
    def validate_jwt_secret(cls, v):
        """HS256 keys shorter than 32 bytes are rejected."""
        if len(v.encode("utf-8")) < 32:
            raise ValueError("jwt_secret must be at least 32 bytes long")
        return v

    @field_validator("jwt_algorithm")
    @classmethod
    def validate_jwt_algorithm(cls, v):
        """Only HMAC algorithms are supported with a shared secret."""
        valid_algorithms = ["HS256", "HS384", "HS512"]
        if v.upper() not in valid_algorithms:
            raise ValueError(f"jwt_algorithm must be one of: {valid_algorithms}")
        return v.upper()

    @field_validator("token_lifetime_minutes")
    @classmethod
    def validate_token_lifetime(cls, v):
        """Ensure token lifetime is reasonable."""
        if v < 1 or v > 24 * 60:
            raise ValueError("token_lifetime_minutes must be between 1 and 1440")
        return v

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v):
        """Normalize the environment name."""
        valid_environments = [DEVELOPMENT, PRODUCTION]
        for name in valid_environments:
            if v.lower() == name.lower():
                return name
        raise ValueError(f"environment must be one of: {valid_environments}")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        """Ensure log level is valid."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"log_level must be one of: {valid_levels}")
        return v.upper()

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v):
        """Ensure log format is valid."""
        valid_formats = ["json", "console"]
        if v.lower() not in valid_formats:
            raise ValueError(f"log_format must be one of: {valid_formats}")
        return v.lower()

    def get_log_file_path(self) -> Optional[Path]:
        """Get log file path as Path object."""
        if self.log_file:
            return Path(self.log_file)
        return None

    def get_seed_books_path(self) -> Optional[Path]:
        """Get the books CSV path as Path object."""
        if self.seed_books_csv:
            return Path(self.seed_books_csv)
        return None

    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment == DEVELOPMENT
