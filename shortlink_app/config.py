from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Loading priority (highest to lowest):
    1. Environment variables (prefixed with SHORTLINK_)
    2. .env file
    3. Default values below
    """

    # Environment
    environment: str = "development"
    debug: bool = True

    # Application
    app_name: str = "Shortlink"
    app_version: str = "1.0.0"

    # Server
    host: str = "127.0.0.1"
    port: int = 8000

    # Database
    database_url: str = "sqlite:///./shortlink.db"
    repository_backend: str = "sql"  # Options: "sql", "memory"

    # Short code allocation
    base_url: str = "http://127.0.0.1:8000"
    short_code_length: int = Field(default=8, ge=1, le=10)  # short_code column is VARCHAR(10)
    max_attempts: int = Field(default=10, ge=1)
    dedup_long_urls: bool = False  # Reuse an existing mapping for an identical long URL
    allocation_timeout: float = 5.0  # Seconds before a request stops starting new attempts

    # Anonymous sessions (JWT)
    jwt_secret: str = "change-me-in-production"
    jwt_algorithm: str = "HS256"
    session_ttl_days: int = 30
    session_cookie_name: str = "auth_token"

    # Logging
    log_level: str = "INFO"
    log_file: str = ""
    log_json: bool = False

    # Pydantic v2 configuration
    model_config = SettingsConfigDict(
        env_prefix="SHORTLINK_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @property
    def cookie_secure(self) -> bool:
        """Session cookies are only sent over HTTPS outside development"""
        return self.environment != "development"


# Create settings instance
settings = Settings()
