from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Loading priority (highest to lowest):
    1. Environment variables
    2. .env file
    3. Default values below
    """

    # Environment
    environment: str = "development"
    debug: bool = True
    log_level: str = "INFO"

    # Application
    app_name: str = "GoLinks"
    app_version: str = "1.0.0"

    # Server
    host: str = "127.0.0.1"
    port: int = 8787

    # Database
    database_url: str = "sqlite:///./golinks.db"

    # Link resolution
    default_domain: str = "go"  # Seeded at startup, used when the host is unknown
    admin_prefix: str = "_"  # Keys may not start with "<prefix>/"

    # Template matching strategy
    template_matcher: Literal["regex", "scanner"] = "regex"

    # Dashboard readers
    recent_events_limit: int = 10
    miss_report_limit: int = 10

    # Pydantic v2 configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )


# Create settings instance
settings = Settings()
