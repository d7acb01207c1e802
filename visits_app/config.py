from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Optional


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
    app_name: str = "AI Docs Visits"
    app_version: str = "1.0.0"
    cors_origins: List[str] = ["*"]

    # Analytics Engine SQL API (only /query needs these)
    cf_account_id: Optional[str] = None
    cf_api_token: Optional[str] = None
    analytics_api_base: str = "https://api.cloudflare.com/client/v4"

    # Dataset names (also the table names the SQL API exposes)
    raw_events_dataset: str = "ai_docs_raw_events"
    visits_dataset: str = "ai_docs_visits"

    # Dataset sink settings
    sink_backend: str = "sqlite"  # Options: "memory", "sqlite", "clickhouse"
    sink_sqlite_path: str = "visits.db"
    sink_clickhouse_url: str = "http://localhost:8123"  # ClickHouse HTTP endpoint
    sink_clickhouse_database: str = "ai_docs"

    # Raw capture
    max_header_length: int = 500  # user_agent / accept_header truncation

    # Pydantic v2 configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )


# Create settings instance
settings = Settings()
