"""Configuration management using Pydantic Settings."""
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Application
    app_name: str = "Talent Assessment Reports"
    app_version: str = "1.0.0"
    debug: bool = False
    log_level: str = "INFO"

    # Snowflake
    snowflake_account: str = ""
    snowflake_user: str = ""
    snowflake_password: str = ""
    snowflake_database: str = "TALENT_ASSESSMENTS"
    snowflake_schema: str = "PUBLIC"
    snowflake_warehouse: str = "COMPUTE_WH"

    # Redis
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_db: int = 0

    # Cache TTLs (seconds)
    cache_ttl_report: int = 600  # 10 minutes

    # Name of the migration that provisions the report table, quoted in
    # the missing-schema message shown to operators
    report_migration_name: str = "003_report_data"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
