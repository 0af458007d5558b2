"""Application configuration using Pydantic Settings."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    database_url: str = "sqlite:///./packing_lists.db"

    # Organization
    organization_prefix: str = "QMP"
    organization_name: str = "QUALITY MEDIGEN PHARMACEUTICALS"
    financial_year_start_month: int = 4

    # Application
    log_level: str = "INFO"
    debug: bool = False

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )


settings = Settings()
