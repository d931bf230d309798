"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Service
    service_name: str = "receivables-risk"
    log_level: str = "INFO"

    # Remote CSV import
    http_timeout_seconds: float = 5.0
    csv_source_max_bytes: int = 20_000_000

    # In-memory store; oldest portfolios are evicted past this count
    max_portfolios: int = 100


settings = Settings()
