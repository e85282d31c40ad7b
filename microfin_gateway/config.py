"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Service
    service_name: str = "microfin-gateway"
    log_level: str = "INFO"

    # Loan form default when a request omits the unit
    default_term_unit: str = "month"

    # Request size guard for ledger/report payloads
    max_ledger_postings: int = 10_000


settings = Settings()
