"""Configuration management using Pydantic Settings"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(
        env_prefix="DEBT_POOL_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    # Service
    service_name: str = "debt-pool"
    log_level: str = "INFO"

    # Allocation
    default_cooperation_score: int = Field(default=5, ge=0, le=10)
    pool_payer_name: str = "Pool distribution"

    # Ledger document
    schema_version: str = "1.0.0"
    ledger_path: str = "ledger.json"


settings = Settings()
