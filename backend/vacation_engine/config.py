import logging
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

LOG_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = "Vacation Engine"
    app_version: str = "0.1.0"
    debug: bool = False
    environment: Literal["development", "staging", "production"] = "development"
    cors_origins: list[str] = ["http://localhost:5173", "http://localhost:8000"]
    log_level: str = "INFO"

    database_url: str = "postgresql+asyncpg://vacation_engine:vacation_engine@db:5432/vacation_engine"
    db_pool_size: int = 5
    db_max_overflow: int = 10
    db_statement_timeout_seconds: float = 30.0

    # Local calendar used to resolve "today" for eligibility, capacity and elapse checks.
    timezone: str = "America/Sao_Paulo"

    # Accrual rules. Every contract model accrues the same entitlement unless overridden.
    annual_entitlement_days: int = 30
    entitlement_by_model: dict[str, int] = {}
    pj_accumulation_warning_days: int = 30
    enforce_vacation_balance: bool = True

    worker_interval_seconds: int = 3600


_settings: Settings | None = None


def get_settings() -> Settings:
    """Return cached settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def configure_logging(settings: Settings) -> None:
    """Root logging for the API process and the worker."""
    logging.basicConfig(level=settings.log_level.upper(), format=LOG_FORMAT)
    if not settings.debug:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
