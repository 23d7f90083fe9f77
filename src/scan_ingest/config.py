"""Application configuration."""

import os
from dataclasses import dataclass

from pydantic_settings import BaseSettings, SettingsConfigDict

from scan_ingest.services.commits import DEFAULT_LOCK_TIMEOUT_SECONDS
from scan_ingest.services.dedup import DEFAULT_DEDUP_WINDOW_SECONDS
from scan_ingest.services.ingestion import DEFAULT_MAX_BATCH_SIZE
from scan_ingest.services.validation import DEFAULT_ID_PATTERN, DEFAULT_ID_YEAR_DIGITS

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    scan_log_table: str = "scan_log"
    id_pattern: str = DEFAULT_ID_PATTERN
    id_year_digits: int = DEFAULT_ID_YEAR_DIGITS
    dedup_window_seconds: float = DEFAULT_DEDUP_WINDOW_SECONDS
    max_batch_size: int = DEFAULT_MAX_BATCH_SIZE
    lock_timeout_seconds: float = DEFAULT_LOCK_TIMEOUT_SECONDS
    school_year_rollover_month: int = 7
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


@dataclass(frozen=True)
class ScanConfig:
    """Settings published to kiosk clients so they can pre-filter scans."""

    id_pattern: str
    id_year_digits: int
    dedup_window_seconds: float
    max_batch_size: int

    @classmethod
    def from_settings(cls, settings: Settings) -> "ScanConfig":
        """Build the published config from application settings."""
        return cls(
            id_pattern=settings.id_pattern,
            id_year_digits=settings.id_year_digits,
            dedup_window_seconds=settings.dedup_window_seconds,
            max_batch_size=settings.max_batch_size,
        )

    def to_payload(self) -> dict[str, object]:
        """Return the camelCase payload served to clients."""
        return {
            "idPattern": self.id_pattern,
            "idYearDigits": self.id_year_digits,
            "dedupWindowSeconds": self.dedup_window_seconds,
            "maxBatchSize": self.max_batch_size,
        }
