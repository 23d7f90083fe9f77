"""Dependency container wiring for the application."""

from dataclasses import dataclass

from supabase import create_client

from scan_ingest.adapters.supabase_scan_log_repository import (
    SupabaseScanLogRepository,
)
from scan_ingest.config import ScanConfig, Settings
from scan_ingest.services.cache import InMemoryCache
from scan_ingest.services.commits import (
    BatchCommitter,
    ScanLogStore,
    ThreadCommitLock,
)
from scan_ingest.services.dedup import DedupGate
from scan_ingest.services.ingestion import IngestionService
from scan_ingest.services.payloads import PayloadParser
from scan_ingest.services.resolver import FieldResolver
from scan_ingest.services.validation import IdentifierFormat, Validator


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    scan_config: ScanConfig
    scan_log: ScanLogStore
    ingestion_service: IngestionService


def build_ingestion_service(
    settings: Settings, scan_log: ScanLogStore
) -> IngestionService:
    """Wire the ingestion pipeline around a scan log store."""
    id_format = IdentifierFormat(
        pattern=settings.id_pattern, year_digits=settings.id_year_digits
    )
    committer = BatchCommitter(
        store=scan_log,
        lock=ThreadCommitLock(),
        lock_timeout_seconds=settings.lock_timeout_seconds,
    )
    return IngestionService(
        parser=PayloadParser(id_format),
        resolver=FieldResolver(
            year_digits=settings.id_year_digits,
            rollover_month=settings.school_year_rollover_month,
        ),
        validator=Validator(id_format),
        dedup_gate=DedupGate(
            cache=InMemoryCache(), window_seconds=settings.dedup_window_seconds
        ),
        committer=committer,
        max_batch_size=settings.max_batch_size,
    )


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    scan_log = SupabaseScanLogRepository(
        supabase_client, table=resolved_settings.scan_log_table
    )
    return AppContainer(
        settings=resolved_settings,
        scan_config=ScanConfig.from_settings(resolved_settings),
        scan_log=scan_log,
        ingestion_service=build_ingestion_service(resolved_settings, scan_log),
    )
