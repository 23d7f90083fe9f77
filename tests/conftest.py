"""Shared test fixtures."""

from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import UTC, date, datetime, timedelta

import pytest

from scan_ingest.config import ScanConfig, Settings
from scan_ingest.containers import AppContainer
from scan_ingest.domain.errors import StoreUnavailable
from scan_ingest.domain.scans import ScanRecord, SessionContext
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

# School year 2025-26: seniors graduate in 2026.
TODAY = date(2025, 10, 1)


@dataclass
class InMemoryScanLog(ScanLogStore):
    """In-memory scan log for tests."""

    records: list[ScanRecord] = field(default_factory=list)
    append_calls: int = 0

    def append_records(self, records: Sequence[ScanRecord]) -> int:
        self.append_calls += 1
        self.records.extend(records)
        return len(records)


@dataclass
class UnavailableScanLog(ScanLogStore):
    """Scan log that always fails to append."""

    append_calls: int = 0

    def append_records(self, records: Sequence[ScanRecord]) -> int:
        self.append_calls += 1
        raise StoreUnavailable("Scan log 'scan_log' is unavailable")


@dataclass
class FakeClock:
    """Manually advanced UTC clock."""

    now: datetime = field(
        default_factory=lambda: datetime(2025, 10, 1, 9, 0, tzinfo=UTC)
    )

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now = self.now + timedelta(seconds=seconds)


def make_service(
    scan_log: ScanLogStore,
    clock: FakeClock | None = None,
    lock: ThreadCommitLock | None = None,
    max_batch_size: int = 50,
) -> IngestionService:
    resolved_clock = clock or FakeClock()
    id_format = IdentifierFormat()
    return IngestionService(
        parser=PayloadParser(id_format),
        resolver=FieldResolver(today=lambda: TODAY),
        validator=Validator(id_format),
        dedup_gate=DedupGate(cache=InMemoryCache(clock=resolved_clock)),
        committer=BatchCommitter(
            store=scan_log,
            lock=lock or ThreadCommitLock(),
            lock_timeout_seconds=0.05,
        ),
        max_batch_size=max_batch_size,
        clock=resolved_clock,
    )


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="header.payload.signature",
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def scan_log() -> InMemoryScanLog:
    return InMemoryScanLog()


@pytest.fixture
def ingestion_service(
    scan_log: InMemoryScanLog, clock: FakeClock
) -> IngestionService:
    return make_service(scan_log, clock)


@pytest.fixture
def context() -> SessionContext:
    return SessionContext(operator="kiosk-1@example.org", session_id="session-1")


@pytest.fixture
def container(
    settings: Settings,
    scan_log: InMemoryScanLog,
    ingestion_service: IngestionService,
) -> AppContainer:
    return AppContainer(
        settings=settings,
        scan_config=ScanConfig.from_settings(settings),
        scan_log=scan_log,
        ingestion_service=ingestion_service,
    )
