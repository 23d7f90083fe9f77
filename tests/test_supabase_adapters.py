"""Tests for the Supabase scan log adapter."""

from dataclasses import dataclass, field
from datetime import UTC, datetime

import httpx
import pytest

from scan_ingest.adapters.supabase_scan_log_repository import (
    SupabaseScanLogRepository,
)
from scan_ingest.domain.errors import StoreUnavailable
from scan_ingest.domain.scans import ScanEvent, ScanRecord, ScanStatus, SessionContext
from tests.conftest import make_service


@dataclass
class FakeResponse:
    data: list[dict[str, object]] | None


@dataclass
class FakeTable:
    name: str
    payloads: list[object] = field(default_factory=list)
    error: Exception | None = None
    echo: bool = True

    def insert(self, payload) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.payloads.append(payload)
        return self

    def execute(self) -> FakeResponse:
        if self.error is not None:
            raise self.error
        if not self.echo:
            return FakeResponse(data=[])
        return FakeResponse(data=list(self.payloads[-1]))


@dataclass
class FakeSupabaseClient:
    tables: dict[str, FakeTable] = field(default_factory=dict)

    def table(self, name: str) -> FakeTable:
        if name not in self.tables:
            self.tables[name] = FakeTable(name=name)
        return self.tables[name]


def _record(identifier: str, status: ScanStatus = ScanStatus.OK) -> ScanRecord:
    return ScanRecord(
        timestamp=datetime(2025, 10, 1, 9, 30, tzinfo=UTC),
        session_id="session-1",
        club="Robotics",
        operator="kiosk-1",
        row_number=1,
        row_position=4,
        identifier=identifier,
        first_name="Ada",
        last_name="Lovelace",
        grade="11",
        grad_year="2027",
        raw_payload=f'{{"id": "{identifier}"}}',
        status=status,
        note="late arrival",
    )


def test_append_records_sends_one_bulk_insert() -> None:
    client = FakeSupabaseClient()
    repository = SupabaseScanLogRepository(client, table="scan_log")

    appended = repository.append_records(
        [_record("2027001"), _record("bad", ScanStatus.INVALID_ID)]
    )

    table = client.tables["scan_log"]
    assert appended == 2
    assert len(table.payloads) == 1
    rows = table.payloads[0]
    assert [row["student_id"] for row in rows] == ["2027001", "bad"]
    assert rows[1]["status"] == "INVALID_ID"
    assert rows[0]["timestamp"] == "2025-10-01T09:30:00+00:00"
    assert rows[0]["raw_payload"] == '{"id": "2027001"}'
    assert set(rows[0]) == {
        "timestamp",
        "session_id",
        "club",
        "operator",
        "row_number",
        "row_position",
        "student_id",
        "first_name",
        "last_name",
        "grade",
        "grad_year",
        "raw_payload",
        "status",
        "note",
    }


def test_append_records_empty_batch_is_noop() -> None:
    client = FakeSupabaseClient()
    repository = SupabaseScanLogRepository(client)

    assert repository.append_records([]) == 0
    assert client.tables == {}


def test_transport_error_maps_to_store_unavailable() -> None:
    client = FakeSupabaseClient()
    client.table("scan_log").error = httpx.ConnectError("connection refused")
    repository = SupabaseScanLogRepository(client)

    with pytest.raises(StoreUnavailable) as excinfo:
        repository.append_records([_record("2027001")])

    assert excinfo.value.retryable is False


def test_empty_echo_still_counts_written_rows() -> None:
    client = FakeSupabaseClient()
    client.table("scan_log").echo = False
    repository = SupabaseScanLogRepository(client)

    appended = repository.append_records([_record("2027001"), _record("2027002")])

    assert appended == 2
    assert len(client.tables["scan_log"].payloads) == 1


def test_rows_behind_empty_echo_keep_their_dedup_marks() -> None:
    client = FakeSupabaseClient()
    client.table("scan_log").echo = False
    service = make_service(SupabaseScanLogRepository(client))
    context = SessionContext(operator="kiosk-1", session_id="session-1")
    event = ScanEvent(raw_payload="2027001")

    first = service.ingest_one(context, event)
    second = service.ingest_one(context, event)

    assert first.appended == 1
    assert second.results[0].status == ScanStatus.DUPLICATE
    statuses = [rows[0]["status"] for rows in client.tables["scan_log"].payloads]
    assert statuses == ["OK", "DUPLICATE"]
