"""Scan ingestion pipeline."""

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import uuid4

from scan_ingest.domain.errors import (
    DuplicateSuppressed,
    ParseError,
    ScanIngestError,
    ValidationFailure,
)
from scan_ingest.domain.scans import (
    IngestResult,
    ScanEvent,
    ScanOutcome,
    ScanRecord,
    ScanStatus,
    SessionContext,
    StudentSummary,
)
from scan_ingest.services.commits import BatchCommitter
from scan_ingest.services.dedup import DedupGate
from scan_ingest.services.payloads import PayloadParser
from scan_ingest.services.resolver import FieldResolver
from scan_ingest.services.validation import Validator

DEFAULT_MAX_BATCH_SIZE = 50

_logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class IngestionService:
    """Parses, classifies and commits batches of kiosk scans."""

    parser: PayloadParser
    resolver: FieldResolver
    validator: Validator
    dedup_gate: DedupGate
    committer: BatchCommitter
    max_batch_size: int = DEFAULT_MAX_BATCH_SIZE
    clock: Callable[[], datetime] = field(default=_utcnow)

    def ingest(
        self, context: SessionContext, events: Sequence[ScanEvent]
    ) -> IngestResult:
        """Ingest a batch of scans; events past the batch cap are dropped."""
        batch = list(events[: self.max_batch_size])
        if len(events) > len(batch):
            _logger.debug(
                "Batch truncated: received=%s kept=%s", len(events), len(batch)
            )
        return self._run(context, batch, dedup=False)

    def ingest_one(self, context: SessionContext, event: ScanEvent) -> IngestResult:
        """Ingest a single scan, suppressing rapid repeats."""
        return self._run(context, [event], dedup=True)

    def _run(
        self, context: SessionContext, events: list[ScanEvent], *, dedup: bool
    ) -> IngestResult:
        fallback_session = context.session_id or uuid4().hex
        records: list[ScanRecord] = []
        outcomes: list[ScanOutcome] = []
        marked: list[tuple[str, str]] = []
        for event in events:
            session_id = event.session_id or fallback_session
            record, outcome = self._process(context, event, session_id, dedup=dedup)
            outcomes.append(outcome)
            if record is None:
                continue
            records.append(record)
            if dedup and record.status == ScanStatus.OK:
                marked.append((session_id, record.identifier))

        try:
            appended = self.committer.commit(records)
        except ScanIngestError:
            for session_id, identifier in marked:
                self.dedup_gate.release(session_id, identifier)
            raise
        return IngestResult(appended=appended, results=outcomes)

    def _process(
        self,
        context: SessionContext,
        event: ScanEvent,
        session_id: str,
        *,
        dedup: bool,
    ) -> tuple[ScanRecord | None, ScanOutcome]:
        try:
            fragment = self.parser.parse(event.raw_payload)
        except ParseError as exc:
            return None, ScanOutcome(
                correlation_id=event.correlation_id,
                ok=False,
                status=ScanStatus.INVALID_JSON,
                message=str(exc),
            )

        resolved = self.resolver.resolve(
            fragment, event.grade_override, event.grad_year_override
        )
        status = ScanStatus.OK
        message: str | None = None
        try:
            self.validator.require(fragment.identifier)
            if dedup:
                self.dedup_gate.guard(session_id, fragment.identifier)
        except (ValidationFailure, DuplicateSuppressed) as exc:
            status = ScanStatus(exc.status)
            message = str(exc)

        record = ScanRecord(
            timestamp=self.clock(),
            session_id=session_id,
            club=event.club,
            operator=context.operator,
            row_number=event.row_number,
            row_position=event.row_position,
            identifier=fragment.identifier,
            first_name=fragment.first_name,
            last_name=fragment.last_name,
            grade=resolved.grade,
            grad_year=resolved.grad_year,
            raw_payload=event.raw_payload,
            status=status,
            note=event.note,
        )
        student = StudentSummary(
            identifier=fragment.identifier,
            first_name=fragment.first_name,
            last_name=fragment.last_name,
            grade=resolved.grade,
            grad_year=resolved.grad_year,
        )
        outcome = ScanOutcome(
            correlation_id=event.correlation_id,
            ok=status != ScanStatus.INVALID_ID,
            status=status,
            message=message,
            student=student,
            payload_mode=fragment.payload_mode,
        )
        return record, outcome
