"""Domain models for scan ingestion."""

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum


class ScanStatus(StrEnum):
    """Outcome status of a submitted scan."""

    OK = "OK"
    INVALID_ID = "INVALID_ID"
    DUPLICATE = "DUPLICATE"
    INVALID_JSON = "INVALID_JSON"


class PayloadMode(StrEnum):
    """How a payload was decoded."""

    ID_ONLY = "ID_ONLY"
    JSON = "JSON"


@dataclass(frozen=True)
class ScanEvent:
    """A raw scan submitted by a kiosk station."""

    raw_payload: str
    club: str = ""
    note: str = ""
    row_number: int | None = None
    row_position: int | None = None
    session_id: str | None = None
    correlation_id: str | None = None
    grade_override: str | None = None
    grad_year_override: str | None = None


@dataclass(frozen=True)
class SessionContext:
    """Caller context shared by every event in one ingestion call."""

    operator: str
    session_id: str | None = None


@dataclass(frozen=True)
class IdentityFragment:
    """Identity fields decoded from a payload."""

    identifier: str
    payload_mode: PayloadMode
    first_name: str = ""
    last_name: str = ""
    grade: str = ""
    grad_year: str = ""


@dataclass(frozen=True)
class ResolvedFields:
    """Grade and graduation year after overrides and inference."""

    grade: str
    grad_year: str


@dataclass(frozen=True)
class ScanRecord:
    """A row of the append-only scan log."""

    timestamp: datetime
    session_id: str
    club: str
    operator: str
    row_number: int | None
    row_position: int | None
    identifier: str
    first_name: str
    last_name: str
    grade: str
    grad_year: str
    raw_payload: str
    status: ScanStatus
    note: str

    def to_row(self) -> dict[str, object]:
        """Render the record using the log table column schema."""
        return {
            "timestamp": self.timestamp.isoformat(),
            "session_id": self.session_id,
            "club": self.club,
            "operator": self.operator,
            "row_number": self.row_number,
            "row_position": self.row_position,
            "student_id": self.identifier,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "grade": self.grade,
            "grad_year": self.grad_year,
            "raw_payload": self.raw_payload,
            "status": str(self.status),
            "note": self.note,
        }


@dataclass(frozen=True)
class StudentSummary:
    """Resolved identity echoed back to the caller."""

    identifier: str
    first_name: str
    last_name: str
    grade: str
    grad_year: str


@dataclass(frozen=True)
class ScanOutcome:
    """Per-event result returned to the caller."""

    correlation_id: str | None
    ok: bool
    status: ScanStatus
    message: str | None = None
    student: StudentSummary | None = None
    payload_mode: PayloadMode | None = None


@dataclass(frozen=True)
class IngestResult:
    """Result of one ingestion call."""

    appended: int
    results: list[ScanOutcome]
