"""Pydantic models for scan submission payloads."""

from pydantic import BaseModel, ConfigDict, Field

from scan_ingest.domain.scans import ScanEvent


class ScanEventIn(BaseModel):
    """One scan as captured by a kiosk."""

    model_config = ConfigDict(populate_by_name=True)

    raw: str = ""
    club: str = ""
    note: str = ""
    row_number: int | None = Field(default=None, alias="rowNumber")
    row_position: int | None = Field(default=None, alias="rowPosition")
    session_id: str | None = Field(default=None, alias="sessionId")
    grade: str | int | None = None
    grad_year: str | int | None = Field(default=None, alias="gradYear")
    client_id: str | None = Field(default=None, alias="clientId")

    def to_event(self) -> ScanEvent:
        """Convert to the domain event."""
        return ScanEvent(
            raw_payload=self.raw,
            club=self.club,
            note=self.note,
            row_number=self.row_number,
            row_position=self.row_position,
            session_id=self.session_id,
            correlation_id=self.client_id,
            grade_override=_text(self.grade),
            grad_year_override=_text(self.grad_year),
        )


class ScanBatchIn(BaseModel):
    """A batch of scans submitted in one request."""

    model_config = ConfigDict(populate_by_name=True)

    session_id: str | None = Field(default=None, alias="sessionId")
    events: list[ScanEventIn] = Field(default_factory=list)


def _text(value: str | int | None) -> str | None:
    if value is None:
        return None
    return str(value)
