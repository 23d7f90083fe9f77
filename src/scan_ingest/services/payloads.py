"""Decoding of raw scan payloads."""

import json
from dataclasses import dataclass

from scan_ingest.domain.errors import ParseError
from scan_ingest.domain.scans import IdentityFragment, PayloadMode
from scan_ingest.services.validation import IdentifierFormat

# Historical key names, highest priority first.
FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "identifier": ("id", "studentId", "sid"),
    "first_name": ("first", "firstName", "f"),
    "last_name": ("last", "lastName", "l"),
    "grade": ("grade", "Grade"),
    "grad_year": ("gradYear", "graduationYear", "grad_year"),
}


@dataclass
class PayloadParser:
    """Turns a raw QR or typed payload into an identity fragment."""

    id_format: IdentifierFormat

    def parse(self, raw: str) -> IdentityFragment:
        """Decode a raw payload, raising ParseError if it is unusable."""
        trimmed = (raw or "").strip()
        if self.id_format.matches(trimmed):
            return IdentityFragment(
                identifier=trimmed, payload_mode=PayloadMode.ID_ONLY
            )
        if not trimmed:
            raise ParseError("Empty payload")
        try:
            decoded = json.loads(trimmed)
        except (ValueError, RecursionError) as exc:
            raise ParseError("Payload is not an ID or JSON object") from exc
        if not isinstance(decoded, dict):
            raise ParseError("Payload JSON must be an object")
        fields = {
            name: _lookup(decoded, aliases) for name, aliases in FIELD_ALIASES.items()
        }
        return IdentityFragment(payload_mode=PayloadMode.JSON, **fields)


def _lookup(payload: dict[str, object], aliases: tuple[str, ...]) -> str:
    for key in aliases:
        value = _to_text(payload.get(key))
        if value:
            return value
    return ""


def _to_text(value: object) -> str:
    if value is None or isinstance(value, bool):
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, str | int | float):
        return str(value).strip()
    return ""
