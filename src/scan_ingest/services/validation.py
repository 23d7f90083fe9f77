"""Identifier format contract and validation."""

import re
from dataclasses import dataclass, field

from scan_ingest.domain.errors import ValidationFailure

DEFAULT_ID_PATTERN = r"^20\d{5}$"
DEFAULT_ID_YEAR_DIGITS = 4


@dataclass(frozen=True)
class IdentifierFormat:
    """Shape a valid institutional id must match.

    The same instance backs the ID-only payload detection and validation.
    """

    pattern: str = DEFAULT_ID_PATTERN
    year_digits: int = DEFAULT_ID_YEAR_DIGITS
    _compiled: re.Pattern[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_compiled", re.compile(self.pattern))

    def matches(self, value: str) -> bool:
        """Return True if the value satisfies the format."""
        return self._compiled.fullmatch(value) is not None


@dataclass(frozen=True)
class ValidationResult:
    """Validation outcome for an identifier."""

    valid: bool


@dataclass
class Validator:
    """Classifies identifiers against the identifier format."""

    id_format: IdentifierFormat

    def validate(self, identifier: str) -> ValidationResult:
        """Return whether the identifier is acceptable."""
        return ValidationResult(valid=self.id_format.matches(identifier))

    def require(self, identifier: str) -> None:
        """Raise ValidationFailure if the identifier is not acceptable."""
        if not self.validate(identifier).valid:
            if not identifier:
                raise ValidationFailure("Missing student ID")
            raise ValidationFailure(f"Invalid student ID: {identifier}")
