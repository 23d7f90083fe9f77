"""Inference of grade and graduation year."""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date

from scan_ingest.domain.scans import IdentityFragment, ResolvedFields
from scan_ingest.services.validation import DEFAULT_ID_YEAR_DIGITS

_MIN_GRADE = 9
_MAX_GRADE = 12


@dataclass
class FieldResolver:
    """Fills missing grade and graduation year from partial data."""

    year_digits: int = DEFAULT_ID_YEAR_DIGITS
    rollover_month: int = 7
    today: Callable[[], date] = field(default=date.today)

    def resolve(
        self,
        fragment: IdentityFragment,
        grade_override: str | None = None,
        grad_year_override: str | None = None,
    ) -> ResolvedFields:
        """Return grade and graduation year, overrides first."""
        grade = _clean(grade_override) or fragment.grade
        grad_year = _clean(grad_year_override) or fragment.grad_year

        prefix = fragment.identifier[: self.year_digits]
        if not grad_year and len(prefix) == self.year_digits and prefix.isdigit():
            grad_year = prefix

        if not grade and len(grad_year) == 4 and grad_year.isdigit():  # noqa: PLR2004
            computed = 12 - (int(grad_year) - self.school_year_end())
            if _MIN_GRADE <= computed <= _MAX_GRADE:
                grade = str(computed)

        return ResolvedFields(grade=grade, grad_year=grad_year)

    def school_year_end(self) -> int:
        """Return the calendar year in which the current school year ends."""
        current = self.today()
        if current.month < self.rollover_month:
            return current.year
        return current.year + 1


def _clean(value: str | None) -> str:
    return (value or "").strip()
