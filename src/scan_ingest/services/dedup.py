"""Time-windowed suppression of repeated scans."""

from dataclasses import dataclass

from scan_ingest.domain.errors import DuplicateSuppressed
from scan_ingest.services.cache import Cache

DEFAULT_DEDUP_WINDOW_SECONDS = 20


@dataclass(frozen=True)
class DedupResult:
    """Whether a scan repeats one seen inside the window."""

    is_duplicate: bool


@dataclass
class DedupGate:
    """Marks (session, identifier) pairs for a fixed window.

    Best effort only: two racing callers may both see the pair as new.
    """

    cache: Cache
    window_seconds: float = DEFAULT_DEDUP_WINDOW_SECONDS

    def check_and_mark(self, session_id: str, identifier: str) -> DedupResult:
        """Report a duplicate, or mark the pair as seen."""
        key = self._key(session_id, identifier)
        if self.cache.get(key) is not None:
            return DedupResult(is_duplicate=True)
        self.cache.set(key, True, ttl_seconds=self.window_seconds)
        return DedupResult(is_duplicate=False)

    def release(self, session_id: str, identifier: str) -> None:
        """Forget a mark whose scan was never committed."""
        self.cache.delete(self._key(session_id, identifier))

    def guard(self, session_id: str, identifier: str) -> None:
        """Raise DuplicateSuppressed if the pair was seen inside the window."""
        if self.check_and_mark(session_id, identifier).is_duplicate:
            raise DuplicateSuppressed(
                f"Duplicate scan ignored (within {self.window_seconds:g}s)"
            )

    @staticmethod
    def _key(session_id: str, identifier: str) -> str:
        return f"dedup:{session_id}:{identifier}"
