"""Serialized, all-or-nothing appends to the shared scan log."""

import logging
import threading
from collections.abc import Iterator, Sequence
from contextlib import AbstractContextManager, contextmanager
from dataclasses import dataclass, field
from typing import Protocol

from scan_ingest.domain.errors import LockTimeout
from scan_ingest.domain.scans import ScanRecord

DEFAULT_LOCK_TIMEOUT_SECONDS = 10.0

_logger = logging.getLogger(__name__)


class ScanLogStore(Protocol):
    """Append-only persistence for scan records."""

    def append_records(self, records: Sequence[ScanRecord]) -> int:
        """Append all records in order as one unit and return the count.

        Raises StoreUnavailable if the log cannot be written; in that case
        no record is visible.
        """


class CommitLock(Protocol):
    """Mutual exclusion around the scan log append."""

    def hold(self, timeout_seconds: float) -> AbstractContextManager[None]:
        """Hold the lock for the block, or raise LockTimeout."""


@dataclass
class ThreadCommitLock(CommitLock):
    """Commit lock shared by the worker threads of one process."""

    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    @contextmanager
    def hold(self, timeout_seconds: float) -> Iterator[None]:
        """Hold the lock for the block, or raise LockTimeout."""
        if not self._lock.acquire(timeout=timeout_seconds):
            raise LockTimeout(
                f"Scan log is busy (waited {timeout_seconds:g}s); retry the batch"
            )
        try:
            yield
        finally:
            self._lock.release()


@dataclass
class BatchCommitter:
    """Appends a batch of records under the commit lock."""

    store: ScanLogStore
    lock: CommitLock
    lock_timeout_seconds: float = DEFAULT_LOCK_TIMEOUT_SECONDS

    def commit(self, records: Sequence[ScanRecord]) -> int:
        """Append records in one write and return how many were appended."""
        if not records:
            return 0
        try:
            with self.lock.hold(self.lock_timeout_seconds):
                appended = self.store.append_records(records)
        except LockTimeout:
            _logger.warning(
                "Scan log lock timed out: batch of %s not appended", len(records)
            )
            raise
        _logger.info("Scan log append: rows=%s", appended)
        return appended
