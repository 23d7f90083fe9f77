"""Expiring key-value cache abstractions."""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Protocol


class Cache(Protocol):
    """Cache interface for short-lived markers."""

    def get(self, key: str) -> object | None:
        """Return a cached value if present and not expired."""

    def set(self, key: str, value: object, ttl_seconds: float) -> None:
        """Store a cached value with a TTL in seconds."""

    def delete(self, key: str) -> None:
        """Remove a cached value if present."""


@dataclass
class _CacheEntry:
    value: object
    expires_at: datetime


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class InMemoryCache(Cache):
    """Process-local cache; expired entries are swept on write."""

    _entries: dict[str, _CacheEntry]
    _clock: Callable[[], datetime]

    def __init__(self, clock: Callable[[], datetime] = _utcnow) -> None:
        self._entries = {}
        self._clock = clock

    def get(self, key: str) -> object | None:
        """Return a cached value if it hasn't expired."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() >= entry.expires_at:
            self._entries.pop(key, None)
            return None
        return entry.value

    def set(self, key: str, value: object, ttl_seconds: float) -> None:
        """Store a cached value with a TTL."""
        now = self._clock()
        self._sweep(now)
        expires_at = now + timedelta(seconds=ttl_seconds)
        self._entries[key] = _CacheEntry(value=value, expires_at=expires_at)

    def delete(self, key: str) -> None:
        """Remove a cached value."""
        self._entries.pop(key, None)

    def __len__(self) -> int:
        return len(self._entries)

    def _sweep(self, now: datetime) -> None:
        expired = [k for k, v in list(self._entries.items()) if now >= v.expires_at]
        for key in expired:
            self._entries.pop(key, None)
