"""FallbackCache — in-memory store that keeps expired entries around for stale fallback.

An entry is *fresh* while ``now - stored_at < ttl`` and *present* until it is
deleted, cleared or the process restarts. Nothing is evicted on read.
"""
from __future__ import annotations

import time
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import Any

Clock = Callable[[], float]


@dataclass(frozen=True)
class CacheEntry:
    key: str
    value: Any
    stored_at: float

    def age(self, now: float) -> float:
        return now - self.stored_at


def is_fresh(entry: CacheEntry, ttl: float, now: float) -> bool:
    return now - entry.stored_at < ttl


class FallbackCache:

    def __init__(self, name: str, ttl: float, clock: Clock = time.time):
        self.name = name
        self.ttl = ttl
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}

    def now(self) -> float:
        return self._clock()

    def get(self, key: str) -> CacheEntry | None:
        return self._entries.get(key)

    def get_fresh(self, key: str, now: float | None = None) -> CacheEntry | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        return entry if is_fresh(entry, self.ttl, self.now() if now is None else now) else None

    def get_stale(self, key: str) -> CacheEntry | None:
        """Return the entry whatever its age; this is the fallback lookup."""
        return self._entries.get(key)

    def set(self, key: str, value: Any, now: float | None = None) -> CacheEntry:
        entry = CacheEntry(key=key, value=value, stored_at=self.now() if now is None else now)
        self._entries[key] = entry
        return entry

    def delete(self, key: str) -> bool:
        return self._entries.pop(key, None) is not None

    def clear(self) -> int:
        count = len(self._entries)
        self._entries.clear()
        return count

    def keys(self) -> list[str]:
        return list(self._entries)

    def fresh_count(self, now: float | None = None) -> int:
        now = self.now() if now is None else now
        return sum(1 for e in self._entries.values() if is_fresh(e, self.ttl, now))

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[CacheEntry]:
        return iter(list(self._entries.values()))
