"""CacheRegistry — every domain store, built once at startup and injected into services."""
from __future__ import annotations

import time
from collections.abc import Iterable, Mapping

import structlog

from quoteboard.core.cache.fallback_cache import Clock, FallbackCache
from quoteboard.core.cache.keys import store_key
from quoteboard.core.cache.ttl_config import CLEAR_GROUPS, TTL

logger = structlog.get_logger()


class CacheRegistry:

    def __init__(self, ttls: Mapping[str, float] | None = None, clock: Clock = time.time):
        self._stores: dict[str, FallbackCache] = {
            name: FallbackCache(name, ttl, clock) for name, ttl in (ttls or TTL).items()
        }

    def __getitem__(self, name: str) -> FallbackCache:
        try:
            return self._stores[name]
        except KeyError:
            raise ValueError(f"Unknown cache store: {name!r}") from None

    def __contains__(self, name: object) -> bool:
        return name in self._stores

    def names(self) -> list[str]:
        return sorted(self._stores)

    def clear(self, names: Iterable[str], key: str | None = None) -> int:
        """Delete ``key`` from each named store, or empty them all when no key is given."""
        stores = [self[n] for n in names]
        removed = 0
        for store in stores:
            if key is None:
                removed += store.clear()
            elif store.delete(key):
                removed += 1
        logger.info("cache.cleared", stores=[s.name for s in stores], key=key, removed=removed)
        return removed

    def clear_group(self, group: str, key: str | None = None) -> int:
        return self.clear(CLEAR_GROUPS.get(group, (group,)), key)

    def clear_store(self, store: str | None = None, key: str | None = None) -> int:
        """Admin clear by store (or clear group) name, or every store when ``store`` is omitted.

        Keys are normalised per store, so ``aapl`` clears ``AAPL``. An unknown store removes nothing.
        """
        if store is None:
            names = self.names()
        elif store in CLEAR_GROUPS or store in self:
            names = list(CLEAR_GROUPS.get(store, (store,)))
        else:
            logger.warning("cache.unknown_store", store=store)
            return 0

        if key is None:
            return self.clear(names)
        return sum(self.clear([name], store_key(name, key)) for name in names)

    def stats(self) -> dict[str, dict]:
        return {
            name: {"ttl_seconds": store.ttl, "entries": len(store), "fresh": store.fresh_count()}
            for name, store in sorted(self._stores.items())
        }
