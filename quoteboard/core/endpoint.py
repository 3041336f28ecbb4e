"""CachedEndpoint — the fetch-or-fallback procedure shared by every cached data endpoint.

    validate params -> check credentials -> build key -> fresh hit?
        yes: return cached value, provider untouched
        no:  fetch once
             ok:      normalize, store, return live value
                      (built from last-resort inputs? return it tagged, unstored)
             failed:  stale entry? return it : default? return it : typed failure

Concurrent misses for the same key each fetch; the last ``set`` wins.
"""
from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

import structlog

from quoteboard.core.cache.fallback_cache import FallbackCache, is_fresh
from quoteboard.core.errors import EmptyResult, SoftFailure, UpstreamError
from quoteboard.core.results import Failure, FailureKind, Provenance, Result, Success

logger = structlog.get_logger()


def no_soft_error(payload: Any) -> str | None:
    return None


def _blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


@dataclass
class CachedEndpoint:
    name: str
    cache: FallbackCache
    key: Callable[..., str]
    fetch: Callable[..., Awaitable[Any]]
    normalize: Callable[..., Any]
    required: tuple[str, ...] = ()
    credentials: Callable[[], str | None] | None = None
    soft_error: Callable[[Any], str | None] = no_soft_error
    is_empty: Callable[[Any], bool] | None = None
    empty_is_success: bool = True
    empty_message: str = "No data available"
    default: Callable[..., Any] | None = None
    uses_default: Callable[[Any], bool] | None = None

    async def __call__(self, **params: Any) -> Result:
        for name in self.required:
            if _blank(params.get(name)):
                return Failure.validation(f"{name} parameter is required")

        if self.credentials is not None:
            problem = self.credentials()
            if problem:
                logger.error("endpoint.misconfigured", endpoint=self.name, error=problem)
                return Failure.configuration(problem)

        key = self.key(**params)
        entry = self.cache.get(key)
        if entry is not None and is_fresh(entry, self.cache.ttl, self.cache.now()):
            logger.debug("cache.hit", endpoint=self.name, key=key)
            return Success(entry.value, Provenance.CACHED, entry.stored_at)

        logger.info("cache.miss", endpoint=self.name, key=key)
        try:
            raw, value = await self._fetch_and_normalize(params)
        except UpstreamError as e:
            return self._fallback(key, e, params)
        except Exception as e:
            # Unexpected payload shapes surface here as KeyError/TypeError/ValidationError
            logger.warning("provider.unparseable", endpoint=self.name, key=key, error=str(e))
            return self._fallback(key, UpstreamError(f"Unparseable response: {e}"), params)

        if self.uses_default is not None and self.uses_default(raw):
            logger.warning("endpoint.default_inputs", endpoint=self.name, key=key)
            return Success(value, Provenance.DEFAULT)

        stored = self.cache.set(key, value)
        return Success(value, Provenance.LIVE, stored.stored_at)

    async def _fetch_and_normalize(self, params: dict[str, Any]) -> tuple[Any, Any]:
        raw = await self.fetch(**params)

        problem = self.soft_error(raw)
        if problem:
            raise SoftFailure(problem)

        if self.is_empty is not None and self.is_empty(raw) and not self.empty_is_success:
            raise EmptyResult(self.empty_message)

        return raw, self.normalize(raw, **params)

    def _fallback(self, key: str, error: UpstreamError, params: dict[str, Any]) -> Result:
        entry = self.cache.get_stale(key)
        if entry is not None:
            logger.warning(
                "cache.stale_fallback",
                endpoint=self.name,
                key=key,
                age_s=round(entry.age(self.cache.now()), 1),
                error=error.message,
            )
            return Success(entry.value, Provenance.STALE, entry.stored_at)

        if self.default is not None:
            value = self.default(error, **params)
            if value is not None:
                logger.warning("endpoint.default_value", endpoint=self.name, key=key, error=error.message)
                return Success(value, Provenance.DEFAULT)

        logger.warning("provider.failed", endpoint=self.name, key=key, status=error.status, error=error.message)
        kind = FailureKind.NOT_FOUND if error.status == 404 else FailureKind.UPSTREAM
        return Failure(kind, error.message, error.status or 500)


async def uncached(name: str, call: Awaitable[Any], normalize: Callable[[Any], Any] | None = None) -> Result:
    """One upstream call with no cache behind it: the value or a typed failure."""
    try:
        raw = await call
        return Success(normalize(raw) if normalize else raw)
    except UpstreamError as e:
        logger.warning("provider.failed", endpoint=name, status=e.status, error=e.message)
        return Failure(FailureKind.UPSTREAM, e.message, e.status or 500)
