"""Company summary service — cached AI overviews with a generic fallback text."""
from __future__ import annotations

from quoteboard.core.cache import CacheRegistry, symbol_key
from quoteboard.core.endpoint import CachedEndpoint
from quoteboard.core.errors import UpstreamError
from quoteboard.core.providers import openrouter as orr
from quoteboard.core.providers.openrouter import OpenRouterProvider, QuotaExceeded
from quoteboard.core.results import Result


def _default_summary(error: UpstreamError, symbol: str, company_name=None, industry=None, sector=None) -> dict | None:
    # quota problems are the operator's to fix, so they surface instead of a canned text
    if isinstance(error, QuotaExceeded):
        return None
    return orr.fallback_summary(symbol, company_name, industry, sector)


class SummaryService:

    def __init__(self, openrouter: OpenRouterProvider, caches: CacheRegistry):
        self._summary = CachedEndpoint(
            name="openrouter.summary",
            cache=caches["ai_summary"],
            key=lambda symbol, **_: symbol_key(symbol),
            fetch=lambda symbol, company_name=None, industry=None, sector=None: openrouter.complete(
                orr.build_prompt(symbol, company_name, industry, sector)
            ),
            normalize=lambda raw, symbol, **_: orr.normalize_summary(raw, symbol),
            required=("symbol",),
            credentials=openrouter.missing_credentials,
            soft_error=orr.completion_soft_error,
            default=_default_summary,
        )

    async def summary(self, symbol: str | None, company_name: str | None = None,
                      industry: str | None = None, sector: str | None = None) -> Result:
        return await self._summary(symbol=symbol, company_name=company_name, industry=industry, sector=sector)
