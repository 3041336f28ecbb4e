"""Market data services — equity quotes, profiles, charts, search, news and fundamentals."""
from __future__ import annotations

import asyncio
from collections.abc import Callable
from datetime import date

from quoteboard.core.cache import CacheRegistry, build_key, symbol_key
from quoteboard.core.endpoint import CachedEndpoint
from quoteboard.core.providers import finnhub as fh
from quoteboard.core.providers import yahoo as yf
from quoteboard.core.providers.finnhub import FinnhubProvider
from quoteboard.core.providers.yahoo import YahooProvider
from quoteboard.core.results import Failure, Result, Success, combine_provenance


class MarketDataService:

    def __init__(self, finnhub: FinnhubProvider, yahoo: YahooProvider, caches: CacheRegistry,
                 today: Callable[[], date] = date.today):
        self._today = today
        keyed = finnhub.missing_credentials

        self.quote = CachedEndpoint(
            name="finnhub.quote",
            cache=caches["quote"],
            key=lambda symbol: symbol_key(symbol),
            fetch=lambda symbol: finnhub.quote(symbol_key(symbol)),
            normalize=lambda raw, symbol: fh.normalize_quote(raw),
            required=("symbol",),
            credentials=keyed,
            soft_error=fh.soft_error,
        )
        self.previous_close = CachedEndpoint(
            name="finnhub.previous_close",
            cache=caches["previous_close"],
            key=lambda symbol: symbol_key(symbol),
            fetch=lambda symbol: finnhub.quote(symbol_key(symbol)),
            normalize=lambda raw, symbol: fh.previous_close(raw),
            required=("symbol",),
            credentials=keyed,
            soft_error=fh.soft_error,
        )
        self.profile = CachedEndpoint(
            name="finnhub.profile",
            cache=caches["profile"],
            key=lambda symbol: symbol_key(symbol),
            fetch=lambda symbol: finnhub.profile(symbol_key(symbol)),
            normalize=lambda raw, symbol: raw,
            required=("symbol",),
            credentials=keyed,
            soft_error=fh.soft_error,
        )
        self.chart = CachedEndpoint(
            name="yahoo.chart",
            cache=caches["chart"],
            key=lambda symbol, chart_range, interval: build_key(symbol_key(symbol), chart_range, interval),
            fetch=lambda symbol, chart_range, interval: yahoo.chart(symbol_key(symbol), chart_range, interval),
            normalize=lambda raw, symbol, chart_range, interval: yf.normalize_chart(raw, chart_range, interval),
            required=("symbol",),
            soft_error=yf.chart_soft_error,
        )
        self._search = CachedEndpoint(
            name="yahoo.search",
            cache=caches["search"],
            key=lambda query: query.strip().lower(),
            fetch=lambda query: yahoo.search(query.strip()),
            normalize=lambda raw, query: yf.normalize_search(raw),
        )
        self.news = CachedEndpoint(
            name="finnhub.news",
            cache=caches["news"],
            key=lambda ticker, limit: build_key(symbol_key(ticker), limit),
            fetch=lambda ticker, limit: finnhub.company_news(symbol_key(ticker), *fh.news_window(self._today())),
            normalize=lambda raw, ticker, limit: fh.normalize_news(raw, symbol_key(ticker), limit),
            required=("ticker",),
            credentials=keyed,
            soft_error=fh.soft_error,
        )
        self.financials = CachedEndpoint(
            name="finnhub.financials",
            cache=caches["financials"],
            key=lambda symbol: symbol_key(symbol),
            fetch=lambda symbol: finnhub.basic_financials(symbol_key(symbol)),
            normalize=lambda raw, symbol: fh.normalize_financials(raw),
            required=("symbol",),
            credentials=keyed,
            soft_error=fh.soft_error,
        )
        self.recommendations = CachedEndpoint(
            name="finnhub.recommendations",
            cache=caches["recommendations"],
            key=lambda symbol: symbol_key(symbol),
            fetch=lambda symbol: finnhub.recommendations(symbol_key(symbol)),
            normalize=lambda raw, symbol: fh.normalize_recommendations(raw),
            required=("symbol",),
            credentials=keyed,
            soft_error=fh.soft_error,
            is_empty=lambda raw: not raw,
            empty_is_success=False,
            empty_message="No recommendations found",
        )
        self._finnhub = finnhub

    async def search(self, query: str | None) -> Result:
        # nothing to look up; not worth an upstream call or a cache entry
        if not query or not query.strip():
            return Success([])
        return await self._search(query=query)

    async def previous_closes(self, symbols: str | None) -> Result:
        """Previous close per symbol; symbols that fail with nothing cached are left out."""
        wanted = list(dict.fromkeys(s.strip().upper() for s in (symbols or "").split(",") if s.strip()))
        if not wanted:
            return Failure.validation("symbols parameter is required")
        problem = self._finnhub.missing_credentials()
        if problem:
            return Failure.configuration(problem)

        results = await asyncio.gather(*(self.previous_close(symbol=s) for s in wanted))
        found = {s: r for s, r in zip(wanted, results) if r.ok}
        return Success(
            {s: r.data for s, r in found.items()},
            combine_provenance(list(found.values())),
        )
