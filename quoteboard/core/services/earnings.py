"""Earnings services — Alpha Vantage surprises/estimates and the Finnhub earnings calendar."""
from __future__ import annotations

import asyncio
from collections.abc import Callable
from datetime import date

from quoteboard.core.cache import CacheRegistry, symbol_key
from quoteboard.core.endpoint import CachedEndpoint
from quoteboard.core.providers import alphavantage as av
from quoteboard.core.providers import finnhub as fh
from quoteboard.core.providers.alphavantage import AlphaVantageProvider
from quoteboard.core.providers.finnhub import FinnhubProvider

THROTTLE_MESSAGE = "No data returned from Alpha Vantage (possible rate limit)"


class EarningsService:

    def __init__(self, alphavantage: AlphaVantageProvider, finnhub: FinnhubProvider, caches: CacheRegistry,
                 today: Callable[[], date] = date.today):
        self._caches = caches
        self._finnhub = finnhub
        self._today = today

        self.earnings = CachedEndpoint(
            name="alphavantage.earnings",
            cache=caches["earnings"],
            key=lambda symbol: symbol_key(symbol),
            fetch=lambda symbol: alphavantage.earnings(symbol_key(symbol)),
            normalize=lambda raw, symbol: av.normalize_earnings(raw, symbol_key(symbol)),
            required=("symbol",),
            credentials=alphavantage.missing_credentials,
            soft_error=av.soft_error,
            is_empty=av.earnings_empty,
            empty_is_success=False,
            empty_message=THROTTLE_MESSAGE,
        )
        self.estimates = CachedEndpoint(
            name="alphavantage.estimates",
            cache=caches["estimates"],
            key=lambda symbol: symbol_key(symbol),
            fetch=lambda symbol: alphavantage.earnings_estimates(symbol_key(symbol)),
            normalize=lambda raw, symbol: av.normalize_estimates(raw),
            required=("symbol",),
            credentials=alphavantage.missing_credentials,
            soft_error=av.soft_error,
            is_empty=av.estimates_empty,
            empty_is_success=False,
            empty_message=THROTTLE_MESSAGE,
        )
        self.calendar = CachedEndpoint(
            name="finnhub.earnings_calendar",
            cache=caches["earnings_calendar"],
            key=lambda symbol: symbol_key(symbol),
            fetch=self._fetch_calendar,
            normalize=lambda raw, symbol: fh.normalize_earnings_calendar(raw, self._today()),
            required=("symbol",),
            credentials=finnhub.missing_credentials,
            soft_error=self._calendar_soft_error,
        )

    async def _fetch_calendar(self, symbol: str) -> dict:
        symbol = symbol_key(symbol)
        surprises, calendar = await asyncio.gather(
            self._finnhub.earnings_surprises(symbol),
            self._finnhub.earnings_calendar(symbol, *fh.calendar_window(self._today())),
        )
        return {"surprises": surprises, "calendar": (calendar or {}).get("earningsCalendar")}

    @staticmethod
    def _calendar_soft_error(payload: dict) -> str | None:
        return fh.soft_error(payload["surprises"])

    def clear_earnings(self, symbol: str | None = None) -> int:
        """Clears earnings and, for the same symbol, estimates."""
        return self._caches.clear_group("earnings", symbol_key(symbol) if symbol else None)

    def clear_calendar(self, symbol: str | None = None) -> int:
        return self._caches.clear_group("earnings_calendar", symbol_key(symbol) if symbol else None)
