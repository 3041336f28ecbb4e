"""Yahoo Finance provider — v8 chart and v1 symbol search (no key required)."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict

from quoteboard.core.errors import UpstreamError
from quoteboard.core.providers.base import BROWSER_HEADERS, HttpClient, Provider

YAHOO_CHART = "https://query1.finance.yahoo.com/v8/finance/chart/{symbol}"
YAHOO_SEARCH = "https://query1.finance.yahoo.com/v1/finance/search"

SEARCH_TYPES = {"EQUITY", "ETF", "INDEX", "MUTUALFUND"}
SEARCH_LIMIT = 8


class ChartMeta(BaseModel):
    model_config = ConfigDict(extra="allow")
    symbol: str | None = None
    currency: str | None = None
    exchangeName: str | None = None
    regularMarketPrice: float | None = None
    previousClose: float | None = None
    chartPreviousClose: float | None = None


class SearchQuote(BaseModel):
    model_config = ConfigDict(extra="allow")
    symbol: str | None = None
    shortname: str | None = None
    longname: str | None = None
    quoteType: str | None = None
    exchange: str | None = None
    exchDisp: str | None = None
    score: float | None = None


class YahooProvider(Provider):

    def __init__(self, http: HttpClient | None = None, search_timeout: float = 8.0):
        super().__init__(http)
        self._search_timeout = search_timeout

    @property
    def name(self) -> str:
        return "Yahoo Finance"

    async def chart(self, symbol: str, chart_range: str, interval: str) -> dict:
        return await self._http.get_json(
            YAHOO_CHART.format(symbol=symbol),
            params={"range": chart_range, "interval": interval},
            headers=BROWSER_HEADERS,
        )

    async def search(self, query: str) -> dict:
        return await self._http.get_json(
            YAHOO_SEARCH,
            params={
                "q": query,
                "quotesCount": 10,
                "newsCount": 0,
                "enableFuzzyQuery": False,
                "quotesQueryId": "tss_match_phrase_query",
            },
            headers=BROWSER_HEADERS,
            timeout=self._search_timeout,
        )


# ── Chart ───────────────────────────────────────────────────────────────


def chart_soft_error(payload: Any) -> str | None:
    if not isinstance(payload, dict) or not payload.get("chart"):
        return "Invalid response from Yahoo Finance"
    error = payload["chart"].get("error")
    if error:
        description = error.get("description") if isinstance(error, dict) else None
        return description or "Failed to fetch chart data"
    return None


def normalize_chart(payload: dict, chart_range: str, interval: str) -> dict:
    results = payload["chart"].get("result") or []
    result = results[0] if results else None
    quotes = ((result or {}).get("indicators") or {}).get("quote") or []
    if not result or not result.get("timestamp") or not quotes or not quotes[0]:
        raise UpstreamError("Invalid chart data received")

    quote = quotes[0]
    prices = []
    for i, ts in enumerate(result["timestamp"]):
        close = _at(quote.get("close"), i)
        if close is None:
            continue
        prices.append({
            "timestamp": ts * 1000,
            "date": datetime.fromtimestamp(ts, tz=timezone.utc).isoformat().replace("+00:00", "Z"),
            "open": _at(quote.get("open"), i),
            "high": _at(quote.get("high"), i),
            "low": _at(quote.get("low"), i),
            "close": close,
            "volume": _at(quote.get("volume"), i),
        })

    meta = ChartMeta.model_validate(result.get("meta") or {})
    return {
        **meta.model_dump(include=set(ChartMeta.model_fields)),
        "range": chart_range,
        "interval": interval,
        "prices": prices,
    }


def _at(values: list | None, i: int) -> Any:
    return values[i] if values and i < len(values) else None


# ── Search ──────────────────────────────────────────────────────────────


def normalize_search(payload: Any) -> list[dict]:
    raw_quotes = payload.get("quotes") if isinstance(payload, dict) else None
    if not raw_quotes:
        return []
    results = []
    for raw in raw_quotes:
        q = SearchQuote.model_validate(raw)
        if not q.symbol or q.quoteType not in SEARCH_TYPES:
            continue
        results.append({
            "symbol": q.symbol,
            "name": q.shortname or q.longname or q.symbol,
            "type": q.quoteType,
            "exchange": q.exchange or q.exchDisp or "N/A",
            "score": q.score or 0,
        })
    results.sort(key=lambda r: r["score"], reverse=True)
    return results[:SEARCH_LIMIT]
