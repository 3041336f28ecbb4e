"""Finnhub provider — quotes, profiles, company news, fundamentals, recommendations, earnings."""
from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from typing import Any
from urllib.parse import urlsplit

from aiolimiter import AsyncLimiter
from pydantic import BaseModel, ConfigDict

from quoteboard.core.errors import EmptyResult, UpstreamError
from quoteboard.core.providers.base import HttpClient, Provider

FINNHUB_BASE = "https://finnhub.io/api/v1"
CLEARBIT_LOGO = "https://logo.clearbit.com/{domain}"

NEWS_LOOKBACK_DAYS = 30
CALENDAR_LOOKBACK_DAYS = 365
CALENDAR_LOOKAHEAD_DAYS = 180


# ── Upstream shapes ──────────────────────────────────────────────────────


class _Loose(BaseModel):
    model_config = ConfigDict(extra="allow")


class Quote(_Loose):
    c: float | None = None    # current
    d: float | None = None
    dp: float | None = None
    h: float | None = None
    l: float | None = None    # noqa: E741
    o: float | None = None
    pc: float | None = None   # previous close
    t: int | None = None


class NewsItem(_Loose):
    id: int | None = None
    headline: str | None = None
    url: str | None = None
    datetime: int | None = None
    source: str | None = None
    summary: str | None = None
    image: str | None = None
    category: str | None = None
    related: str | None = None


class EarningsSurprise(_Loose):
    actual: float | None = None
    estimate: float | None = None
    period: str | None = None
    quarter: int | None = None
    year: int | None = None


class CalendarItem(_Loose):
    date: str | None = None
    epsEstimate: float | None = None
    revenueEstimate: float | None = None


class FinnhubProvider(Provider):

    requires_key = True

    def __init__(self, api_key: str = "", http: HttpClient | None = None, logo_timeout: float = 2.0):
        # free tier: 60 calls per minute
        super().__init__(http or HttpClient(limiter=AsyncLimiter(60, 60)), api_key)
        self._logo_timeout = logo_timeout

    @property
    def name(self) -> str:
        return "Finnhub"

    async def _get(self, path: str, **params: Any) -> Any:
        return await self._http.get_json(f"{FINNHUB_BASE}{path}", params={**params, "token": self._api_key})

    async def quote(self, symbol: str) -> dict:
        return await self._get("/quote", symbol=symbol)

    async def profile(self, symbol: str) -> dict:
        profile = await self._get("/stock/profile2", symbol=symbol)
        if isinstance(profile, dict) and not profile.get("logo") and profile.get("weburl"):
            domain = urlsplit(profile["weburl"]).netloc.removeprefix("www.")
            if domain:
                logo = CLEARBIT_LOGO.format(domain=domain)
                if await self._http.head_ok(logo, timeout=self._logo_timeout):
                    profile = {**profile, "logo": logo}
        return profile

    async def company_news(self, symbol: str, start: date, end: date) -> Any:
        return await self._get("/company-news", symbol=symbol, **{"from": start.isoformat(), "to": end.isoformat()})

    async def basic_financials(self, symbol: str) -> dict:
        return await self._get("/stock/metric", symbol=symbol, metric="all")

    async def recommendations(self, symbol: str) -> Any:
        return await self._get("/stock/recommendation", symbol=symbol)

    async def earnings_surprises(self, symbol: str) -> Any:
        return await self._get("/stock/earnings", symbol=symbol)

    async def earnings_calendar(self, symbol: str, start: date, end: date) -> dict:
        return await self._get("/calendar/earnings", symbol=symbol, **{"from": start.isoformat(), "to": end.isoformat()})


# ── Soft errors ─────────────────────────────────────────────────────────


def soft_error(payload: Any) -> str | None:
    """Finnhub reports some failures as ``{"error": "..."}`` with a 200."""
    if isinstance(payload, dict) and payload.get("error"):
        return str(payload["error"])
    return None


# ── Normalizers ─────────────────────────────────────────────────────────


def normalize_quote(payload: dict) -> dict:
    quote = Quote.model_validate(payload)
    # unknown symbols come back as all zeros
    if not quote.c:
        raise EmptyResult("No data found for symbol")
    return quote.model_dump(exclude_none=True)


def previous_close(payload: dict) -> float:
    quote = Quote.model_validate(payload)
    if quote.pc is None:
        raise EmptyResult("No previous close in quote")
    return quote.pc


def news_window(today: date) -> tuple[date, date]:
    return today - timedelta(days=NEWS_LOOKBACK_DAYS), today


def _compact_timestamp(epoch: int) -> str:
    # YYYYMMDDTHHMMSSZ, the layout the dashboard sorts on
    return datetime.fromtimestamp(epoch, tz=timezone.utc).strftime("%Y%m%dT%H%M%SZ")


def normalize_news(items: Any, ticker: str, limit: int) -> dict:
    if not isinstance(items, list):
        raise UpstreamError("Unexpected news payload")
    feed = []
    for raw in items:
        item = NewsItem.model_validate(raw)
        if not item.headline or not item.url:
            continue
        feed.append({
            "title": item.headline,
            "url": item.url,
            "timePublished": _compact_timestamp(item.datetime or 0),
            "source": item.source,
            "summary": item.summary or "",
            "bannerImage": item.image or None,
            "category": item.category or "company news",
            "related": item.related or ticker,
            "id": item.id,
        })
    feed.sort(key=lambda n: n["timePublished"], reverse=True)
    return {"feed": feed[:limit]}


def normalize_financials(payload: dict) -> dict:
    return {
        "symbol": payload.get("symbol"),
        "metric": payload.get("metric"),
        "series": payload.get("series"),
        "metricType": payload.get("metricType"),
    }


def normalize_recommendations(payload: list) -> list:
    # most recent first; six months is what the dashboard charts
    return list(payload[:6])


def format_earnings_history(surprises: list) -> list[dict]:
    history = []
    for raw in surprises or []:
        item = EarningsSurprise.model_validate(raw)
        if item.actual is None or item.estimate is None or not item.quarter or not item.year:
            continue
        surprise = item.actual - item.estimate
        history.append({
            "quarter": f"Q{item.quarter} FY{item.year}",
            "date": item.period or "N/A",
            "epsActual": item.actual,
            "epsEstimate": item.estimate,
            "epsSurprise": surprise,
            "surprisePercent": (surprise / item.estimate) * 100 if item.estimate != 0 else 0,
        })
    # last 12 quarters, then reversed as the dashboard expects
    return list(reversed(history[:12]))


def _future(calendar: list, today: date) -> list[CalendarItem]:
    items = [CalendarItem.model_validate(raw) for raw in calendar or []]
    upcoming = [i for i in items if i.date and date.fromisoformat(i.date) > today]
    return sorted(upcoming, key=lambda i: i.date)


def format_earnings_estimates(calendar: list, today: date) -> list[dict]:
    estimates = []
    for item in [i for i in _future(calendar, today) if i.epsEstimate is not None][:4]:
        when = date.fromisoformat(item.date)
        estimates.append({
            "period": f"Q{(when.month - 1) // 3 + 1} {when.year}",
            "endDate": item.date,
            "growth": None,
            "earningsEstimate": {"avg": item.epsEstimate, "low": None, "high": None, "numberOfAnalysts": None},
            "revenueEstimate": {
                "avg": item.revenueEstimate or None, "low": None, "high": None, "numberOfAnalysts": None,
            },
        })
    return estimates


def find_next_earnings_date(calendar: list, today: date) -> str | None:
    upcoming = _future(calendar, today)
    return upcoming[0].date if upcoming else None


def calendar_window(today: date) -> tuple[date, date]:
    return today - timedelta(days=CALENDAR_LOOKBACK_DAYS), today + timedelta(days=CALENDAR_LOOKAHEAD_DAYS)


def normalize_earnings_calendar(payload: dict, today: date) -> dict:
    surprises = payload.get("surprises") or []
    calendar = payload.get("calendar") or []
    return {
        "history": format_earnings_history(surprises),
        "estimates": format_earnings_estimates(calendar, today),
        "nextEarningsDate": find_next_earnings_date(calendar, today),
    }
