"""Alpha Vantage provider — quarterly earnings surprises and analyst estimates."""
from __future__ import annotations

from typing import Any

from aiolimiter import AsyncLimiter
from pydantic import BaseModel, ConfigDict

from quoteboard.core.providers.base import HttpClient, Provider

ALPHA_VANTAGE_BASE = "https://www.alphavantage.co/query"

# Keys Alpha Vantage uses to report throttling, quota and bad requests with HTTP 200
SOFT_ERROR_KEYS = ("Note", "Information", "Error Message")


class QuarterlyEarning(BaseModel):
    model_config = ConfigDict(extra="allow")
    fiscalDateEnding: str | None = None
    reportedDate: str | None = None
    reportedEPS: str | float | None = None
    estimatedEPS: str | float | None = None


class AlphaVantageProvider(Provider):

    requires_key = True

    def __init__(self, api_key: str = "", http: HttpClient | None = None):
        # free tier: 5 calls per minute
        super().__init__(http or HttpClient(limiter=AsyncLimiter(5, 60)), api_key)

    @property
    def name(self) -> str:
        return "Alpha Vantage"

    async def _query(self, function: str, symbol: str) -> dict:
        return await self._http.get_json(
            ALPHA_VANTAGE_BASE, params={"function": function, "symbol": symbol, "apikey": self._api_key}
        )

    async def earnings(self, symbol: str) -> dict:
        return await self._query("EARNINGS", symbol)

    async def earnings_estimates(self, symbol: str) -> dict:
        return await self._query("EARNINGS_ESTIMATES", symbol)


def soft_error(payload: Any) -> str | None:
    if not isinstance(payload, dict):
        return "Unexpected Alpha Vantage payload"
    for key in SOFT_ERROR_KEYS:
        if payload.get(key):
            return str(payload[key])
    return None


def _to_float(value: Any) -> float | None:
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


# ── Earnings ────────────────────────────────────────────────────────────


def earnings_empty(payload: dict) -> bool:
    # An empty body is Alpha Vantage's other throttling symptom
    return not payload.get("quarterlyEarnings")


def normalize_earnings(payload: dict, symbol: str) -> list[dict]:
    quarters = [QuarterlyEarning.model_validate(q) for q in payload.get("quarterlyEarnings", [])[:4]]
    formatted = []
    for q in quarters:
        actual = _to_float(q.reportedEPS) or 0.0
        estimate = _to_float(q.estimatedEPS) or actual
        surprise = actual - estimate
        formatted.append({
            "actual": actual,
            "estimate": estimate,
            "period": q.fiscalDateEnding,
            "surprise": surprise,
            "surprisePercent": round(surprise / abs(estimate) * 100, 2) if estimate != 0 else 0.0,
            "symbol": symbol,
            "fiscalQuarter": None,
            "fiscalYear": None,
            "reportedDate": q.reportedDate,
        })
    # oldest to newest, left to right on the chart
    formatted.reverse()
    return formatted


# ── Estimates ───────────────────────────────────────────────────────────


def _quarterly(payload: dict) -> list:
    return payload.get("quarterlyEarnings") or payload.get("quarterlyEstimates") or []


def _annual(payload: dict) -> list:
    return payload.get("annualEarnings") or payload.get("annualEstimates") or []


def estimates_empty(payload: dict) -> bool:
    return not _quarterly(payload) and not _annual(payload)


def normalize_estimates(payload: dict) -> dict:
    return {"quarterly": _quarterly(payload)[:4], "annual": _annual(payload)[:3]}
