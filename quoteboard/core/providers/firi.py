"""Firi provider — crypto balances (per-user key) and NOK market prices."""
from __future__ import annotations

from typing import Any

from quoteboard.core.cache.ttl_config import FALLBACK_USDT_NOK
from quoteboard.core.providers.base import HttpClient, Provider

FIRI_BASE = "https://api.firi.com/v2"


class FiriProvider(Provider):

    requires_key = True

    def __init__(self, api_key: str = "", http: HttpClient | None = None):
        super().__init__(http, api_key)

    @property
    def name(self) -> str:
        return "Firi"

    def resolve_key(self, user_key: str | None) -> str:
        """A key sent by the browser wins over the server's own."""
        return user_key or self._api_key

    async def balances(self, api_key: str) -> list:
        return await self._http.get_json(
            f"{FIRI_BASE}/balances", headers={"firi-access-key": api_key, "Accept": "application/json"}
        )

    async def markets(self) -> list:
        return await self._http.get_json(f"{FIRI_BASE}/markets", headers={"Accept": "application/json"})


def balances_key(api_key: str) -> str:
    # never keep the full key in memory as a cache key
    return f"balances_{api_key[:8]}"


def normalize_balances(rows: Any) -> list[dict]:
    balances = []
    for row in rows:
        amount = float(row.get("balance") or 0)
        if amount > 0:
            balances.append({"currency": row.get("currency"), "balance": amount})
    return balances


def usdt_nok_rate(markets: Any) -> float:
    for market in markets:
        if market.get("id") == "usdtnok":
            return float(market["last"])
    return FALLBACK_USDT_NOK
