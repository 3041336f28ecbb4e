"""CoinPaprika provider — coin detail, ticker quotes and OHLCV history (no key required)."""
from __future__ import annotations

import asyncio
from datetime import date, datetime, timedelta
from typing import Any

from pydantic import BaseModel, ConfigDict

from quoteboard.core.providers.base import HttpClient, Provider

COINPAPRIKA_BASE = "https://api.coinpaprika.com/v1"
HISTORY_START = date(2013, 1, 1)

# Common tickers resolved without a coin-list round trip
CURRENCY_ID_MAP = {
    "BTC": "btc-bitcoin",
    "ETH": "eth-ethereum",
    "ADA": "ada-cardano",
    "LTC": "ltc-litecoin",
    "XRP": "xrp-xrp",
    "SOL": "sol-solana",
    "DOGE": "doge-dogecoin",
    "USDT": "usdt-tether",
    "USDC": "usdc-usd-coin",
    "BNB": "bnb-binance-coin",
    "DOT": "dot-polkadot",
    "LINK": "link-chainlink",
    "NOK": "nok-norwegian-krone",
}


class UsdQuote(BaseModel):
    model_config = ConfigDict(extra="allow")
    price: float | None = None
    market_cap: float | None = None
    volume_24h: float | None = None
    percent_change_24h: float | None = None
    percent_change_7d: float | None = None
    percent_change_30d: float | None = None
    percent_change_1y: float | None = None
    ath_price: float | None = None
    ath_date: str | None = None
    percent_from_price_ath: float | None = None


class OhlcvRow(BaseModel):
    model_config = ConfigDict(extra="allow")
    time_close: str
    close: float | None = None
    market_cap: float | None = None
    volume: float | None = None


class CoinPaprikaProvider(Provider):

    def __init__(self, http: HttpClient | None = None):
        super().__init__(http)

    @property
    def name(self) -> str:
        return "CoinPaprika"

    async def _get(self, path: str, params: dict | None = None) -> Any:
        return await self._http.get_json(
            f"{COINPAPRIKA_BASE}{path}", params=params, headers={"Accept": "application/json"}
        )

    async def coin(self, coin_id: str) -> dict:
        coin, ticker = await asyncio.gather(self._get(f"/coins/{coin_id}"), self._get(f"/tickers/{coin_id}"))
        return {"coin": coin, "ticker": ticker}

    async def ohlcv(self, coin_id: str, start: date, end: date) -> list:
        return await self._get(
            f"/coins/{coin_id}/ohlcv/historical", params={"start": start.isoformat(), "end": end.isoformat()}
        )

    async def coins(self) -> list:
        return await self._get("/coins")


# ── Coin detail ─────────────────────────────────────────────────────────


def _times(value: float | None, factor: float) -> float | None:
    return value * factor if value else None


def normalize_coin(payload: dict, coin_id: str, usd_to_nok: float) -> dict:
    coin = payload.get("coin") or {}
    ticker = payload.get("ticker") or {}
    usd = UsdQuote.model_validate((ticker.get("quotes") or {}).get("USD") or {})
    links = coin.get("links") or {}
    change_24h = usd.percent_change_24h or 0
    high_24h = _times(usd.price, 1 + change_24h / 100)
    low_24h = _times(usd.price, 1 - abs(change_24h) / 100)
    twitter = (links.get("twitter") or [None])[0]

    return {
        "id": coin.get("id"),
        "symbol": (coin.get("symbol") or "").upper() or None,
        "name": coin.get("name"),
        "image": coin.get("logo") or f"https://static.coinpaprika.com/coin/{coin_id}/logo.png",
        "description": coin.get("description"),
        "links": {
            "homepage": (links.get("website") or [None])[0],
            "whitepaper": (coin.get("whitepaper") or {}).get("link"),
            "blockchain_site": [e for e in links.get("explorer") or [] if e],
            "twitter": twitter.replace("https://twitter.com/", "") if twitter else None,
            "subreddit": (links.get("reddit") or [None])[0],
        },
        "team": [{"name": m.get("name"), "position": m.get("position")} for m in coin.get("team") or []],
        "market_data": {
            "current_price": {"usd": usd.price, "nok": _times(usd.price, usd_to_nok)},
            "market_cap": {"usd": usd.market_cap, "nok": _times(usd.market_cap, usd_to_nok)},
            "market_cap_rank": ticker.get("rank"),
            "total_volume": {"usd": usd.volume_24h, "nok": _times(usd.volume_24h, usd_to_nok)},
            "high_24h": {"usd": high_24h, "nok": _times(high_24h, usd_to_nok)},
            "low_24h": {"usd": low_24h, "nok": _times(low_24h, usd_to_nok)},
            "price_change_24h": (
                usd.price * usd.percent_change_24h / 100 if usd.price and usd.percent_change_24h else None
            ),
            "price_change_percentage_24h": usd.percent_change_24h,
            "price_change_percentage_7d": usd.percent_change_7d,
            "price_change_percentage_30d": usd.percent_change_30d,
            "price_change_percentage_1y": usd.percent_change_1y,
            "ath": {"usd": usd.ath_price, "nok": _times(usd.ath_price, usd_to_nok)},
            "ath_change_percentage": {"usd": usd.percent_from_price_ath, "nok": usd.percent_from_price_ath},
            "ath_date": {"usd": usd.ath_date, "nok": usd.ath_date},
            "atl": {"usd": None, "nok": None},
            "circulating_supply": ticker.get("circulating_supply"),
            "total_supply": ticker.get("total_supply"),
            "max_supply": ticker.get("max_supply"),
        },
        "community_data": {
            "twitter_followers": None,
            "reddit_subscribers": None,
            "telegram_channel_user_count": None,
        },
        "last_updated": ticker.get("last_updated"),
    }


# ── Charts ──────────────────────────────────────────────────────────────


def chart_window(days: str, today: date) -> tuple[date, date]:
    if days == "max":
        return HISTORY_START, today
    return today - timedelta(days=int(days)), today


def _epoch_ms(iso: str) -> int:
    return int(datetime.fromisoformat(iso.replace("Z", "+00:00")).timestamp() * 1000)


def normalize_chart(rows: list, usd_to_nok: float) -> dict:
    parsed = [OhlcvRow.model_validate(r) for r in rows]

    def series(field: str) -> list[list]:
        return [
            [_epoch_ms(r.time_close), getattr(r, field) * usd_to_nok if getattr(r, field) is not None else None]
            for r in parsed
        ]

    return {"prices": series("close"), "market_caps": series("market_cap"), "total_volumes": series("volume")}


# ── Search ──────────────────────────────────────────────────────────────


def active_coins(rows: list) -> list[dict]:
    return [{"id": r.get("id"), "symbol": r.get("symbol")} for r in rows if r.get("is_active")]


def find_coin_id(coins: list[dict], symbol: str) -> str | None:
    for coin in coins:
        if (coin.get("symbol") or "").upper() == symbol:
            return coin.get("id")
    return None
