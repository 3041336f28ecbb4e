"""Crypto services — CoinPaprika coin data in NOK and Firi balances/rates."""
from __future__ import annotations

from collections.abc import Awaitable, Callable
from datetime import date
from typing import Any, NamedTuple

from quoteboard.core.cache import CacheRegistry, build_key
from quoteboard.core.cache.ttl_config import FALLBACK_USDT_NOK
from quoteboard.core.endpoint import CachedEndpoint, uncached
from quoteboard.core.providers import coinpaprika as cp
from quoteboard.core.providers import firi as fr
from quoteboard.core.providers.coinpaprika import CoinPaprikaProvider
from quoteboard.core.providers.firi import FiriProvider
from quoteboard.core.results import Failure, Provenance, Result, Success
from quoteboard.core.services.fx import ExchangeRateService

COINS_KEY = "coins"
RATE_KEY = "rate"


class Priced(NamedTuple):
    """An upstream payload with the USD→NOK rate looked up right after it."""
    payload: Any
    usd_to_nok: Success


def _default_rate(raw: Priced) -> bool:
    return raw.usd_to_nok.provenance is Provenance.DEFAULT


class CoinService:

    def __init__(self, coinpaprika: CoinPaprikaProvider, fx: ExchangeRateService, caches: CacheRegistry,
                 today: Callable[[], date] = date.today):
        self._caches = caches
        self._fx = fx
        self._today = today
        store = caches["coin"]

        self._coin = CachedEndpoint(
            name="coinpaprika.coin",
            cache=store,
            key=lambda coin_id: build_key("coin", coin_id),
            fetch=lambda coin_id: self._priced(coinpaprika.coin(coin_id)),
            normalize=lambda raw, coin_id: cp.normalize_coin(raw.payload, coin_id, raw.usd_to_nok.data),
            required=("coin_id",),
            uses_default=_default_rate,
        )
        self._chart = CachedEndpoint(
            name="coinpaprika.chart",
            cache=store,
            key=lambda coin_id, days: build_key("chart", coin_id, days),
            fetch=lambda coin_id, days: self._priced(
                coinpaprika.ohlcv(coin_id, *cp.chart_window(days, self._today()))
            ),
            normalize=lambda raw, coin_id, days: cp.normalize_chart(raw.payload, raw.usd_to_nok.data),
            required=("coin_id",),
            uses_default=_default_rate,
        )
        self._coins = CachedEndpoint(
            name="coinpaprika.coins",
            cache=store,
            key=lambda: COINS_KEY,
            fetch=coinpaprika.coins,
            normalize=lambda raw: cp.active_coins(raw),
        )

    async def _priced(self, call: Awaitable[Any]) -> Priced:
        payload = await call
        return Priced(payload, await self._fx.usd_to_nok())

    async def coin(self, coin_id: str) -> Result:
        return await self._coin(coin_id=coin_id.strip().lower())

    async def chart(self, coin_id: str, days: str = "1") -> Result:
        if days != "max" and not days.isdigit():
            return Failure.validation("days must be a whole number or 'max'")
        return await self._chart(coin_id=coin_id.strip().lower(), days=days)

    async def search(self, symbol: str) -> Result:
        symbol = symbol.strip().upper()
        if symbol in cp.CURRENCY_ID_MAP:
            return Success({"coinId": cp.CURRENCY_ID_MAP[symbol]})

        coins = await self._coins()
        if not coins.ok:
            return coins
        coin_id = cp.find_coin_id(coins.data, symbol)
        if coin_id is None:
            return Failure.not_found("Coin not found")
        return Success({"coinId": coin_id}, coins.provenance, coins.stored_at)

    def clear(self) -> int:
        return self._caches.clear_group("coinpaprika")


class FiriService:

    def __init__(self, firi: FiriProvider, caches: CacheRegistry):
        self._caches = caches
        self._provider = firi

        self._balances = CachedEndpoint(
            name="firi.balances",
            cache=caches["firi_balances"],
            key=lambda api_key: fr.balances_key(api_key),
            fetch=lambda api_key: firi.balances(api_key),
            normalize=lambda raw, api_key: fr.normalize_balances(raw),
        )
        self.usdt_nok_rate = CachedEndpoint(
            name="firi.usdt_nok_rate",
            cache=caches["firi_rate"],
            key=lambda: RATE_KEY,
            fetch=firi.markets,
            normalize=lambda raw: {"rate": fr.usdt_nok_rate(raw)},
            default=lambda error: {"rate": FALLBACK_USDT_NOK},
        )

    async def balances(self, user_key: str | None = None) -> Result:
        api_key = self._provider.resolve_key(user_key)
        if not api_key:
            return Failure.configuration(f"{self._provider.name} API key not configured")
        return await self._balances(api_key=api_key)

    async def markets(self) -> Result:
        return await uncached("firi.markets", self._provider.markets())

    def clear(self) -> int:
        return self._caches.clear_group("firi")
