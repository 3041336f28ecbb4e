"""Service layer — providers and cache stores wired into per-domain services.

Design: build_services() is called once at application startup and the
resulting Services bundle is attached to the app. Nothing here is a
module-level singleton, so tests build their own bundle from a fresh
CacheRegistry (fake clock) and fake providers:

    services = build_services(settings, CacheRegistry(clock=clock), finnhub=FakeFinnhub())
"""
from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import date

from aiolimiter import AsyncLimiter

from quoteboard.core.cache import CacheRegistry
from quoteboard.core.cache.ttl_config import TIMEOUTS
from quoteboard.core.config import Settings, get_settings
from quoteboard.core.providers.alphavantage import AlphaVantageProvider
from quoteboard.core.providers.base import HttpClient
from quoteboard.core.providers.coinpaprika import CoinPaprikaProvider
from quoteboard.core.providers.finnhub import FinnhubProvider
from quoteboard.core.providers.firi import FiriProvider
from quoteboard.core.providers.nordnet import NordnetProvider
from quoteboard.core.providers.norges_bank import NorgesBankProvider
from quoteboard.core.providers.openrouter import OpenRouterProvider
from quoteboard.core.providers.yahoo import YahooProvider
from quoteboard.core.services.accounts import AccountService
from quoteboard.core.services.crypto import CoinService, FiriService
from quoteboard.core.services.earnings import EarningsService
from quoteboard.core.services.fx import ExchangeRateService
from quoteboard.core.services.market_data import MarketDataService
from quoteboard.core.services.summaries import SummaryService


@dataclass
class Services:
    caches: CacheRegistry
    market_data: MarketDataService
    earnings: EarningsService
    fx: ExchangeRateService
    coins: CoinService
    firi: FiriService
    summaries: SummaryService
    accounts: AccountService


def build_services(
    settings: Settings | None = None,
    caches: CacheRegistry | None = None,
    *,
    finnhub: FinnhubProvider | None = None,
    alphavantage: AlphaVantageProvider | None = None,
    yahoo: YahooProvider | None = None,
    norges_bank: NorgesBankProvider | None = None,
    coinpaprika: CoinPaprikaProvider | None = None,
    firi: FiriProvider | None = None,
    openrouter: OpenRouterProvider | None = None,
    nordnet: NordnetProvider | None = None,
    today: Callable[[], date] = date.today,
) -> Services:
    settings = settings or get_settings()
    caches = caches or CacheRegistry()
    timeout = settings.request_timeout_seconds

    finnhub = finnhub or FinnhubProvider(
        settings.finnhub_api_key,
        HttpClient(timeout, limiter=AsyncLimiter(60, 60)),
        logo_timeout=TIMEOUTS["logo"],
    )
    alphavantage = alphavantage or AlphaVantageProvider(
        settings.alpha_vantage_api_key, HttpClient(timeout, limiter=AsyncLimiter(5, 60))
    )
    yahoo = yahoo or YahooProvider(HttpClient(timeout), search_timeout=TIMEOUTS["search"])
    norges_bank = norges_bank or NorgesBankProvider(HttpClient(timeout), timeout=TIMEOUTS["fx"])
    coinpaprika = coinpaprika or CoinPaprikaProvider(HttpClient(timeout))
    firi = firi or FiriProvider(settings.firi_api_key, HttpClient(timeout))
    openrouter = openrouter or OpenRouterProvider(
        settings.openrouter_api_key,
        HttpClient(timeout),
        base_url=settings.openrouter_base_url,
        model=settings.openrouter_model,
    )
    nordnet = nordnet or NordnetProvider(settings.nordnet_session_id, HttpClient(timeout))

    fx = ExchangeRateService(norges_bank, caches)
    return Services(
        caches=caches,
        market_data=MarketDataService(finnhub, yahoo, caches, today),
        earnings=EarningsService(alphavantage, finnhub, caches, today),
        fx=fx,
        coins=CoinService(coinpaprika, fx, caches, today),
        firi=FiriService(firi, caches),
        summaries=SummaryService(openrouter, caches),
        accounts=AccountService(nordnet),
    )
