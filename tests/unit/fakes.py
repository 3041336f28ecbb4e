"""Test doubles — a controllable clock and scripted providers that never touch the network."""
from __future__ import annotations

from typing import Any

from quoteboard.core.providers.alphavantage import AlphaVantageProvider
from quoteboard.core.providers.base import HttpClient
from quoteboard.core.providers.coinpaprika import CoinPaprikaProvider
from quoteboard.core.providers.finnhub import FinnhubProvider
from quoteboard.core.providers.firi import FiriProvider
from quoteboard.core.providers.nordnet import NordnetProvider
from quoteboard.core.providers.norges_bank import NorgesBankProvider
from quoteboard.core.providers.openrouter import OpenRouterProvider
from quoteboard.core.providers.yahoo import YahooProvider

MINUTE = 60


class FakeClock:
    """Callable clock; tests move time with ``advance`` or by setting ``now``."""

    def __init__(self, now: float = 0.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class ScriptedFetch:
    """Async fetch returning queued outcomes in order; exception instances are raised."""

    def __init__(self, *outcomes: Any):
        self.outcomes = list(outcomes)
        self.call_count = 0
        self.calls: list[dict] = []

    def push(self, *outcomes: Any) -> None:
        self.outcomes.extend(outcomes)

    async def __call__(self, **params: Any) -> Any:
        self.call_count += 1
        self.calls.append(params)
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


class FakeHttp(HttpClient):
    """HttpClient stand-in: answers by URL substring, records every request."""

    def __init__(self, routes: dict[str, Any] | None = None, head: bool = False):
        super().__init__()
        self.routes = routes or {}
        self.head = head
        self.requests: list[tuple] = []

    async def request_json(self, method, url, params=None, headers=None, json=None, timeout=None):
        self.requests.append((method, url, params, headers, json))
        for fragment, value in self.routes.items():
            if fragment in url:
                if isinstance(value, Exception):
                    raise value
                return value
        raise AssertionError(f"unexpected request {method} {url}")

    async def head_ok(self, url, timeout=None):
        self.requests.append(("HEAD", url, None, None, None))
        return self.head


class Scripted:
    """Mixin: every provider method answers from ``responses[method]`` and is recorded."""

    def _script(self, **responses: Any) -> None:
        self.responses = responses
        self.calls: list[tuple] = []

    def call_count(self, method: str) -> int:
        return sum(1 for c in self.calls if c[0] == method)

    async def _answer(self, method: str, *args: Any) -> Any:
        self.calls.append((method, *args))
        value = self.responses[method]
        if isinstance(value, Exception):
            raise value
        return value


class FakeFinnhub(Scripted, FinnhubProvider):

    def __init__(self, api_key: str = "test-key", **responses: Any):
        FinnhubProvider.__init__(self, api_key, http=HttpClient())
        self._script(**responses)

    async def quote(self, symbol):
        return await self._answer("quote", symbol)

    async def profile(self, symbol):
        return await self._answer("profile", symbol)

    async def company_news(self, symbol, start, end):
        return await self._answer("company_news", symbol, start, end)

    async def basic_financials(self, symbol):
        return await self._answer("basic_financials", symbol)

    async def recommendations(self, symbol):
        return await self._answer("recommendations", symbol)

    async def earnings_surprises(self, symbol):
        return await self._answer("earnings_surprises", symbol)

    async def earnings_calendar(self, symbol, start, end):
        return await self._answer("earnings_calendar", symbol, start, end)


class FakeAlphaVantage(Scripted, AlphaVantageProvider):

    def __init__(self, api_key: str = "test-key", **responses: Any):
        AlphaVantageProvider.__init__(self, api_key, http=HttpClient())
        self._script(**responses)

    async def earnings(self, symbol):
        return await self._answer("earnings", symbol)

    async def earnings_estimates(self, symbol):
        return await self._answer("earnings_estimates", symbol)


class FakeYahoo(Scripted, YahooProvider):

    def __init__(self, **responses: Any):
        YahooProvider.__init__(self, http=HttpClient())
        self._script(**responses)

    async def chart(self, symbol, chart_range, interval):
        return await self._answer("chart", symbol, chart_range, interval)

    async def search(self, query):
        return await self._answer("search", query)


class FakeNorgesBank(Scripted, NorgesBankProvider):

    def __init__(self, **responses: Any):
        NorgesBankProvider.__init__(self, http=HttpClient())
        self._script(**responses)

    async def exchange_rates(self):
        return await self._answer("exchange_rates")


class FakeCoinPaprika(Scripted, CoinPaprikaProvider):

    def __init__(self, **responses: Any):
        CoinPaprikaProvider.__init__(self, http=HttpClient())
        self._script(**responses)

    async def coin(self, coin_id):
        return await self._answer("coin", coin_id)

    async def ohlcv(self, coin_id, start, end):
        return await self._answer("ohlcv", coin_id, start, end)

    async def coins(self):
        return await self._answer("coins")


class FakeFiri(Scripted, FiriProvider):

    def __init__(self, api_key: str = "", **responses: Any):
        FiriProvider.__init__(self, api_key, http=HttpClient())
        self._script(**responses)

    async def balances(self, api_key):
        return await self._answer("balances", api_key)

    async def markets(self):
        return await self._answer("markets")


class FakeOpenRouter(Scripted, OpenRouterProvider):

    def __init__(self, api_key: str = "test-key", **responses: Any):
        OpenRouterProvider.__init__(self, api_key, http=HttpClient())
        self._script(**responses)

    async def complete(self, prompt):
        return await self._answer("complete", prompt)


class FakeNordnet(Scripted, NordnetProvider):

    def __init__(self, session_id: str = "", **responses: Any):
        NordnetProvider.__init__(self, session_id, http=HttpClient())
        self._script(**responses)

    async def accounts(self, session_id, include_credit_accounts=False, accept_language=None):
        return await self._answer("accounts", session_id, include_credit_accounts)

    async def positions(self, session_id, accid, include_instrument_loans=False,
                        include_intraday_limit=False, accept_language="en"):
        return await self._answer("positions", session_id, accid)

    async def account_info(self, session_id, accid):
        return await self._answer("account_info", session_id, accid)


def completion(text: str) -> dict:
    return {"choices": [{"message": {"role": "assistant", "content": text}}]}
