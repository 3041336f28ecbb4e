"""Provider base — shared HTTP plumbing and the abstract upstream contract."""
from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from contextlib import nullcontext
from typing import Any
from urllib.parse import urlsplit

import aiohttp
from aiolimiter import AsyncLimiter

from quoteboard.core.errors import UpstreamError

BROWSER_HEADERS = {
    "User-Agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36",
    "Accept": "application/json",
}


def _clean_params(params: dict[str, Any] | None) -> dict[str, str] | None:
    # aiohttp refuses bools and None in query strings
    if params is None:
        return None
    cleaned = {}
    for k, v in params.items():
        if v is None:
            continue
        cleaned[k] = str(v).lower() if isinstance(v, bool) else str(v)
    return cleaned


class HttpClient:
    """One bounded-timeout request per call; every failure becomes an UpstreamError."""

    def __init__(self, timeout: float = 10.0, limiter: AsyncLimiter | None = None):
        self._timeout = timeout
        self._limiter = limiter

    async def request_json(
        self,
        method: str,
        url: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        json: Any = None,
        timeout: float | None = None,
    ) -> Any:
        host = urlsplit(url).netloc
        client_timeout = aiohttp.ClientTimeout(total=timeout or self._timeout)
        try:
            async with self._limiter or nullcontext():
                async with aiohttp.ClientSession(timeout=client_timeout) as session:
                    async with session.request(
                        method, url, params=_clean_params(params), headers=headers, json=json
                    ) as resp:
                        if resp.status >= 400:
                            body = (await resp.text())[:200]
                            raise UpstreamError(f"HTTP {resp.status} from {host}: {body}", status=resp.status)
                        try:
                            return await resp.json(content_type=None)
                        except ValueError as e:
                            raise UpstreamError(f"Unparseable response from {host}: {e}") from e
        except asyncio.TimeoutError as e:
            raise UpstreamError(f"Request timeout ({host})", status=504) from e
        except aiohttp.ClientError as e:
            raise UpstreamError(f"Request to {host} failed: {e}") from e

    async def get_json(self, url: str, params: dict[str, Any] | None = None,
                       headers: dict[str, str] | None = None, timeout: float | None = None) -> Any:
        return await self.request_json("GET", url, params=params, headers=headers, timeout=timeout)

    async def post_json(self, url: str, payload: Any, headers: dict[str, str] | None = None,
                        timeout: float | None = None) -> Any:
        return await self.request_json("POST", url, headers=headers, json=payload, timeout=timeout)

    async def head_ok(self, url: str, timeout: float | None = None) -> bool:
        """True when a HEAD request answers 200; never raises."""
        client_timeout = aiohttp.ClientTimeout(total=timeout or self._timeout)
        try:
            async with aiohttp.ClientSession(timeout=client_timeout) as session:
                async with session.head(url, allow_redirects=True) as resp:
                    return resp.status == 200
        except (asyncio.TimeoutError, aiohttp.ClientError):
            return False


class Provider(ABC):

    requires_key: bool = False

    def __init__(self, http: HttpClient | None = None, api_key: str = ""):
        self._http = http or HttpClient()
        self._api_key = api_key

    @property
    @abstractmethod
    def name(self) -> str:
        """Human label used in error messages: 'Finnhub', 'Alpha Vantage', ..."""
        ...

    @property
    def configured(self) -> bool:
        return bool(self._api_key) or not self.requires_key

    def missing_credentials(self) -> str | None:
        if self.configured:
            return None
        return f"{self.name} API key not configured"
