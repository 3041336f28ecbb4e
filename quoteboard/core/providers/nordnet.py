"""Nordnet provider — brokerage accounts and positions behind a session credential.

Without a session the account listing answers with fixed demo accounts so the
dashboard still renders; positions and account info require a real session.
"""
from __future__ import annotations

import base64
from typing import Any

from quoteboard.core.providers.base import HttpClient, Provider

NORDNET_BASE = "https://public.nordnet.se/api/2"

MOCK_ACCOUNTS = [
    {"accno": 11111111, "accid": 1, "type": "ISIN", "name": "Main Brokerage", "currency": "SEK"},
    {"accno": 22222222, "accid": 2, "type": "ISA", "name": "Savings", "currency": "SEK"},
]


def basic_auth(session_id: str) -> str:
    token = base64.b64encode(f"{session_id}:{session_id}".encode()).decode()
    return f"Basic {token}"


class NordnetProvider(Provider):

    def __init__(self, session_id: str = "", http: HttpClient | None = None):
        super().__init__(http, session_id)

    @property
    def name(self) -> str:
        return "Nordnet"

    def resolve_session(self, session_id: str | None) -> str | None:
        return session_id or self._api_key or None

    def _headers(self, session_id: str, accept_language: str | None) -> dict[str, str]:
        headers = {"Authorization": basic_auth(session_id), "Accept": "application/json"}
        if accept_language:
            headers["Accept-Language"] = accept_language
        return headers

    async def accounts(self, session_id: str, include_credit_accounts: bool = False,
                       accept_language: str | None = None) -> Any:
        return await self._http.get_json(
            f"{NORDNET_BASE}/accounts",
            params={"include_credit_accounts": include_credit_accounts},
            headers=self._headers(session_id, accept_language),
        )

    async def positions(self, session_id: str, accid: str, include_instrument_loans: bool = False,
                        include_intraday_limit: bool = False, accept_language: str | None = "en") -> Any:
        return await self._http.get_json(
            f"{NORDNET_BASE}/accounts/{accid}/positions",
            params={
                "include_instrument_loans": include_instrument_loans,
                "include_intraday_limit": include_intraday_limit,
            },
            headers=self._headers(session_id, accept_language),
        )

    async def account_info(self, session_id: str, accid: str) -> Any:
        return await self._http.get_json(
            f"{NORDNET_BASE}/accounts/{accid}/info",
            params={"include_interest_rate": False, "include_short_pos_margin": False},
            headers=self._headers(session_id, "no"),
        )


# ── Account strings ─────────────────────────────────────────────────────


def _coerce(value: str) -> Any:
    if value in ("True", "true"):
        return True
    if value in ("False", "false"):
        return False
    if value:
        try:
            number = float(value)
        except ValueError:
            return value
        return int(number) if number.is_integer() and "." not in value else number
    return value


def parse_account_string(raw: Any) -> Any:
    """Turn ``"@{accno=21773585; accid=1; type=...}"`` into a dict; other values pass through."""
    if not isinstance(raw, str):
        return raw
    text = raw.strip()
    if text.startswith("@{") and text.endswith("}"):
        text = text[2:-1]
    parsed: dict[str, Any] = {}
    for part in (p.strip() for p in text.split(";")):
        if "=" not in part:
            continue
        key, _, value = part.partition("=")
        parsed[key.strip()] = _coerce(value.strip())
    return parsed


def normalize_accounts(payload: Any) -> list:
    if not isinstance(payload, list):
        return []
    return [parse_account_string(a) for a in payload]
