"""Brokerage account service — Nordnet pass-through, never cached."""
from __future__ import annotations

from quoteboard.core.endpoint import uncached
from quoteboard.core.providers import nordnet as nn
from quoteboard.core.providers.nordnet import NordnetProvider
from quoteboard.core.results import Failure, Provenance, Result, Success


class AccountService:

    def __init__(self, nordnet: NordnetProvider):
        self._nordnet = nordnet

    async def accounts(self, session_id: str | None = None, include_credit_accounts: bool = False,
                       accept_language: str | None = None) -> Result:
        session = self._nordnet.resolve_session(session_id)
        if session is None:
            return Success({"accounts": list(nn.MOCK_ACCOUNTS)}, Provenance.DEFAULT)
        return await uncached(
            "nordnet.accounts",
            self._nordnet.accounts(session, include_credit_accounts, accept_language),
            lambda raw: {"accounts": nn.normalize_accounts(raw)},
        )

    async def positions(self, accid: str, session_id: str | None = None,
                        include_instrument_loans: bool = False, include_intraday_limit: bool = False,
                        accept_language: str | None = None) -> Result:
        session = self._nordnet.resolve_session(session_id)
        if session is None:
            return Failure.unauthorized("Missing session id")
        return await uncached(
            "nordnet.positions",
            self._nordnet.positions(
                session, accid, include_instrument_loans, include_intraday_limit, accept_language or "en"
            ),
            lambda raw: {"positions": raw},
        )

    async def account_info(self, session_id: str | None, accid: str | None) -> Result:
        if not session_id or not accid:
            return Failure.validation("Missing sessionId or accid")
        return await uncached("nordnet.account_info", self._nordnet.account_info(session_id, accid))
