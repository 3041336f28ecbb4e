"""Brokerage endpoints — Nordnet accounts, positions and account info."""
from fastapi import APIRouter, Depends, Header, Query

from quoteboard.api.v1.responses import envelope, get_services
from quoteboard.core.services import Services

router = APIRouter(tags=["Accounts"])


def _flag(value: str | None) -> bool:
    return value in ("true", "1")


@router.get("/accounts")
async def get_accounts(
    include_credit_accounts: str | None = None,
    nordnet_session: str | None = Header(None, alias="X-NORDNET-SESSION"),
    accept_language: str | None = Header(None),
    services: Services = Depends(get_services),
):
    """Without a session (header or configured) this answers with demo accounts."""
    return envelope(await services.accounts.accounts(
        nordnet_session, _flag(include_credit_accounts), accept_language
    ))


@router.get("/positions/{accid}")
async def get_positions(
    accid: str,
    include_instrument_loans: str | None = None,
    include_intraday_limit: str | None = None,
    nordnet_session: str | None = Header(None, alias="X-NORDNET-SESSION"),
    accept_language: str | None = Header(None),
    services: Services = Depends(get_services),
):
    return envelope(await services.accounts.positions(
        accid,
        nordnet_session,
        include_instrument_loans == "true",
        include_intraday_limit == "true",
        accept_language,
    ))


@router.get("/account-info")
async def get_account_info(
    session_id: str | None = Query(None, alias="sessionId"),
    accid: str | None = None,
    services: Services = Depends(get_services),
):
    return envelope(await services.accounts.account_info(session_id, accid))
