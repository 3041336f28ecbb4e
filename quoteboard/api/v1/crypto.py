"""Crypto endpoints — CoinPaprika coin data and Firi balances."""
from fastapi import APIRouter, Depends, Header, Query

from quoteboard.api.v1.responses import cleared, envelope, get_services
from quoteboard.core.services import Services

router = APIRouter(tags=["Crypto"])


# ── CoinPaprika ─────────────────────────────────────────────────────────


@router.get("/coinpaprika/coins/{coin_id}")
async def get_coin(coin_id: str, services: Services = Depends(get_services)):
    return envelope(await services.coins.coin(coin_id))


@router.get("/coinpaprika/coins/{coin_id}/chart")
async def get_coin_chart(coin_id: str, days: str = Query("1"), services: Services = Depends(get_services)):
    return envelope(await services.coins.chart(coin_id, days))


@router.get("/coinpaprika/search/{symbol}")
async def search_coin(symbol: str, services: Services = Depends(get_services)):
    return envelope(await services.coins.search(symbol))


@router.get("/coinpaprika/clear-cache")
async def clear_coin_cache(services: Services = Depends(get_services)):
    return cleared("CoinPaprika cache cleared", services.coins.clear())


# ── Firi ────────────────────────────────────────────────────────────────


@router.get("/firi/balances")
async def get_firi_balances(
    x_firi_user_key: str | None = Header(None),
    services: Services = Depends(get_services),
):
    return envelope(await services.firi.balances(x_firi_user_key))


@router.get("/firi/usdt-nok-rate")
async def get_usdt_nok_rate(services: Services = Depends(get_services)):
    result = await services.firi.usdt_nok_rate()
    # Browser clients read a top-level "rate"
    return envelope(result, rate=result.data["rate"]) if result.ok else envelope(result)


@router.get("/firi/markets")
async def get_firi_markets(services: Services = Depends(get_services)):
    return envelope(await services.firi.markets())


@router.get("/firi/clear-cache")
async def clear_firi_cache(services: Services = Depends(get_services)):
    return cleared("Firi cache cleared", services.firi.clear())
