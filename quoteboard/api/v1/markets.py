"""Market endpoints — exchange rates and trading session status."""
from fastapi import APIRouter, Depends

from quoteboard.api.v1.responses import envelope, get_services
from quoteboard.core.markets.registry import market_status
from quoteboard.core.services import Services

router = APIRouter(tags=["Markets"])


@router.get("/exchangeRates")
async def get_exchange_rates(services: Services = Depends(get_services)):
    """NOK per unit of USD and SEK (NOK itself is 1.0)."""
    return envelope(await services.fx.exchange_rates())


@router.get("/market-status")
async def get_market_status():
    return market_status()
