"""Earnings endpoints — Alpha Vantage surprises/estimates and the Finnhub calendar view."""
from fastapi import APIRouter, Depends

from quoteboard.api.v1.responses import cleared, envelope, get_services
from quoteboard.core.services import Services

router = APIRouter(tags=["Earnings"])


@router.get("/earnings")
async def get_earnings(symbol: str | None = None, services: Services = Depends(get_services)):
    return envelope(await services.earnings.earnings(symbol=symbol))


@router.get("/earnings-estimates")
async def get_earnings_estimates(symbol: str | None = None, services: Services = Depends(get_services)):
    return envelope(await services.earnings.estimates(symbol=symbol))


@router.get("/earnings-clear-cache")
async def clear_earnings_cache(symbol: str | None = None, services: Services = Depends(get_services)):
    """Clears earnings and estimates together."""
    removed = services.earnings.clear_earnings(symbol)
    message = f"Cache cleared for {symbol.upper()}" if symbol else "All earnings cache cleared"
    return cleared(message, removed)


@router.get("/yahoo-earnings")
async def get_earnings_calendar(symbol: str | None = None, services: Services = Depends(get_services)):
    return envelope(await services.earnings.calendar(symbol=symbol))


@router.get("/yahoo-earnings/clear-cache")
async def clear_earnings_calendar_cache(symbol: str | None = None, services: Services = Depends(get_services)):
    removed = services.earnings.clear_calendar(symbol)
    message = f"Cache cleared for {symbol.upper()}" if symbol else "All earnings calendar cache cleared"
    return cleared(message, removed)
