"""Equity endpoints — quotes, previous closes, profiles, charts, search, news and fundamentals."""
from fastapi import APIRouter, Depends, Query

from quoteboard.api.v1.responses import envelope, get_services
from quoteboard.core.services import Services

router = APIRouter(tags=["Market data"])


@router.get("/finnhub/quote/{symbol}")
async def get_quote(symbol: str, services: Services = Depends(get_services)):
    return envelope(await services.market_data.quote(symbol=symbol))


@router.get("/previous-closes")
async def get_previous_closes(symbols: str | None = None, services: Services = Depends(get_services)):
    """Comma-separated symbols; the response maps each resolved symbol to its previous close."""
    return envelope(await services.market_data.previous_closes(symbols))


@router.get("/finnhub-profile")
async def get_profile(symbol: str | None = None, services: Services = Depends(get_services)):
    return envelope(await services.market_data.profile(symbol=symbol))


@router.get("/yahoo/chart")
async def get_chart(
    symbol: str | None = None,
    chart_range: str = Query("1d", alias="range"),
    interval: str = Query("5m"),
    services: Services = Depends(get_services),
):
    return envelope(await services.market_data.chart(symbol=symbol, chart_range=chart_range, interval=interval))


@router.get("/search")
async def search(q: str | None = None, services: Services = Depends(get_services)):
    return envelope(await services.market_data.search(q))


@router.get("/news")
async def get_news(
    ticker: str | None = None,
    limit: int = Query(10, ge=1, le=100),
    services: Services = Depends(get_services),
):
    return envelope(await services.market_data.news(ticker=ticker, limit=limit))


@router.get("/financials")
async def get_financials(symbol: str | None = None, services: Services = Depends(get_services)):
    return envelope(await services.market_data.financials(symbol=symbol))


@router.get("/recommendations")
async def get_recommendations(symbol: str | None = None, services: Services = Depends(get_services)):
    return envelope(await services.market_data.recommendations(symbol=symbol))
