"""AI company summary endpoint."""
from fastapi import APIRouter, Depends, Query

from quoteboard.api.v1.responses import envelope, get_services
from quoteboard.core.services import Services

router = APIRouter(tags=["Summaries"])


@router.get("/ai-summary")
async def get_ai_summary(
    symbol: str | None = None,
    company_name: str | None = Query(None, alias="companyName"),
    industry: str | None = None,
    sector: str | None = None,
    services: Services = Depends(get_services),
):
    return envelope(await services.summaries.summary(symbol, company_name, industry, sector))
