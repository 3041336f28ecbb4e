"""Result → HTTP translation and the services dependency."""
from fastapi import Request
from fastapi.responses import JSONResponse

from quoteboard.api.v1.models import ClearResponse, ErrorEnvelope, SuccessEnvelope
from quoteboard.core.results import Provenance, Result
from quoteboard.core.services import Services


def get_services(request: Request) -> Services:
    return request.app.state.services


def envelope(result: Result, **extra) -> JSONResponse:
    """Translate a result; ``extra`` fields are added at the top level of a success body."""
    if not result.ok:
        body = ErrorEnvelope(error=result.message, code=result.kind.value)
        return JSONResponse(status_code=result.status, content=body.model_dump())

    body = SuccessEnvelope(
        data=result.data,
        cached=result.cached,
        stale=result.stale,
        fallback=True if result.provenance is Provenance.DEFAULT else None,
    )
    return JSONResponse(content={**body.model_dump(exclude_none=True), **extra})


def cleared(message: str, removed: int) -> dict:
    return ClearResponse(message=message, removed=removed).model_dump()
