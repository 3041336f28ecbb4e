"""Global error handlers."""
from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from quoteboard.core.results import FailureKind


def _first_problem(exc: RequestValidationError) -> str:
    for err in exc.errors():
        where = ".".join(str(p) for p in err.get("loc", ()) if p not in ("query", "path", "header"))
        return f"{where}: {err.get('msg', 'invalid value')}" if where else err.get("msg", "invalid value")
    return "Invalid request"


async def request_validation_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content={"success": False, "error": _first_problem(exc), "code": FailureKind.VALIDATION.value},
    )


async def value_error_handler(request: Request, exc: ValueError):
    return JSONResponse(
        status_code=422,
        content={"success": False, "error": str(exc), "code": FailureKind.VALIDATION.value},
    )
