"""FastAPI application — quoteboard API v1."""
import time
from contextlib import asynccontextmanager
from pathlib import Path

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from quoteboard import __version__
from quoteboard.api.v1 import accounts, cache, crypto, earnings, market_data, markets, summaries
from quoteboard.api.v1.errors import request_validation_handler, value_error_handler
from quoteboard.core.config import Settings, get_settings
from quoteboard.core.logging import configure_logging
from quoteboard.core.services import Services, build_services

logger = structlog.get_logger()


def create_app(services: Services | None = None, settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.log_level, settings.log_json)
    services = services or build_services(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("startup", version=__version__, stores=services.caches.names())
        yield
        logger.info("shutdown")

    app = FastAPI(
        title="Quoteboard API",
        version=__version__,
        description="Market data aggregator with per-provider caches and stale fallback",
        lifespan=lifespan,
    )
    app.state.services = services

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        logger.info(
            "request",
            method=request.method,
            path=request.url.path,
            status=response.status_code,
            duration_ms=round((time.perf_counter() - started) * 1000, 1),
        )
        return response

    app.include_router(market_data.router, prefix="/api")
    app.include_router(earnings.router, prefix="/api")
    app.include_router(markets.router, prefix="/api")
    app.include_router(crypto.router, prefix="/api")
    app.include_router(summaries.router, prefix="/api")
    app.include_router(accounts.router, prefix="/api")
    app.include_router(cache.router, prefix="/api")

    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(ValueError, value_error_handler)

    @app.get("/health")
    async def health():
        return {"status": "ok", "version": __version__}

    # dashboard files last so the API routes win
    static_dir = Path(settings.static_dir)
    if static_dir.is_dir():
        app.mount("/", StaticFiles(directory=static_dir, html=True), name="static")
    else:
        logger.info("static.skipped", directory=str(static_dir))

    return app
