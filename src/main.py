"""FastAPI application entry point.

Run with: uvicorn src.main:app --reload --port 8000
"""

# ruff: noqa: E402  -- uvloop.install() must run before other imports

import uvloop

uvloop.install()

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from config.settings import settings
from src.ft_admin.api.router import router as admin_router
from src.ft_analytics.api.router import router as analytics_router
from src.ft_category.api.router import router as category_router
from src.ft_common.cache import get_cache
from src.ft_common.database import dispose_engine, ping_database
from src.ft_common.errors import AppError, InternalError
from src.ft_common.redis_client import close_redis
from src.ft_common.response import error_payload
from src.ft_gateway.api.router import router as auth_router
from src.ft_gateway.middleware.rate_limit import RateLimitMiddleware
from src.ft_gateway.middleware.request_log import RequestLogMiddleware
from src.ft_transaction.api.router import router as transaction_router

VERSION = "1.0.0"

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: verify the DB connection, check the cache. Shutdown: dispose."""
    await ping_database()
    if not await get_cache().healthy():
        logger.warning("Cache unavailable at startup; serving uncached until it recovers")
    yield
    await dispose_engine()
    await close_redis()


app = FastAPI(
    title=settings.APP_NAME,
    version=VERSION,
    lifespan=lifespan,
)


# Added last runs first: request id is set before the rate limiter answers.
if settings.RATE_LIMIT_ENABLED:
    app.add_middleware(RateLimitMiddleware)
app.add_middleware(RequestLogMiddleware)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    return JSONResponse(status_code=exc.http_status, content=error_payload(request, exc))


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error(
        "Unhandled database error on %s %s", request.method, request.url.path, exc_info=exc
    )
    err = InternalError()
    return JSONResponse(status_code=err.http_status, content=error_payload(request, err))


app.include_router(auth_router, prefix="/api/v1")
app.include_router(transaction_router, prefix="/api/v1")
app.include_router(category_router, prefix="/api/v1")
app.include_router(analytics_router, prefix="/api/v1")
app.include_router(admin_router, prefix="/api/v1")


@app.get("/health")
async def health() -> dict[str, Any]:
    try:
        await ping_database()
        database = "ok"
    except (SQLAlchemyError, OSError) as exc:
        logger.warning("Health check: database unavailable: %s", exc)
        database = "unavailable"
    cache = "ok" if await get_cache().healthy() else "unavailable"
    return {
        "status": "ok" if database == "ok" else "degraded",
        "version": VERSION,
        "database": database,
        "cache": cache,
    }
