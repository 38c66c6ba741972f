"""FastAPI application entrypoint."""

from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import settings
from app.db.database import Database
from app.routers import auth, transactions
from app.utils.errors import AppError, NotFoundError, StoreError, ValidationError
from app.utils.time import iso_timestamp

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the store pool at startup and release it at shutdown."""
    db = Database.from_settings(settings)
    if settings.auto_create_schema:
        db.create_schema()
    app.state.db = db
    logger.info("Store opened (pool size %d)", settings.database_pool_size)
    yield
    app.state.db = None
    db.close()
    logger.info("Store closed")


app = FastAPI(
    title=settings.app_name,
    description="Personal income and expense ledger API",
    version=settings.app_version,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def request_timing_middleware(request: Request, call_next):
    """Add per-request processing time and optionally log slow requests."""
    started = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - started) * 1000
    response.headers["X-Process-Time-Ms"] = f"{elapsed_ms:.1f}"

    threshold_ms = settings.slow_request_log_threshold_ms
    if threshold_ms > 0 and elapsed_ms >= threshold_ms:
        logger.warning(
            "Slow request %s %s %.1fms",
            request.method,
            request.url.path,
            elapsed_ms,
        )

    return response


@app.exception_handler(AppError)
async def app_error_handler(_: Request, exc: AppError) -> JSONResponse:
    """Convert domain exceptions into structured API responses."""
    content = exc.to_dict()
    if isinstance(exc, StoreError) and not settings.is_production:
        content["detail"] = exc.detail
    return JSONResponse(status_code=exc.status_code, content=content)


def _field_name(error: dict) -> str:
    if error.get("type") == "json_invalid":
        return "body"
    loc = tuple(error.get("loc", ()))
    parts = [str(part) for part in loc if part not in ("body", "query", "path", "header")]
    return ".".join(parts) or "request"


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(
    _: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """Normalize FastAPI validation responses into field-level details."""
    details = [
        {
            "field": _field_name(error),
            "message": str(error.get("msg", "Invalid value")).removeprefix("Value error, "),
        }
        for error in exc.errors()
    ]
    api_error = ValidationError(details)
    return JSONResponse(status_code=api_error.status_code, content=api_error.to_dict())


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(_: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Keep framework-level errors (unknown route, bad method) in the API shape."""
    if exc.status_code == 404:
        api_error = NotFoundError("Endpoint")
        return JSONResponse(status_code=404, content=api_error.to_dict())
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail), "code": "HTTP_ERROR"},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(_: Request, exc: Exception) -> JSONResponse:
    """Catch unexpected errors without leaking internals."""
    logger.exception("Unhandled exception", exc_info=exc)
    content = {"error": "Internal server error", "code": "INTERNAL_ERROR"}
    if not settings.is_production:
        content["detail"] = str(exc)
    return JSONResponse(status_code=500, content=content)


app.include_router(auth.router, prefix="/auth", tags=["auth"])
app.include_router(transactions.router, prefix="/transactions", tags=["transactions"])


@app.get("/health")
async def health() -> dict[str, str]:
    """Liveness probe; does not touch the store."""
    return {
        "status": "OK",
        "message": f"{settings.app_name} is running",
        "version": settings.app_version,
        "timestamp": iso_timestamp(),
    }
