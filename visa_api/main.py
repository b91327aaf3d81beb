"""
main.py — Visa API FastAPI application entry point.

Start with: uvicorn visa_api.main:app --port 3000
       or: visa-api   (console script, honours PORT)
"""
import logging
import os
import subprocess
import sys
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any

import uvicorn
from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address
from sqlalchemy import text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from starlette.exceptions import HTTPException as StarletteHTTPException

from visa_api.admin.auth import admin_key_middleware
from visa_api.config import settings
from visa_api.database import async_engine, get_sessionmaker
from visa_api.errors import NotFoundError, make_error_response

# ---------------------------------------------------------------------------
# Logging — configured before anything else
# ---------------------------------------------------------------------------
logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s — %(message)s",
)
logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Lifespan — startup & shutdown hooks
# ---------------------------------------------------------------------------
@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Startup:
      1. Run Alembic migrations (unless RUN_MIGRATIONS_ON_STARTUP=false)
    Shutdown:
      1. Dispose of the connection pool
    """
    if settings.run_migrations_on_startup:
        package_dir = os.path.dirname(os.path.abspath(__file__))
        result = subprocess.run(
            [sys.executable, "-m", "alembic", "upgrade", "head"],
            capture_output=True,
            text=True,
            cwd=package_dir,
        )
        if result.returncode != 0:
            logger.error("Alembic migration failed:\n%s", result.stderr)
            raise RuntimeError(f"Alembic migration failed: {result.stderr}")
        msg = result.stdout.strip() or "No pending migrations"
        logger.info("Alembic: %s", msg)

    logger.info("Visa API v%s starting up", settings.app_version)
    yield

    await async_engine.dispose()
    logger.info("Database pool disposed")
    logger.info("Visa API shutting down")


def _servers() -> list[dict[str, str]] | None:
    if not settings.public_base_url:
        return None
    return [{"url": settings.public_base_url, "description": "Public server"}]


# ---------------------------------------------------------------------------
# FastAPI application instance
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Visa API",
    version=settings.app_version,
    description=(
        "Visa, eVisa/ETA, travel authorization and health requirements "
        "by nationality, destination and travel purpose."
    ),
    lifespan=lifespan,
    servers=_servers(),
    openapi_tags=[
        {"name": "Catalog", "description": "Countries and nationalities"},
        {"name": "Requirements", "description": "Travel requirements"},
        {"name": "Admin", "description": "Data administration (x-api-key)"},
        {"name": "System", "description": "Health"},
    ],
)

# ---------------------------------------------------------------------------
# Middleware — last added runs outermost: CORS → rate limit → admin key → headers
# ---------------------------------------------------------------------------
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[settings.rate_limit],
    enabled=settings.rate_limit_enabled,
)
app.state.limiter = limiter

_SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "no-referrer",
}
_API_CSP = "default-src 'self'; img-src 'self' data: https:; style-src 'self' 'unsafe-inline'"


@app.middleware("http")
async def security_headers(request: Request, call_next):
    response = await call_next(request)
    for name, value in _SECURITY_HEADERS.items():
        response.headers.setdefault(name, value)
    # Swagger UI pulls its assets from a CDN
    if not request.url.path.startswith(("/docs", "/redoc")):
        response.headers.setdefault("Content-Security-Policy", _API_CSP)
    return response


app.middleware("http")(admin_key_middleware)
app.add_middleware(SlowAPIMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials="*" not in settings.cors_origins_list,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ---------------------------------------------------------------------------
# Global exception handlers — registered BEFORE routers
# ---------------------------------------------------------------------------
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """
    Converts Pydantic / FastAPI validation errors to a 400 in the standard format.
    Returns ALL field violations in one response.
    """
    details = []
    for error in exc.errors():
        # Dot-notation field path without the top-level 'body'/'query'/'path' loc
        field = ".".join(
            str(loc) for loc in error["loc"] if loc not in ("body", "query", "path")
        )
        details.append({"field": field or None, "issue": error["msg"]})
    return make_error_response(
        code="VALIDATION_ERROR",
        message="Request validation failed",
        details=details,
        status_code=400,
    )


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    return make_error_response(code="NOT_FOUND", message=str(exc), status_code=404)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """
    Converts FastAPI HTTPException to standard error format with semantic code.
    """
    code_map = {
        400: "BAD_REQUEST",
        401: "UNAUTHORIZED",
        403: "FORBIDDEN",
        404: "NOT_FOUND",
        405: "METHOD_NOT_ALLOWED",
        409: "CONFLICT",
        429: "RATE_LIMITED",
    }
    code = code_map.get(exc.status_code, f"HTTP_{exc.status_code}")
    return make_error_response(
        code=code,
        message=str(exc.detail),
        status_code=exc.status_code,
    )


@app.exception_handler(IntegrityError)
async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    """A write collided with another row's unique key (e.g. a name already used by another iso2)."""
    logger.warning("Integrity error on %s %s: %s", request.method, request.url.path, exc.orig)
    return make_error_response(
        code="CONFLICT",
        message="The submitted data conflicts with an existing record",
        status_code=409,
    )


@app.exception_handler(RateLimitExceeded)
def rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    # Plain function: SlowAPIMiddleware calls it without awaiting
    return make_error_response(
        code="RATE_LIMITED",
        message=f"Rate limit exceeded: {exc.detail}",
        status_code=429,
        headers={"Retry-After": "60"},
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(
    request: Request, exc: Exception
) -> JSONResponse:
    """
    Catch-all for unexpected errors.
    DEBUG=true  → includes exception type & message in details (dev only).
    DEBUG=false → generic message; full traceback logged server-side only.
    """
    logger.error(
        "Unhandled exception on %s %s",
        request.method,
        request.url.path,
        exc_info=True,
    )
    if settings.debug:
        details = [{"issue": f"{type(exc).__name__}: {exc}"}]
        message = "An unexpected error occurred (debug details included)"
    else:
        details = []
        message = "An unexpected error occurred"
    return make_error_response(
        code="INTERNAL_ERROR",
        message=message,
        details=details,
        status_code=500,
    )


# ---------------------------------------------------------------------------
# Health endpoint (no auth required)
# ---------------------------------------------------------------------------
@app.get("/health", tags=["System"])
@app.get("/v1/health", tags=["System"], include_in_schema=False)
async def health_check(
    sessions: async_sessionmaker[AsyncSession] = Depends(get_sessionmaker),
) -> dict[str, Any]:
    """
    Liveness plus database reachability. Always 200; the body says whether
    the database answered.
    """
    try:
        async with sessions() as session:
            await session.execute(text("SELECT 1"))
        status, database = "ok", "connected"
    except (SQLAlchemyError, OSError) as exc:
        logger.warning("Health check: database unreachable: %s", exc)
        status, database = "error", "disconnected"
    return {
        "status": status,
        "database": database,
        "version": settings.app_version,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from visa_api.admin.routes import router as admin_router
from visa_api.catalog.routes import router as catalog_router
from visa_api.requirements.routes import router as requirements_router

app.include_router(catalog_router)
app.include_router(requirements_router)
app.include_router(admin_router)


def run() -> None:
    """Console entry point: serve on 0.0.0.0:PORT."""
    uvicorn.run("visa_api.main:app", host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    run()
