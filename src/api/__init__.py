"""
REST API Layer for Pause Tracker.

Provides:
- FastAPI application with CORS middleware
- Stateless endpoints over the scoring, risk and insight services
- API versioning under /api/v1 prefix
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src.api.routes import router
from src.api.schemas import error_response
from src.config.settings import Settings, load_settings
from src.lib.errors import INTERNAL_ERROR, NOT_FOUND, VALIDATION_ERROR

logger = logging.getLogger(__name__)

_ALLOWED_HEADERS: list[str] = [
    "Content-Type",
    "Accept",
    "Accept-Language",
    "X-Request-ID",
]


def request_language(request: Request) -> str:
    """
    Primary language subtag of the first Accept-Language entry.

    "de-DE,de;q=0.9,en;q=0.8" -> "de". Defaults to "en".
    """
    header = request.headers.get("accept-language", "")
    first = header.split(",", 1)[0].split(";", 1)[0].strip()
    return first.split("-", 1)[0].lower() or "en"


def create_app(settings: Settings | None = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Includes:
    - CORS middleware with origins from PAUSE_CORS_ORIGINS
    - Error envelope for validation failures (422), unknown paths (404)
      and unhandled exceptions (500), localized via Accept-Language
    - API v1 router
    - Root-level health check for load balancers
    - Production: /docs and /redoc disabled

    Args:
        settings: Pre-built settings; loaded from the environment when None

    Returns:
        Configured FastAPI application instance.
    """
    if settings is None:
        settings = load_settings()

    app = FastAPI(
        title="Pause Tracker",
        description="Urge, slip and pattern metrics for a personal pause practice",
        version="0.1.0",
        docs_url=None if settings.is_production else "/docs",
        redoc_url=None if settings.is_production else "/redoc",
    )
    app.state.settings = settings

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError,
    ) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content=error_response(
                VALIDATION_ERROR,
                details={"errors": jsonable_encoder(exc.errors())},
                lang=request_language(request),
            ),
        )

    @app.exception_handler(404)
    async def not_found_handler(request: Request, exc: Exception) -> JSONResponse:
        return JSONResponse(
            status_code=404,
            content=error_response(NOT_FOUND, lang=request_language(request)),
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(
        request: Request, exc: Exception,
    ) -> JSONResponse:
        logger.exception(
            "Unhandled exception on %s %s", request.method, request.url.path,
        )
        return JSONResponse(
            status_code=500,
            content=error_response(INTERNAL_ERROR, lang=request_language(request)),
        )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=_ALLOWED_HEADERS,
    )

    if settings.cors_origins:
        logger.info("CORS enabled for origins: %s", settings.cors_origins)
    else:
        logger.info("CORS: no origins configured (restrictive default)")

    app.include_router(router)

    @app.get("/health")
    async def root_health_check() -> dict[str, str]:
        """Root health check for load balancers."""
        return {"status": "ok"}

    return app


__all__ = ["create_app", "request_language", "router"]
