"""FastAPI application factory and global exception handling."""

from __future__ import annotations

from typing import Any, Optional

import httpx
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.requests import Request
from starlette.responses import JSONResponse

from summary_assistant import __version__ as app_version
from summary_assistant.api.deps import build_services
from summary_assistant.api.routes import router
from summary_assistant.config import Settings, get_settings
from summary_assistant.log import configure_logging
from summary_assistant.summarizer.models_catalog import model_family
from summary_assistant.summarizer.rate_limit import RateLimiter
from summary_assistant.summarizer.store import InMemoryPostRepository


def create_application(
    settings: Optional[Settings] = None,
    repository: Optional[InMemoryPostRepository] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    rate_limiter: Optional[RateLimiter] = None,
) -> FastAPI:
    """Create and configure the FastAPI application instance."""
    settings = settings or get_settings()
    configure_logging(settings.log_level, settings.debug_mode)

    app = FastAPI(
        title=settings.app_name,
        description="Dutch text-TV summaries with length validation and edit audits.",
        version=app_version,
    )
    app.state.services = build_services(
        settings, repository=repository, transport=transport, rate_limiter=rate_limiter
    )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=400,
            content={"error": "validation_error", "details": jsonable_errors(exc)},
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        detail = exc.detail
        if isinstance(detail, dict) and "error" in detail:
            payload = detail
        else:
            payload = {"error": "http_error", "details": detail}
        return JSONResponse(status_code=exc.status_code, content=payload)

    @app.get("/healthz", tags=["health"])
    async def healthz() -> dict[str, Any]:
        return {
            "status": "ok",
            "version": app_version,
            "model": settings.model,
            "model_family": model_family(settings.model).value,
            "api_key_configured": bool(settings.api_key),
        }

    app.include_router(router)
    return app


def jsonable_errors(exc: RequestValidationError) -> list:
    # ctx may carry the raw exception object, which JSONResponse cannot encode
    return [
        {key: value for key, value in error.items() if key != "ctx"}
        for error in exc.errors()
    ]


app = create_application()
