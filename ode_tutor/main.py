"""
ode_tutor/main.py

FastAPI application factories for the two deployment shapes:

  - ``create_app``:        local development server. Wildcard CORS, the hint
                           API and static files for the widget on one listener.
  - ``create_hosted_app``: serverless handler (``api/ai-hint.py``). Only the
                           hint API, CORS locked to the published widget origin.

Both share the same routers and the same provider, built once from settings
when the app is created and stored on ``app.state``.

Environment variables are loaded by Pydantic Settings from ``.env``; there
is no ``load_dotenv()`` call here. Do not add one.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ode_tutor.core.config import Settings, get_settings
from ode_tutor.core.cors import FixedCORSMiddleware
from ode_tutor.core.logging import RequestContextMiddleware, get_logger, setup_logging
from ode_tutor.services.llm import HintProvider, build_provider


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Configure logging and announce the server; there are no connections to open."""
    settings: Settings = app.state.settings

    setup_logging(
        environment=settings.environment,
        level=logging.getLevelName(settings.log_level),
    )
    logger = get_logger(__name__)

    logger.info(
        "app_startup",
        version=settings.app_version,
        environment=settings.environment,
        provider=settings.provider_display_name,
    )
    if app.state.serves_static:
        logger.info(
            "app_ready",
            url=f"http://localhost:{settings.port}",
            static_root=str(settings.static_root),
            message="Open this URL in your browser to try the exercise.",
        )

    yield

    logger.info("app_stopped")


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render routing errors in the widget's ``{"error": ...}`` shape."""
    if exc.status_code == 405:
        message = "Method not allowed"
    else:
        message = str(exc.detail)
    return JSONResponse(
        content={"error": message},
        status_code=exc.status_code,
        headers=getattr(exc, "headers", None),
    )


def _build_app(
    settings: Settings,
    provider: HintProvider | None,
    *,
    serves_static: bool,
    allow_origin: str,
    allow_methods: list[str],
) -> FastAPI:
    from ode_tutor.api import health, hint, static  # noqa: PLC0415  (deferred import avoids circular deps at configure time)

    app = FastAPI(
        title="ODE Tutor Backend",
        description=(
            "Hint backend for the linear-ODE tutoring widget. Relays each student answer, "
            "with the reference solution and hint ladder, to a generative-AI provider."
        ),
        version=settings.app_version,
        docs_url="/docs" if not settings.is_production else None,
        redoc_url="/redoc" if not settings.is_production else None,
        openapi_url="/openapi.json" if not settings.is_production else None,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.provider = provider or build_provider(settings)
    app.state.serves_static = serves_static

    app.add_middleware(
        FixedCORSMiddleware,
        allow_origin=allow_origin,
        allow_methods=allow_methods,
    )
    app.add_middleware(RequestContextMiddleware)

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)

    app.include_router(hint.router, prefix="/api", tags=["Hints"])
    app.include_router(health.router, prefix="/api", tags=["Health"])

    # Catch-all GET: must stay last so it never shadows the API routes.
    if serves_static:
        app.include_router(static.router, tags=["Static"])

    return app


def create_app(settings: Settings | None = None, provider: HintProvider | None = None) -> FastAPI:
    """Local development server: hint API plus the widget's static files."""
    settings = settings or get_settings()
    return _build_app(
        settings,
        provider,
        serves_static=True,
        allow_origin="*",
        allow_methods=["GET", "POST", "OPTIONS"],
    )


def create_hosted_app(
    settings: Settings | None = None, provider: HintProvider | None = None
) -> FastAPI:
    """Serverless handler: hint API only, callable from the published widget."""
    settings = settings or get_settings()
    return _build_app(
        settings,
        provider,
        serves_static=False,
        allow_origin=settings.hosted_origin,
        allow_methods=["POST", "OPTIONS"],
    )
