"""
ode_tutor/core/logging.py

structlog configuration for the hint backend.

Production (the serverless platform) gets one JSON object per line; local
development gets coloured console output. Hebrew text is written as-is, not
``\\u``-escaped, so student answers stay readable in the logs.

Per-request fields (path, method) are bound with ``structlog.contextvars`` by
``RequestContextMiddleware`` and merged into every event logged while that
request is being handled.

Usage:
    from ode_tutor.core.logging import get_logger
    logger = get_logger(__name__)
    logger.info("hint_request", current_step=3)
"""

import logging
import sys

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from structlog.types import EventDict, Processor


def _drop_color_message_key(_, __, event_dict: EventDict) -> EventDict:
    """uvicorn adds ``color_message`` next to ``message``; keep only one copy."""
    event_dict.pop("color_message", None)
    return event_dict


def setup_logging(environment: str = "development", level: int = logging.INFO) -> None:
    """Configure structlog and route stdlib loggers (uvicorn, httpx) to stdout.

    Called from the app lifespan; safe to call more than once.
    """
    renderer: Processor
    if environment == "production":
        renderer = structlog.processors.JSONRenderer(ensure_ascii=False)
        tail: list[Processor] = [structlog.processors.dict_tracebacks, renderer]
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=True)
        tail = [renderer]

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            _drop_color_message_key,
            *tail,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.DEBUG if environment == "development" else level
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        logging.getLogger(name).handlers = []
        logging.getLogger(name).propagate = True
    # httpx logs every request line at INFO, which would duplicate provider_call_* events.
    logging.getLogger("httpx").setLevel(logging.WARNING)


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Bind method and path to the structlog context for the lifetime of a request."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            method=request.method,
            path=request.url.path,
        )
        try:
            return await call_next(request)
        finally:
            structlog.contextvars.clear_contextvars()


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Return a structlog logger named after the calling module."""
    return structlog.get_logger(name)
