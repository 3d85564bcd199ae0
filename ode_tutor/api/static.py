"""
ode_tutor/api/static.py

GET /* — serves the tutoring widget (HTML/JS/CSS/images) for local development.

Only mounted by the local server. Files come from ``Settings.static_root``;
``/`` maps to ``index.html``. Content type is picked from a fixed extension
table, not guessed from the platform's MIME database, so every machine serves
the widget identically.
"""

from pathlib import Path

from fastapi import APIRouter, Request, status
from fastapi.responses import PlainTextResponse, Response
from starlette.concurrency import run_in_threadpool

from ode_tutor.core.logging import get_logger

logger = get_logger(__name__)
router = APIRouter()

CONTENT_TYPES = {
    ".html": "text/html",
    ".js": "application/javascript",
    ".css": "text/css",
    ".json": "application/json",
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".gif": "image/gif",
    ".svg": "image/svg+xml",
    ".ico": "image/x-icon",
}
DEFAULT_CONTENT_TYPE = "application/octet-stream"


def content_type_for(path: Path) -> str:
    return CONTENT_TYPES.get(path.suffix.lower(), DEFAULT_CONTENT_TYPE)


def resolve_static_path(root: Path, url_path: str) -> Path | None:
    """Map a URL path onto a file under ``root``.

    Returns ``None`` when the path escapes the root (``..`` segments, symlinks
    pointing outside).
    """
    relative = url_path.lstrip("/") or "index.html"
    base = root.resolve()
    candidate = (base / relative).resolve()
    if not candidate.is_relative_to(base):
        return None
    return candidate


@router.get("/{file_path:path}", include_in_schema=False)
async def serve_static(file_path: str, request: Request) -> Response:
    root: Path = request.app.state.settings.static_root
    try:
        path = resolve_static_path(root, file_path)
    except ValueError:
        # e.g. an embedded NUL byte; no such file can exist.
        path = None

    if path is None:
        logger.warning("static_path_rejected", path=file_path)
        return PlainTextResponse("File not found", status_code=status.HTTP_404_NOT_FOUND)

    try:
        content = await run_in_threadpool(path.read_bytes)
    except FileNotFoundError:
        logger.debug("static_not_found", path=file_path)
        return PlainTextResponse("File not found", status_code=status.HTTP_404_NOT_FOUND)
    except OSError as exc:
        logger.error("static_read_failed", path=file_path, error=str(exc))
        return PlainTextResponse(
            "Server error", status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
        )

    return Response(content=content, media_type=content_type_for(path))
