"""
ode_tutor/core/cors.py

Fixed-header CORS for the widget.

Starlette's ``CORSMiddleware`` echoes origins and only treats an OPTIONS
request as a preflight when the browser sends ``Access-Control-Request-Method``;
its preflight body is ``"OK"``. The widget contract is simpler: every response
carries the same three headers, and any OPTIONS request is answered with an
empty 200 before routing.
"""

from collections.abc import Sequence

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp


class FixedCORSMiddleware(BaseHTTPMiddleware):
    def __init__(
        self,
        app: ASGIApp,
        *,
        allow_origin: str,
        allow_methods: Sequence[str],
        allow_headers: Sequence[str] = ("Content-Type",),
    ) -> None:
        super().__init__(app)
        self._headers = {
            "Access-Control-Allow-Origin": allow_origin,
            "Access-Control-Allow-Methods": ", ".join(allow_methods),
            "Access-Control-Allow-Headers": ", ".join(allow_headers),
        }

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if request.method == "OPTIONS":
            response = Response(status_code=200)
        else:
            response = await call_next(request)
        response.headers.update(self._headers)
        return response
