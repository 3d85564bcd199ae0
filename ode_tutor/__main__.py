"""
ode_tutor/__main__.py

Local development server: ``python -m ode_tutor`` or ``ode-tutor-server``.

Serves the widget from STATIC_ROOT (default: the current directory) and the
hint API on http://localhost:3000. Press Ctrl+C to stop.
"""

import uvicorn

from ode_tutor.core.config import get_settings
from ode_tutor.main import create_app


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_config=None,  # setup_logging() owns the handlers
    )


if __name__ == "__main__":
    main()
