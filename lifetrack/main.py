"""FastAPI application entrypoint for the Lifetrack API."""

from __future__ import annotations

from datetime import datetime
from datetime import timezone
import logging
import time

from fastapi import FastAPI
from fastapi import Request
from fastapi.responses import JSONResponse

from lifetrack.core.config import AppSettings
from lifetrack.core.config import get_settings
from lifetrack.core.handlers import register_error_handlers
from lifetrack.core.logging import configure_logging
from lifetrack.core.middleware import RequestContextMiddleware
from lifetrack.core.responses import success_response

logger = logging.getLogger(__name__)

STARTED_AT = time.monotonic()


def create_app(settings: AppSettings | None = None) -> FastAPI:
    """Build the application with its middleware and the terminal error handler."""
    settings = settings or get_settings()
    configure_logging(settings.log_level)
    logger.info("Creating application with settings=%s", settings.safe_for_logging())

    app = FastAPI(title="Lifetrack", version=settings.version)
    app.add_middleware(RequestContextMiddleware, header_name=settings.request_id_header)
    register_error_handlers(app, settings)

    @app.get("/health")
    def health(request: Request) -> JSONResponse:
        """Liveness probe in the shared success envelope."""
        return success_response(
            {
                "status": "healthy",
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "version": settings.version,
                "environment": settings.environment,
                "uptime": round(time.monotonic() - STARTED_AT, 3),
            },
            request=request,
        )

    return app


app = create_app()
