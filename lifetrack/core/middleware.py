"""Request context middleware: request id assignment and completion logging."""

from __future__ import annotations

import logging
import secrets
import string
import time
from collections.abc import Awaitable
from collections.abc import Callable

from fastapi import Request
from fastapi import Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from lifetrack.core.config import DEFAULT_REQUEST_ID_HEADER
from lifetrack.core.handlers import handle_exception

logger = logging.getLogger(__name__)

REQUEST_ID_ALPHABET = string.ascii_lowercase + string.digits


def new_request_id() -> str:
    suffix = "".join(secrets.choice(REQUEST_ID_ALPHABET) for _ in range(9))
    return f"req_{int(time.time() * 1000)}_{suffix}"


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Attach a request id to every request and log its outcome.

    An id supplied by an upstream proxy in ``header_name`` is reused as-is;
    otherwise one is generated. The id is exposed on ``request.state`` for the
    response envelope and echoed back in the response headers. Unclassified
    failures escaping the route are rendered here through the shared failure
    handler so their responses carry the id as well.
    """

    def __init__(self, app: ASGIApp, header_name: str = DEFAULT_REQUEST_ID_HEADER) -> None:
        super().__init__(app)
        self.header_name = header_name

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        request_id = request.headers.get(self.header_name) or new_request_id()
        request.state.request_id = request_id
        started = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception as exc:
            response = await handle_exception(request, exc)

        duration_ms = int((time.perf_counter() - started) * 1000)
        response.headers[self.header_name] = request_id

        if response.status_code >= 500:
            level = logging.ERROR
        elif response.status_code >= 400:
            level = logging.WARNING
        else:
            level = logging.INFO
        logger.log(
            level,
            "%s %s -> %s in %dms request_id=%s",
            request.method,
            request.url.path,
            response.status_code,
            duration_ms,
            request_id,
        )
        return response
