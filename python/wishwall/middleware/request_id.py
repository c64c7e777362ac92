"""X-Request-ID middleware for request correlation and access logging.

Each request gets one request id: a well-formed incoming X-Request-ID is
reused (UUIDs lowercased), anything else is replaced by a fresh UUID4. The id
is bound to the structlog context, stored on request.state and echoed on the
response, including redirects and error responses produced further in.

Must be registered last so it wraps AdminGuardMiddleware and every handler.
"""

import re
import time
import uuid

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from wishwall.logging import clear_request_context, get_logger, set_request_context

REQUEST_ID_HEADER = "X-Request-ID"
MAX_REQUEST_ID_LENGTH = 128

_TOKEN_ID = re.compile(r"^[A-Za-z0-9._-]{1,128}$")
_UUID_ID = re.compile(
    r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$"
)

logger = get_logger(__name__)


def accept_request_id(value: str | None) -> str:
    """Return the request id to use for an incoming header value."""
    if value and len(value.encode("utf-8")) <= MAX_REQUEST_ID_LENGTH:
        if _UUID_ID.match(value):
            return value.lower()
        if _TOKEN_ID.match(value):
            return value
    return str(uuid.uuid4())


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Assign a request id and emit one access log entry per request.

    Args:
        app: The ASGI application.
        log_requests: If True, log a `request_completed` entry per request.
    """

    def __init__(self, app, log_requests: bool = True):
        super().__init__(app)
        self.log_requests = log_requests

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        started = time.monotonic()
        request_id = accept_request_id(request.headers.get(REQUEST_ID_HEADER))
        request.state.request_id = request_id
        set_request_context(request_id, path=request.url.path, method=request.method)

        try:
            response = await call_next(request)

            # Set by require_admin once a session verifies
            admin = getattr(request.state, "admin", None)
            if admin is not None:
                set_request_context(
                    request_id, admin.id, path=request.url.path, method=request.method
                )

            response.headers[REQUEST_ID_HEADER] = request_id

            if self.log_requests:
                logger.info(
                    "request_completed",
                    status_code=response.status_code,
                    duration_ms=round((time.monotonic() - started) * 1000, 2),
                )
            return response

        except Exception:
            logger.exception("request_failed")
            raise

        finally:
            clear_request_context()
