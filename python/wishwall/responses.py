"""API response envelope helpers and exception handlers.

Most API responses use a consistent envelope:
- Success: { "data": ... }
- Error: { "error": { "code": "E_...", "message": "...", "request_id": "..." } }

Session errors additionally carry a top-level `authenticated` flag so that
clients can tell "log in again" (false) from "logged in, not an admin" (true).

The request_id is included in error responses for debugging and support.
"""

from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from wishwall.errors import ApiError, ApiErrorCode
from wishwall.logging import get_logger, get_request_id

logger = get_logger(__name__)

_SESSION_FLAGS = {
    ApiErrorCode.E_UNAUTHENTICATED: False,
    ApiErrorCode.E_FORBIDDEN: True,
}


def success_response(data: Any) -> dict[str, Any]:
    """Create a success response envelope.

    Args:
        data: The response data to wrap.

    Returns:
        Dict with "data" key containing the response.
    """
    return {"data": data}


def error_response(
    code: ApiErrorCode, message: str, request_id: str | None = None
) -> dict[str, Any]:
    """Create an error response envelope.

    Args:
        code: The error code enum value.
        message: Human-readable error message.
        request_id: Optional request ID for correlation (auto-populated from context if None).

    Returns:
        Dict with "error" key containing code, message, and request_id.
    """
    if request_id is None:
        request_id = get_request_id()

    error = {"code": code.value, "message": message}
    if request_id:
        error["request_id"] = request_id

    body: dict[str, Any] = {"error": error}
    if code in _SESSION_FLAGS:
        body["authenticated"] = _SESSION_FLAGS[code]
    return body


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    """Handle ApiError exceptions and return proper JSON response."""
    response = JSONResponse(
        status_code=exc.status_code,
        content=error_response(exc.code, exc.message),
    )
    if exc.clear_session:
        gate = getattr(request.app.state, "session_gate", None)
        if gate is not None:
            gate.clear_cookie(response)
    return response


async def http_exception_handler(request: Request, exc: Any) -> JSONResponse:
    """Handle FastAPI HTTPException and return proper JSON response."""
    status_to_code = {
        400: ApiErrorCode.E_INVALID_REQUEST,
        401: ApiErrorCode.E_UNAUTHENTICATED,
        403: ApiErrorCode.E_FORBIDDEN,
        404: ApiErrorCode.E_NOT_FOUND,
        422: ApiErrorCode.E_INVALID_REQUEST,
    }
    code = status_to_code.get(exc.status_code, ApiErrorCode.E_INTERNAL)
    message = str(exc.detail) if exc.detail else "An error occurred"
    return JSONResponse(
        status_code=exc.status_code,
        content=error_response(code, message),
    )


async def store_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Handle record-store failures as E_STORE_UNAVAILABLE (500).

    Services let SQLAlchemy errors propagate unchanged; this is the one place
    they are logged and turned into a response.
    """
    logger.error(
        "store_unavailable",
        error_type=type(exc).__name__,
        error=str(exc).splitlines()[0] if str(exc) else "",
    )
    return JSONResponse(
        status_code=500,
        content=error_response(ApiErrorCode.E_STORE_UNAVAILABLE, "Record store unavailable"),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unhandled exceptions and return 500 with E_INTERNAL.

    Logs the exception server-side but never leaks details to client.
    """
    logger.exception("Unhandled exception: %s", exc)

    return JSONResponse(
        status_code=500,
        content=error_response(ApiErrorCode.E_INTERNAL, "Internal server error"),
    )
