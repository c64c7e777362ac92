"""FastAPI application creation and configuration.

This module creates and configures the FastAPI application instance.
It registers exception handlers, the admin page guard, request-id middleware,
and routes.

Collaborators:
- SessionGate (app.state.session_gate) wraps the identity provider; Supabase
  Auth when SUPABASE_URL is set, otherwise the in-memory fake
- Email client (app.state.email_client): Mailtrap when configured, else fake
- Session factory (app.state.session_factory): optional override used by get_db

Middleware Ordering (Critical):
- Middleware runs in reverse order of registration
- RequestIDMiddleware is added LAST so it runs FIRST (outermost)
- This ensures every response, including guard redirects, gets X-Request-ID

Actual execution order per request:
1. RequestIDMiddleware (sets request_id, starts timer)
2. AdminGuardMiddleware (redirects unauthenticated admin page requests)
3. JSON body check
4. Route handler (admin API routes verify via require_admin)
"""

import json

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from starlette.exceptions import HTTPException as StarletteHTTPException

from wishwall.api.routes import create_api_router
from wishwall.auth.middleware import AdminGuardMiddleware
from wishwall.auth.provider import IdentityProvider, get_identity_provider
from wishwall.auth.session import SessionGate
from wishwall.config import get_settings
from wishwall.email.client import EmailClientBase, get_email_client
from wishwall.errors import ApiError, ApiErrorCode
from wishwall.logging import configure_logging, get_logger
from wishwall.middleware.request_id import RequestIDMiddleware
from wishwall.responses import (
    api_error_handler,
    error_response,
    http_exception_handler,
    store_error_handler,
    unhandled_exception_handler,
)

# Configure structured logging at import time
configure_logging()

logger = get_logger(__name__)

_BODY_METHODS = frozenset({"POST", "PUT", "PATCH", "DELETE"})


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Body, query and path validation failures are all E_INVALID_REQUEST (400)."""
    return JSONResponse(
        status_code=400,
        content=error_response(ApiErrorCode.E_INVALID_REQUEST, "Invalid request"),
    )


async def reject_malformed_json(request: Request, call_next):
    """Answer 400 for JSON bodies that do not parse, before routing."""
    is_json = "application/json" in request.headers.get("content-type", "")
    if request.method in _BODY_METHODS and is_json:
        body = await request.body()
        try:
            if body:
                json.loads(body)
        except json.JSONDecodeError:
            return JSONResponse(
                status_code=400,
                content=error_response(ApiErrorCode.E_INVALID_REQUEST, "Malformed JSON body"),
            )
    return await call_next(request)


def create_app(
    identity_provider: IdentityProvider | None = None,
    email_client: EmailClientBase | None = None,
    session_factory: sessionmaker[Session] | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        identity_provider: Optional identity provider (for testing).
        email_client: Optional email client (for testing).
        session_factory: Optional session factory used instead of the default engine.

    Returns:
        Configured FastAPI application instance.
    """
    settings = get_settings()

    app = FastAPI(
        title="Wishwall Admin API",
        description="Admin session and message moderation API for Wishwall",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    provider = identity_provider or get_identity_provider(settings)
    gate = SessionGate.from_settings(provider, settings)
    app.state.session_gate = gate
    app.state.email_client = email_client or get_email_client(settings)
    app.state.session_factory = session_factory

    # Register exception handlers
    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(SQLAlchemyError, store_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.middleware("http")(reject_malformed_json)

    app.include_router(create_api_router())

    app.add_middleware(AdminGuardMiddleware, gate=gate)

    logger.info(
        "app_created",
        env=settings.wishwall_env.value,
        identity_provider=type(provider).__name__,
        email_client=type(app.state.email_client).__name__,
    )
    return app


def add_request_id_middleware(app: FastAPI, log_requests: bool = True) -> None:
    """Add request-id middleware to the app.

    Call AFTER all other middleware is added, so it runs FIRST and every
    response includes X-Request-ID.

    Args:
        app: The FastAPI application.
        log_requests: Whether to log access entries for each request.
    """
    app.add_middleware(RequestIDMiddleware, log_requests=log_requests)
    logger.info("request_id_middleware_enabled")
