"""Admin authorization for routes and pages.

Provides:
- get_session_gate: Dependency for the app's SessionGate
- require_admin: Dependency for admin-only API routes (JSON 401/403)
- AdminGuardMiddleware: Guard for admin pages (redirects to the login page)

Both sit on SessionGate.verify; neither inspects cookies or metadata itself.
"""

from typing import Annotated
from urllib.parse import urlencode

from fastapi import Depends, Request
from starlette.concurrency import run_in_threadpool
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import RedirectResponse, Response
from starlette.types import ASGIApp

from wishwall.auth.session import AuthenticatedAdmin, SessionGate, SessionStatus
from wishwall.errors import AdminRequiredError, UnauthenticatedError

LOGIN_PATH = "/admin/login"
ADMIN_PAGE_PREFIX = "/admin"

# Admin pages reachable without a session
PUBLIC_ADMIN_PATHS = {LOGIN_PATH, "/admin/forgot-password", "/admin/reset-password"}


def get_session_gate(request: Request) -> SessionGate:
    """Get the shared SessionGate from app state."""
    return request.app.state.session_gate


def require_admin(
    request: Request,
    gate: Annotated[SessionGate, Depends(get_session_gate)],
) -> AuthenticatedAdmin:
    """FastAPI dependency for admin-only routes.

    Returns:
        The authenticated admin.

    Raises:
        UnauthenticatedError: No valid session (401).
        AdminRequiredError: Valid session, not an admin (403); the cookie is cleared.
    """
    check = gate.verify(request)
    if check.status is SessionStatus.unauthenticated:
        raise UnauthenticatedError()
    if check.status is SessionStatus.forbidden:
        raise AdminRequiredError()

    request.state.admin = check.admin
    return check.admin


def is_protected_page(path: str) -> bool:
    """Whether a path is an admin page that needs a session."""
    if path in PUBLIC_ADMIN_PATHS:
        return False
    return path == ADMIN_PAGE_PREFIX or path.startswith(ADMIN_PAGE_PREFIX + "/")


class AdminGuardMiddleware(BaseHTTPMiddleware):
    """Guard for admin pages.

    Runs on every request, so each navigation into an admin page re-verifies
    the session (sessions can expire mid-visit). Outcomes:
    1. Not an admin page, or a public one: pass through
    2. No valid session: 303 to /admin/login?redirect=<path>
    3. Valid session, not an admin: clear cookie, 303 to /admin/login?error=unauthorized
    4. Admin: attach admin to request.state and render the page

    API routes are not handled here; they use require_admin.
    """

    def __init__(self, app: ASGIApp, gate: SessionGate):
        super().__init__(app)
        self.gate = gate

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        path = request.url.path
        if not is_protected_page(path):
            return await call_next(request)

        # verify() may call the identity provider over blocking HTTP
        check = await run_in_threadpool(self.gate.verify, request)

        if check.status is SessionStatus.unauthenticated:
            return RedirectResponse(
                f"{LOGIN_PATH}?{urlencode({'redirect': path})}", status_code=303
            )

        if check.status is SessionStatus.forbidden:
            response = RedirectResponse(
                f"{LOGIN_PATH}?{urlencode({'error': 'unauthorized'})}", status_code=303
            )
            self.gate.clear_cookie(response)
            return response

        request.state.admin = check.admin
        return await call_next(request)
