"""Admin auth routes.

Routes are transport-only: the SessionGate owns the cookie and every
verification decision.

- POST /api/admin/auth/login: establish a session (admins only get a cookie)
- GET /api/admin/auth/verify: check the current session
- POST /api/admin/auth/logout, DELETE /api/admin/auth: end the session
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from wishwall.api.deps import get_session_gate, require_admin
from wishwall.auth.session import AuthenticatedAdmin, SessionGate
from wishwall.errors import ForbiddenError
from wishwall.logging import get_logger
from wishwall.schemas.auth import LoginRequest

logger = get_logger(__name__)

router = APIRouter()


@router.post("/api/admin/auth/login")
def login(
    body: LoginRequest,
    gate: Annotated[SessionGate, Depends(get_session_gate)],
) -> JSONResponse:
    """Log an admin in.

    The provider may authenticate identities that are not admins. Those get
    403 and no cookie; their provider session is revoked straight away.

    Returns:
        {success: true, user: {id, email, username, role}} with the session cookie set.
    """
    session = gate.establish(body.username, body.password)

    if not session.is_admin:
        gate.abandon(session)
        logger.warning("admin_login_denied", user_id=session.identity.id)
        raise ForbiddenError(message="Admin access required")

    response = JSONResponse({"success": True, "user": session.to_admin().to_dict()})
    gate.issue_cookie(response, session)
    return response


@router.get("/api/admin/auth/verify")
def verify(admin: Annotated[AuthenticatedAdmin, Depends(require_admin)]) -> dict:
    """Verify the admin session.

    Returns 200 with the admin, 401 {authenticated: false} without a valid
    session, 403 {authenticated: true} for a non-admin session.
    """
    return {"authenticated": True, "user": admin.to_dict()}


@router.post("/api/admin/auth/logout")
@router.delete("/api/admin/auth")
def logout(
    request: Request,
    gate: Annotated[SessionGate, Depends(get_session_gate)],
) -> JSONResponse:
    """End the admin session.

    Always 200, whether or not a session existed.
    """
    response = JSONResponse({"success": True})
    gate.invalidate(request, response)
    return response
