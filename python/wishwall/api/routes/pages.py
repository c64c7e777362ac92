"""Admin page shells.

The admin UI is a client-side bundle; the server only serves the HTML shell
that mounts it. AdminGuardMiddleware decides whether a protected shell is
served at all, so handlers here never check the session themselves.
"""

from fastapi import APIRouter
from fastapi.responses import HTMLResponse

router = APIRouter()

_SHELL = """<!doctype html>
<html lang="en">
<head><meta charset="utf-8"><title>{title}</title></head>
<body><div id="app" data-view="{view}"></div><script src="/static/admin.js"></script></body>
</html>
"""


def _shell(title: str, view: str) -> HTMLResponse:
    return HTMLResponse(_SHELL.format(title=title, view=view))


@router.get("/admin/login", response_class=HTMLResponse)
async def login_page() -> HTMLResponse:
    """Login page. Public."""
    return _shell("Admin login", "login")


@router.get("/admin/forgot-password", response_class=HTMLResponse)
async def forgot_password_page() -> HTMLResponse:
    """Password reset request. Public; the reset email comes from the identity provider."""
    return _shell("Forgot password", "forgot-password")


@router.get("/admin/reset-password", response_class=HTMLResponse)
async def reset_password_page() -> HTMLResponse:
    """Target of the provider's reset link. Public."""
    return _shell("Reset password", "reset-password")


@router.get("/admin", response_class=HTMLResponse)
async def dashboard_page() -> HTMLResponse:
    """Dashboard. Only reached with a verified admin session."""
    return _shell("Admin dashboard", "dashboard")


@router.get("/admin/messages", response_class=HTMLResponse)
async def messages_page() -> HTMLResponse:
    """Message moderation view. Only reached with a verified admin session."""
    return _shell("Messages", "messages")
