"""FastAPI dependencies for route handlers.

Common dependencies like database sessions, the session gate, the email client.
"""

from fastapi import Request

from wishwall.auth.middleware import get_session_gate, require_admin
from wishwall.db.session import get_db
from wishwall.email.client import EmailClientBase

__all__ = ["get_db", "get_email_client", "get_session_gate", "require_admin"]


def get_email_client(request: Request) -> EmailClientBase:
    """Get the shared email client from app state.

    The client is chosen once in create_app (Mailtrap or fake) and reused.
    """
    return request.app.state.email_client
