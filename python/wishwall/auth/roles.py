"""Role resolution for admin authorization.

resolve_role is the single source of truth for who counts as an admin.
Routes, the session gate and the page guard must all go through it rather
than reading metadata bags themselves.

Policy: an identity is an admin if EITHER metadata bag carries role "admin".
This is an OR, not a precedence chain; either source alone is sufficient.
"""

from enum import Enum

from wishwall.auth.provider import Identity

ADMIN_ROLE_CLAIM = "admin"


class Role(str, Enum):
    """Effective authorization level, derived per request, never stored."""

    admin = "admin"
    standard = "standard"


def resolve_role(identity: Identity) -> Role:
    """Derive the effective role from an identity's two role claims.

    Pure function. An absent metadata bag is "no claim", not an error.
    """
    if identity.app_role == ADMIN_ROLE_CLAIM or identity.user_role == ADMIN_ROLE_CLAIM:
        return Role.admin
    return Role.standard
