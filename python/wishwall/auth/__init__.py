"""Authentication and authorization module.

This module provides:
- Identity provider abstraction (Supabase Auth + in-memory fake)
- Role resolution from identity metadata
- The admin SessionGate (cookie sessions)

Route dependencies and the admin page guard live in wishwall.auth.middleware.
"""

from wishwall.auth.provider import (
    FakeIdentityProvider,
    Identity,
    IdentityProvider,
    SupabaseIdentityProvider,
    get_identity_provider,
)
from wishwall.auth.roles import Role, resolve_role
from wishwall.auth.session import (
    AuthenticatedAdmin,
    SessionCheck,
    SessionGate,
    SessionStatus,
)

__all__ = [
    "Identity",
    "IdentityProvider",
    "SupabaseIdentityProvider",
    "FakeIdentityProvider",
    "get_identity_provider",
    "Role",
    "resolve_role",
    "AuthenticatedAdmin",
    "SessionCheck",
    "SessionGate",
    "SessionStatus",
]
