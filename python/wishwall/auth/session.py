"""Admin session gate: establish, verify and invalidate the admin session.

The admin session lives in one cookie:
- name `admin-session`, path `/`, HttpOnly, SameSite=Lax, Secure in prod
- value: HS256 JWT signed with ADMIN_SESSION_SECRET
- claims: iss/aud=wishwall-admin, sub=identity id, iat, exp, scope=admin-session,
  ptk=identity provider access token

Only SessionGate mints or clears the cookie. The JWT bounds the session
lifetime; the embedded provider token lets every verify() re-ask the identity
provider who the session belongs to, so revocation and role changes on the
provider side take effect on the next request.

Session establishment and admin authorization are separate checks: establish()
succeeds for any identity the provider accepts, and callers must look at the
resolved role before granting admin access.
"""

import time
from dataclasses import dataclass
from enum import Enum
from typing import Any

import jwt
from starlette.requests import HTTPConnection
from starlette.responses import Response

from wishwall.auth.provider import Identity, IdentityProvider
from wishwall.auth.roles import Role, resolve_role
from wishwall.config import Settings, get_settings
from wishwall.errors import IdentityProviderUnavailable
from wishwall.logging import get_logger

logger = get_logger(__name__)

SESSION_COOKIE_NAME = "admin-session"
SESSION_COOKIE_PATH = "/"
SESSION_TOKEN_ISSUER = "wishwall-admin"
SESSION_TOKEN_AUDIENCE = "wishwall-admin"
SESSION_TOKEN_SCOPE = "admin-session"


class SessionStatus(str, Enum):
    """Outcome of a session verification."""

    authenticated = "authenticated"
    unauthenticated = "unauthenticated"
    forbidden = "forbidden"


@dataclass(frozen=True)
class AuthenticatedAdmin:
    """The admin a verified session belongs to."""

    id: str
    email: str | None
    username: str
    role: Role

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "email": self.email,
            "username": self.username,
            "role": self.role.value,
        }


@dataclass(frozen=True)
class SessionCheck:
    """Result of SessionGate.verify.

    `admin` is set only for authenticated checks; `reason` only for failures.
    """

    status: SessionStatus
    admin: AuthenticatedAdmin | None = None
    reason: str | None = None

    @property
    def ok(self) -> bool:
        return self.status is SessionStatus.authenticated


@dataclass(frozen=True)
class EstablishedSession:
    """A freshly minted session token and the identity it is bound to."""

    token: str
    identity: Identity
    role: Role
    max_age: int

    @property
    def is_admin(self) -> bool:
        return self.role is Role.admin

    def to_admin(self) -> AuthenticatedAdmin:
        return AuthenticatedAdmin(
            id=self.identity.id,
            email=self.identity.email,
            username=derive_username(self.identity),
            role=self.role,
        )


def derive_username(identity: Identity) -> str:
    """Display username: metadata username, else email local part, else id."""
    if identity.username:
        return identity.username
    if identity.email:
        return identity.email.split("@")[0]
    return identity.id


def _log_auth_failure(reason: str, **fields: Any) -> None:
    # Auth-failure logging is advisory and must never affect the outcome.
    try:
        logger.warning("auth_failure", reason=reason, **fields)
    except Exception:
        pass


class SessionGate:
    """Single choke point for admin sessions.

    Every admin API route (via require_admin), the verify endpoint and the
    admin page guard call verify(); nothing else inspects the cookie.
    """

    def __init__(
        self,
        provider: IdentityProvider,
        *,
        secret: str,
        ttl_seconds: int,
        secure_cookies: bool = False,
        login_email_domain: str = "admin.local",
    ):
        """Initialize the gate.

        Args:
            provider: Identity provider used for login and identity lookups.
            secret: HS256 signing secret for session tokens.
            ttl_seconds: Session lifetime (JWT exp and cookie Max-Age).
            secure_cookies: Whether cookies carry the Secure attribute.
            login_email_domain: Domain appended to logins that are bare usernames.
        """
        self.provider = provider
        self._secret = secret
        self.ttl_seconds = ttl_seconds
        self.secure_cookies = secure_cookies
        self.login_email_domain = login_email_domain

    @classmethod
    def from_settings(
        cls, provider: IdentityProvider, settings: Settings | None = None
    ) -> "SessionGate":
        """Build a gate from application settings."""
        settings = settings or get_settings()
        return cls(
            provider,
            secret=settings.effective_session_secret,
            ttl_seconds=settings.admin_session_ttl_s,
            secure_cookies=settings.secure_cookies,
            login_email_domain=settings.admin_login_email_domain,
        )

    # ------------------------------------------------------------------
    # establish
    # ------------------------------------------------------------------

    def login_email(self, username: str) -> str:
        """Map a login name to the provider email (bare usernames get the admin domain)."""
        username = username.strip()
        if "@" in username:
            return username
        return f"{username}@{self.login_email_domain}"

    def establish(self, username: str, password: str) -> EstablishedSession:
        """Authenticate with the provider and mint a session token.

        Succeeds for every identity the provider accepts, admin or not.

        Raises:
            InvalidCredentialsError: The provider rejected the credentials.
            IdentityProviderUnavailable: The provider could not be reached.
        """
        provider_session = self.provider.authenticate(self.login_email(username), password)
        identity = provider_session.identity
        role = resolve_role(identity)

        now = int(time.time())
        payload = {
            "iss": SESSION_TOKEN_ISSUER,
            "aud": SESSION_TOKEN_AUDIENCE,
            "sub": identity.id,
            "iat": now,
            "exp": now + self.ttl_seconds,
            "scope": SESSION_TOKEN_SCOPE,
            "ptk": provider_session.access_token,
        }
        token = jwt.encode(payload, self._secret, algorithm="HS256")

        logger.info("admin_session_established", user_id=identity.id, role=role.value)
        return EstablishedSession(
            token=token, identity=identity, role=role, max_age=self.ttl_seconds
        )

    # ------------------------------------------------------------------
    # verify
    # ------------------------------------------------------------------

    def verify(self, conn: HTTPConnection) -> SessionCheck:
        """Verify the admin session carried by a request's cookies."""
        return self.verify_token(conn.cookies.get(SESSION_COOKIE_NAME))

    def verify_token(self, token: str | None) -> SessionCheck:
        """Verify a raw session token.

        Never raises: every failure maps to unauthenticated or forbidden.
        Provider outages fail closed (unauthenticated).
        """
        if not token:
            return SessionCheck(SessionStatus.unauthenticated, reason="missing_session")

        claims = self._decode(token)
        if claims is None:
            return SessionCheck(SessionStatus.unauthenticated, reason="invalid_session")

        try:
            identity = self.provider.get_current_identity(claims["ptk"])
        except IdentityProviderUnavailable as e:
            _log_auth_failure("provider_unavailable", error=e.message)
            return SessionCheck(SessionStatus.unauthenticated, reason="provider_unavailable")

        if identity is None:
            _log_auth_failure("identity_revoked")
            return SessionCheck(SessionStatus.unauthenticated, reason="identity_revoked")

        if identity.id != claims["sub"]:
            _log_auth_failure("identity_mismatch")
            return SessionCheck(SessionStatus.unauthenticated, reason="identity_mismatch")

        role = resolve_role(identity)
        if role is not Role.admin:
            _log_auth_failure("not_admin", user_id=identity.id)
            return SessionCheck(SessionStatus.forbidden, reason="not_admin")

        return SessionCheck(
            SessionStatus.authenticated,
            admin=AuthenticatedAdmin(
                id=identity.id,
                email=identity.email,
                username=derive_username(identity),
                role=role,
            ),
        )

    def _decode(self, token: str, *, verify_exp: bool = True) -> dict[str, Any] | None:
        try:
            claims = jwt.decode(
                token,
                self._secret,
                algorithms=["HS256"],
                issuer=SESSION_TOKEN_ISSUER,
                audience=SESSION_TOKEN_AUDIENCE,
                options={
                    "require": ["exp", "iss", "aud", "sub", "scope", "ptk"],
                    "verify_exp": verify_exp,
                },
            )
        except jwt.ExpiredSignatureError:
            _log_auth_failure("expired_session")
            return None
        except jwt.InvalidTokenError as e:
            _log_auth_failure("invalid_session", error=str(e))
            return None

        if claims.get("scope") != SESSION_TOKEN_SCOPE:
            _log_auth_failure("invalid_scope")
            return None
        return claims

    # ------------------------------------------------------------------
    # invalidate
    # ------------------------------------------------------------------

    def invalidate(self, conn: HTTPConnection, response: Response) -> None:
        """End the session: clear the cookie and revoke the provider token.

        Idempotent. A missing, expired or garbled cookie is still cleared and
        is not an error.
        """
        token = conn.cookies.get(SESSION_COOKIE_NAME)
        self.clear_cookie(response)
        if not token:
            return

        # Expired sessions still carry a provider token worth revoking
        claims = self._decode(token, verify_exp=False)
        if claims is not None:
            self.provider.revoke(claims["ptk"])
            logger.info("admin_session_invalidated", user_id=claims["sub"])

    def abandon(self, session: EstablishedSession) -> None:
        """Revoke a session that was established but will not be issued."""
        claims = self._decode(session.token)
        if claims is not None:
            self.provider.revoke(claims["ptk"])

    # ------------------------------------------------------------------
    # cookie helpers
    # ------------------------------------------------------------------

    def issue_cookie(self, response: Response, session: EstablishedSession) -> None:
        """Attach the session cookie to a response."""
        response.set_cookie(
            SESSION_COOKIE_NAME,
            session.token,
            max_age=session.max_age,
            path=SESSION_COOKIE_PATH,
            secure=self.secure_cookies,
            httponly=True,
            samesite="lax",
        )

    def clear_cookie(self, response: Response) -> None:
        """Clear the session cookie: empty value, Max-Age=0, same path as issuance."""
        response.set_cookie(
            SESSION_COOKIE_NAME,
            "",
            max_age=0,
            path=SESSION_COOKIE_PATH,
            secure=self.secure_cookies,
            httponly=True,
            samesite="lax",
        )
