"""Identity provider abstraction.

The identity provider authenticates admins, stores their passwords and issues
access tokens. Wishwall only consumes it through three calls:
- authenticate: exchange email + password for an access token and identity
- get_current_identity: resolve an access token to the identity it belongs to
- revoke: sign the token out (best-effort)

SupabaseIdentityProvider talks to Supabase Auth (GoTrue) over httpx.
FakeIdentityProvider keeps users and tokens in memory for tests and for
local runs without Supabase.
"""

import secrets
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any
from uuid import uuid4

import httpx

from wishwall.config import Settings, get_settings
from wishwall.errors import IdentityProviderUnavailable, InvalidCredentialsError
from wishwall.logging import get_logger

logger = get_logger(__name__)


def _role_claim(bag: Any) -> str | None:
    """Read `role` from a metadata bag; anything but a dict is no claim."""
    if not isinstance(bag, dict):
        return None
    role = bag.get("role")
    return role if isinstance(role, str) else None


@dataclass(frozen=True)
class Identity:
    """An authenticated subject as known to the identity provider.

    The two role claims are kept apart:
    - user_role: from user_metadata, editable by the subject
    - app_role: from app_metadata, editable only by provider-side admin tooling
    """

    id: str
    email: str | None
    user_role: str | None = None
    app_role: str | None = None
    username: str | None = None

    @classmethod
    def from_provider_user(cls, payload: dict[str, Any]) -> "Identity":
        """Build an Identity from a provider user object.

        Expected shape: {id, email, user_metadata: {role?, username?}, app_metadata: {role?}}.
        Missing metadata bags are treated as carrying no claims.
        """
        user_metadata = payload.get("user_metadata")
        username = user_metadata.get("username") if isinstance(user_metadata, dict) else None

        return cls(
            id=str(payload["id"]),
            email=payload.get("email"),
            user_role=_role_claim(user_metadata),
            app_role=_role_claim(payload.get("app_metadata")),
            username=username if isinstance(username, str) and username else None,
        )


@dataclass(frozen=True)
class ProviderSession:
    """Result of a successful authenticate call."""

    access_token: str
    identity: Identity


class IdentityProvider(ABC):
    """Abstract base class for identity provider implementations."""

    @abstractmethod
    def authenticate(self, email: str, password: str) -> ProviderSession:
        """Verify credentials and open a provider session.

        Raises:
            InvalidCredentialsError: The provider rejected the credentials.
            IdentityProviderUnavailable: The provider could not be reached.
        """
        ...

    @abstractmethod
    def get_current_identity(self, access_token: str) -> Identity | None:
        """Resolve an access token to its identity.

        Returns:
            The identity, or None if the token is unknown, expired or revoked.

        Raises:
            IdentityProviderUnavailable: The provider could not be reached.
        """
        ...

    @abstractmethod
    def revoke(self, access_token: str) -> None:
        """Sign the access token out.

        Best-effort operation - logs errors but doesn't raise.
        """
        ...


def _json_body(response: httpx.Response) -> Any:
    """Decode a 200 body; anything but JSON means the service is misbehaving."""
    try:
        return response.json()
    except ValueError as e:
        raise IdentityProviderUnavailable("Authentication service returned a malformed response") from e


class SupabaseIdentityProvider(IdentityProvider):
    """Production identity provider backed by Supabase Auth (GoTrue)."""

    def __init__(
        self,
        supabase_url: str,
        anon_key: str,
        *,
        timeout: float = 10.0,
        transport: httpx.BaseTransport | None = None,
    ):
        """Initialize the provider.

        Args:
            supabase_url: Supabase project URL (e.g., https://xxx.supabase.co).
            anon_key: Supabase anon key, sent as the `apikey` header.
            timeout: Per-request timeout in seconds.
            transport: Optional httpx transport (tests use httpx.MockTransport).
        """
        self._auth_url = f"{supabase_url.rstrip('/')}/auth/v1"
        self._anon_key = anon_key
        self._timeout = timeout
        self._transport = transport

    def _client(self) -> httpx.Client:
        return httpx.Client(transport=self._transport, timeout=self._timeout)

    def _headers(self, access_token: str | None = None) -> dict[str, str]:
        headers = {"apikey": self._anon_key}
        if access_token:
            headers["Authorization"] = f"Bearer {access_token}"
        return headers

    def authenticate(self, email: str, password: str) -> ProviderSession:
        """Password grant via POST /auth/v1/token?grant_type=password."""
        try:
            with self._client() as client:
                response = client.post(
                    f"{self._auth_url}/token",
                    params={"grant_type": "password"},
                    headers=self._headers(),
                    json={"email": email, "password": password},
                )
        except httpx.HTTPError as e:
            raise IdentityProviderUnavailable() from e

        if response.status_code >= 500:
            raise IdentityProviderUnavailable(
                f"Authentication service error: {response.status_code}"
            )
        if response.status_code != 200:
            # GoTrue answers 400 invalid_grant for unknown user / bad password
            raise InvalidCredentialsError()

        data = _json_body(response)
        access_token = data.get("access_token") if isinstance(data, dict) else None
        user = data.get("user") if isinstance(data, dict) else None
        if not access_token or not isinstance(user, dict):
            raise IdentityProviderUnavailable("Authentication service returned no session")

        return ProviderSession(access_token=access_token, identity=Identity.from_provider_user(user))

    def get_current_identity(self, access_token: str) -> Identity | None:
        """Look up the token owner via GET /auth/v1/user."""
        try:
            with self._client() as client:
                response = client.get(
                    f"{self._auth_url}/user",
                    headers=self._headers(access_token),
                )
        except httpx.HTTPError as e:
            raise IdentityProviderUnavailable() from e

        if response.status_code in (401, 403, 404):
            return None
        if response.status_code != 200:
            raise IdentityProviderUnavailable(
                f"Authentication service error: {response.status_code}"
            )

        data = _json_body(response)
        if not isinstance(data, dict) or not data.get("id"):
            return None
        return Identity.from_provider_user(data)

    def revoke(self, access_token: str) -> None:
        """Sign out via POST /auth/v1/logout (best-effort)."""
        try:
            with self._client() as client:
                response = client.post(
                    f"{self._auth_url}/logout",
                    headers=self._headers(access_token),
                )
            if response.status_code not in (200, 204, 401, 403, 404):
                logger.warning("identity_revoke_failed", status_code=response.status_code)
        except httpx.HTTPError as e:
            logger.warning("identity_revoke_failed", error=str(e))


class FakeIdentityProvider(IdentityProvider):
    """Fake identity provider for testing without real Supabase.

    Users and tokens live in memory. Identities are rebuilt from the stored
    user payload on every lookup, so metadata edits take effect immediately.
    """

    def __init__(self):
        self._users: dict[str, dict[str, Any]] = {}  # user id -> provider user payload
        self._passwords: dict[str, str] = {}  # email -> password
        self._tokens: dict[str, str] = {}  # access token -> user id
        self.available = True

    def _check_available(self) -> None:
        if not self.available:
            raise IdentityProviderUnavailable()

    def authenticate(self, email: str, password: str) -> ProviderSession:
        self._check_available()
        user = self._find_by_email(email)
        if user is None or not secrets.compare_digest(self._passwords[email], password):
            raise InvalidCredentialsError()

        access_token = f"fake-access-{uuid4()}"
        self._tokens[access_token] = user["id"]
        return ProviderSession(access_token=access_token, identity=Identity.from_provider_user(user))

    def get_current_identity(self, access_token: str) -> Identity | None:
        self._check_available()
        user_id = self._tokens.get(access_token)
        if user_id is None or user_id not in self._users:
            return None
        return Identity.from_provider_user(self._users[user_id])

    def revoke(self, access_token: str) -> None:
        self._tokens.pop(access_token, None)

    # Test helper methods

    def add_user(
        self,
        email: str,
        password: str,
        *,
        user_metadata: dict[str, Any] | None = None,
        app_metadata: dict[str, Any] | None = None,
    ) -> Identity:
        """Register a user (test helper)."""
        payload: dict[str, Any] = {"id": str(uuid4()), "email": email}
        if user_metadata is not None:
            payload["user_metadata"] = user_metadata
        if app_metadata is not None:
            payload["app_metadata"] = app_metadata
        self._users[payload["id"]] = payload
        self._passwords[email] = password
        return Identity.from_provider_user(payload)

    def set_metadata(
        self,
        user_id: str,
        *,
        user_metadata: dict[str, Any] | None = None,
        app_metadata: dict[str, Any] | None = None,
    ) -> None:
        """Replace a user's metadata bags (test helper)."""
        payload = self._users[user_id]
        payload["user_metadata"] = user_metadata or {}
        payload["app_metadata"] = app_metadata or {}

    def active_tokens(self) -> set[str]:
        """Tokens that have not been revoked (test helper)."""
        return set(self._tokens)

    def _find_by_email(self, email: str) -> dict[str, Any] | None:
        if email not in self._passwords:
            return None
        for user in self._users.values():
            if user.get("email") == email:
                return user
        return None


def get_identity_provider(settings: Settings | None = None) -> IdentityProvider:
    """Get the configured identity provider.

    Returns:
        SupabaseIdentityProvider if SUPABASE_URL and SUPABASE_ANON_KEY are set,
        FakeIdentityProvider otherwise (no users, so every login fails).
    """
    settings = settings or get_settings()

    if settings.normalized_supabase_url and settings.supabase_anon_key:
        return SupabaseIdentityProvider(
            supabase_url=settings.normalized_supabase_url,
            anon_key=settings.supabase_anon_key,
            timeout=settings.identity_timeout_s,
        )

    logger.warning("identity_provider_fake_in_use", env=settings.wishwall_env.value)
    return FakeIdentityProvider()
