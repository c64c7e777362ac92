"""Test helpers for sessions and moderation data.

Provides:
- Credentials for the standard fake users
- Login and session-token helpers
- Message creation helpers
"""

import time
from datetime import UTC, datetime, timedelta
from pathlib import Path
from uuid import UUID

import jwt
from fastapi.testclient import TestClient
from httpx import Response
from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session

from tests.fixtures import FIXTURE_MESSAGES
from wishwall.auth.session import (
    SESSION_COOKIE_NAME,
    SESSION_TOKEN_AUDIENCE,
    SESSION_TOKEN_ISSUER,
    SESSION_TOKEN_SCOPE,
)
from wishwall.db.models import Base, MediaFile, Message, ModerationStatus

ADMIN_EMAIL = "admin@admin.local"
ADMIN_PASSWORD = "correct-horse-battery-staple"
VIEWER_EMAIL = "viewer@example.com"
VIEWER_PASSWORD = "viewer-password"

BASE_TIME = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)


def create_sqlite_engine(path: Path, *, create_schema: bool = True) -> Engine:
    """Create an engine on a fresh SQLite file, optionally with the full schema."""
    engine = create_engine(
        f"sqlite:///{path}",
        connect_args={"check_same_thread": False},
    )
    if create_schema:
        Base.metadata.create_all(engine)
    return engine


def login(client: TestClient, username: str, password: str) -> Response:
    """POST the login form."""
    return client.post(
        "/api/admin/auth/login", json={"username": username, "password": password}
    )


def use_session(client: TestClient, token: str) -> None:
    """Put a raw session token into the client's cookie jar."""
    client.cookies.set(SESSION_COOKIE_NAME, token)


def read_claims(token: str) -> dict:
    """Decode a session token without verifying it."""
    return jwt.decode(token, options={"verify_signature": False})


def mint_session_token(
    secret: str,
    *,
    sub: str,
    ptk: str,
    expires_in: int = 3600,
    scope: str = SESSION_TOKEN_SCOPE,
    issuer: str = SESSION_TOKEN_ISSUER,
    audience: str = SESSION_TOKEN_AUDIENCE,
) -> str:
    """Mint a session token with arbitrary claims."""
    now = int(time.time())
    payload = {
        "iss": issuer,
        "aud": audience,
        "sub": sub,
        "iat": now,
        "exp": now + expires_in,
        "scope": scope,
        "ptk": ptk,
    }
    return jwt.encode(payload, secret, algorithm="HS256")


def set_cookie_header(response: Response) -> str:
    """The Set-Cookie header for the admin session, or "" if absent."""
    for value in response.headers.get_list("set-cookie"):
        if value.startswith(f"{SESSION_COOKIE_NAME}="):
            return value
    return ""


def create_message(
    db: Session,
    *,
    name: str = "Guest",
    email: str | None = "guest@example.com",
    message: str = "Happy birthday!",
    location_country: str | None = None,
    status: ModerationStatus = ModerationStatus.pending,
    attachments: int = 0,
    created_at: datetime | None = None,
    message_id: UUID | None = None,
) -> Message:
    """Create and commit a message with the given number of attachments."""
    row = Message(
        name=name,
        email=email,
        message=message,
        location_country=location_country,
        moderation_status=status,
    )
    if message_id is not None:
        row.id = message_id
    if created_at is not None:
        row.created_at = created_at
        row.updated_at = created_at
    for i in range(attachments):
        row.media_files.append(
            MediaFile(
                file_name=f"photo-{i}.jpg",
                file_type="image/jpeg",
                file_size=2048,
                storage_path=f"uploads/{name.lower()}/photo-{i}.jpg",
            )
        )
    db.add(row)
    db.commit()
    return row


def seed_fixture_messages(db: Session) -> list[Message]:
    """Create the fixture messages, oldest first, one minute apart."""
    return [
        create_message(
            db,
            message_id=fixture["id"],
            name=fixture["name"],
            email=fixture["email"],
            message=fixture["message"],
            location_country=fixture["location_country"],
            status=ModerationStatus(fixture["moderation_status"]),
            attachments=fixture["attachments"],
            created_at=BASE_TIME + timedelta(minutes=i),
        )
        for i, fixture in enumerate(FIXTURE_MESSAGES)
    ]
