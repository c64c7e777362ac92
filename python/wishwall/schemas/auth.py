"""Admin auth Pydantic schemas."""

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    """Request schema for POST /api/admin/auth/login.

    `username` may be a bare admin username or a full email address.
    """

    username: str = Field(min_length=1, max_length=320)
    password: str = Field(min_length=1, max_length=1024)
