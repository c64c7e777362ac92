"""Moderation Pydantic schemas.

Messages store their moderation state as a single enum. The legacy wire forms,
`is_approved` (true/false/null) and `status` ("approved"/"rejected"/"pending"),
are produced here and only here, so they cannot disagree.
"""

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from wishwall.db.models import Message, ModerationDecision


class MessageOut(BaseModel):
    """Response schema for a message in the admin listing."""

    id: UUID
    name: str
    email: str | None
    message: str
    location_city: str | None
    location_country: str | None
    latitude: float | None
    longitude: float | None
    wants_reminders: bool
    status: Literal["pending", "approved", "rejected"]
    is_approved: bool | None
    is_visible: bool
    moderator_notes: str | None
    media_count: int
    has_media: bool
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_row(cls, message: Message, media_count: int) -> "MessageOut":
        return cls(
            id=message.id,
            name=message.name,
            email=message.email,
            message=message.message,
            location_city=message.location_city,
            location_country=message.location_country,
            latitude=message.latitude,
            longitude=message.longitude,
            wants_reminders=message.wants_reminders,
            status=message.status,
            is_approved=message.is_approved,
            is_visible=message.is_visible,
            moderator_notes=message.moderator_notes,
            media_count=media_count,
            has_media=media_count > 0,
            created_at=message.created_at,
            updated_at=message.updated_at,
        )


class MessageListOut(BaseModel):
    """One page of the admin message listing."""

    messages: list[MessageOut]
    total: int
    limit: int
    offset: int
    has_more: bool


class DecisionRequest(BaseModel):
    """Request schema for POST /api/admin/messages/approve."""

    message_id: UUID = Field(alias="messageId")
    approved: bool
    moderator_notes: str | None = Field(default=None, alias="moderatorNotes", max_length=2000)

    model_config = ConfigDict(populate_by_name=True)

    @property
    def decision(self) -> ModerationDecision:
        return ModerationDecision.approved if self.approved else ModerationDecision.rejected


class DecisionOut(BaseModel):
    """Response schema for a recorded decision."""

    id: UUID
    approved: bool
    status: Literal["approved", "rejected"]
    updated_at: datetime


class ModerationStats(BaseModel):
    """Moderation summary, derived on demand and never persisted.

    total always equals approved + pending + rejected.
    """

    total: int = 0
    approved: int = 0
    pending: int = 0
    rejected: int = 0
    with_media: int = Field(default=0, serialization_alias="withMedia")
    countries: int = 0
