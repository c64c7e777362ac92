"""SQLAlchemy ORM models for Wishwall.

Defines all database tables using SQLAlchemy 2.x declarative patterns.
Enums are defined as Python enums and mapped to PostgreSQL enum types.

Column types are the dialect-neutral SQLAlchemy ones (Uuid, DateTime) so the
same metadata serves PostgreSQL in deployment and SQLite in unit tests.
"""

from datetime import datetime
from enum import Enum as PyEnum
from uuid import UUID, uuid4

from sqlalchemy import (
    Boolean,
    DateTime,
    Enum,
    Float,
    ForeignKey,
    Index,
    Integer,
    Text,
    Uuid,
    func,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


# =============================================================================
# Enums
# =============================================================================


class ModerationStatus(str, PyEnum):
    """Moderation lifecycle of a submitted message.

    States:
        pending: Submitted, not yet reviewed (initial state)
        approved: Accepted by an admin, publicly visible
        rejected: Declined by an admin

    pending is left on the first decision and never re-entered;
    approved and rejected may be swapped by a later decision.
    """

    pending = "pending"
    approved = "approved"
    rejected = "rejected"

    @property
    def is_approved(self) -> bool | None:
        """Tri-state wire form: True approved, False rejected, None pending."""
        if self is ModerationStatus.approved:
            return True
        if self is ModerationStatus.rejected:
            return False
        return None


class ModerationDecision(str, PyEnum):
    """Decisions an admin can record. Pending is not one of them."""

    approved = "approved"
    rejected = "rejected"

    @property
    def status(self) -> ModerationStatus:
        return ModerationStatus(self.value)


# =============================================================================
# Models
# =============================================================================


class Message(Base):
    """A message submitted through the public contributor flow."""

    __tablename__ = "messages"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    email: Mapped[str | None] = mapped_column(Text, nullable=True)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    location_city: Mapped[str | None] = mapped_column(Text, nullable=True)
    location_country: Mapped[str | None] = mapped_column(Text, nullable=True)
    latitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    longitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    wants_reminders: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    moderation_status: Mapped[ModerationStatus] = mapped_column(
        Enum(ModerationStatus, name="moderation_status"),
        default=ModerationStatus.pending,
        nullable=False,
    )
    moderator_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    # Relationships
    media_files: Mapped[list["MediaFile"]] = relationship(
        "MediaFile", back_populates="message", cascade="all, delete-orphan"
    )

    __table_args__ = (
        Index("idx_messages_moderation_status", "moderation_status"),
        Index("idx_messages_created_at", "created_at"),
    )

    @property
    def is_approved(self) -> bool | None:
        return self.moderation_status.is_approved

    @property
    def status(self) -> str:
        return self.moderation_status.value

    @property
    def is_visible(self) -> bool:
        return self.moderation_status is ModerationStatus.approved


class MediaFile(Base):
    """A media attachment owned by a message."""

    __tablename__ = "media_files"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    message_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("messages.id", ondelete="CASCADE"),
        nullable=False,
    )
    file_name: Mapped[str] = mapped_column(Text, nullable=False)
    file_type: Mapped[str] = mapped_column(Text, nullable=False)
    file_size: Mapped[int] = mapped_column(Integer, nullable=False)
    storage_path: Mapped[str] = mapped_column(Text, nullable=False)
    thumbnail_path: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    # Relationships
    message: Mapped["Message"] = relationship("Message", back_populates="media_files")

    __table_args__ = (Index("idx_media_files_message_id", "message_id"),)
