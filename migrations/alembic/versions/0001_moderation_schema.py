"""Moderation schema - messages, media_files

Revision ID: 0001
Revises:
Create Date: 2026-10-19

Creates the message store the admin moderation API reads and writes.
Moderation state is a single enum column; the approved flag and the
visibility flag exposed by the API are derived from it.
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    # Enable pgcrypto extension for gen_random_uuid()
    op.execute("CREATE EXTENSION IF NOT EXISTS pgcrypto")

    moderation_status = postgresql.ENUM(
        "pending", "approved", "rejected", name="moderation_status", create_type=False
    )
    moderation_status.create(op.get_bind(), checkfirst=True)

    # ==========================================================================
    # messages table
    # ==========================================================================
    op.create_table(
        "messages",
        sa.Column(
            "id",
            sa.UUID(),
            server_default=sa.text("gen_random_uuid()"),
            nullable=False,
        ),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("email", sa.Text(), nullable=True),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("location_city", sa.Text(), nullable=True),
        sa.Column("location_country", sa.Text(), nullable=True),
        sa.Column("latitude", sa.Float(), nullable=True),
        sa.Column("longitude", sa.Float(), nullable=True),
        sa.Column("wants_reminders", sa.Boolean(), server_default="false", nullable=False),
        sa.Column(
            "moderation_status",
            moderation_status,
            server_default="pending",
            nullable=False,
        ),
        sa.Column("moderator_notes", sa.Text(), nullable=True),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_index("idx_messages_moderation_status", "messages", ["moderation_status"])
    op.create_index("idx_messages_created_at", "messages", ["created_at"])

    # ==========================================================================
    # media_files table
    # ==========================================================================
    op.create_table(
        "media_files",
        sa.Column(
            "id",
            sa.UUID(),
            server_default=sa.text("gen_random_uuid()"),
            nullable=False,
        ),
        sa.Column("message_id", sa.UUID(), nullable=False),
        sa.Column("file_name", sa.Text(), nullable=False),
        sa.Column("file_type", sa.Text(), nullable=False),
        sa.Column("file_size", sa.Integer(), nullable=False),
        sa.Column("storage_path", sa.Text(), nullable=False),
        sa.Column("thumbnail_path", sa.Text(), nullable=True),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(
            ["message_id"],
            ["messages.id"],
            ondelete="CASCADE",
        ),
        sa.CheckConstraint("file_size >= 0", name="ck_media_files_file_size"),
    )

    op.create_index("idx_media_files_message_id", "media_files", ["message_id"])


def downgrade() -> None:
    op.drop_index("idx_media_files_message_id", table_name="media_files")
    op.drop_table("media_files")

    op.drop_index("idx_messages_created_at", table_name="messages")
    op.drop_index("idx_messages_moderation_status", table_name="messages")
    op.drop_table("messages")

    op.execute("DROP TYPE IF EXISTS moderation_status")
