"""Moderation store service layer.

All moderation-domain business logic lives here.
Routes may not contain domain logic or raw DB access - they must call these functions.

Semantics:
- Moderation state is one enum column; a decision changes it in a single
  transaction together with notes and updated_at, or not at all.
- pending -> approved | rejected, approved <-> rejected. Nothing returns to pending.
- Re-deciding is an overwrite, not an error. Concurrent decisions are last-write-wins.
- Messages are never created or deleted here.
"""

from datetime import UTC, datetime
from uuid import UUID

from sqlalchemy import Select, func, or_, select
from sqlalchemy.orm import Session

from wishwall.db.models import MediaFile, Message, ModerationDecision, ModerationStatus
from wishwall.db.session import transaction
from wishwall.errors import ApiErrorCode, NotFoundError
from wishwall.logging import get_logger
from wishwall.schemas.moderation import DecisionOut, MessageListOut, MessageOut

logger = get_logger(__name__)

DEFAULT_PAGE_SIZE = 50
MAX_PAGE_SIZE = 200


def attachment_counts():
    """Subquery of (message_id, media_count) for messages with at least one attachment."""
    return (
        select(
            MediaFile.message_id.label("message_id"),
            func.count(MediaFile.id).label("media_count"),
        )
        .group_by(MediaFile.message_id)
        .subquery("attachment_counts")
    )


def _apply_filters(
    query: Select, status: ModerationStatus | None, search: str | None
) -> Select:
    if status is not None:
        query = query.where(Message.moderation_status == status)
    if search:
        term = search.strip()
        if term:
            query = query.where(
                or_(
                    Message.name.icontains(term, autoescape=True),
                    Message.email.icontains(term, autoescape=True),
                    Message.message.icontains(term, autoescape=True),
                )
            )
    return query


def list_with_attachments(
    db: Session,
    *,
    status: ModerationStatus | None = None,
    search: str | None = None,
    limit: int | None = None,
    offset: int = 0,
) -> list[tuple[Message, int]]:
    """List messages with their attachment counts.

    Read-only. Ordered newest first (ties broken by id) so pagination is stable.

    Args:
        db: Database session.
        status: Only messages in this moderation state.
        search: Case-insensitive substring match on name, email or message body.
        limit: Maximum rows to return (None for all).
        offset: Rows to skip.

    Returns:
        List of (message, attachment_count) pairs.
    """
    counts = attachment_counts()
    media_count = func.coalesce(counts.c.media_count, 0)

    query = select(Message, media_count).outerjoin(counts, counts.c.message_id == Message.id)
    query = _apply_filters(query, status, search)
    query = query.order_by(Message.created_at.desc(), Message.id)
    if limit is not None:
        query = query.limit(limit)
    if offset:
        query = query.offset(offset)

    return [(message, int(count)) for message, count in db.execute(query).all()]


def count_messages(
    db: Session,
    *,
    status: ModerationStatus | None = None,
    search: str | None = None,
) -> int:
    """Count messages matching the same filters as list_with_attachments."""
    query = _apply_filters(select(func.count(Message.id)), status, search)
    return int(db.execute(query).scalar_one())


def set_decision(
    db: Session,
    message_id: UUID,
    decision: ModerationDecision,
    moderator_notes: str | None = None,
) -> Message:
    """Record an admin decision on a message.

    Args:
        db: Database session.
        message_id: The message to decide on.
        decision: approved or rejected.
        moderator_notes: Optional notes; existing notes are kept when None.

    Returns:
        The updated message.

    Raises:
        NotFoundError: If the message does not exist.
    """
    message = db.get(Message, message_id)
    if message is None:
        raise NotFoundError(ApiErrorCode.E_MESSAGE_NOT_FOUND, "Message not found")

    previous = message.moderation_status
    with transaction(db):
        message.moderation_status = decision.status
        if moderator_notes is not None:
            message.moderator_notes = moderator_notes
        message.updated_at = datetime.now(UTC)

    logger.info(
        "message_decided",
        message_id=str(message_id),
        previous_status=previous.value,
        status=message.moderation_status.value,
    )
    return message


# =============================================================================
# Route-facing wrappers
# =============================================================================


def list_messages_for_admin(
    db: Session,
    *,
    status: ModerationStatus | None = None,
    search: str | None = None,
    limit: int = DEFAULT_PAGE_SIZE,
    offset: int = 0,
) -> MessageListOut:
    """Get one page of the admin message listing with its pagination totals."""
    rows = list_with_attachments(db, status=status, search=search, limit=limit, offset=offset)
    total = count_messages(db, status=status, search=search)

    return MessageListOut(
        messages=[MessageOut.from_row(message, count) for message, count in rows],
        total=total,
        limit=limit,
        offset=offset,
        has_more=offset + limit < total,
    )


def decide_message(
    db: Session,
    message_id: UUID,
    decision: ModerationDecision,
    moderator_notes: str | None = None,
) -> tuple[DecisionOut, Message]:
    """Record a decision and build its response.

    Returns the updated message too, so the caller can schedule notifications.
    """
    message = set_decision(db, message_id, decision, moderator_notes)
    out = DecisionOut(
        id=message.id,
        approved=decision is ModerationDecision.approved,
        status=message.status,
        updated_at=message.updated_at,
    )
    return out, message
