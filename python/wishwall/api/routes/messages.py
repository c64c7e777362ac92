"""Admin message moderation routes.

Routes are transport-only:
- Require an admin via require_admin
- Call exactly one service function
- Return success(...) or raise ApiError

No domain logic or raw DB access in routes.
"""

from typing import Annotated, Literal

from fastapi import APIRouter, BackgroundTasks, Depends, Query
from sqlalchemy.orm import Session

from wishwall.api.deps import get_db, get_email_client, require_admin
from wishwall.auth.session import AuthenticatedAdmin
from wishwall.config import get_settings
from wishwall.db.models import ModerationStatus
from wishwall.email.client import EmailClientBase
from wishwall.responses import success_response
from wishwall.schemas.moderation import DecisionRequest
from wishwall.services import moderation as moderation_service
from wishwall.services.moderation_stats import compute_stats
from wishwall.services.notifications import ApprovalNotice, send_approval_email

router = APIRouter()


@router.get("/api/admin/messages")
def list_messages(
    admin: Annotated[AuthenticatedAdmin, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
    status: Literal["all", "pending", "approved", "rejected"] = "all",
    search: Annotated[str | None, Query(max_length=200)] = None,
    limit: Annotated[int, Query(ge=1, le=moderation_service.MAX_PAGE_SIZE)] = (
        moderation_service.DEFAULT_PAGE_SIZE
    ),
    offset: Annotated[int, Query(ge=0)] = 0,
) -> dict:
    """List messages for moderation, newest first.

    Each message carries `status`, `is_approved`, `is_visible`, `media_count`
    and `has_media`.
    """
    result = moderation_service.list_messages_for_admin(
        db,
        status=None if status == "all" else ModerationStatus(status),
        search=search,
        limit=limit,
        offset=offset,
    )
    return success_response(result.model_dump(mode="json"))


@router.post("/api/admin/messages/approve")
def decide_message(
    body: DecisionRequest,
    background_tasks: BackgroundTasks,
    admin: Annotated[AuthenticatedAdmin, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
    email_client: Annotated[EmailClientBase, Depends(get_email_client)],
) -> dict:
    """Approve or reject a message.

    Decisions may be reversed later. Approving a message with a contributor
    email schedules an approval email after the response is sent.

    Returns 404 E_MESSAGE_NOT_FOUND if the message does not exist.
    """
    result, message = moderation_service.decide_message(
        db, body.message_id, body.decision, body.moderator_notes
    )

    if result.approved:
        notice = ApprovalNotice.from_message(message)
        if notice is not None:
            background_tasks.add_task(
                send_approval_email, email_client, notice, get_settings().site_url
            )

    return success_response(result.model_dump(mode="json"))


@router.get("/api/admin/messages/stats")
def message_stats(
    admin: Annotated[AuthenticatedAdmin, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> dict:
    """Moderation statistics, recomputed on every call.

    Returns {total, approved, pending, rejected, withMedia, countries}.
    Store failures surface as 500 E_STORE_UNAVAILABLE.
    """
    return compute_stats(db).model_dump(by_alias=True)
