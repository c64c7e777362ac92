"""Contributor notifications.

Approval emails are fire-and-forget: they run after the response as a
background task and a failed send is logged, never surfaced to the admin.
"""

from dataclasses import dataclass
from datetime import UTC, datetime

from wishwall.db.models import Message
from wishwall.email.client import EmailClientBase, EmailError, OutgoingEmail
from wishwall.logging import get_logger

logger = get_logger(__name__)

PREVIEW_LENGTH = 140


@dataclass(frozen=True)
class ApprovalNotice:
    """Detached snapshot of what the approval email needs.

    Built while the request's session is open; the background task must not
    touch ORM objects after the session closes.
    """

    message_id: str
    contributor_name: str
    contributor_email: str
    message_preview: str
    approved_at: datetime

    @classmethod
    def from_message(cls, message: Message) -> "ApprovalNotice | None":
        """Snapshot an approved message, or None if there is nobody to notify."""
        if not message.email:
            return None
        body = message.message.strip()
        if len(body) > PREVIEW_LENGTH:
            body = body[: PREVIEW_LENGTH - 3].rstrip() + "..."
        return cls(
            message_id=str(message.id),
            contributor_name=message.name,
            contributor_email=message.email,
            message_preview=body,
            approved_at=datetime.now(UTC),
        )


def build_approval_email(notice: ApprovalNotice, site_url: str) -> OutgoingEmail:
    """Render the approval email."""
    approved_on = notice.approved_at.strftime("%B %d, %Y")
    text = (
        f"Hi {notice.contributor_name},\n\n"
        f"Your message was approved on {approved_on} and is now on the wall:\n\n"
        f'  "{notice.message_preview}"\n\n'
        f"See it at {site_url.rstrip('/')}\n"
    )
    return OutgoingEmail(
        to=notice.contributor_email,
        subject="Your message has been approved",
        text=text,
        category="message-approved",
    )


def send_approval_email(client: EmailClientBase, notice: ApprovalNotice, site_url: str) -> bool:
    """Send the approval email, best-effort.

    Returns:
        True if the provider accepted the email, False otherwise.
    """
    try:
        client.send(build_approval_email(notice, site_url))
    except EmailError as e:
        logger.warning(
            "approval_email_failed",
            message_id=notice.message_id,
            error=e.message,
        )
        return False

    logger.info("approval_email_sent", message_id=notice.message_id)
    return True
