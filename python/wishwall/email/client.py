"""Transactional email client abstraction.

Provides a narrow interface for sending one email. The production client
uses the Mailtrap send API over httpx; FakeEmailClient records messages in
memory for tests and for local runs without a Mailtrap token.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass

import httpx

from wishwall.config import Settings, get_settings
from wishwall.logging import get_logger

logger = get_logger(__name__)

MAILTRAP_SEND_URL = "https://send.api.mailtrap.io/api/send"


@dataclass(frozen=True)
class OutgoingEmail:
    """A single plain-text + HTML email."""

    to: str
    subject: str
    text: str
    html: str | None = None
    category: str | None = None


class EmailError(Exception):
    """Email delivery error."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class EmailClientBase(ABC):
    """Abstract base class for email client implementations."""

    @abstractmethod
    def send(self, email: OutgoingEmail) -> None:
        """Send an email.

        Raises:
            EmailError: If the provider rejects the message or cannot be reached.
        """
        ...


class MailtrapEmailClient(EmailClientBase):
    """Production email client using the Mailtrap send API."""

    def __init__(
        self,
        api_token: str,
        *,
        from_address: str,
        from_name: str,
        send_url: str = MAILTRAP_SEND_URL,
        transport: httpx.BaseTransport | None = None,
    ):
        self._send_url = send_url
        self._headers = {"Authorization": f"Bearer {api_token}"}
        self._sender = {"email": from_address, "name": from_name}
        self._transport = transport

    def send(self, email: OutgoingEmail) -> None:
        payload: dict = {
            "from": self._sender,
            "to": [{"email": email.to}],
            "subject": email.subject,
            "text": email.text,
        }
        if email.html:
            payload["html"] = email.html
        if email.category:
            payload["category"] = email.category

        try:
            with httpx.Client(transport=self._transport) as client:
                response = client.post(
                    self._send_url, headers=self._headers, json=payload, timeout=30.0
                )
        except httpx.HTTPError as e:
            raise EmailError(f"Email provider unreachable: {e}") from e

        if response.status_code not in (200, 202):
            raise EmailError(
                f"Email send failed: {response.status_code} {response.text}",
                status_code=response.status_code,
            )


class FakeEmailClient(EmailClientBase):
    """Fake email client that records sent emails."""

    def __init__(self):
        self.sent: list[OutgoingEmail] = []
        self.fail_with: EmailError | None = None

    def send(self, email: OutgoingEmail) -> None:
        if self.fail_with is not None:
            raise self.fail_with
        self.sent.append(email)


def get_email_client(settings: Settings | None = None) -> EmailClientBase:
    """Get the configured email client.

    Returns:
        MailtrapEmailClient if MAILTRAP_API_TOKEN is set, FakeEmailClient otherwise.
    """
    settings = settings or get_settings()

    if settings.mailtrap_api_token:
        return MailtrapEmailClient(
            settings.mailtrap_api_token,
            from_address=settings.email_from_address,
            from_name=settings.email_from_name,
        )

    return FakeEmailClient()
