"""Email module for transactional notifications.

Provides:
- MailtrapEmailClient for the Mailtrap send API
- FakeEmailClient for tests and unconfigured environments
"""

from wishwall.email.client import (
    EmailClientBase,
    EmailError,
    FakeEmailClient,
    MailtrapEmailClient,
    OutgoingEmail,
    get_email_client,
)

__all__ = [
    "EmailClientBase",
    "EmailError",
    "FakeEmailClient",
    "MailtrapEmailClient",
    "OutgoingEmail",
    "get_email_client",
]
