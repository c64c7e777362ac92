"""Business logic services.

This module contains service-layer functions that implement business logic.
Services are called by route handlers and orchestrate database operations.
"""

from wishwall.services.moderation import (
    count_messages,
    list_with_attachments,
    set_decision,
)
from wishwall.services.moderation_stats import compute_stats

__all__ = [
    "list_with_attachments",
    "count_messages",
    "set_decision",
    "compute_stats",
]
