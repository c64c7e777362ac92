"""Database module for Wishwall.

Provides engine creation, session management, transaction helpers, and ORM models.
"""

from wishwall.db.engine import create_db_engine, get_engine
from wishwall.db.models import (
    Base,
    MediaFile,
    Message,
    ModerationDecision,
    ModerationStatus,
)
from wishwall.db.session import get_db, transaction

__all__ = [
    # Engine and session
    "create_db_engine",
    "get_engine",
    "get_db",
    "transaction",
    # Base
    "Base",
    # Enums
    "ModerationStatus",
    "ModerationDecision",
    # Models
    "Message",
    "MediaFile",
]
