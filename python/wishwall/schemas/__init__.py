"""Pydantic schemas for request/response models."""

from wishwall.schemas.auth import LoginRequest
from wishwall.schemas.moderation import (
    DecisionOut,
    DecisionRequest,
    MessageListOut,
    MessageOut,
    ModerationStats,
)

__all__ = [
    "LoginRequest",
    "MessageOut",
    "MessageListOut",
    "DecisionRequest",
    "DecisionOut",
    "ModerationStats",
]
