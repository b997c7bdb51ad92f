"""Audit trail entries for destructive and publishing operations."""

from datetime import datetime

from pydantic import Field

from .base import RecordModel, utc_now


class AuditEntry(RecordModel):
    """One recorded editorial action.

    Attributes:
        id: Entry identifier
        action: Action name (e.g. "submission_deleted", "issue_published")
        actor_email: Who performed the action
        timestamp: When it happened
        success: Whether the action completed
        details: Action-specific context
    """

    id: str
    action: str
    actor_email: str
    timestamp: datetime = Field(default_factory=utc_now)
    success: bool = True
    details: dict = {}
