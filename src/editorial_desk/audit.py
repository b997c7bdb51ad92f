"""Audit trail for destructive and publishing operations."""

import logging
import uuid

from editorial_desk.stores.store import RecordStore
from schemas import Actor, AuditEntry

logger = logging.getLogger(__name__)


class AuditTrail:
    """Appends audit entries on behalf of one actor.

    Example:
        trail = AuditTrail(store, actor)
        trail.record("submission_deleted", submission_id=submission.id)
    """

    def __init__(self, store: RecordStore, actor: Actor):
        self.store = store
        self.actor = actor

    def record(self, action: str, success: bool = True, **details) -> AuditEntry:
        entry = AuditEntry(
            id=str(uuid.uuid4()),
            action=action,
            actor_email=self.actor.email,
            success=success,
            details=details,
        )
        self.store.append_audit(entry)
        logger.debug(f"Audit: {action} by {self.actor.email} {details}")
        return entry
