"""Role checks for editorial operations."""

from editorial_desk.exceptions import PermissionDeniedError
from schemas import Actor, Submission

PRE_ACCEPTANCE_STATUSES = frozenset({"pending", "under_review"})


def require_editor(actor: Actor, operation: str) -> None:
    """Raise PermissionDeniedError unless ``actor`` is an editor."""
    if not actor.is_editor:
        raise PermissionDeniedError(
            f"{actor.email} ({actor.role}) may not {operation}"
        )


def can_edit_content(actor: Actor, submission: Submission) -> bool:
    """Editors may always edit; contributors only their own unreviewed work."""
    if actor.is_editor:
        return True
    return (
        submission.submitted_by == actor.email
        or submission.author_email == actor.email
    ) and submission.status in PRE_ACCEPTANCE_STATUSES
