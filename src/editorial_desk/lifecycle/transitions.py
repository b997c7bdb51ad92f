"""Submission status transition table.

``deleted`` is deliberately absent as a target: trash, restore and
permanent delete have their own operations on the engine.
"""

from schemas.correspondence import TemplateKey

TRANSITIONS: dict[str, frozenset[str]] = {
    "pending": frozenset({"under_review"}),
    "under_review": frozenset({"accepted", "declined", "pending"}),
    "accepted": frozenset({"published", "under_review", "declined"}),
    "declined": frozenset({"accepted", "under_review"}),
    "published": frozenset({"accepted"}),
    "deleted": frozenset(),
}


def is_allowed(current: str, target: str) -> bool:
    """Return True if ``current -> target`` is a permitted move.

    A same-status call is allowed for every live status; it only updates
    editor notes.
    """
    if current == "deleted" or target == "deleted":
        return False
    if current == target:
        return current in TRANSITIONS
    return target in TRANSITIONS.get(current, frozenset())


def correspondence_template(current: str, target: str) -> TemplateKey | None:
    """Select the message a status change triggers, if any.

    Examples:
        >>> correspondence_template("pending", "under_review")
        'acknowledgement'
        >>> correspondence_template("declined", "accepted")
        'accepted'
        >>> correspondence_template("accepted", "accepted") is None
        True
    """
    if current == target:
        return None
    if current == "pending" and target == "under_review":
        return "acknowledgement"
    if target == "accepted":
        return "accepted"
    if target == "declined":
        return "declined"
    return None
