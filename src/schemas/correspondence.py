"""Correspondence schemas.

The lifecycle engine never sends mail. A status change that warrants a
message yields a ``CorrespondenceIntent``; the calling layer renders it into
an ``EmailMessage`` and hands that to the correspondence collaborator.
"""

from datetime import datetime
from typing import Literal

from pydantic import Field

from .base import RecordModel, utc_now

TemplateKey = Literal["acknowledgement", "accepted", "declined"]


class CorrespondenceIntent(RecordModel):
    """A pending outbound message triggered by a status transition.

    Attributes:
        template: Template selected by the new status
        recipient: Contributor email address
        submission_id: Submission the message is about
        data: Substitution values (title, author name, type, id, ...)
    """

    template: TemplateKey
    recipient: str
    submission_id: str
    data: dict = {}


class EmailMessage(RecordModel):
    """A rendered message ready for delivery."""

    recipient: str
    subject: str
    body: str
    submission_id: str | None = None
    created_at: datetime = Field(default_factory=utc_now)
