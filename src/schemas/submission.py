"""Submission record schemas.

A submission is the unit of editorial work: one contributed piece of
writing or artwork with its metadata, lifecycle status, uploaded documents
and optional placement in an issue.
"""

from datetime import datetime
from typing import Literal

from pydantic import Field, field_validator

from .base import RecordModel, utc_now

SubmissionStatus = Literal[
    "pending",
    "under_review",
    "accepted",
    "declined",
    "published",
    "deleted",
]

SUBMISSION_STATUSES: tuple[str, ...] = (
    "pending",
    "under_review",
    "accepted",
    "declined",
    "published",
    "deleted",
)


class DocumentMetadata(RecordModel):
    """Optional descriptive metadata for an attached document."""

    title: str | None = None
    description: str | None = None
    page_number: int | None = None


class DocumentAttachment(RecordModel):
    """One uploaded file belonging to a submission.

    Attributes:
        id: Attachment identifier, unique within the submission
        url: Storage reference returned by the blob store
        file_name: Original file name supplied by the uploader
        type: MIME type of the file
        uploaded_at: When the upload completed
        size: File size in bytes
        page_count: Number of pages (PDFs are measured, images count as one)
        metadata: Optional title/description/page number
    """

    id: str
    url: str
    file_name: str
    type: str
    uploaded_at: datetime = Field(default_factory=utc_now)
    size: int | None = None
    page_count: int | None = None
    metadata: DocumentMetadata | None = None


class IssueMetadata(RecordModel):
    """Placement details recorded when a submission is assigned to an issue."""

    issue_number: int | None = None
    page_number: int | None = None
    short_description: str | None = None


class Submission(RecordModel):
    """A contributed work moving through the editorial lifecycle.

    Attributes:
        id: Opaque identifier, immutable
        title: Title of the work
        content: Free text body
        type: Content category (open set, e.g. "poem", "photography")
        author_name: Contributor display name
        author_email: Contributor email, recipient of correspondence
        contributor_status: Contributor role tag (open set, e.g. "student")
        status: Lifecycle status
        previous_status: Status held when the record was moved to trash
        documents: Ordered attachments; list order is page order
        file_url: Legacy single file attachment
        image_url: Featured image
        issue_id: Issue the submission is assigned to, if any
        issue_metadata: Placement details within the assigned issue
        editor_notes: Notes from editors, visible to the contributor
        submitted_by: Email of the account that created the record
        created_at: Creation timestamp
        updated_at: Last modification timestamp
        trashed_at: When the record entered the trash
        trashed_by: Who moved the record to the trash
        published_at: When the record was published with its issue
        version: Revision counter used to reject stale writes
    """

    id: str
    title: str
    content: str = ""
    type: str
    author_name: str = ""
    author_email: str = ""
    contributor_status: str = ""
    status: SubmissionStatus = "pending"
    previous_status: SubmissionStatus | None = None
    documents: list[DocumentAttachment] = []
    file_url: str | None = None
    image_url: str | None = None
    issue_id: str | None = None
    issue_metadata: IssueMetadata | None = None
    editor_notes: str = ""
    submitted_by: str | None = None
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime | None = None
    trashed_at: datetime | None = None
    trashed_by: str | None = None
    published_at: datetime | None = None
    version: int = 0

    @field_validator("type")
    @classmethod
    def _type_not_blank(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("type must be a non-empty string")
        return value

    @property
    def is_trashed(self) -> bool:
        return self.status == "deleted"

    def find_document(self, document_id: str) -> DocumentAttachment | None:
        for document in self.documents:
            if document.id == document_id:
                return document
        return None
