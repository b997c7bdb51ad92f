"""Schema definitions for the editorial desk."""

from .actor import Actor
from .audit import AuditEntry
from .correspondence import CorrespondenceIntent, EmailMessage
from .issue import Issue, TocEntry
from .lookup import DEFAULT_CONTENT_TYPES, DEFAULT_CONTRIBUTOR_STATUSES, LookupEntry
from .page import IssuePage, PageLayout
from .publication import PublicationReport
from .submission import (
    SUBMISSION_STATUSES,
    DocumentAttachment,
    DocumentMetadata,
    IssueMetadata,
    Submission,
)
from .upload import UploadFile

__all__ = [
    "Actor",
    "AuditEntry",
    "CorrespondenceIntent",
    "DEFAULT_CONTENT_TYPES",
    "DEFAULT_CONTRIBUTOR_STATUSES",
    "DocumentAttachment",
    "DocumentMetadata",
    "EmailMessage",
    "Issue",
    "IssueMetadata",
    "IssuePage",
    "LookupEntry",
    "PageLayout",
    "PublicationReport",
    "SUBMISSION_STATUSES",
    "Submission",
    "TocEntry",
    "UploadFile",
]
