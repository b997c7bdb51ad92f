"""Persistence collaborator interface.

A ``RecordStore`` persists submissions, issues, issue page layouts, audit
entries and the editor-managed lookup tables. Every update carries the
version the caller read; a mismatch raises ``StaleWriteError`` instead of
silently overwriting a concurrent edit.
"""

from abc import ABC, abstractmethod
from typing import Literal

from schemas import AuditEntry, Issue, LookupEntry, PageLayout, Submission

LookupKind = Literal["content-types", "contributor-statuses"]


def filter_submissions(
    submissions: list[Submission],
    issue_id: str | None = None,
    status: str | None = None,
    include_trashed: bool = False,
    trashed_only: bool = False,
    author_email: str | None = None,
) -> list[Submission]:
    """Apply the standard listing filters, newest first.

    Trashed records are excluded unless ``include_trashed`` or
    ``trashed_only`` is set, or ``status`` explicitly asks for "deleted".
    """
    result = []
    for submission in submissions:
        trashed = submission.status == "deleted"
        if trashed_only and not trashed:
            continue
        if trashed and not (include_trashed or trashed_only or status == "deleted"):
            continue
        if issue_id is not None and submission.issue_id != issue_id:
            continue
        if status is not None and submission.status != status:
            continue
        if author_email is not None and submission.author_email != author_email:
            continue
        result.append(submission)
    result.sort(key=lambda s: s.created_at, reverse=True)
    return result


class RecordStore(ABC):
    """Abstract persistence for editorial records."""

    @abstractmethod
    def get_submission(self, submission_id: str) -> Submission:
        """Return a submission or raise RecordNotFoundError."""
        pass

    @abstractmethod
    def list_submissions(
        self,
        issue_id: str | None = None,
        status: str | None = None,
        include_trashed: bool = False,
        trashed_only: bool = False,
        author_email: str | None = None,
    ) -> list[Submission]:
        """List submissions matching the filters, newest first."""
        pass

    @abstractmethod
    def create_submission(self, submission: Submission) -> Submission:
        pass

    @abstractmethod
    def update_submission(self, submission: Submission) -> Submission:
        """Persist changes made to a submission read at ``submission.version``.

        Returns:
            The stored record with its version incremented

        Raises:
            RecordNotFoundError: If the submission no longer exists
            StaleWriteError: If the stored version differs from the one read
        """
        pass

    @abstractmethod
    def delete_submission(self, submission_id: str) -> None:
        """Physically remove a submission record."""
        pass

    @abstractmethod
    def get_issue(self, issue_id: str) -> Issue:
        pass

    @abstractmethod
    def list_issues(self) -> list[Issue]:
        pass

    @abstractmethod
    def create_issue(self, issue: Issue) -> Issue:
        pass

    @abstractmethod
    def update_issue(self, issue: Issue) -> Issue:
        """Persist issue changes with the same version rules as submissions."""
        pass

    @abstractmethod
    def delete_issue(self, issue_id: str) -> None:
        pass

    @abstractmethod
    def load_layout(self, issue_id: str) -> PageLayout:
        """Return the issue's page layout, empty when none was saved."""
        pass

    @abstractmethod
    def save_layout(self, layout: PageLayout) -> PageLayout:
        """Replace the issue's whole page layout in a single write.

        Raises:
            StaleWriteError: If another save happened since ``layout`` was loaded
        """
        pass

    @abstractmethod
    def append_audit(self, entry: AuditEntry) -> None:
        pass

    @abstractmethod
    def list_audit(self) -> list[AuditEntry]:
        pass

    @abstractmethod
    def list_lookup(self, kind: LookupKind) -> list[LookupEntry]:
        """Return a lookup table sorted by order, seeded with defaults."""
        pass
