"""Exceptions raised by the editorial core.

Validation errors (invalid transitions, rejected files, duplicate pages)
are caller errors and are never retried. Collaborator failures surface as
the client exceptions in ``editorial_desk.clients.exceptions``.
"""


class EditorialError(Exception):
    """Base exception for all editorial core errors."""

    def __init__(self, message: str, *args, **kwargs):
        self.message = message
        super().__init__(message, *args, **kwargs)


class RecordNotFoundError(EditorialError):
    """Raised when a submission, issue or attachment id is unknown."""

    def __init__(self, kind: str, record_id: str):
        self.kind = kind
        self.record_id = record_id
        super().__init__(f"{kind} {record_id} not found")


class InvalidTransitionError(EditorialError):
    """Raised when a lifecycle move is not permitted."""

    def __init__(self, message: str, current: str | None = None, target: str | None = None):
        self.current = current
        self.target = target
        super().__init__(message)


class NotInTrashError(EditorialError):
    """Raised when restore or permanent delete targets a record outside the trash."""

    def __init__(self, submission_id: str, status: str):
        self.submission_id = submission_id
        self.status = status
        super().__init__(f"Submission {submission_id} is not in the trash (status: {status})")


class DuplicateSubmissionError(EditorialError):
    """Raised when a submission already backs a page in the issue."""

    def __init__(self, submission_id: str, issue_id: str):
        self.submission_id = submission_id
        self.issue_id = issue_id
        super().__init__(f"Submission {submission_id} already has a page in issue {issue_id}")


class FileTooLargeError(EditorialError):
    """Raised when an upload exceeds the size ceiling for its type."""

    def __init__(self, message: str, size: int, limit: int):
        self.size = size
        self.limit = limit
        super().__init__(message)


class UnsupportedTypeError(EditorialError):
    """Raised when an upload's MIME type is not on the allow-list."""

    def __init__(self, message: str, content_type: str):
        self.content_type = content_type
        super().__init__(message)


class PartialCascadeError(EditorialError):
    """Raised when publication could not update every linked submission.

    The attached report lists which submissions were updated and which
    failed, so the caller can re-run publication for the failures.
    """

    def __init__(self, message: str, report):
        self.report = report
        super().__init__(message)

    @property
    def failed_ids(self) -> list[str]:
        return list(self.report.failed)


class PartialPurgeError(EditorialError):
    """Raised when emptying the trash could not remove every submission.

    ``removed`` counts the submissions that were erased; ``failed`` maps the
    ids still in the trash to their error.
    """

    def __init__(self, message: str, removed: int, failed: dict[str, str]):
        self.removed = removed
        self.failed = failed
        super().__init__(message)


class StaleWriteError(EditorialError):
    """Raised when a record changed since the caller read it."""

    def __init__(self, kind: str, record_id: str, expected: int, actual: int):
        self.kind = kind
        self.record_id = record_id
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"{kind} {record_id} was modified concurrently "
            f"(read version {expected}, stored version {actual})"
        )


class PermissionDeniedError(EditorialError):
    """Raised when the acting user's role does not allow an operation."""

    pass
