"""Publication cascade report."""

from pydantic import BaseModel


class PublicationReport(BaseModel):
    """Outcome of publishing an issue.

    Attributes:
        issue_id: Issue that was published
        updated: Submissions moved from accepted to published by this call
        already_published: Linked submissions that were published before the call
        failed: Map of submission id to the error that stopped its update
    """

    issue_id: str
    updated: list[str] = []
    already_published: list[str] = []
    failed: dict[str, str] = {}

    @property
    def count(self) -> int:
        return len(self.updated)

    @property
    def succeeded(self) -> bool:
        return not self.failed
