"""Issue record schemas."""

from datetime import datetime
from typing import Literal

from pydantic import Field

from .base import RecordModel, utc_now

IssueStatus = Literal["draft", "published"]


class TocEntry(RecordModel):
    """A manually curated table-of-contents line on an issue.

    These entries are edited independently of the assembled page list.
    """

    id: str
    title: str = ""
    author: str = ""
    page: str = ""
    category: str = ""


class Issue(RecordModel):
    """A dated collection of pages published as a unit.

    Attributes:
        id: Opaque identifier
        title: Display title
        month: Publication month (1-12)
        year: Publication year
        number: Issue number, copied into submission placement metadata
        volume: Volume number
        cover_image_url: Cover artwork reference
        description: Free text description
        status: "draft" until published
        table_of_contents: Ordered, manually edited TOC entries
        published_at: Set once, on first publication
        published_by: Email of the editor who last published the issue
        created_at: Creation timestamp
        updated_at: Last modification timestamp
        version: Revision counter used to reject stale writes
    """

    id: str
    title: str
    month: int = Field(ge=1, le=12)
    year: int
    number: int | None = None
    volume: int | None = None
    cover_image_url: str | None = None
    description: str = ""
    status: IssueStatus = "draft"
    table_of_contents: list[TocEntry] = []
    published_at: datetime | None = None
    published_by: str | None = None
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime | None = None
    version: int = 0

    @property
    def is_published(self) -> bool:
        return self.status == "published"
