"""Issue page schemas.

An issue's pages are stored as an arena keyed by stable page id plus a
separate ordering list. Page numbers are never stored authoritatively; they
are derived from the position of the page id in ``order``.
"""

from typing import Literal

from pydantic import model_validator

from .base import RecordModel

PageType = Literal["editorial", "toc", "submission"]


class IssuePage(RecordModel):
    """A single renderable page of an assembled issue.

    Attributes:
        id: Stable page identifier
        page_number: 1-based position, recomputed from the layout order
        type: "editorial", "toc" or "submission"
        submission_id: Backing submission (required iff type is "submission")
        title: Page heading
        contributor_name: Credited contributor
        image_url: Image shown on the page
        description: Body text or excerpt
        issue_number: Number of the owning issue
    """

    id: str
    page_number: int = 0
    type: PageType
    submission_id: str | None = None
    title: str = ""
    contributor_name: str = ""
    image_url: str | None = None
    description: str = ""
    issue_number: int | None = None

    @model_validator(mode="after")
    def _submission_reference(self) -> "IssuePage":
        if self.type == "submission" and not self.submission_id:
            raise ValueError("submission pages require a submission_id")
        if self.type != "submission" and self.submission_id:
            raise ValueError(f"{self.type} pages cannot reference a submission")
        return self


class PageLayout(RecordModel):
    """The complete page set of one issue.

    Attributes:
        issue_id: Owning issue
        pages: Page arena keyed by page id
        order: Page ids in reading order
        revision: Incremented on every save; used to reject stale saves
    """

    issue_id: str
    pages: dict[str, IssuePage] = {}
    order: list[str] = []
    revision: int = 0

    @model_validator(mode="after")
    def _order_matches_arena(self) -> "PageLayout":
        if len(set(self.order)) != len(self.order):
            raise ValueError("page order contains duplicate ids")
        if set(self.order) != set(self.pages):
            raise ValueError("page order does not match the page arena")
        return self

    def ordered_pages(self) -> list[IssuePage]:
        """Return pages in reading order with dense page numbers."""
        ordered = []
        for position, page_id in enumerate(self.order, start=1):
            page = self.pages[page_id]
            page.page_number = position
            ordered.append(page)
        return ordered

    @classmethod
    def from_pages(
        cls, issue_id: str, pages: list[IssuePage], revision: int = 0
    ) -> "PageLayout":
        """Build a layout from a flat list already in reading order."""
        return cls(
            issue_id=issue_id,
            pages={page.id: page for page in pages},
            order=[page.id for page in pages],
            revision=revision,
        )
