"""Issue page assembly.

The assembler edits one issue's ``PageLayout``: pages live in an arena keyed
by stable id and the reading order is a separate list of ids. Page numbers
are recomputed from that order after every mutation, so they stay dense
(1..N) no matter which operations run.
"""

import logging
import uuid
from typing import Literal

from editorial_desk.exceptions import DuplicateSubmissionError, InvalidTransitionError
from editorial_desk.lookups import is_image_like
from editorial_desk.stores.store import RecordStore
from schemas import Issue, IssuePage, PageLayout, Submission

logger = logging.getLogger(__name__)

Direction = Literal["up", "down"]

EDITORIAL_CONTRIBUTOR = "Editorial Team"
TOC_TITLE = "Table of Contents"
TOC_POSITION = 1
DESCRIPTION_LENGTH = 200


class PageAssembler:
    """Maintain the ordered page list of a single issue.

    Indexes passed to ``move_page`` and ``remove_page`` are 0-based
    positions in reading order; ``page_number`` on the returned pages is
    1-based.

    Example:
        assembler = PageAssembler(store, issue).load()
        assembler.add_editorial_page("Welcome", "Letter from the editors")
        for submission in accepted:
            assembler.add_submission_page(submission)
        assembler.add_table_of_contents_page()
        assembler.save()
    """

    def __init__(self, store: RecordStore, issue: Issue):
        self.store = store
        self.issue = issue
        self.layout = PageLayout(issue_id=issue.id)

    def __repr__(self) -> str:
        return f"PageAssembler({self.issue.id}, {len(self.layout.order)} pages)"

    def __len__(self) -> int:
        return len(self.layout.order)

    def load(self) -> "PageAssembler":
        """Replace the working layout with the stored one."""
        self.layout = self.store.load_layout(self.issue.id)
        return self

    @property
    def pages(self) -> list[IssuePage]:
        """Pages in reading order with recomputed page numbers."""
        return self.layout.ordered_pages()

    def _new_page(self, **fields) -> IssuePage:
        return IssuePage(id=str(uuid.uuid4()), issue_number=self.issue.number, **fields)

    def _insert(self, position: int, page: IssuePage) -> IssuePage:
        self.layout.pages[page.id] = page
        self.layout.order.insert(position, page.id)
        self.layout.ordered_pages()
        return page

    def _check_index(self, index: int) -> None:
        if index < 0 or index >= len(self.layout.order):
            raise IndexError(
                f"Page index {index} out of range for issue {self.issue.id} "
                f"({len(self.layout.order)} pages)"
            )

    def add_editorial_page(self, title: str, content: str) -> IssuePage:
        """Insert an editorial page at the front of the issue."""
        page = self._new_page(
            type="editorial",
            title=title,
            description=content,
            contributor_name=EDITORIAL_CONTRIBUTOR,
        )
        logger.debug(f"Adding editorial page '{title}' to issue {self.issue.id}")
        return self._insert(0, page)

    def add_table_of_contents_page(self) -> IssuePage:
        """Insert a snapshot table of contents as the second page.

        The listing is built from the submission pages present at the time
        of the call and is not updated afterwards. Each call adds a new,
        independent TOC page. An issue with no pages gets the TOC as its
        only page.
        """
        lines = [
            f"{page.page_number}. {page.title} - {page.contributor_name}"
            for page in self.pages
            if page.type == "submission"
        ]
        page = self._new_page(
            type="toc",
            title=TOC_TITLE,
            description="\n".join(lines),
        )
        position = min(TOC_POSITION, len(self.layout.order))
        return self._insert(position, page)

    def add_submission_page(self, submission: Submission) -> IssuePage:
        """Append a page backed by ``submission``.

        Raises:
            InvalidTransitionError: If the submission is in the trash
            DuplicateSubmissionError: If the submission already has a page here
        """
        if submission.is_trashed:
            raise InvalidTransitionError(
                f"Submission {submission.id} is in the trash and cannot be placed in an issue",
                current=submission.status,
            )
        if self.find_submission_page(submission.id) is not None:
            raise DuplicateSubmissionError(submission.id, self.issue.id)

        image_url = submission.image_url
        if not image_url and is_image_like(submission.type):
            image_url = submission.file_url

        page = self._new_page(
            type="submission",
            submission_id=submission.id,
            title=submission.title,
            contributor_name=submission.author_name,
            image_url=image_url,
            description=submission.content[:DESCRIPTION_LENGTH],
        )
        return self._insert(len(self.layout.order), page)

    def find_submission_page(self, submission_id: str) -> IssuePage | None:
        for page in self.layout.pages.values():
            if page.submission_id == submission_id:
                return page
        return None

    def move_page(self, index: int, direction: Direction) -> None:
        """Swap the page at ``index`` with its neighbour; no-op at the edges."""
        if direction not in ("up", "down"):
            raise ValueError(f"direction must be 'up' or 'down', not {direction!r}")
        self._check_index(index)

        target = index - 1 if direction == "up" else index + 1
        if target < 0 or target >= len(self.layout.order):
            return

        order = self.layout.order
        order[index], order[target] = order[target], order[index]
        self.layout.ordered_pages()

    def remove_page(self, index: int) -> IssuePage:
        """Remove and return the page at ``index``."""
        self._check_index(index)
        page_id = self.layout.order.pop(index)
        page = self.layout.pages.pop(page_id)
        self.layout.ordered_pages()
        return page

    def remove_submission(self, submission_id: str) -> int:
        """Drop every page backed by ``submission_id``; return how many."""
        page_ids = [
            page_id
            for page_id in self.layout.order
            if self.layout.pages[page_id].submission_id == submission_id
        ]
        for page_id in page_ids:
            self.layout.order.remove(page_id)
            del self.layout.pages[page_id]
        if page_ids:
            self.layout.ordered_pages()
        return len(page_ids)

    def save(self) -> PageLayout:
        """Persist the whole layout in one write.

        Raises:
            StaleWriteError: If the layout was saved elsewhere since ``load``
        """
        self.layout = self.store.save_layout(self.layout)
        logger.info(f"Saved {len(self.layout.order)} pages for issue {self.issue.id}")
        return self.layout
