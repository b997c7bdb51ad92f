"""Issue records and their manually curated table of contents.

The table of contents on the issue record is edited independently of the
assembled page list; see ``editorial_desk.assembly`` for pages.
"""

import logging
import uuid
from typing import Literal

from editorial_desk.access import require_editor
from editorial_desk.assembly import PageAssembler
from editorial_desk.exceptions import RecordNotFoundError
from editorial_desk.stores.store import RecordStore
from schemas import Actor, Issue, IssueMetadata, TocEntry

logger = logging.getLogger(__name__)

ISSUE_FIELDS = frozenset(
    {"title", "month", "year", "number", "volume", "cover_image_url", "description"}
)
TOC_FIELDS = frozenset({"title", "author", "page", "category"})


class IssueDesk:
    """Create and edit issues on behalf of an editor."""

    def __init__(self, store: RecordStore, actor: Actor):
        self.store = store
        self.actor = actor

    def create_issue(
        self,
        title: str,
        month: int,
        year: int,
        number: int | None = None,
        volume: int | None = None,
        cover_image_url: str | None = None,
        description: str = "",
    ) -> Issue:
        require_editor(self.actor, "create issues")
        if not title or not title.strip():
            raise ValueError("title is required")
        issue = Issue(
            id=str(uuid.uuid4()),
            title=title.strip(),
            month=month,
            year=year,
            number=number,
            volume=volume,
            cover_image_url=cover_image_url,
            description=description,
        )
        created = self.store.create_issue(issue)
        logger.info(f"Created issue {created.id}: '{created.title}'")
        return created

    def update_issue(self, issue_id: str, **fields) -> Issue:
        """Change descriptive fields of an issue.

        A new issue ``number`` is copied onto the placement metadata of every
        linked submission and onto the issue's pages.

        Raises:
            ValueError: If a field cannot be edited or fails validation
        """
        require_editor(self.actor, "edit issues")
        unknown = set(fields) - ISSUE_FIELDS
        if unknown:
            raise ValueError(f"Fields not editable: {', '.join(sorted(unknown))}")

        issue = self.store.get_issue(issue_id)
        candidate = Issue.model_validate({**issue.model_dump(), **fields})
        updated = self.store.update_issue(candidate)

        if updated.number != issue.number:
            self._renumber(updated)
        return updated

    def _renumber(self, issue: Issue) -> None:
        for submission in self.store.list_submissions(issue_id=issue.id, include_trashed=True):
            metadata = submission.issue_metadata or IssueMetadata()
            self.store.update_submission(
                submission.model_copy(
                    update={"issue_metadata": metadata.model_copy(update={"issue_number": issue.number})}
                )
            )

        assembler = PageAssembler(self.store, issue).load()
        if assembler.layout.order:
            for page in assembler.layout.pages.values():
                page.issue_number = issue.number
            assembler.save()
        logger.info(f"Issue {issue.id} renumbered to {issue.number}")

    def delete_issue(self, issue_id: str) -> None:
        """Delete an issue and its pages, unlinking its submissions."""
        require_editor(self.actor, "delete issues")
        issue = self.store.get_issue(issue_id)
        for submission in self.store.list_submissions(issue_id=issue.id, include_trashed=True):
            self.store.update_submission(
                submission.model_copy(update={"issue_id": None, "issue_metadata": None})
            )
        self.store.delete_issue(issue.id)
        logger.info(f"Deleted issue {issue.id}")

    # Table of contents

    def _toc_index(self, issue: Issue, entry_id: str) -> int:
        for index, entry in enumerate(issue.table_of_contents):
            if entry.id == entry_id:
                return index
        raise RecordNotFoundError("TOC entry", entry_id)

    def _save_toc(self, issue: Issue, entries: list[TocEntry]) -> Issue:
        return self.store.update_issue(issue.model_copy(update={"table_of_contents": entries}))

    def add_toc_entry(
        self,
        issue_id: str,
        title: str,
        author: str = "",
        page: str = "",
        category: str = "",
    ) -> TocEntry:
        require_editor(self.actor, "edit the table of contents")
        issue = self.store.get_issue(issue_id)
        entry = TocEntry(
            id=str(uuid.uuid4()), title=title, author=author, page=page, category=category
        )
        self._save_toc(issue, [*issue.table_of_contents, entry])
        return entry

    def update_toc_entry(self, issue_id: str, entry_id: str, **fields) -> TocEntry:
        require_editor(self.actor, "edit the table of contents")
        unknown = set(fields) - TOC_FIELDS
        if unknown:
            raise ValueError(f"Unknown TOC fields: {', '.join(sorted(unknown))}")

        issue = self.store.get_issue(issue_id)
        index = self._toc_index(issue, entry_id)
        entries = list(issue.table_of_contents)
        entries[index] = entries[index].model_copy(update=fields)
        self._save_toc(issue, entries)
        return entries[index]

    def remove_toc_entry(self, issue_id: str, entry_id: str) -> None:
        require_editor(self.actor, "edit the table of contents")
        issue = self.store.get_issue(issue_id)
        index = self._toc_index(issue, entry_id)
        entries = list(issue.table_of_contents)
        del entries[index]
        self._save_toc(issue, entries)

    def move_toc_entry(self, issue_id: str, entry_id: str, direction: Literal["up", "down"]) -> None:
        """Swap an entry with its neighbour; no-op at either end."""
        require_editor(self.actor, "edit the table of contents")
        if direction not in ("up", "down"):
            raise ValueError(f"direction must be 'up' or 'down', not {direction!r}")

        issue = self.store.get_issue(issue_id)
        index = self._toc_index(issue, entry_id)
        target = index - 1 if direction == "up" else index + 1
        if target < 0 or target >= len(issue.table_of_contents):
            return

        entries = list(issue.table_of_contents)
        entries[index], entries[target] = entries[target], entries[index]
        self._save_toc(issue, entries)
