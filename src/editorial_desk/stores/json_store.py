"""Directory-backed record store.

Layout:
    {root}/
    ├── submissions/{id}.json
    ├── issues/{id}.json
    ├── pages/{issue_id}.json      # PageLayout
    ├── audit/{timestamp}-{id}.json
    └── lookups/{kind}.json

Each file is written to a temporary sibling and moved into place with
``os.replace`` so readers never observe a partially written record.
"""

import json
import logging
import os
from pathlib import Path

from pydantic import BaseModel

from editorial_desk.exceptions import RecordNotFoundError, StaleWriteError
from schemas import (
    DEFAULT_CONTENT_TYPES,
    DEFAULT_CONTRIBUTOR_STATUSES,
    AuditEntry,
    Issue,
    LookupEntry,
    PageLayout,
    Submission,
)
from schemas.base import utc_now

from .store import LookupKind, RecordStore, filter_submissions

logger = logging.getLogger(__name__)

DEFAULT_LOOKUPS: dict[str, list[LookupEntry]] = {
    "content-types": DEFAULT_CONTENT_TYPES,
    "contributor-statuses": DEFAULT_CONTRIBUTOR_STATUSES,
}


def write_json_atomic(destination: Path, payload) -> None:
    """Write JSON to ``destination`` via a temporary file and rename."""
    destination.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = destination.with_name(f".{destination.name}.tmp")
    with open(tmp_path, "w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2)
        f.flush()
        os.fsync(f.fileno())
    os.replace(tmp_path, destination)


def read_json(source: Path):
    with open(source, "r", encoding="utf-8") as f:
        return json.load(f)


class JsonFileStore(RecordStore):
    """Record store keeping one JSON file per record under a root directory.

    Example:
        store = JsonFileStore(Path("./workspace/records"))
        submission = store.get_submission("0b6c...")
    """

    def __init__(self, root: Path):
        self.root = Path(root)
        for sub in ("submissions", "issues", "pages", "audit", "lookups"):
            (self.root / sub).mkdir(parents=True, exist_ok=True)

    def __repr__(self) -> str:
        return f"JsonFileStore({self.root})"

    @staticmethod
    def _storable(record_id: str) -> bool:
        return bool(record_id) and "/" not in record_id and not record_id.startswith(".")

    def _record_path(self, kind: str, record_id: str) -> Path:
        if not self._storable(record_id):
            raise ValueError(f"Invalid record id: {record_id!r}")
        return self.root / kind / f"{record_id}.json"

    def _existing_path(self, kind: str, label: str, record_id: str) -> Path:
        """Path of a stored record; ids that cannot be stored are never found."""
        if not self._storable(record_id):
            raise RecordNotFoundError(label, record_id)
        path = self.root / kind / f"{record_id}.json"
        if not path.exists():
            raise RecordNotFoundError(label, record_id)
        return path

    def _write(self, path: Path, record: BaseModel) -> None:
        write_json_atomic(path, record.model_dump(mode="json", by_alias=True))

    def _load_all(self, kind: str, model: type[BaseModel]) -> list:
        records = []
        for path in sorted((self.root / kind).glob("*.json")):
            records.append(model.model_validate(read_json(path)))
        return records

    # Submissions

    def get_submission(self, submission_id: str) -> Submission:
        path = self._existing_path("submissions", "Submission", submission_id)
        return Submission.model_validate(read_json(path))

    def list_submissions(
        self,
        issue_id: str | None = None,
        status: str | None = None,
        include_trashed: bool = False,
        trashed_only: bool = False,
        author_email: str | None = None,
    ) -> list[Submission]:
        return filter_submissions(
            self._load_all("submissions", Submission),
            issue_id=issue_id,
            status=status,
            include_trashed=include_trashed,
            trashed_only=trashed_only,
            author_email=author_email,
        )

    def create_submission(self, submission: Submission) -> Submission:
        path = self._record_path("submissions", submission.id)
        if path.exists():
            raise ValueError(f"Submission {submission.id} already exists")
        self._write(path, submission)
        logger.debug(f"Created submission {submission.id}")
        return submission

    def update_submission(self, submission: Submission) -> Submission:
        stored = self.get_submission(submission.id)
        if stored.version != submission.version:
            raise StaleWriteError("Submission", submission.id, submission.version, stored.version)
        updated = submission.model_copy(
            update={"version": stored.version + 1, "updated_at": utc_now()}
        )
        self._write(self._record_path("submissions", submission.id), updated)
        return updated

    def delete_submission(self, submission_id: str) -> None:
        path = self._existing_path("submissions", "Submission", submission_id)
        path.unlink()
        logger.debug(f"Deleted submission file {path}")

    # Issues

    def get_issue(self, issue_id: str) -> Issue:
        path = self._existing_path("issues", "Issue", issue_id)
        return Issue.model_validate(read_json(path))

    def list_issues(self) -> list[Issue]:
        issues = self._load_all("issues", Issue)
        issues.sort(key=lambda i: i.created_at, reverse=True)
        return issues

    def create_issue(self, issue: Issue) -> Issue:
        path = self._record_path("issues", issue.id)
        if path.exists():
            raise ValueError(f"Issue {issue.id} already exists")
        self._write(path, issue)
        return issue

    def update_issue(self, issue: Issue) -> Issue:
        stored = self.get_issue(issue.id)
        if stored.version != issue.version:
            raise StaleWriteError("Issue", issue.id, issue.version, stored.version)
        updated = issue.model_copy(update={"version": stored.version + 1, "updated_at": utc_now()})
        self._write(self._record_path("issues", issue.id), updated)
        return updated

    def delete_issue(self, issue_id: str) -> None:
        path = self._existing_path("issues", "Issue", issue_id)
        path.unlink()
        layout_path = self._record_path("pages", issue_id)
        if layout_path.exists():
            layout_path.unlink()

    # Page layouts

    def load_layout(self, issue_id: str) -> PageLayout:
        path = self._record_path("pages", issue_id)
        if not path.exists():
            return PageLayout(issue_id=issue_id)
        return PageLayout.model_validate(read_json(path))

    def save_layout(self, layout: PageLayout) -> PageLayout:
        current = self.load_layout(layout.issue_id)
        if current.revision != layout.revision:
            raise StaleWriteError("Page layout", layout.issue_id, layout.revision, current.revision)
        saved = layout.model_copy(update={"revision": layout.revision + 1})
        saved.ordered_pages()
        self._write(self._record_path("pages", layout.issue_id), saved)
        logger.debug(f"Saved {len(saved.order)} pages for issue {layout.issue_id}")
        return saved

    # Audit trail

    def append_audit(self, entry: AuditEntry) -> None:
        stamp = entry.timestamp.strftime("%Y%m%dT%H%M%S%f")
        self._write(self.root / "audit" / f"{stamp}-{entry.id}.json", entry)

    def list_audit(self) -> list[AuditEntry]:
        return self._load_all("audit", AuditEntry)

    # Lookup tables

    def list_lookup(self, kind: LookupKind) -> list[LookupEntry]:
        if kind not in DEFAULT_LOOKUPS:
            raise ValueError(f"Unknown lookup table: {kind}")
        path = self.root / "lookups" / f"{kind}.json"
        if not path.exists():
            entries = [entry.model_copy() for entry in DEFAULT_LOOKUPS[kind]]
            write_json_atomic(path, [e.model_dump(mode="json", by_alias=True) for e in entries])
        else:
            entries = [LookupEntry.model_validate(item) for item in read_json(path)]
        return sorted(entries, key=lambda e: e.order)
