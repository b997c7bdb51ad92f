"""Record store backed by the hosted editorial backend API."""

import logging
from typing import Any

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from editorial_desk.exceptions import RecordNotFoundError, StaleWriteError
from editorial_desk.stores.store import LookupKind, RecordStore, filter_submissions
from schemas import AuditEntry, Issue, IssuePage, LookupEntry, PageLayout, Submission

from .client import Client
from .exceptions import ConflictError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)

LOOKUP_RESPONSE_KEYS = {
    "content-types": "types",
    "contributor-statuses": "statuses",
}


class BackendStore(Client, RecordStore):
    """RecordStore implementation speaking to the backend's REST endpoints.

    Responses are validated against the record schemas. A 404 becomes
    RecordNotFoundError and a 409 becomes StaleWriteError; every other
    failure propagates as a client exception.

    Example:
        config = {"base_url": "https://example.org/api", "auth_token": token}
        with BackendStore(config) as store:
            pending = store.list_submissions(status="pending")
    """

    def _validate(self, model: type[BaseModel], data: Any, label: str):
        try:
            return model.model_validate(data)
        except PydanticValidationError as e:
            raise ValidationError(
                f"{label} failed validation",
                errors=[str(err) for err in e.errors()],
            ) from e

    def _validate_list(self, model: type[BaseModel], items: list, label: str) -> list:
        validated = []
        for i, item in enumerate(items):
            item_id = item.get("id", f"index {i}") if isinstance(item, dict) else f"index {i}"
            validated.append(self._validate(model, item, f"{label} {item_id}"))
        return validated

    def _stale(self, kind: str, record_id: str, expected: int, error: ConflictError) -> StaleWriteError:
        actual = -1
        if isinstance(error.details, dict):
            actual = int(error.details.get("version", error.details.get("revision", -1)))
        return StaleWriteError(kind, record_id, expected, actual)

    # Submissions

    def get_submission(self, submission_id: str) -> Submission:
        try:
            data = self.get(f"/submissions/{submission_id}").json()
        except NotFoundError as e:
            raise RecordNotFoundError("Submission", submission_id) from e
        return self._validate(Submission, data.get("submission"), f"Submission {submission_id}")

    def list_submissions(
        self,
        issue_id: str | None = None,
        status: str | None = None,
        include_trashed: bool = False,
        trashed_only: bool = False,
        author_email: str | None = None,
    ) -> list[Submission]:
        params: dict[str, Any] = {}
        if issue_id is not None:
            params["issueId"] = issue_id
        if status is not None:
            params["status"] = status
        if trashed_only or status == "deleted":
            params["trash"] = "true"
        elif include_trashed:
            params["includeTrashed"] = "true"

        data = self.get("/submissions", params=params).json()
        submissions = self._validate_list(Submission, data.get("submissions", []), "Submission")
        return filter_submissions(
            submissions,
            issue_id=issue_id,
            status=status,
            include_trashed=include_trashed,
            trashed_only=trashed_only,
            author_email=author_email,
        )

    def create_submission(self, submission: Submission) -> Submission:
        data = self.post("/submissions", json=submission.to_wire()).json()
        return self._validate(Submission, data.get("submission"), "Created submission")

    def update_submission(self, submission: Submission) -> Submission:
        try:
            data = self.put(f"/submissions/{submission.id}", json=submission.to_wire()).json()
        except NotFoundError as e:
            raise RecordNotFoundError("Submission", submission.id) from e
        except ConflictError as e:
            raise self._stale("Submission", submission.id, submission.version, e) from e
        return self._validate(Submission, data.get("submission"), f"Submission {submission.id}")

    def delete_submission(self, submission_id: str) -> None:
        try:
            self.delete(f"/submissions/{submission_id}")
        except NotFoundError as e:
            raise RecordNotFoundError("Submission", submission_id) from e

    # Issues

    def get_issue(self, issue_id: str) -> Issue:
        try:
            data = self.get(f"/issues/{issue_id}").json()
        except NotFoundError as e:
            raise RecordNotFoundError("Issue", issue_id) from e
        return self._validate(Issue, data.get("issue"), f"Issue {issue_id}")

    def list_issues(self) -> list[Issue]:
        data = self.get("/issues").json()
        return self._validate_list(Issue, data.get("issues", []), "Issue")

    def create_issue(self, issue: Issue) -> Issue:
        data = self.post("/issues", json=issue.to_wire()).json()
        return self._validate(Issue, data.get("issue"), "Created issue")

    def update_issue(self, issue: Issue) -> Issue:
        try:
            data = self.put(f"/issues/{issue.id}", json=issue.to_wire()).json()
        except NotFoundError as e:
            raise RecordNotFoundError("Issue", issue.id) from e
        except ConflictError as e:
            raise self._stale("Issue", issue.id, issue.version, e) from e
        return self._validate(Issue, data.get("issue"), f"Issue {issue.id}")

    def delete_issue(self, issue_id: str) -> None:
        try:
            self.delete(f"/issues/{issue_id}")
        except NotFoundError as e:
            raise RecordNotFoundError("Issue", issue_id) from e

    # Page layouts

    def load_layout(self, issue_id: str) -> PageLayout:
        try:
            data = self.get(f"/issues/{issue_id}/pages").json()
        except NotFoundError as e:
            raise RecordNotFoundError("Issue", issue_id) from e
        pages = self._validate_list(IssuePage, data.get("pages", []), "Page")
        pages.sort(key=lambda p: p.page_number)
        return PageLayout.from_pages(issue_id, pages, revision=int(data.get("revision", 0)))

    def save_layout(self, layout: PageLayout) -> PageLayout:
        payload = {
            "pages": [page.to_wire() for page in layout.ordered_pages()],
            "revision": layout.revision,
        }
        try:
            data = self.put(f"/issues/{layout.issue_id}/pages", json=payload).json()
        except NotFoundError as e:
            raise RecordNotFoundError("Issue", layout.issue_id) from e
        except ConflictError as e:
            raise self._stale("Page layout", layout.issue_id, layout.revision, e) from e
        revision = int(data.get("revision", layout.revision + 1))
        logger.debug(f"Saved {len(layout.order)} pages for issue {layout.issue_id}")
        return layout.model_copy(update={"revision": revision})

    # Audit trail

    def append_audit(self, entry: AuditEntry) -> None:
        self.post("/audit-logs", json=entry.to_wire())

    def list_audit(self) -> list[AuditEntry]:
        data = self.get("/audit-logs").json()
        return self._validate_list(AuditEntry, data.get("logs", []), "Audit entry")

    # Lookup tables

    def list_lookup(self, kind: LookupKind) -> list[LookupEntry]:
        if kind not in LOOKUP_RESPONSE_KEYS:
            raise ValueError(f"Unknown lookup table: {kind}")
        data = self.get(f"/{kind}").json()
        entries = self._validate_list(LookupEntry, data.get(LOOKUP_RESPONSE_KEYS[kind], []), kind)
        return sorted(entries, key=lambda e: e.order)
