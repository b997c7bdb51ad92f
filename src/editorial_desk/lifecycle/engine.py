"""Submission lifecycle engine.

Enforces the status transition table, the two-step trash/permanent-delete
gate and issue assignment rules. The engine performs no I/O beyond its
collaborators: a transition that warrants contributor mail returns a
``CorrespondenceIntent`` for the caller to fulfil.
"""

import logging
import uuid

from pydantic import BaseModel

from editorial_desk.access import can_edit_content, require_editor
from editorial_desk.assembly import PageAssembler
from editorial_desk.attachments.blob_storage import BlobStorage
from editorial_desk.audit import AuditTrail
from editorial_desk.exceptions import (
    InvalidTransitionError,
    NotInTrashError,
    PartialPurgeError,
    PermissionDeniedError,
    RecordNotFoundError,
)
from editorial_desk.lookups import LookupTables, normalize_open_value
from editorial_desk.stores.store import RecordStore
from schemas import (
    SUBMISSION_STATUSES,
    Actor,
    CorrespondenceIntent,
    IssueMetadata,
    Submission,
)
from schemas.base import utc_now

from .transitions import correspondence_template, is_allowed

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = frozenset(
    {
        "title",
        "content",
        "type",
        "author_name",
        "contributor_status",
        "image_url",
        "file_url",
    }
)


class TransitionResult(BaseModel):
    """Updated submission plus the correspondence its new status requires."""

    submission: Submission
    intent: CorrespondenceIntent | None = None


class LifecycleEngine:
    """Run lifecycle operations on behalf of one actor.

    Args:
        store: Record persistence
        actor: The authenticated user; only editors may change status
        blob_storage: Used to delete attachment blobs on permanent delete

    Example:
        engine = LifecycleEngine(store, editor, blob_storage)
        result = engine.transition(submission_id, "accepted", "Lovely piece")
        if result.intent:
            renderer.fulfill(result.intent, correspondent)
    """

    def __init__(
        self,
        store: RecordStore,
        actor: Actor,
        blob_storage: BlobStorage | None = None,
    ):
        self.store = store
        self.actor = actor
        self.blob_storage = blob_storage
        self.audit = AuditTrail(store, actor)
        self.lookups = LookupTables(store)

    def create(
        self,
        title: str,
        type: str,
        content: str = "",
        author_name: str | None = None,
        author_email: str | None = None,
        contributor_status: str = "",
        image_url: str | None = None,
        file_url: str | None = None,
    ) -> Submission:
        """Create a new pending submission.

        Contributors always submit under their own name and email; editors
        may enter a submission on someone else's behalf.
        """
        type = normalize_open_value("type", type)
        if type not in self.lookups.content_types():
            logger.debug(f"Content type {type!r} is not in the lookup table")

        if not self.actor.is_editor:
            author_name = author_name or self.actor.name
            author_email = self.actor.email

        submission = Submission(
            id=str(uuid.uuid4()),
            title=title,
            content=content,
            type=type,
            author_name=author_name or "",
            author_email=author_email or "",
            contributor_status=contributor_status.strip(),
            image_url=image_url,
            file_url=file_url,
            submitted_by=self.actor.email,
        )
        created = self.store.create_submission(submission)
        logger.info(f"Created submission {created.id}: '{created.title}'")
        return created

    def edit_content(self, submission_id: str, **fields) -> Submission:
        """Update descriptive fields of a submission.

        Raises:
            ValueError: If a field is not editable through this operation
            PermissionDeniedError: If a contributor edits work that is not
                theirs or has moved past review
            InvalidTransitionError: If the submission is in the trash
        """
        unknown = set(fields) - EDITABLE_FIELDS
        if unknown:
            raise ValueError(f"Fields not editable: {', '.join(sorted(unknown))}")

        submission = self.store.get_submission(submission_id)
        if submission.is_trashed:
            raise InvalidTransitionError(
                f"Submission {submission_id} is in the trash", current=submission.status
            )
        if not can_edit_content(self.actor, submission):
            raise PermissionDeniedError(
                f"{self.actor.email} may not edit submission {submission_id} "
                f"(status: {submission.status})"
            )
        if "type" in fields:
            fields["type"] = normalize_open_value("type", fields["type"])

        return self.store.update_submission(submission.model_copy(update=fields))

    def transition(
        self,
        submission_id: str,
        new_status: str,
        editor_notes: str | None = None,
    ) -> TransitionResult:
        """Move a submission to ``new_status``.

        Args:
            submission_id: Submission to update
            new_status: Target status (never "deleted"; use move_to_trash)
            editor_notes: Replaces the stored notes when given

        Returns:
            TransitionResult with the stored record and an optional intent

        Raises:
            RecordNotFoundError: If the id is unknown
            InvalidTransitionError: If the move is not in the transition
                table, the record is trashed, or it would be published
                without an issue
        """
        require_editor(self.actor, "change submission status")
        submission = self.store.get_submission(submission_id)
        current = submission.status

        if new_status not in SUBMISSION_STATUSES:
            raise InvalidTransitionError(
                f"Unknown status: {new_status}", current=current, target=new_status
            )
        if current == "deleted":
            raise InvalidTransitionError(
                f"Submission {submission_id} is in the trash; restore it first",
                current=current,
                target=new_status,
            )
        if new_status == "deleted":
            raise InvalidTransitionError(
                "Use move_to_trash to delete a submission",
                current=current,
                target=new_status,
            )
        if not is_allowed(current, new_status):
            raise InvalidTransitionError(
                f"Cannot move submission {submission_id} from {current} to {new_status}",
                current=current,
                target=new_status,
            )
        if new_status == "published" and not submission.issue_id:
            raise InvalidTransitionError(
                f"Submission {submission_id} must be assigned to an issue before publishing",
                current=current,
                target=new_status,
            )

        updates: dict = {"status": new_status}
        if editor_notes is not None:
            updates["editor_notes"] = editor_notes
        if new_status == "published" and submission.published_at is None:
            updates["published_at"] = utc_now()

        updated = self.store.update_submission(submission.model_copy(update=updates))
        logger.info(f"Submission {submission_id}: {current} -> {new_status}")

        return TransitionResult(
            submission=updated,
            intent=self._intent_for(updated, current, new_status),
        )

    def _intent_for(
        self, submission: Submission, current: str, target: str
    ) -> CorrespondenceIntent | None:
        template = correspondence_template(current, target)
        if template is None:
            return None
        if not submission.author_email:
            logger.warning(
                f"Submission {submission.id} has no author email; "
                f"'{template}' message cannot be sent"
            )
            return None
        return CorrespondenceIntent(
            template=template,
            recipient=submission.author_email,
            submission_id=submission.id,
            data={
                "title": submission.title,
                "author_name": submission.author_name,
                "type": submission.type,
                "submission_id": submission.id,
                "editor_notes": submission.editor_notes,
                "created_at": submission.created_at.isoformat(),
                "issue_number": (
                    submission.issue_metadata.issue_number if submission.issue_metadata else None
                ),
            },
        )

    def move_to_trash(self, submission_id: str) -> Submission:
        """Soft-delete a submission, remembering its status for restore.

        Pages backed by the submission are removed from every issue first.
        Trashing an already trashed record is a no-op.
        """
        require_editor(self.actor, "move submissions to the trash")
        submission = self.store.get_submission(submission_id)
        if submission.is_trashed:
            logger.debug(f"Submission {submission_id} already in the trash")
            return submission

        removed = self._remove_pages(submission_id)
        updated = self.store.update_submission(
            submission.model_copy(
                update={
                    "status": "deleted",
                    "previous_status": submission.status,
                    "trashed_at": utc_now(),
                    "trashed_by": self.actor.email,
                }
            )
        )
        self.audit.record(
            "submission_trashed",
            submission_id=submission_id,
            previous_status=submission.status,
            pages_removed=removed,
        )
        logger.info(f"Moved submission {submission_id} to the trash")
        return updated

    def _remove_pages(self, submission_id: str, issue_ids: list[str] | None = None) -> int:
        if issue_ids is None:
            issues = self.store.list_issues()
        else:
            issues = []
            for issue_id in issue_ids:
                try:
                    issues.append(self.store.get_issue(issue_id))
                except RecordNotFoundError:
                    logger.debug(f"Issue {issue_id} no longer exists; no pages to remove")

        removed = 0
        for issue in issues:
            assembler = PageAssembler(self.store, issue).load()
            count = assembler.remove_submission(submission_id)
            if count:
                assembler.save()
                removed += count
                logger.info(f"Removed {count} page(s) for {submission_id} from issue {issue.id}")
        return removed

    def restore(self, submission_id: str) -> Submission:
        """Return a trashed submission to the status it held before.

        Raises:
            NotInTrashError: If the submission is not trashed
        """
        require_editor(self.actor, "restore submissions")
        submission = self.store.get_submission(submission_id)
        if not submission.is_trashed:
            raise NotInTrashError(submission_id, submission.status)

        status = submission.previous_status or "pending"
        updated = self.store.update_submission(
            submission.model_copy(
                update={
                    "status": status,
                    "previous_status": None,
                    "trashed_at": None,
                    "trashed_by": None,
                }
            )
        )
        self.audit.record("submission_restored", submission_id=submission_id, status=status)
        logger.info(f"Restored submission {submission_id} to {status}")
        return updated

    def permanently_delete(self, submission_id: str) -> None:
        """Erase a trashed submission and its stored files.

        Blobs are deleted before the record, so a storage failure leaves the
        record in the trash where the delete can be retried.

        Raises:
            NotInTrashError: If the submission has not been trashed first
        """
        require_editor(self.actor, "permanently delete submissions")
        submission = self.store.get_submission(submission_id)
        self._purge(submission)
        self.audit.record(
            "submission_deleted",
            submission_id=submission_id,
            title=submission.title,
        )

    def _purge(self, submission: Submission) -> None:
        if not submission.is_trashed:
            raise NotInTrashError(submission.id, submission.status)

        urls = [document.url for document in submission.documents]
        urls.extend(url for url in (submission.file_url, submission.image_url) if url)
        if urls and self.blob_storage is None:
            logger.warning(
                f"No blob storage configured; {len(urls)} file(s) of {submission.id} left in place"
            )
        elif self.blob_storage is not None:
            for url in urls:
                self.blob_storage.delete(url)

        self.store.delete_submission(submission.id)
        logger.info(f"Permanently deleted submission {submission.id}")

    def empty_trash(self) -> int:
        """Permanently delete every trashed submission; return the count.

        Each submission is purged on its own, so one storage failure does
        not stop the rest.

        Raises:
            PartialPurgeError: If some submissions could not be removed; it
                carries the removed count and the failed ids
        """
        require_editor(self.actor, "empty the trash")
        removed = 0
        failed: dict[str, str] = {}
        for submission in self.store.list_submissions(trashed_only=True):
            try:
                self._purge(submission)
            except Exception as e:
                logger.error(f"Failed to delete submission {submission.id}: {e}")
                failed[submission.id] = str(e)
                continue
            removed += 1

        self.audit.record(
            "trash_emptied",
            success=not failed,
            count=removed,
            failed=sorted(failed),
        )
        if removed:
            logger.info(f"Emptied trash: {removed} submission(s) removed")
        if failed:
            raise PartialPurgeError(
                f"Removed {removed} submission(s) from the trash but "
                f"{len(failed)} could not be deleted: {', '.join(sorted(failed))}",
                removed=removed,
                failed=failed,
            )
        return removed

    def assign_to_issue(
        self,
        submission_id: str,
        issue_id: str,
        page_number: int | None = None,
        short_description: str | None = None,
    ) -> Submission:
        """Link a submission to an issue, replacing any earlier assignment.

        ``issue_metadata.issue_number`` is always copied from the issue.
        Pages in a previously assigned issue are removed.

        Raises:
            InvalidTransitionError: If the submission is in the trash
        """
        require_editor(self.actor, "assign submissions to issues")
        submission = self.store.get_submission(submission_id)
        if submission.is_trashed:
            raise InvalidTransitionError(
                f"Submission {submission_id} is in the trash and cannot be assigned",
                current=submission.status,
            )
        issue = self.store.get_issue(issue_id)

        if submission.issue_id and submission.issue_id != issue.id:
            self._remove_pages(submission_id, [submission.issue_id])

        metadata = IssueMetadata(
            issue_number=issue.number,
            page_number=page_number,
            short_description=short_description,
        )
        updated = self.store.update_submission(
            submission.model_copy(update={"issue_id": issue.id, "issue_metadata": metadata})
        )
        logger.info(f"Assigned submission {submission_id} to issue {issue.id}")
        return updated

    def unassign(self, submission_id: str) -> Submission:
        """Clear a submission's issue link and drop its page from that issue."""
        require_editor(self.actor, "unassign submissions")
        submission = self.store.get_submission(submission_id)
        if not submission.issue_id:
            return submission

        self._remove_pages(submission_id, [submission.issue_id])
        return self.store.update_submission(
            submission.model_copy(update={"issue_id": None, "issue_metadata": None})
        )
