"""Issue publication and its cascade onto linked submissions."""

import logging

from editorial_desk.access import require_editor
from editorial_desk.audit import AuditTrail
from editorial_desk.exceptions import PartialCascadeError
from editorial_desk.stores.store import RecordStore
from schemas import Actor, PublicationReport
from schemas.base import utc_now

logger = logging.getLogger(__name__)


class PublicationCoordinator:
    """Publish issues on behalf of an editor.

    Publishing is safe to repeat: ``published_at`` is stamped only once and
    the cascade only touches submissions still in ``accepted``.

    Example:
        coordinator = PublicationCoordinator(store, editor)
        try:
            report = coordinator.publish(issue_id)
        except PartialCascadeError as e:
            retry_later(e.failed_ids)
    """

    def __init__(self, store: RecordStore, actor: Actor):
        self.store = store
        self.actor = actor
        self.audit = AuditTrail(store, actor)

    def publish(self, issue_id: str) -> PublicationReport:
        """Publish an issue and cascade "published" to its accepted submissions.

        Args:
            issue_id: Issue to publish

        Returns:
            PublicationReport; ``report.count`` is the number of submissions
            moved to published by this call

        Raises:
            RecordNotFoundError: If the issue id is unknown
            PartialCascadeError: If some submissions could not be updated;
                the report lists them under ``failed``
        """
        require_editor(self.actor, "publish issues")
        issue = self.store.get_issue(issue_id)

        now = utc_now()
        updates: dict = {"status": "published", "published_by": self.actor.email}
        if issue.published_at is None:
            updates["published_at"] = now
        issue = self.store.update_issue(issue.model_copy(update=updates))
        logger.info(f"Issue {issue_id} marked published")

        report = PublicationReport(issue_id=issue_id)
        for submission in self.store.list_submissions(issue_id=issue_id):
            if submission.status == "published":
                report.already_published.append(submission.id)
                continue
            if submission.status != "accepted":
                logger.debug(
                    f"Skipping submission {submission.id} in status {submission.status}"
                )
                continue

            try:
                self.store.update_submission(
                    submission.model_copy(
                        update={
                            "status": "published",
                            "published_at": submission.published_at or now,
                        }
                    )
                )
            except Exception as e:
                logger.error(f"Failed to publish submission {submission.id}: {e}")
                report.failed[submission.id] = str(e)
                continue
            report.updated.append(submission.id)

        self.audit.record(
            "issue_published",
            success=report.succeeded,
            issue_id=issue_id,
            updated=len(report.updated),
            already_published=len(report.already_published),
            failed=sorted(report.failed),
        )
        logger.info(
            f"Published issue {issue_id}: {report.count} updated, "
            f"{len(report.already_published)} already published, {len(report.failed)} failed"
        )

        if report.failed:
            raise PartialCascadeError(
                f"Issue {issue_id} published but {len(report.failed)} submission(s) "
                f"were not updated: {', '.join(sorted(report.failed))}",
                report=report,
            )
        return report
