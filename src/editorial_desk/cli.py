"""Command-line interface for editorial-desk."""

import argparse
import json
import logging
import mimetypes
import sys
from contextlib import ExitStack, contextmanager
from pathlib import Path

from editorial_desk.assembly import PageAssembler
from editorial_desk.attachments import AttachmentSet, BlobStorage, LocalBlobStorage
from editorial_desk.audit import AuditTrail
from editorial_desk.clients import BackendStore, ClientError, MailClient, StorageClient
from editorial_desk.config import load_config
from editorial_desk.correspondence import (
    Correspondent,
    CorrespondenceRenderer,
    OutboxCorrespondent,
)
from editorial_desk.exceptions import EditorialError, PartialCascadeError, PartialPurgeError
from editorial_desk.issues import IssueDesk
from editorial_desk.lifecycle import LifecycleEngine
from editorial_desk.publication import PublicationCoordinator
from editorial_desk.stores import JsonFileStore, RecordStore
from schemas import SUBMISSION_STATUSES, Actor, UploadFile

COMMAND_ERRORS = (EditorialError, ClientError, ValueError, IndexError, OSError)


def setup_logging(verbose: bool = False) -> None:
    """Configure logging for the CLI."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
    )


class Desk:
    """Collaborators selected by configuration for one CLI invocation."""

    def __init__(
        self,
        config: dict,
        store: RecordStore,
        blob_storage: BlobStorage,
        correspondent: Correspondent,
    ):
        self.config = config
        self.store = store
        self.blob_storage = blob_storage
        self.correspondent = correspondent
        self.actor = Actor.model_validate(config["actor"])

    def engine(self) -> LifecycleEngine:
        return LifecycleEngine(self.store, self.actor, self.blob_storage)

    def attachments(self) -> AttachmentSet:
        return AttachmentSet(self.store, self.blob_storage, self.actor)

    def issues(self) -> IssueDesk:
        return IssueDesk(self.store, self.actor)

    def renderer(self) -> CorrespondenceRenderer:
        mail = self.config.get("mail", {})
        return CorrespondenceRenderer(**mail)

    def audit(self) -> AuditTrail:
        return AuditTrail(self.store, self.actor)


def resolve_config(args: argparse.Namespace) -> dict:
    """Layer command-line overrides over the loaded config file."""
    config = load_config(args.config)
    if args.store:
        config["store"]["kind"] = args.store
    if args.root:
        root = Path(args.root)
        config["store"]["root"] = str(root / "records")
        config["blobs"]["root"] = str(root / "blobs")
        config["outbox"]["root"] = str(root / "outbox")
    if args.base_url:
        config["backend"]["base_url"] = args.base_url
    if args.actor_email:
        config["actor"]["email"] = args.actor_email
    if args.role:
        config["actor"]["role"] = args.role
    return config


@contextmanager
def open_desk(args: argparse.Namespace):
    """Build the configured collaborators and close them afterwards."""
    config = resolve_config(args)
    with ExitStack() as stack:
        if config["store"]["kind"] == "backend":
            backend = config["backend"]
            store = stack.enter_context(BackendStore(backend))
            blob_storage = stack.enter_context(StorageClient(backend))
            correspondent = stack.enter_context(MailClient(backend))
        else:
            store = JsonFileStore(Path(config["store"]["root"]))
            blob_storage = LocalBlobStorage(Path(config["blobs"]["root"]))
            correspondent = OutboxCorrespondent(Path(config["outbox"]["root"]))
        yield Desk(config, store, blob_storage, correspondent)


def print_json(data) -> None:
    print(json.dumps(data, indent=2))


def cmd_submit(args: argparse.Namespace, desk: Desk) -> int:
    logger = logging.getLogger(__name__)
    submission = desk.engine().create(
        title=args.title,
        type=args.type,
        content=args.content,
        author_name=args.author_name,
        author_email=args.author_email,
        contributor_status=args.contributor_status,
    )
    logger.info(f"Created submission: {submission.id}")
    print_json(submission.to_wire())
    return 0


def cmd_list(args: argparse.Namespace, desk: Desk) -> int:
    submissions = desk.store.list_submissions(
        issue_id=args.issue,
        status=args.status,
        trashed_only=args.trash,
    )
    for submission in submissions:
        print(f"{submission.id}\t{submission.status}\t{submission.type}\t{submission.title}")
    return 0


def cmd_show(args: argparse.Namespace, desk: Desk) -> int:
    print_json(desk.store.get_submission(args.submission).to_wire())
    return 0


def cmd_transition(args: argparse.Namespace, desk: Desk) -> int:
    logger = logging.getLogger(__name__)
    result = desk.engine().transition(args.submission, args.status, args.notes)
    logger.info(f"Submission {result.submission.id} is now {result.submission.status}")

    if result.intent is None:
        return 0
    if args.no_email:
        logger.warning(f"Skipped '{result.intent.template}' message to {result.intent.recipient}")
        return 0

    message = desk.renderer().fulfill(result.intent, desk.correspondent, desk.audit())
    logger.info(f"Sent '{message.subject}' to {message.recipient}")
    return 0


def cmd_trash(args: argparse.Namespace, desk: Desk) -> int:
    submission = desk.engine().move_to_trash(args.submission)
    logging.getLogger(__name__).info(
        f"Submission {submission.id} moved to trash (was {submission.previous_status})"
    )
    return 0


def cmd_restore(args: argparse.Namespace, desk: Desk) -> int:
    submission = desk.engine().restore(args.submission)
    logging.getLogger(__name__).info(f"Submission {submission.id} restored to {submission.status}")
    return 0


def cmd_delete(args: argparse.Namespace, desk: Desk) -> int:
    logger = logging.getLogger(__name__)
    if not args.yes:
        logger.error("Permanent deletion cannot be undone; pass --yes to confirm")
        return 1
    desk.engine().permanently_delete(args.submission)
    logger.info(f"Submission {args.submission} permanently deleted")
    return 0


def cmd_empty_trash(args: argparse.Namespace, desk: Desk) -> int:
    logger = logging.getLogger(__name__)
    if not args.yes:
        logger.error("Emptying the trash cannot be undone; pass --yes to confirm")
        return 1
    try:
        count = desk.engine().empty_trash()
    except PartialPurgeError as e:
        logger.error(e.message)
        for submission_id, error in e.failed.items():
            logger.error(f"  {submission_id}: {error}")
        return 1
    logger.info(f"Removed {count} submission(s) from the trash")
    return 0


def cmd_attach(args: argparse.Namespace, desk: Desk) -> int:
    logger = logging.getLogger(__name__)
    path: Path = args.file
    if not path.exists():
        logger.error(f"File not found: {path}")
        return 1

    content_type = args.content_type or mimetypes.guess_type(path.name)[0]
    if content_type is None:
        logger.error(f"Cannot determine the MIME type of {path.name}; pass --content-type")
        return 1

    document = desk.attachments().attach(args.submission, UploadFile.from_path(path, content_type))
    logger.info(f"Attached {document.file_name} as {document.id}")
    if document.page_count:
        logger.info(f"  Pages: {document.page_count}")
    return 0


def cmd_detach(args: argparse.Namespace, desk: Desk) -> int:
    document = desk.attachments().detach(args.submission, args.document)
    logging.getLogger(__name__).info(f"Detached {document.file_name}")
    return 0


def cmd_create_issue(args: argparse.Namespace, desk: Desk) -> int:
    issue = desk.issues().create_issue(
        title=args.title,
        month=args.month,
        year=args.year,
        number=args.number,
        volume=args.volume,
        description=args.description,
    )
    logging.getLogger(__name__).info(f"Created issue: {issue.id}")
    print_json(issue.to_wire())
    return 0


def cmd_assign(args: argparse.Namespace, desk: Desk) -> int:
    submission = desk.engine().assign_to_issue(
        args.submission,
        args.issue,
        page_number=args.page_number,
        short_description=args.short_description,
    )
    logging.getLogger(__name__).info(f"Submission {submission.id} assigned to issue {submission.issue_id}")
    return 0


def cmd_unassign(args: argparse.Namespace, desk: Desk) -> int:
    desk.engine().unassign(args.submission)
    logging.getLogger(__name__).info(f"Submission {args.submission} unassigned")
    return 0


def cmd_pages(args: argparse.Namespace, desk: Desk) -> int:
    """Edit or show the page list of an issue.

    Page positions on the command line are 1-based page numbers.
    """
    logger = logging.getLogger(__name__)
    issue = desk.store.get_issue(args.issue)
    assembler = PageAssembler(desk.store, issue).load()

    if args.action == "show":
        for page in assembler.pages:
            print(f"{page.page_number}\t{page.type}\t{page.title}\t{page.contributor_name}")
        return 0

    if args.action == "add-editorial":
        assembler.add_editorial_page(args.title, args.content)
    elif args.action == "add-toc":
        assembler.add_table_of_contents_page()
    elif args.action == "add-submission":
        assembler.add_submission_page(desk.store.get_submission(args.submission))
    elif args.action == "move":
        assembler.move_page(args.page - 1, args.direction)
    elif args.action == "remove":
        assembler.remove_page(args.page - 1)

    assembler.save()
    logger.info(f"Issue {issue.id} now has {len(assembler)} page(s)")
    return 0


def cmd_publish(args: argparse.Namespace, desk: Desk) -> int:
    logger = logging.getLogger(__name__)
    try:
        report = PublicationCoordinator(desk.store, desk.actor).publish(args.issue)
    except PartialCascadeError as e:
        logger.error(e.message)
        for submission_id, error in e.report.failed.items():
            logger.error(f"  {submission_id}: {error}")
        logger.error("Re-run publish to retry the failed submissions")
        return 1

    logger.info(f"Published issue {report.issue_id}")
    logger.info(f"  Submissions published: {report.count}")
    if report.already_published:
        logger.info(f"  Already published: {len(report.already_published)}")
    return 0


def run_command(args: argparse.Namespace) -> int:
    """Open the configured collaborators and dispatch to the subcommand."""
    setup_logging(args.verbose)
    logger = logging.getLogger(__name__)

    try:
        with open_desk(args) as desk:
            return args.handler(args, desk)
    except COMMAND_ERRORS as e:
        logger.error(f"{args.command} failed: {e}")
        return 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="editorial-desk",
        description="Manage magazine submissions and assemble issues",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose output",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="JSON config file layered over the defaults",
    )
    parser.add_argument(
        "--store",
        choices=["json", "backend"],
        default=None,
        help="Record store to use (default: from config, 'json')",
    )
    parser.add_argument(
        "--root",
        type=Path,
        default=None,
        help="Workspace directory for the json store, blobs and outbox",
    )
    parser.add_argument(
        "--base-url",
        type=str,
        default=None,
        help="Backend API base URL for the backend store",
    )
    parser.add_argument("--actor-email", type=str, default=None, help="Acting user's email")
    parser.add_argument(
        "--role",
        choices=["editor", "contributor"],
        default=None,
        help="Acting user's role",
    )

    subparsers = parser.add_subparsers(
        title="commands",
        description="Available commands",
        dest="command",
    )

    submit_parser = subparsers.add_parser("submit", help="Create a new submission")
    submit_parser.add_argument("--title", required=True)
    submit_parser.add_argument("--type", required=True, help="Content type, e.g. poem")
    submit_parser.add_argument("--content", default="")
    submit_parser.add_argument("--author-name", default=None)
    submit_parser.add_argument("--author-email", default=None)
    submit_parser.add_argument("--contributor-status", default="")
    submit_parser.set_defaults(handler=cmd_submit)

    list_parser = subparsers.add_parser("list", help="List submissions")
    list_parser.add_argument("--issue", default=None, help="Only submissions in this issue")
    list_parser.add_argument("--status", choices=SUBMISSION_STATUSES, default=None)
    list_parser.add_argument("--trash", action="store_true", help="List the trash")
    list_parser.set_defaults(handler=cmd_list)

    show_parser = subparsers.add_parser("show", help="Print a submission as JSON")
    show_parser.add_argument("submission")
    show_parser.set_defaults(handler=cmd_show)

    transition_parser = subparsers.add_parser(
        "transition",
        help="Change a submission's status",
        description="Change a submission's status and send the contributor message it triggers.",
    )
    transition_parser.add_argument("submission")
    transition_parser.add_argument("status", choices=SUBMISSION_STATUSES)
    transition_parser.add_argument("--notes", default=None, help="Editor notes")
    transition_parser.add_argument(
        "--no-email",
        action="store_true",
        help="Do not send the triggered message",
    )
    transition_parser.set_defaults(handler=cmd_transition)

    trash_parser = subparsers.add_parser("trash", help="Move a submission to the trash")
    trash_parser.add_argument("submission")
    trash_parser.set_defaults(handler=cmd_trash)

    restore_parser = subparsers.add_parser("restore", help="Restore a submission from the trash")
    restore_parser.add_argument("submission")
    restore_parser.set_defaults(handler=cmd_restore)

    delete_parser = subparsers.add_parser("delete", help="Permanently delete a trashed submission")
    delete_parser.add_argument("submission")
    delete_parser.add_argument("--yes", action="store_true", help="Confirm deletion")
    delete_parser.set_defaults(handler=cmd_delete)

    empty_parser = subparsers.add_parser("empty-trash", help="Permanently delete everything in the trash")
    empty_parser.add_argument("--yes", action="store_true", help="Confirm deletion")
    empty_parser.set_defaults(handler=cmd_empty_trash)

    attach_parser = subparsers.add_parser("attach", help="Attach a file to a submission")
    attach_parser.add_argument("submission")
    attach_parser.add_argument("file", type=Path)
    attach_parser.add_argument("--content-type", default=None, help="MIME type (default: guessed)")
    attach_parser.set_defaults(handler=cmd_attach)

    detach_parser = subparsers.add_parser("detach", help="Remove an attached file")
    detach_parser.add_argument("submission")
    detach_parser.add_argument("document")
    detach_parser.set_defaults(handler=cmd_detach)

    issue_parser = subparsers.add_parser("create-issue", help="Create a draft issue")
    issue_parser.add_argument("--title", required=True)
    issue_parser.add_argument("--month", type=int, required=True)
    issue_parser.add_argument("--year", type=int, required=True)
    issue_parser.add_argument("--number", type=int, default=None)
    issue_parser.add_argument("--volume", type=int, default=None)
    issue_parser.add_argument("--description", default="")
    issue_parser.set_defaults(handler=cmd_create_issue)

    assign_parser = subparsers.add_parser("assign", help="Assign a submission to an issue")
    assign_parser.add_argument("submission")
    assign_parser.add_argument("issue")
    assign_parser.add_argument("--page-number", type=int, default=None)
    assign_parser.add_argument("--short-description", default=None)
    assign_parser.set_defaults(handler=cmd_assign)

    unassign_parser = subparsers.add_parser("unassign", help="Remove a submission from its issue")
    unassign_parser.add_argument("submission")
    unassign_parser.set_defaults(handler=cmd_unassign)

    pages_parser = subparsers.add_parser("pages", help="Show or edit an issue's pages")
    pages_parser.add_argument("issue")
    page_actions = pages_parser.add_subparsers(dest="action", required=True)
    page_actions.add_parser("show", help="List pages in order")
    editorial_parser = page_actions.add_parser("add-editorial", help="Insert an editorial page first")
    editorial_parser.add_argument("--title", required=True)
    editorial_parser.add_argument("--content", default="")
    page_actions.add_parser("add-toc", help="Insert a table of contents snapshot as page 2")
    add_sub_parser = page_actions.add_parser("add-submission", help="Append a submission page")
    add_sub_parser.add_argument("submission")
    move_parser = page_actions.add_parser("move", help="Swap a page with its neighbour")
    move_parser.add_argument("page", type=int, help="Page number")
    move_parser.add_argument("direction", choices=["up", "down"])
    remove_parser = page_actions.add_parser("remove", help="Remove a page")
    remove_parser.add_argument("page", type=int, help="Page number")
    pages_parser.set_defaults(handler=cmd_pages)

    publish_parser = subparsers.add_parser(
        "publish",
        help="Publish an issue",
        description="Publish an issue and mark its accepted submissions as published.",
    )
    publish_parser.add_argument("issue")
    publish_parser.set_defaults(handler=cmd_publish)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    return run_command(args)


if __name__ == "__main__":
    sys.exit(main())
