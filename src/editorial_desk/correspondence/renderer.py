"""Render correspondence intents into email messages.

Each template key has a directory under ``templates/`` holding
``subject.txt.j2`` and ``body.txt.j2``. Templates receive the intent's data
plus the publication and team names.
"""

import logging
from pathlib import Path

from jinja2 import Environment, FileSystemLoader

from editorial_desk.audit import AuditTrail
from schemas import CorrespondenceIntent, EmailMessage

from .correspondent import Correspondent
from .filters import FILTERS

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).parent / "templates"
DEFAULT_PUBLICATION_NAME = "Mosaic Magazine HI"
DEFAULT_TEAM_NAME = "The Mosaic Magazine Editorial Team"


class CorrespondenceRenderer:
    """Turn a CorrespondenceIntent into a subject and body, and send it.

    Attributes:
        publication_name: Name of the magazine used in message bodies
        team_name: Signature line
    """

    def __init__(
        self,
        templates_dir: Path | None = None,
        publication_name: str = DEFAULT_PUBLICATION_NAME,
        team_name: str = DEFAULT_TEAM_NAME,
    ):
        self.templates_dir = templates_dir or TEMPLATES_DIR
        self.publication_name = publication_name
        self.team_name = team_name

        self._env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        for name, func in FILTERS.items():
            self._env.filters[name] = func

    def render(self, intent: CorrespondenceIntent) -> EmailMessage:
        """Render the subject and body for ``intent``.

        Raises:
            jinja2.TemplateNotFound: If no templates exist for the key
        """
        context = {
            "title": "",
            "author_name": "",
            "type": "",
            "submission_id": intent.submission_id,
            "editor_notes": "",
            "created_at": None,
            "issue_number": None,
            **intent.data,
            "publication_name": self.publication_name,
            "team_name": self.team_name,
        }
        subject = self._env.get_template(f"{intent.template}/subject.txt.j2").render(context)
        body = self._env.get_template(f"{intent.template}/body.txt.j2").render(context)

        return EmailMessage(
            recipient=intent.recipient,
            subject=" ".join(subject.split()),
            body=body.strip() + "\n",
            submission_id=intent.submission_id,
        )

    def fulfill(
        self,
        intent: CorrespondenceIntent,
        correspondent: Correspondent,
        audit: AuditTrail | None = None,
    ) -> EmailMessage:
        """Render ``intent`` and hand the message to ``correspondent``.

        Delivery errors propagate; a failed send is still recorded in the
        audit trail when one is given.
        """
        message = self.render(intent)
        try:
            correspondent.send(
                message.recipient,
                message.subject,
                message.body,
                submission_id=message.submission_id,
            )
        except Exception as e:
            logger.error(f"Failed to send '{intent.template}' to {intent.recipient}: {e}")
            if audit is not None:
                audit.record(
                    "email_sent",
                    success=False,
                    template=intent.template,
                    submission_id=intent.submission_id,
                    recipient=intent.recipient,
                    error=str(e),
                )
            raise

        if audit is not None:
            audit.record(
                "email_sent",
                template=intent.template,
                submission_id=intent.submission_id,
                recipient=intent.recipient,
            )
        return message
