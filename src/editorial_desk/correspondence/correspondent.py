"""Correspondence collaborator interface and a file-based outbox."""

import logging
import uuid
from abc import ABC, abstractmethod
from pathlib import Path

from editorial_desk.stores.json_store import read_json, write_json_atomic
from schemas import EmailMessage

logger = logging.getLogger(__name__)


class Correspondent(ABC):
    """Delivers outbound mail to contributors."""

    @abstractmethod
    def send(
        self,
        recipient: str,
        subject: str,
        body: str,
        submission_id: str | None = None,
    ) -> None:
        pass


class OutboxCorrespondent(Correspondent):
    """Write each message as a JSON file for a separate mailer to pick up.

    Layout:
        {root}/{timestamp}-{uuid}.json
    """

    def __init__(self, root: Path):
        self.root = Path(root)
        self.root.mkdir(parents=True, exist_ok=True)

    def __repr__(self) -> str:
        return f"OutboxCorrespondent({self.root})"

    def send(
        self,
        recipient: str,
        subject: str,
        body: str,
        submission_id: str | None = None,
    ) -> None:
        message = EmailMessage(
            recipient=recipient,
            subject=subject,
            body=body,
            submission_id=submission_id,
        )
        stamp = message.created_at.strftime("%Y%m%dT%H%M%S%f")
        path = self.root / f"{stamp}-{uuid.uuid4().hex[:8]}.json"
        write_json_atomic(path, message.to_wire())
        logger.info(f"Queued '{subject}' for {recipient} in {path.name}")

    def messages(self) -> list[EmailMessage]:
        """Queued messages, oldest first."""
        return [
            EmailMessage.model_validate(read_json(path))
            for path in sorted(self.root.glob("*.json"))
        ]
