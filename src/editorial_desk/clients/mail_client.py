"""Correspondence client delivering mail through the backend."""

import logging

from editorial_desk.correspondence.correspondent import Correspondent

from .client import Client

logger = logging.getLogger(__name__)


class MailClient(Client, Correspondent):
    """Sends contributor correspondence via the backend's email endpoints."""

    def send(
        self,
        recipient: str,
        subject: str,
        body: str,
        submission_id: str | None = None,
    ) -> None:
        payload = {"to": recipient, "subject": subject, "message": body}
        path = f"/submissions/{submission_id}/send-email" if submission_id else "/send-email"
        self.post(path, json=payload)
        logger.info(f"Sent '{subject}' to {recipient}")
