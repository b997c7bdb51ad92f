"""Document attachments of a submission.

Files are validated before upload and recorded only after blob storage
returns a URL, so a failed upload never leaves a partial attachment.
"""

import logging
import uuid

from editorial_desk.access import can_edit_content
from editorial_desk.exceptions import (
    InvalidTransitionError,
    PermissionDeniedError,
    RecordNotFoundError,
)
from editorial_desk.stores.store import RecordStore
from schemas import Actor, DocumentAttachment, DocumentMetadata, Submission, UploadFile

from .blob_storage import BlobStorage
from .pdf_pages import measure_pages
from .validation import validate_upload

logger = logging.getLogger(__name__)

METADATA_FIELDS = frozenset(DocumentMetadata.model_fields)


class AttachmentSet:
    """Attach, detach and describe a submission's documents.

    Example:
        attachments = AttachmentSet(store, blob_storage, actor)
        document = attachments.attach(submission.id, UploadFile.from_path(path, "application/pdf"))
    """

    def __init__(self, store: RecordStore, blob_storage: BlobStorage, actor: Actor):
        self.store = store
        self.blob_storage = blob_storage
        self.actor = actor

    def _editable(self, submission_id: str) -> Submission:
        submission = self.store.get_submission(submission_id)
        if submission.is_trashed:
            raise InvalidTransitionError(
                f"Submission {submission_id} is in the trash", current=submission.status
            )
        if not can_edit_content(self.actor, submission):
            raise PermissionDeniedError(
                f"{self.actor.email} may not change documents of submission {submission_id}"
            )
        return submission

    def _document(self, submission: Submission, document_id: str) -> DocumentAttachment:
        document = submission.find_document(document_id)
        if document is None:
            raise RecordNotFoundError("Document", document_id)
        return document

    def attach(
        self,
        submission_id: str,
        file: UploadFile,
        metadata: DocumentMetadata | None = None,
    ) -> DocumentAttachment:
        """Validate, upload and append a document.

        Raises:
            UnsupportedTypeError: If the MIME type is not allowed
            FileTooLargeError: If the file is over the limit for its kind
        """
        submission = self._editable(submission_id)
        validate_upload(file)
        page_count = measure_pages(file)

        url = self.blob_storage.upload(file)
        document = DocumentAttachment(
            id=str(uuid.uuid4()),
            url=url,
            file_name=file.file_name,
            type=file.content_type,
            size=file.size,
            page_count=page_count,
            metadata=metadata,
        )
        try:
            self.store.update_submission(
                submission.model_copy(update={"documents": [*submission.documents, document]})
            )
        except Exception:
            logger.warning(f"Recording {file.file_name} failed; removing uploaded blob {url}")
            self.blob_storage.delete(url)
            raise

        logger.info(f"Attached {file.file_name} to submission {submission_id}")
        return document

    def detach(self, submission_id: str, document_id: str) -> DocumentAttachment:
        """Remove a document and delete its blob.

        Raises:
            RecordNotFoundError: If the document id is not on the submission
        """
        submission = self._editable(submission_id)
        document = self._document(submission, document_id)

        remaining = [d for d in submission.documents if d.id != document_id]
        self.store.update_submission(submission.model_copy(update={"documents": remaining}))
        self.blob_storage.delete(document.url)

        logger.info(f"Detached {document.file_name} from submission {submission_id}")
        return document

    def update_metadata(self, submission_id: str, document_id: str, **partial) -> DocumentAttachment:
        """Merge ``partial`` into a document's metadata.

        Only title, description and page_number can be set; the file
        reference fields are never touched.
        """
        unknown = set(partial) - METADATA_FIELDS
        if unknown:
            raise ValueError(f"Unknown metadata fields: {', '.join(sorted(unknown))}")

        submission = self._editable(submission_id)
        document = self._document(submission, document_id)

        current = document.metadata or DocumentMetadata()
        updated_document = document.model_copy(
            update={"metadata": current.model_copy(update=partial)}
        )
        documents = [
            updated_document if d.id == document_id else d for d in submission.documents
        ]
        self.store.update_submission(submission.model_copy(update={"documents": documents}))
        return updated_document

    @staticmethod
    def page_sequence(submission: Submission) -> list[tuple[DocumentAttachment, int]]:
        """Flatten documents into (document, page index) pairs in reading order.

        Documents with an unknown page count contribute one page.
        """
        sequence = []
        for document in submission.documents:
            for page_index in range(document.page_count or 1):
                sequence.append((document, page_index))
        return sequence
