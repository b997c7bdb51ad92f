"""Submission document attachments."""

from .attachment_set import AttachmentSet
from .blob_storage import BlobStorage, LocalBlobStorage
from .validation import (
    ALLOWED_DOCUMENT_TYPES,
    ALLOWED_IMAGE_TYPES,
    MAX_DOCUMENT_SIZE,
    MAX_IMAGE_SIZE,
    format_file_size,
    validate_upload,
)

__all__ = [
    "AttachmentSet",
    "BlobStorage",
    "LocalBlobStorage",
    "ALLOWED_DOCUMENT_TYPES",
    "ALLOWED_IMAGE_TYPES",
    "MAX_DOCUMENT_SIZE",
    "MAX_IMAGE_SIZE",
    "format_file_size",
    "validate_upload",
]
