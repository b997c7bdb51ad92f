"""Upload validation: MIME allow-lists and size ceilings."""

from typing import Literal

from editorial_desk.exceptions import FileTooLargeError, UnsupportedTypeError
from schemas import UploadFile

UploadKind = Literal["document", "image"]

ALLOWED_DOCUMENT_TYPES = frozenset(
    {
        "application/pdf",
        "application/msword",
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        "text/plain",
    }
)

ALLOWED_IMAGE_TYPES = frozenset(
    {
        "image/jpeg",
        "image/png",
        "image/gif",
        "image/webp",
    }
)

MAX_DOCUMENT_SIZE = 10 * 1024 * 1024
MAX_IMAGE_SIZE = 5 * 1024 * 1024


def format_file_size(size: int) -> str:
    """Format a byte count for messages.

    Examples:
        >>> format_file_size(0)
        '0 Bytes'
        >>> format_file_size(12 * 1024 * 1024)
        '12 MB'
        >>> format_file_size(1536)
        '1.5 KB'
    """
    if size <= 0:
        return "0 Bytes"
    value = float(size)
    for unit in ("Bytes", "KB", "MB"):
        if value < 1024:
            return f"{round(value, 2):g} {unit}"
        value /= 1024
    return f"{round(value, 2):g} GB"


def upload_kind(content_type: str) -> UploadKind:
    """Classify a MIME type against the allow-lists.

    Raises:
        UnsupportedTypeError: If the type is on neither list
    """
    normalized = content_type.split(";")[0].strip().lower()
    if normalized in ALLOWED_IMAGE_TYPES:
        return "image"
    if normalized in ALLOWED_DOCUMENT_TYPES:
        return "document"
    raise UnsupportedTypeError(
        f"File type {content_type!r} is not supported. "
        "Use PDF, Word, plain text, JPEG, PNG, GIF or WebP.",
        content_type=content_type,
    )


def validate_upload(file: UploadFile) -> UploadKind:
    """Check an upload's type and size before it reaches storage.

    Returns:
        "image" or "document"

    Raises:
        UnsupportedTypeError: If the MIME type is not allowed
        FileTooLargeError: If the file exceeds the ceiling for its kind
    """
    kind = upload_kind(file.content_type)
    limit = MAX_IMAGE_SIZE if kind == "image" else MAX_DOCUMENT_SIZE
    if file.size > limit:
        raise FileTooLargeError(
            f"{file.file_name} is {format_file_size(file.size)}; "
            f"{kind}s must be {format_file_size(limit)} or smaller",
            size=file.size,
            limit=limit,
        )
    return kind
