"""Page counting for uploaded documents."""

import logging

import fitz  # PyMuPDF

from schemas import UploadFile

logger = logging.getLogger(__name__)


def count_pdf_pages(data: bytes) -> int:
    """Count the pages of an in-memory PDF.

    Raises:
        RuntimeError: If PyMuPDF cannot parse the data
    """
    with fitz.open(stream=data, filetype="pdf") as doc:
        return len(doc)


def measure_pages(file: UploadFile) -> int | None:
    """Number of pages an upload contributes, if it can be known.

    Images are a single page and PDFs are measured. Other documents, and
    PDFs that cannot be parsed, are left unknown.
    """
    content_type = file.content_type.split(";")[0].strip().lower()
    if content_type.startswith("image/"):
        return 1
    if content_type != "application/pdf":
        return None
    try:
        page_count = count_pdf_pages(file.data)
    except RuntimeError as e:
        logger.warning(f"Could not read page count of {file.file_name}: {e}")
        return None
    return page_count or None
