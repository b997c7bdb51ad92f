"""Blob storage collaborator interface and a local-directory implementation."""

import logging
import re
import uuid
from abc import ABC, abstractmethod
from pathlib import Path
from urllib.parse import unquote, urlparse

from schemas import UploadFile

logger = logging.getLogger(__name__)


class BlobStorage(ABC):
    """Stores uploaded file bytes and hands back an opaque URL."""

    @abstractmethod
    def upload(self, file: UploadFile) -> str:
        """Store ``file`` and return its URL."""
        pass

    @abstractmethod
    def delete(self, url: str) -> None:
        """Delete the blob behind ``url``; unknown URLs are ignored."""
        pass


def safe_file_name(name: str) -> str:
    """Reduce a user-supplied file name to a filesystem-safe form.

    Examples:
        >>> safe_file_name("My Poem (final).pdf")
        'My_Poem_final_.pdf'
    """
    cleaned = re.sub(r"[^A-Za-z0-9._-]+", "_", Path(name).name).strip("._")
    return cleaned or "upload"


class LocalBlobStorage(BlobStorage):
    """Keep blobs as files under a root directory, addressed by file:// URLs.

    Layout:
        {root}/{images,documents}/{uuid}-{file_name}
    """

    def __init__(self, root: Path):
        self.root = Path(root).resolve()
        self.root.mkdir(parents=True, exist_ok=True)

    def __repr__(self) -> str:
        return f"LocalBlobStorage({self.root})"

    def upload(self, file: UploadFile) -> str:
        bucket = "images" if file.content_type.startswith("image/") else "documents"
        destination = self.root / bucket / f"{uuid.uuid4().hex}-{safe_file_name(file.file_name)}"
        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_bytes(file.data)
        logger.debug(f"Stored {file.file_name} at {destination}")
        return destination.as_uri()

    def path_for(self, url: str) -> Path | None:
        """Map a URL back to a path under the root, or None if it is foreign."""
        parsed = urlparse(url)
        if parsed.scheme != "file":
            return None
        path = Path(unquote(parsed.path)).resolve()
        if not path.is_relative_to(self.root):
            return None
        return path

    def delete(self, url: str) -> None:
        path = self.path_for(url)
        if path is None:
            logger.debug(f"Not a local blob, nothing to delete: {url}")
            return
        path.unlink(missing_ok=True)
        logger.debug(f"Deleted blob {path}")
