"""Incoming file upload."""

from pathlib import Path

from pydantic import BaseModel


class UploadFile(BaseModel):
    """A file offered for attachment, before it reaches blob storage.

    Attributes:
        file_name: Original file name
        content_type: Declared MIME type
        data: Raw file bytes
    """

    file_name: str
    content_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def extension(self) -> str:
        return Path(self.file_name).suffix.lstrip(".").lower()

    @classmethod
    def from_path(cls, path: Path, content_type: str) -> "UploadFile":
        return cls(file_name=path.name, content_type=content_type, data=path.read_bytes())
