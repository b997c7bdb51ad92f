"""Blob storage client for uploaded submission files."""

import logging

from editorial_desk.attachments.blob_storage import BlobStorage
from schemas import UploadFile

from .client import Client
from .exceptions import ValidationError

logger = logging.getLogger(__name__)


class StorageClient(BlobStorage):
    """Uploads files through the backend's upload endpoint.

    Images and documents go to separate buckets, chosen by the ``type``
    form field. Requests are made through a wrapped ``Client`` because the
    storage ``delete(url)`` operation would otherwise shadow the HTTP helper
    of the same name.

    Example:
        with StorageClient({"base_url": "https://example.org/api"}) as storage:
            url = storage.upload(UploadFile.from_path(path, "application/pdf"))
    """

    UPLOAD_PATH = "/upload-file"
    DELETE_PATH = "/delete-file"

    def __init__(self, config: dict):
        self.http = Client(config)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    def close(self) -> None:
        self.http.close()

    def upload(self, file: UploadFile) -> str:
        kind = "image" if file.content_type.startswith("image/") else "document"
        response = self.http.post(
            self.UPLOAD_PATH,
            files={"file": (file.file_name, file.data, file.content_type)},
            data={"type": kind},
        )
        data = response.json()
        url = data.get("url")
        if not url:
            raise ValidationError(f"Upload of {file.file_name} returned no URL")
        logger.info(f"Uploaded {file.file_name} ({file.size} bytes) to {data.get('path', url)}")
        return url

    def delete(self, url: str) -> None:
        self.http.post(self.DELETE_PATH, json={"url": url})
        logger.info(f"Requested deletion of {url}")
