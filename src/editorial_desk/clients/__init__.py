"""Network clients for the hosted editorial backend."""

from .backend_client import BackendStore
from .client import Client
from .exceptions import (
    APIError,
    ClientError,
    ConflictError,
    ConnectionError,
    NotFoundError,
    RateLimitError,
    ValidationError,
)
from .mail_client import MailClient
from .storage_client import StorageClient

__all__ = [
    "Client",
    "BackendStore",
    "MailClient",
    "StorageClient",
    "ClientError",
    "ConnectionError",
    "APIError",
    "ConflictError",
    "RateLimitError",
    "NotFoundError",
    "ValidationError",
]
