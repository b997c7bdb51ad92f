"""Record stores for the editorial desk."""

from .json_store import JsonFileStore
from .store import RecordStore, filter_submissions

__all__ = ["JsonFileStore", "RecordStore", "filter_submissions"]
