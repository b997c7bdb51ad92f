"""Open value sets for content types and contributor statuses.

Editors manage these as lookup tables. The core only requires values to be
non-empty; values missing from the tables are kept as opaque strings.
"""

import logging

from editorial_desk.stores.store import RecordStore

logger = logging.getLogger(__name__)

# Content types whose legacy file_url holds a picture rather than a document
IMAGE_LIKE_TYPES = frozenset({"photography", "visual-art", "crafts", "photo", "art"})


def is_image_like(content_type: str) -> bool:
    return content_type.strip().lower() in IMAGE_LIKE_TYPES


def normalize_open_value(field: str, value: str | None) -> str:
    """Strip a type/status value and reject blanks.

    Raises:
        ValueError: If the value is missing or whitespace only
    """
    if value is None or not value.strip():
        raise ValueError(f"{field} must be a non-empty string")
    return value.strip()


class LookupTables:
    """Read access to the editor-managed lookup tables."""

    def __init__(self, store: RecordStore):
        self.store = store

    def content_types(self) -> list[str]:
        return [entry.value for entry in self.store.list_lookup("content-types")]

    def contributor_statuses(self) -> list[str]:
        return [entry.value for entry in self.store.list_lookup("contributor-statuses")]

    def label_for(self, kind: str, value: str) -> str:
        """Return the display label for ``value``, or the value itself."""
        for entry in self.store.list_lookup(kind):
            if entry.value == value:
                return entry.label
        logger.debug(f"No {kind} label for {value!r}; using raw value")
        return value
