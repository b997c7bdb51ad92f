"""Shared pydantic configuration for record schemas."""

from datetime import datetime, timezone

from pydantic import BaseModel
from pydantic.alias_generators import to_camel


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


class RecordModel(BaseModel):
    """Base model for records exchanged with the hosted backend.

    Attribute names are snake_case in Python; the serialized form uses the
    camelCase names the backend stores (``authorName``, ``issueId``, ...).
    Both spellings are accepted on input.
    """

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
        "extra": "ignore",
    }

    def to_wire(self) -> dict:
        """Dump to a JSON-compatible dict using camelCase keys."""
        return self.model_dump(mode="json", by_alias=True)
