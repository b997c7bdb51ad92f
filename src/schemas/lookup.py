"""Lookup tables for the open sets of content types and contributor statuses."""

from .base import RecordModel


class LookupEntry(RecordModel):
    """A value/label pair managed by editors.

    Attributes:
        id: Entry identifier
        value: Stored value (e.g. "short-story")
        label: Human-readable label (e.g. "Short Story")
        description: Optional explanation shown to contributors
        order: Sort position
    """

    id: str
    value: str
    label: str
    description: str = ""
    order: int = 0


DEFAULT_CONTENT_TYPES: list[LookupEntry] = [
    LookupEntry(id="type-1", value="writing", label="Writing", order=1),
    LookupEntry(id="type-2", value="poem", label="Poem", order=2),
    LookupEntry(id="type-3", value="photography", label="Photography", order=3),
    LookupEntry(id="type-4", value="visual-art", label="Visual Art", order=4),
    LookupEntry(id="type-5", value="crafts", label="Crafts", order=5),
    LookupEntry(id="type-6", value="short-story", label="Short Story", order=6),
    LookupEntry(id="type-7", value="reflection", label="Reflection", order=7),
    LookupEntry(id="type-8", value="news", label="News", order=8),
    LookupEntry(id="type-9", value="opinion", label="Opinion", order=9),
]

DEFAULT_CONTRIBUTOR_STATUSES: list[LookupEntry] = [
    LookupEntry(
        id="status-1",
        value="student",
        label="Student",
        description="Current student contributor",
        order=1,
    ),
    LookupEntry(
        id="status-2",
        value="teacher",
        label="Teacher",
        description="Faculty member contributor",
        order=2,
    ),
    LookupEntry(
        id="status-3",
        value="hi-staff",
        label="HI Staff",
        description="Magazine staff member",
        order=3,
    ),
    LookupEntry(
        id="status-4",
        value="guest",
        label="Guest",
        description="Guest contributor",
        order=4,
    ),
]
