"""Acting user supplied by the identity collaborator."""

from typing import Literal

from .base import RecordModel

Role = Literal["editor", "contributor"]


class Actor(RecordModel):
    """The authenticated user on whose behalf an operation runs."""

    email: str
    name: str = ""
    role: Role = "contributor"

    @property
    def is_editor(self) -> bool:
        return self.role == "editor"
