"""Contributor correspondence."""

from .correspondent import Correspondent, OutboxCorrespondent
from .renderer import CorrespondenceRenderer

__all__ = ["Correspondent", "CorrespondenceRenderer", "OutboxCorrespondent"]
