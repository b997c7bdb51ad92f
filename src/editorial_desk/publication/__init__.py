"""Issue publication."""

from .coordinator import PublicationCoordinator

__all__ = ["PublicationCoordinator"]
