"""Issue page assembly."""

from .page_assembler import PageAssembler

__all__ = ["PageAssembler"]
