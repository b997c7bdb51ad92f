"""Editorial desk: submission lifecycle and issue assembly."""

__version__ = "0.1.0"
