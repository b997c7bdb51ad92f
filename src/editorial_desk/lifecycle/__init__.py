"""Submission lifecycle."""

from .engine import LifecycleEngine, TransitionResult
from .transitions import TRANSITIONS, correspondence_template, is_allowed

__all__ = [
    "LifecycleEngine",
    "TransitionResult",
    "TRANSITIONS",
    "correspondence_template",
    "is_allowed",
]
