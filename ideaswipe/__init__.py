"""
Idea Swipe - discover ideas one at a time, judge them, and see the feedback.
"""

from ideaswipe.engine import IdeaEngine
from ideaswipe.errors import (
    IdeaSwipeError,
    ValidationError,
    NotFoundError,
    ConflictError,
    StoreUnavailableError,
)
from ideaswipe.models import Idea, IdeaDraft, Interaction, IdeaStats, IdeaWithStats

__version__ = "1.0.0"

__all__ = [
    "IdeaEngine",
    "IdeaSwipeError",
    "ValidationError",
    "NotFoundError",
    "ConflictError",
    "StoreUnavailableError",
    "Idea",
    "IdeaDraft",
    "Interaction",
    "IdeaStats",
    "IdeaWithStats",
]
