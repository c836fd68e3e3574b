"""
Data models module.

Defines data structures for ideas, interactions, and feedback statistics.
"""

from ideaswipe.models.idea import (
    Idea,
    IdeaDraft,
    MAX_TITLE_LENGTH,
    MIN_DESCRIPTION_LENGTH,
    normalize_tags,
    sort_newest_first,
)
from ideaswipe.models.interaction import (
    Interaction,
    MIN_RATING,
    MAX_RATING,
    validate_rating,
    validate_judgment,
)
from ideaswipe.models.stats import IdeaStats, IdeaWithStats

__all__ = [
    "Idea",
    "IdeaDraft",
    "MAX_TITLE_LENGTH",
    "MIN_DESCRIPTION_LENGTH",
    "normalize_tags",
    "sort_newest_first",
    "Interaction",
    "MIN_RATING",
    "MAX_RATING",
    "validate_rating",
    "validate_judgment",
    "IdeaStats",
    "IdeaWithStats",
]
