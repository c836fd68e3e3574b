"""
Interaction data model for Idea Swipe.

An Interaction is one user's judgment on one idea: a swipe (accept or
reject) plus an optional 1-10 rating. Each (user_id, idea_id) pair has at
most one Interaction; later judgments overwrite it in place.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional
import uuid

from ideaswipe.errors import ValidationError
from ideaswipe.models.timestamps import parse_iso, to_iso, utc_now


MIN_RATING: int = 1
MAX_RATING: int = 10


def validate_rating(rating: Any) -> Optional[int]:
    """
    Check an optional rating value.

    Args:
        rating: None, or an integer in [MIN_RATING, MAX_RATING].

    Returns:
        The rating unchanged.

    Raises:
        ValidationError: If the rating is not an integer or is out of range.
    """
    if rating is None:
        return None
    # bool is an int subclass; True must not count as a rating of 1
    if isinstance(rating, bool) or not isinstance(rating, int):
        raise ValidationError(f"rating must be an integer, got {rating!r}")
    if not (MIN_RATING <= rating <= MAX_RATING):
        raise ValidationError(
            f"rating must be between {MIN_RATING} and {MAX_RATING}, got {rating}"
        )
    return rating


def validate_judgment(user_id: Any, idea_id: Any, swipe: Any, rating: Any) -> None:
    """
    Validate the arguments of an interaction upsert before any store access.

    Raises:
        ValidationError: Listing every failed rule.
    """
    errors = []

    if not isinstance(user_id, str) or not user_id.strip():
        errors.append("user_id is required and cannot be empty")

    if not isinstance(idea_id, str) or not idea_id.strip():
        errors.append("idea_id is required and cannot be empty")

    if not isinstance(swipe, bool):
        errors.append(f"swipe must be a boolean, got {swipe!r}")

    try:
        validate_rating(rating)
    except ValidationError as e:
        errors.extend(e.errors)

    if errors:
        raise ValidationError(f"Interaction validation failed: {'; '.join(errors)}", errors)


@dataclass
class Interaction:
    """
    A user's recorded judgment on an idea.

    Attributes:
        user_id: Identifier of the judging user.
        idea_id: Identifier of the judged idea.
        swipe: True if the user would use the idea.
        rating: Optional desirability rating (1-10).
        id: Unique identifier of this record.
        created_at: When the first judgment for the pair was stored (UTC).
    """

    user_id: str
    idea_id: str
    swipe: bool
    rating: Optional[int] = None
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    created_at: datetime = field(default_factory=utc_now)

    @property
    def pair_key(self) -> tuple:
        """The uniqueness key for this interaction."""
        return (self.user_id, self.idea_id)

    def to_dict(self) -> dict:
        """Convert Interaction to a plain dictionary with an ISO timestamp."""
        return {
            "id": self.id,
            "user_id": self.user_id,
            "idea_id": self.idea_id,
            "swipe": self.swipe,
            "rating": self.rating,
            "created_at": to_iso(self.created_at),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Interaction":
        """Create an Interaction from a dictionary (e.g., a stored row)."""
        data = data.copy()
        data["swipe"] = bool(data.get("swipe"))
        if data.get("created_at") is not None:
            data["created_at"] = parse_iso(data["created_at"])
        else:
            data.pop("created_at", None)
        return cls(**data)

    def __repr__(self) -> str:
        return (
            f"Interaction(user_id={self.user_id!r}, idea_id={self.idea_id!r}, "
            f"swipe={self.swipe}, rating={self.rating})"
        )
