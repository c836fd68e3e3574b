"""
Idea data model for Idea Swipe.

Defines the IdeaDraft submitted by an author and the stored Idea record
that users swipe on in their feed.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional
import uuid

from ideaswipe.errors import ValidationError
from ideaswipe.models.timestamps import parse_iso, to_iso, utc_now


# Field limits for submitted ideas
MAX_TITLE_LENGTH: int = 100
MIN_DESCRIPTION_LENGTH: int = 20


def normalize_tags(tags) -> List[str]:
    """
    Trim, lower-case and deduplicate tags, keeping first-seen order.

    Blank tags are dropped.

    Args:
        tags: Iterable of tag strings.

    Returns:
        List of normalized, unique tags (may be empty).
    """
    normalized: List[str] = []
    for tag in tags:
        if not isinstance(tag, str):
            continue
        tag = tag.strip().lower()
        if tag and tag not in normalized:
            normalized.append(tag)
    return normalized


@dataclass
class IdeaDraft:
    """
    An idea as submitted by its author, before it has an id or timestamp.

    Validation runs on construction so an invalid draft can never reach a
    store. Tags are normalized in place.

    Attributes:
        title: Short name of the idea (1 to 100 characters).
        description: Pitch text (at least 20 characters).
        tags: Topic tags, at least one after normalization.
        author_id: Identifier of the submitting user.
        image_ref: Optional reference returned by the blob store.
    """

    title: str
    description: str
    tags: List[str]
    author_id: str
    image_ref: Optional[str] = None

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """
        Validate and normalize all fields.

        Raises:
            ValidationError: Listing every rule that failed.
        """
        errors = []

        if not isinstance(self.title, str) or not self.title.strip():
            errors.append("title is required and cannot be empty")
        else:
            self.title = self.title.strip()
            if len(self.title) > MAX_TITLE_LENGTH:
                errors.append(
                    f"title must be at most {MAX_TITLE_LENGTH} characters, got {len(self.title)}"
                )

        if not isinstance(self.description, str):
            errors.append("description is required")
        else:
            self.description = self.description.strip()
            if len(self.description) < MIN_DESCRIPTION_LENGTH:
                errors.append(
                    f"description must be at least {MIN_DESCRIPTION_LENGTH} characters, "
                    f"got {len(self.description)}"
                )

        if isinstance(self.tags, str) or not isinstance(self.tags, (list, tuple, set, frozenset)):
            errors.append("tags must be a list of strings")
        else:
            self.tags = normalize_tags(self.tags)
            if not self.tags:
                errors.append("at least one non-empty tag is required")

        if not isinstance(self.author_id, str) or not self.author_id.strip():
            errors.append("author_id is required and cannot be empty")

        if self.image_ref is not None and not isinstance(self.image_ref, str):
            errors.append("image_ref must be a string")
        elif self.image_ref is not None and not self.image_ref.strip():
            self.image_ref = None

        if errors:
            raise ValidationError(f"Idea validation failed: {'; '.join(errors)}", errors)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "IdeaDraft":
        """
        Build a draft from a request payload.

        Missing keys become validation failures rather than TypeErrors.
        """
        if not isinstance(data, dict):
            raise ValidationError("Idea payload must be a JSON object")
        return cls(
            title=data.get("title"),
            description=data.get("description"),
            tags=data.get("tags"),
            author_id=data.get("author_id"),
            image_ref=data.get("image_ref"),
        )


@dataclass
class Idea:
    """
    A stored idea posting.

    Attributes:
        id: Unique identifier (UUID string).
        title: Short name of the idea.
        description: Pitch text.
        tags: Normalized, unique topic tags.
        author_id: Identifier of the author.
        image_ref: Optional blob store reference.
        created_at: When the idea was stored (UTC).
    """

    title: str
    description: str
    tags: List[str]
    author_id: str
    image_ref: Optional[str] = None
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    created_at: datetime = field(default_factory=utc_now)

    @classmethod
    def from_draft(cls, draft: IdeaDraft, created_at: Optional[datetime] = None) -> "Idea":
        """Create a new Idea from a validated draft, assigning id and timestamp."""
        return cls(
            title=draft.title,
            description=draft.description,
            tags=list(draft.tags),
            author_id=draft.author_id,
            image_ref=draft.image_ref,
            created_at=created_at or utc_now(),
        )

    def to_dict(self) -> dict:
        """
        Convert Idea to a plain dictionary for storage/serialization.

        The created_at timestamp is converted to an ISO format string.
        """
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "tags": list(self.tags),
            "author_id": self.author_id,
            "image_ref": self.image_ref,
            "created_at": to_iso(self.created_at),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Idea":
        """Create an Idea from a dictionary, parsing created_at back to a datetime."""
        data = data.copy()
        if data.get("created_at") is not None:
            data["created_at"] = parse_iso(data["created_at"])
        else:
            data.pop("created_at", None)
        return cls(**data)

    def __str__(self) -> str:
        return f"{self.title} [{', '.join(self.tags)}]"

    def __repr__(self) -> str:
        return f"Idea(id={self.id!r}, title={self.title!r}, author_id={self.author_id!r})"


def sort_newest_first(ideas: List[Idea]) -> List[Idea]:
    """Order ideas by created_at descending, ties broken by id ascending."""
    # Two stable passes: secondary key first, then primary.
    by_id = sorted(ideas, key=lambda idea: idea.id)
    return sorted(by_id, key=lambda idea: idea.created_at, reverse=True)
