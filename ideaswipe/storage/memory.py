"""
In-memory storage backend for Idea Swipe.

Use this for tests and local development. Data is lost when the process ends.
"""

import logging
from datetime import datetime
from threading import Lock
from typing import Callable, Dict, Iterable, List, Optional, Set, Tuple

from ideaswipe.errors import NotFoundError
from ideaswipe.models import (
    Idea,
    IdeaDraft,
    Interaction,
    sort_newest_first,
    validate_judgment,
)
from ideaswipe.models.timestamps import utc_now
from ideaswipe.storage.base import Storage

logger = logging.getLogger(__name__)


class MemoryStorage(Storage):
    """
    Dictionary-backed storage.

    A single lock covers each whole operation, so an upsert's existence
    check and write happen atomically with respect to other threads.

    Args:
        clock: Callable returning the current time. Defaults to UTC now;
            tests inject a fixed sequence to control ordering.
    """

    def __init__(self, clock: Optional[Callable[[], datetime]] = None):
        self._clock = clock or utc_now
        self._ideas: Dict[str, Idea] = {}
        self._interactions: Dict[Tuple[str, str], Interaction] = {}
        self._lock = Lock()

    @property
    def name(self) -> str:
        return "memory"

    # =========================================================================
    # IdeaStore
    # =========================================================================

    def create_idea(self, draft: IdeaDraft) -> Idea:
        idea = Idea.from_draft(draft, created_at=self._clock())
        with self._lock:
            self._ideas[idea.id] = _copy_idea(idea)
        logger.debug("Stored idea %s (memory)", idea.id)
        return idea

    def list_excluding(self, excluded_ids: Iterable[str]) -> List[Idea]:
        excluded = set(excluded_ids)
        with self._lock:
            ideas = [_copy_idea(idea) for idea in self._ideas.values() if idea.id not in excluded]
        return sort_newest_first(ideas)

    def list_by_author(self, author_id: str) -> List[Idea]:
        with self._lock:
            ideas = [_copy_idea(idea) for idea in self._ideas.values() if idea.author_id == author_id]
        return sort_newest_first(ideas)

    def get_idea(self, idea_id: str) -> Optional[Idea]:
        with self._lock:
            found = self._ideas.get(idea_id)
        return _copy_idea(found) if found else None

    # =========================================================================
    # InteractionStore
    # =========================================================================

    def upsert_interaction(
        self,
        user_id: str,
        idea_id: str,
        swipe: bool,
        rating: Optional[int] = None,
    ) -> Interaction:
        validate_judgment(user_id, idea_id, swipe, rating)

        with self._lock:
            if idea_id not in self._ideas:
                raise NotFoundError(f"Idea not found: {idea_id}")

            existing = self._interactions.get((user_id, idea_id))

            if existing is None:
                stored = Interaction(
                    user_id=user_id,
                    idea_id=idea_id,
                    swipe=swipe,
                    rating=rating,
                    created_at=self._clock(),
                )
            else:
                stored = Interaction(
                    user_id=user_id,
                    idea_id=idea_id,
                    swipe=swipe,
                    rating=rating if rating is not None else existing.rating,
                    id=existing.id,
                    created_at=existing.created_at,
                )

            self._interactions[stored.pair_key] = stored

        logger.debug(
            "%s interaction %s for idea %s (memory)",
            "Inserted" if existing is None else "Updated", stored.id, idea_id,
        )
        return _copy(stored)

    def get_for_user(self, idea_id: str, user_id: str) -> Optional[Interaction]:
        with self._lock:
            found = self._interactions.get((user_id, idea_id))
        return _copy(found) if found else None

    def get_all_for_idea(self, idea_id: str) -> List[Interaction]:
        with self._lock:
            return [
                _copy(interaction)
                for (_, pair_idea_id), interaction in self._interactions.items()
                if pair_idea_id == idea_id
            ]

    def get_idea_ids_for_user(self, user_id: str) -> Set[str]:
        with self._lock:
            return {idea_id for (pair_user_id, idea_id) in self._interactions if pair_user_id == user_id}

    # =========================================================================
    # Test helpers
    # =========================================================================

    def clear(self) -> None:
        """Clear all records (for testing)."""
        with self._lock:
            self._ideas.clear()
            self._interactions.clear()


# Records cross the store boundary as serialized copies, never the stored instances.

def _copy_idea(idea: Idea) -> Idea:
    return Idea.from_dict(idea.to_dict())


def _copy(interaction: Interaction) -> Interaction:
    return Interaction.from_dict(interaction.to_dict())
