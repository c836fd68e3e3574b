"""
Idea Swipe Engine - the single entry point for the core.

This module wires the pieces together:

    IdeaStore ──┐
                ├── FeedSelector ──> get_feed
    InteractionStore ──> record_interaction
                └── aggregate ─────> get_stats

Operations:
1. submit_idea: validate and store a new idea
2. get_feed: ideas the user has not judged yet, newest first
3. record_interaction: atomic upsert of the user's judgment on an idea
4. get_stats: feedback statistics, recomputed on every call

Design principles:
- Dependency injection: stores are passed in, never looked up globally
- Fail fast: validation errors are raised before any store write
- No retries: store failures propagate so the caller decides
"""

import logging
import sqlite3
from contextlib import contextmanager
from typing import Iterator, List, Optional, Tuple, Union

from ideaswipe.errors import IdeaSwipeError, NotFoundError, StoreUnavailableError
from ideaswipe.feed import FeedSelector
from ideaswipe.models import (
    Idea,
    IdeaDraft,
    IdeaStats,
    IdeaWithStats,
    Interaction,
    validate_judgment,
)
from ideaswipe.stats import aggregate
from ideaswipe.storage.base import IdeaStore, InteractionStore, Storage

logger = logging.getLogger(__name__)


@contextmanager
def translate_store_errors(operation: str) -> Iterator[None]:
    """
    Map raw backend failures onto StoreUnavailableError.

    Errors already in the Idea Swipe taxonomy pass through unchanged.
    requests exceptions are OSError subclasses and are covered here too.
    """
    try:
        yield
    except IdeaSwipeError:
        raise
    except (OSError, sqlite3.Error) as e:
        logger.error("%s failed: %s: %s", operation, type(e).__name__, e)
        raise StoreUnavailableError(f"{operation} failed: {e}") from e


class IdeaEngine:
    """
    Facade over the idea store, interaction store, feed selector and aggregator.

    Usage:
        storage = SQLiteStorage("ideas.db")
        engine = IdeaEngine(storage, storage)
        idea = engine.submit_idea(IdeaDraft(...))
        engine.record_interaction("user-1", idea.id, swipe=True, rating=8)
        print(engine.get_stats(idea.id).accept_percentage)
    """

    def __init__(self, idea_store: IdeaStore, interaction_store: InteractionStore):
        """
        Initialize the engine.

        Args:
            idea_store: Where ideas are created and listed.
            interaction_store: Where judgments are upserted and read.
        """
        self.idea_store = idea_store
        self.interaction_store = interaction_store
        self.feed_selector = FeedSelector(idea_store, interaction_store)

    @classmethod
    def from_storage(cls, storage: Storage) -> "IdeaEngine":
        """Build an engine on a backend that implements both stores."""
        return cls(storage, storage)

    # =========================================================================
    # Core operations
    # =========================================================================

    def submit_idea(self, draft: Union[IdeaDraft, dict]) -> Idea:
        """
        Validate and store a new idea.

        Args:
            draft: An IdeaDraft, or a payload dict with the draft's fields.

        Returns:
            The stored Idea with id and created_at assigned.

        Raises:
            ValidationError: If any field is invalid. Nothing is stored.
        """
        if not isinstance(draft, IdeaDraft):
            draft = IdeaDraft.from_dict(draft)

        with translate_store_errors("submit_idea"):
            idea = self.idea_store.create_idea(draft)

        logger.info("Idea %s submitted by %s", idea.id, idea.author_id)
        return idea

    def get_feed(self, user_id: str) -> List[Idea]:
        """Return the ideas user_id has not judged yet, newest first."""
        with translate_store_errors("get_feed"):
            return self.feed_selector.get_feed(user_id)

    def record_interaction(
        self,
        user_id: str,
        idea_id: str,
        swipe: bool,
        rating: Optional[int] = None,
    ) -> Interaction:
        """
        Record a user's judgment on an idea.

        Creates the interaction on the first judgment and overwrites it on
        later ones. A judgment without a rating keeps any earlier rating.
        Safe to retry with the same arguments.

        Raises:
            ValidationError: Bad ids, non-boolean swipe, or rating outside [1, 10].
            NotFoundError: idea_id does not reference an existing idea.
            StoreUnavailableError: The store could not be reached.
        """
        validate_judgment(user_id, idea_id, swipe, rating)

        with translate_store_errors("record_interaction"):
            interaction = self.interaction_store.upsert_interaction(
                user_id, idea_id, swipe, rating
            )

        logger.info(
            "Recorded %s from %s on idea %s (rating=%s)",
            "accept" if interaction.swipe else "reject",
            user_id, idea_id, interaction.rating,
        )
        return interaction

    def get_stats(self, idea_id: str) -> IdeaStats:
        """
        Compute feedback statistics for an idea from its current interactions.

        An idea nobody has judged (or an unknown id) yields empty stats.
        """
        with translate_store_errors("get_stats"):
            interactions = self.interaction_store.get_all_for_idea(idea_id)
        return aggregate(interactions)

    # =========================================================================
    # Read helpers
    # =========================================================================

    def get_interaction(self, idea_id: str, user_id: str) -> Optional[Interaction]:
        """Return user_id's interaction with idea_id, or None if they have not judged it."""
        with translate_store_errors("get_interaction"):
            return self.interaction_store.get_for_user(idea_id, user_id)

    def get_feedback(self, idea_id: str) -> Tuple[IdeaStats, List[Interaction]]:
        """Return stats and the interactions they were computed from, read once."""
        with translate_store_errors("get_feedback"):
            interactions = self.interaction_store.get_all_for_idea(idea_id)
        return aggregate(interactions), interactions

    def list_ideas(self) -> List[Idea]:
        """Return every idea, newest first."""
        with translate_store_errors("list_ideas"):
            return self.idea_store.list_excluding(set())

    def get_idea(self, idea_id: str) -> IdeaWithStats:
        """
        Return one idea with its feedback statistics.

        Raises:
            NotFoundError: If the idea does not exist.
        """
        with translate_store_errors("get_idea"):
            idea = self.idea_store.get_idea(idea_id)
        if idea is None:
            raise NotFoundError(f"Idea not found: {idea_id}")
        return IdeaWithStats(idea=idea, stats=self.get_stats(idea_id))

    def list_author_ideas(self, author_id: str) -> List[IdeaWithStats]:
        """Return an author's ideas, newest first, each with its feedback statistics."""
        with translate_store_errors("list_author_ideas"):
            ideas = self.idea_store.list_by_author(author_id)
        return [IdeaWithStats(idea=idea, stats=self.get_stats(idea.id)) for idea in ideas]
