"""
Base storage abstractions for Idea Swipe.

Defines the abstract interfaces that all storage backends must implement.
This allows swapping between the in-memory store, SQLite, Airtable, etc.

Two interfaces are defined so the engine can be given each one separately:

- IdeaStore: create and list idea postings
- InteractionStore: one judgment per (user, idea) pair, written by upsert

A backend usually implements both, since recording an interaction must
check that the referenced idea exists.
"""

from abc import ABC, abstractmethod
from typing import Iterable, List, Optional, Set

from ideaswipe.models import Idea, IdeaDraft, Interaction


class IdeaStore(ABC):
    """
    Abstract base class for idea persistence.

    All listing methods return ideas newest first (created_at descending),
    with ties broken by id ascending so output is deterministic.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """
        Return the name of this storage backend.

        Used for logging and debugging.
        """
        pass

    @abstractmethod
    def create_idea(self, draft: IdeaDraft) -> Idea:
        """
        Persist a new idea.

        The draft is validated on construction; implementations assign the
        id and created_at timestamp.

        Args:
            draft: A validated IdeaDraft.

        Returns:
            The stored Idea.
        """
        pass

    @abstractmethod
    def list_excluding(self, excluded_ids: Iterable[str]) -> List[Idea]:
        """
        Retrieve every idea whose id is not in excluded_ids.

        No pagination: the full remaining set is returned.

        Args:
            excluded_ids: Idea ids to leave out.

        Returns:
            List of Idea instances, newest first.
        """
        pass

    @abstractmethod
    def list_by_author(self, author_id: str) -> List[Idea]:
        """
        Retrieve all ideas submitted by one author.

        Args:
            author_id: The author's user id.

        Returns:
            List of Idea instances, newest first.
        """
        pass

    @abstractmethod
    def get_idea(self, idea_id: str) -> Optional[Idea]:
        """
        Retrieve a single idea by id.

        Returns:
            Idea if found, None otherwise.
        """
        pass

    def __str__(self) -> str:
        return f"IdeaStore({self.name})"


class InteractionStore(ABC):
    """
    Abstract base class for interaction persistence.

    Implementations must keep at most one row per (user_id, idea_id) and
    must write it with a single atomic insert-or-update, never a separate
    existence check followed by an insert or update.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        pass

    @abstractmethod
    def upsert_interaction(
        self,
        user_id: str,
        idea_id: str,
        swipe: bool,
        rating: Optional[int] = None,
    ) -> Interaction:
        """
        Insert or update the interaction for (user_id, idea_id).

        If no row exists one is inserted. Otherwise swipe is overwritten,
        and rating is overwritten only when a rating is given; a judgment
        without a rating keeps the previously recorded one.

        Calling this repeatedly with the same arguments leaves the same
        final state as calling it once.

        Args:
            user_id: The judging user.
            idea_id: The judged idea.
            swipe: True to accept, False to reject.
            rating: Optional rating in [1, 10].

        Returns:
            The interaction as stored after the write.

        Raises:
            ValidationError: If an argument is invalid (nothing is written).
            NotFoundError: If idea_id does not reference an existing idea.
        """
        pass

    @abstractmethod
    def get_for_user(self, idea_id: str, user_id: str) -> Optional[Interaction]:
        """
        Retrieve the interaction of one user with one idea.

        Returns:
            Interaction if the user has judged the idea, None otherwise.
        """
        pass

    @abstractmethod
    def get_all_for_idea(self, idea_id: str) -> List[Interaction]:
        """
        Retrieve every interaction recorded for an idea.

        Order is unspecified; the result is aggregation input.
        """
        pass

    @abstractmethod
    def get_idea_ids_for_user(self, user_id: str) -> Set[str]:
        """Return the ids of all ideas the user has judged."""
        pass

    def __str__(self) -> str:
        return f"InteractionStore({self.name})"


class Storage(IdeaStore, InteractionStore):
    """
    A backend holding both ideas and interactions.

    Backends that own both tables inherit from this class so they can be
    passed to the engine as both collaborators.
    """

    def close(self) -> None:
        """Release backend resources. Default implementation does nothing."""

    def __str__(self) -> str:
        return f"Storage({self.name})"

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"
