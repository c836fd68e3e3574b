"""
Feed selection for Idea Swipe.

The feed of a user is every idea they have not judged yet, newest first.
It is a stateless read composed from the two stores; the set subtraction
happens inside the idea store so backends can push it into their query.
"""

import logging
from typing import List

from ideaswipe.models import Idea
from ideaswipe.storage.base import IdeaStore, InteractionStore

logger = logging.getLogger(__name__)


class FeedSelector:
    """
    Produces the ordered set of ideas a user has not yet judged.

    Usage:
        selector = FeedSelector(idea_store, interaction_store)
        ideas = selector.get_feed("user-123")
    """

    def __init__(self, idea_store: IdeaStore, interaction_store: InteractionStore):
        self.idea_store = idea_store
        self.interaction_store = interaction_store

    def get_feed(self, user_id: str) -> List[Idea]:
        """
        Return the ideas user_id has not judged, newest first.

        Authentication is the caller's job; user_id is used as given.
        """
        judged = self.interaction_store.get_idea_ids_for_user(user_id)
        feed = self.idea_store.list_excluding(judged)
        logger.debug("Feed for %s: %d ideas (%d already judged)", user_id, len(feed), len(judged))
        return feed
