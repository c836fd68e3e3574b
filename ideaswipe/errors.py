"""
Error taxonomy for Idea Swipe.

Every failure the engine reports to callers is one of these classes:

- ValidationError: malformed or out-of-range input, raised before any write
- NotFoundError: reference to an idea that does not exist
- ConflictError: a store constraint violation outside the upsert path
- StoreUnavailableError: transport or I/O failure talking to the store
"""

from typing import List, Optional


class IdeaSwipeError(Exception):
    """Base class for all Idea Swipe errors."""


class ValidationError(IdeaSwipeError, ValueError):
    """
    Input failed validation.

    Attributes:
        errors: Individual validation messages, one per failed rule.
    """

    def __init__(self, message: str, errors: Optional[List[str]] = None):
        super().__init__(message)
        self.errors = errors if errors is not None else [message]


class NotFoundError(IdeaSwipeError, LookupError):
    """A referenced idea or interaction does not exist."""


class ConflictError(IdeaSwipeError):
    """The store rejected a write because of a constraint violation."""


class StoreUnavailableError(IdeaSwipeError):
    """The backing store could not be reached or failed mid-request."""
