"""
Feedback aggregation for Idea Swipe.

Provides a pure, side-effect-free function that turns the interaction rows
of one idea into IdeaStats. Nothing is cached: callers recompute on every
read, so the numbers can never be stale.

All functions are deterministic and do not mutate input data.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, List, Optional

from ideaswipe.models import IdeaStats, Interaction


# Mean ratings are reported to one decimal place
RATING_PRECISION = Decimal("0.1")


def compute_accept_fraction(interactions: List[Interaction]) -> float:
    """
    Share of interactions that swiped accept.

    Returns 0.0 for an empty list instead of dividing by zero.
    """
    if not interactions:
        return 0.0
    accepted = sum(1 for interaction in interactions if interaction.swipe)
    return accepted / len(interactions)


def compute_mean_rating(interactions: List[Interaction]) -> Optional[float]:
    """
    Mean of the recorded ratings, rounded half away from zero to one decimal.

    Interactions without a rating are ignored. Ratings are integers, so the
    sum is exact and the result does not depend on input order.

    Returns:
        The rounded mean, or None when no interaction carries a rating.

    Example:
        >>> compute_mean_rating([Interaction("u1", "i", True, 8), Interaction("u2", "i", True, 7)])
        7.5
    """
    ratings = [interaction.rating for interaction in interactions if interaction.rating is not None]
    if not ratings:
        return None

    mean = Decimal(sum(ratings)) / Decimal(len(ratings))
    return float(mean.quantize(RATING_PRECISION, rounding=ROUND_HALF_UP))


def aggregate(interactions: Iterable[Interaction]) -> IdeaStats:
    """
    Compute feedback statistics for one idea.

    Args:
        interactions: Every interaction recorded for the idea.

    Returns:
        IdeaStats with total, accept_fraction and mean_rating.
        mean_rating is None when nobody rated the idea, which is distinct
        from a mean of zero.
    """
    interactions = list(interactions)
    return IdeaStats(
        total=len(interactions),
        accept_fraction=compute_accept_fraction(interactions),
        mean_rating=compute_mean_rating(interactions),
    )
