"""
Derived feedback statistics for an idea.

IdeaStats is never stored; it is recomputed from the interaction rows on
every read (see ideaswipe.stats.aggregator).
"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from ideaswipe.models.idea import Idea


@dataclass(frozen=True)
class IdeaStats:
    """
    Aggregate feedback for one idea.

    Attributes:
        total: Number of interactions recorded.
        accept_fraction: Share of interactions that swiped accept (0.0 when total is 0).
        mean_rating: Mean of the recorded ratings rounded to one decimal,
            or None when nobody has rated the idea.
    """

    total: int = 0
    accept_fraction: float = 0.0
    mean_rating: Optional[float] = None

    @property
    def accept_percentage(self) -> int:
        """accept_fraction as a whole percentage, rounded half away from zero."""
        percent = Decimal(repr(self.accept_fraction)) * 100
        return int(percent.quantize(Decimal("1"), rounding=ROUND_HALF_UP))

    @property
    def has_ratings(self) -> bool:
        return self.mean_rating is not None

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "accept_fraction": self.accept_fraction,
            "accept_percentage": self.accept_percentage,
            "mean_rating": self.mean_rating,
        }


@dataclass
class IdeaWithStats:
    """An idea together with its current feedback statistics."""

    idea: Idea
    stats: IdeaStats

    def to_dict(self) -> dict:
        data = self.idea.to_dict()
        data["stats"] = self.stats.to_dict()
        return data
