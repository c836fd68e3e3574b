"""
Stats module.

Aggregates interaction rows into per-idea feedback statistics.
"""

from ideaswipe.stats.aggregator import (
    aggregate,
    compute_accept_fraction,
    compute_mean_rating,
    RATING_PRECISION,
)

__all__ = [
    "aggregate",
    "compute_accept_fraction",
    "compute_mean_rating",
    "RATING_PRECISION",
]
