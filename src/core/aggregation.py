"""
Review Aggregation Engine.

Reduces a review collection into summary statistics: average rating,
per-star distribution, recommendation rate and sub-rating averages.
"""

import logging
from collections import Counter
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Optional, Sequence

from src.models.review import Review
from src.models.stats import RatingBucket, ReviewStatsSummary, SubRatingAverages

logger = logging.getLogger(__name__)

STAR_VALUES = (5, 4, 3, 2, 1)

# (lower bound, label), checked top-down; lower bounds are inclusive
RATING_LABELS = [
    (4.5, "Excellent"),
    (4.0, "Very Good"),
    (3.5, "Good"),
    (3.0, "Average"),
    (2.0, "Below Average"),
]


def _percentage(count: int, total: int) -> float:
    if total == 0:
        return 0.0
    return 100 * count / total


def _mean(values: List[int]) -> float:
    if not values:
        return 0.0
    return sum(values) / len(values)


def summarize(reviews: Sequence[Review]) -> ReviewStatsSummary:
    """
    Summarize a review collection.

    Every record counts once; duplicate ids are not collapsed.
    An empty collection yields an all-zero summary.

    Args:
        reviews: Any finite sequence of Review objects

    Returns:
        ReviewStatsSummary with unrounded average and percentages
    """
    reviews = list(reviews)
    total = len(reviews)

    star_counts = Counter(review.rating for review in reviews)
    distribution = [
        RatingBucket(
            stars=stars,
            count=star_counts.get(stars, 0),
            percentage=_percentage(star_counts.get(stars, 0), total)
        )
        for stars in STAR_VALUES
    ]

    average = sum(review.rating for review in reviews) / total if total else 0.0
    recommend_count = sum(1 for review in reviews if review.recommend)

    sub_ratings = SubRatingAverages(
        delivery=_mean([r.delivery_rating for r in reviews if r.delivery_rating]),
        communication=_mean([r.communication_rating for r in reviews if r.communication_rating]),
        value=_mean([r.value_rating for r in reviews if r.value_rating])
    )

    logger.debug(f"Summarized {total} reviews (average {average:.3f})")

    return ReviewStatsSummary(
        total_count=total,
        average_rating=average,
        distribution=distribution,
        recommend_count=recommend_count,
        recommend_percentage=_percentage(recommend_count, total),
        verified_count=sum(1 for review in reviews if review.verified),
        sub_ratings=sub_ratings
    )


def rating_label(average: float) -> str:
    """Map an average rating to its qualitative label."""
    for lower_bound, label in RATING_LABELS:
        if average >= lower_bound:
            return label
    return "Poor"


def format_rating(average: float) -> str:
    """
    One-decimal textual rating, e.g. 4.333 -> '4.3'.

    Ties round half up on the exact float value, so 4.25 -> '4.3'
    while 4.35 (stored just below the tie) -> '4.3'.
    """
    return str(Decimal(average).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def recent_activity(reviews: Sequence[Review], count: int = 3) -> List[Review]:
    """Return the `count` most recently created reviews, newest first."""
    if count <= 0:
        return []
    ordered = sorted(reviews, key=lambda review: review.created_at, reverse=True)
    return ordered[:count]


class AggregationEngine:
    """
    Computes review statistics for a subject's review collection.
    """

    def __init__(self, recent_count: int = 3):
        """
        Initialize aggregation engine.

        Args:
            recent_count: Number of reviews reported as recent activity
        """
        self.recent_count = recent_count

    def summarize(self, reviews: Sequence[Review]) -> ReviewStatsSummary:
        summary = summarize(reviews)
        logger.info(
            f"Aggregated {summary.total_count} reviews: "
            f"average {format_rating(summary.average_rating)} "
            f"({rating_label(summary.average_rating)}), "
            f"{summary.recommend_count} recommend"
        )
        return summary

    def recent(self, reviews: Sequence[Review], count: Optional[int] = None) -> List[Review]:
        return recent_activity(reviews, self.recent_count if count is None else count)


# Design Rationale and Trade-offs:
#
# 1. Why keep the average at full precision?
#    - Labels and sorting use the exact mean
#    - Rounding happens once, in format_rating
#
# 2. Why Decimal for the display rounding?
#    - Decimal(float) is exact, so half-up matches the storefront's toFixed(1)
#    - Plain f"{x:.1f}" rounds exact ties to even (4.25 -> '4.2')
#
# 3. Why no deduplication by id?
#    - The store keys records by id already
#    - Trade-off: Callers building their own lists must not repeat records
