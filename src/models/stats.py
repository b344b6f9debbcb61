"""
Review statistics model.

Derived summary of a review collection. Recomputed on demand, never persisted.
"""

from dataclasses import dataclass, field
from typing import List


@dataclass
class RatingBucket:
    """Count and share of reviews with a given star value."""
    stars: int
    count: int
    percentage: float  # 0-100, unrounded

    def to_dict(self) -> dict:
        return {
            "stars": self.stars,
            "count": self.count,
            "percentage": self.percentage
        }


@dataclass
class SubRatingAverages:
    """Mean of each optional sub-rating over the reviews that rated it."""
    delivery: float = 0.0
    communication: float = 0.0
    value: float = 0.0

    def to_dict(self) -> dict:
        return {
            "delivery": self.delivery,
            "communication": self.communication,
            "value": self.value
        }


@dataclass
class ReviewStatsSummary:
    """
    Summary statistics for one review collection.
    average_rating keeps full precision; round only for display.
    """
    total_count: int
    average_rating: float
    distribution: List[RatingBucket]  # stars 5..1
    recommend_count: int
    recommend_percentage: float
    verified_count: int = 0
    sub_ratings: SubRatingAverages = field(default_factory=SubRatingAverages)

    def bucket(self, stars: int) -> RatingBucket:
        """Return the distribution bucket for a star value."""
        for entry in self.distribution:
            if entry.stars == stars:
                return entry
        raise KeyError(stars)

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dict."""
        return {
            "totalCount": self.total_count,
            "averageRating": self.average_rating,
            "distribution": [entry.to_dict() for entry in self.distribution],
            "recommendCount": self.recommend_count,
            "recommendPercentage": self.recommend_percentage,
            "verifiedCount": self.verified_count,
            "subRatings": self.sub_ratings.to_dict()
        }
