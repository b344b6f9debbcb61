"""
Filter, sort and paging models for review listings.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Union

from src.models.review import Review


class SortKey(str, Enum):
    """Supported review orderings."""
    NEWEST = "newest"
    OLDEST = "oldest"
    HIGHEST = "highest"
    LOWEST = "lowest"
    MOST_HELPFUL = "most_helpful"

    @classmethod
    def parse(cls, value) -> Optional["SortKey"]:
        """Return the matching SortKey, or None for unknown values."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return None


@dataclass
class FilterCriteria:
    """
    Declarative review filters. All predicates are AND-combined;
    an absent or empty criterion passes everything through.
    """
    search_text: Optional[str] = None
    rating_filter: Optional[Union[int, str]] = None  # exact match; "all" = no filter
    require_images: bool = False
    require_verified: bool = False

    def __post_init__(self):
        rating = self.rating_filter
        if rating is None or rating == "all" or rating == "":
            self.rating_filter = None
            return
        if isinstance(rating, bool):
            raise ValueError(f"Invalid rating filter: {rating!r}. Must be 1-5 or 'all'")
        try:
            self.rating_filter = int(rating)
        except (TypeError, ValueError):
            raise ValueError(f"Invalid rating filter: {rating!r}. Must be 1-5 or 'all'")

    @property
    def is_empty(self) -> bool:
        return (
            not self.search_text
            and self.rating_filter is None
            and not self.require_images
            and not self.require_verified
        )


@dataclass
class ReviewPage:
    """One page of a review listing plus paging metadata."""
    items: List[Review] = field(default_factory=list)
    current_page: int = 1
    total_pages: int = 0
    total_reviews: int = 0
    has_next: bool = False
    has_prev: bool = False

    def to_dict(self) -> dict:
        return {
            "reviews": [review.to_dict() for review in self.items],
            "pagination": {
                "currentPage": self.current_page,
                "totalPages": self.total_pages,
                "totalReviews": self.total_reviews,
                "hasNext": self.has_next,
                "hasPrev": self.has_prev
            }
        }
