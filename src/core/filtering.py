"""
Review Filter/Sort Pipeline.

Produces a filtered, sorted, read-only view of a review collection.
The source collection and its records are never mutated.
"""

import logging
import math
from typing import Callable, List, Optional, Sequence, Union

from src.models.criteria import FilterCriteria, ReviewPage, SortKey
from src.models.review import Review
import config.settings as settings

logger = logging.getLogger(__name__)


def helpfulness(review: Review) -> int:
    """Net helpful votes. May be negative."""
    return review.likes - review.dislikes


def matches_search(review: Review, search_text: str) -> bool:
    """Case-insensitive substring match on title, comment or author name."""
    needle = search_text.lower()
    return (
        needle in review.title.lower()
        or needle in review.comment.lower()
        or needle in review.user.name.lower()
    )


def _build_predicates(criteria: FilterCriteria) -> List[Callable[[Review], bool]]:
    predicates = []

    if criteria.search_text:
        search_text = criteria.search_text
        predicates.append(lambda review: matches_search(review, search_text))

    if criteria.rating_filter is not None:
        rating = criteria.rating_filter
        predicates.append(lambda review: review.rating == rating)

    if criteria.require_images:
        predicates.append(lambda review: review.has_images)

    if criteria.require_verified:
        predicates.append(lambda review: review.verified)

    return predicates


# (sort key function, descending); list.sort is stable in both directions
SORT_ORDERS = {
    SortKey.NEWEST: (lambda review: review.created_at, True),
    SortKey.OLDEST: (lambda review: review.created_at, False),
    SortKey.HIGHEST: (lambda review: review.rating, True),
    SortKey.LOWEST: (lambda review: review.rating, False),
    SortKey.MOST_HELPFUL: (helpfulness, True),
}


def sort_reviews(reviews: Sequence[Review], sort_key: Union[SortKey, str, None]) -> List[Review]:
    """
    Stable-sort reviews by the given key.

    Unknown keys leave the order untouched.
    """
    ordered = list(reviews)
    key = SortKey.parse(sort_key)
    if key is None:
        logger.debug(f"Unknown sort key {sort_key!r}, keeping input order")
        return ordered

    key_func, descending = SORT_ORDERS[key]
    ordered.sort(key=key_func, reverse=descending)
    return ordered


def apply(
    reviews: Sequence[Review],
    criteria: Optional[FilterCriteria] = None,
    sort_key: Union[SortKey, str, None] = SortKey.NEWEST
) -> List[Review]:
    """
    Filter then sort a review collection.

    Args:
        reviews: Source collection (not modified)
        criteria: Filters to AND-combine; None means no filtering
        sort_key: One of SortKey; any other value keeps filtered order

    Returns:
        New list, never longer than the input
    """
    criteria = criteria or FilterCriteria()
    predicates = _build_predicates(criteria)

    filtered = [
        review for review in reviews
        if all(predicate(review) for predicate in predicates)
    ]

    result = sort_reviews(filtered, sort_key)
    logger.debug(
        f"Filtered {len(reviews)} reviews down to {len(result)} "
        f"(sort={getattr(sort_key, 'value', sort_key)})"
    )
    return result


def paginate(reviews: Sequence[Review], page: int = 1, limit: int = 20) -> ReviewPage:
    """
    Slice a listing into one page.

    Args:
        reviews: Already filtered and sorted reviews
        page: 1-based page number
        limit: Page size, 1-50

    Raises:
        ValueError: If page or limit is out of range
    """
    if page < 1:
        raise ValueError(f"Invalid page: {page}. Must be >= 1")
    if not (1 <= limit <= settings.MAX_PAGE_SIZE):
        raise ValueError(f"Invalid limit: {limit}. Must be 1-{settings.MAX_PAGE_SIZE}")

    total = len(reviews)
    start = (page - 1) * limit
    items = list(reviews[start:start + limit])

    return ReviewPage(
        items=items,
        current_page=page,
        total_pages=math.ceil(total / limit),
        total_reviews=total,
        has_next=start + len(items) < total,
        has_prev=page > 1
    )


class FilterSortPipeline:
    """
    Stateless filter/sort/paginate pipeline over review collections.
    """

    def __init__(self, default_sort: Union[SortKey, str] = SortKey.NEWEST):
        self.default_sort = default_sort

    def apply(
        self,
        reviews: Sequence[Review],
        criteria: Optional[FilterCriteria] = None,
        sort_key: Union[SortKey, str, None] = None
    ) -> List[Review]:
        return apply(reviews, criteria, self.default_sort if sort_key is None else sort_key)

    def page(
        self,
        reviews: Sequence[Review],
        criteria: Optional[FilterCriteria] = None,
        sort_key: Union[SortKey, str, None] = None,
        page: int = 1,
        limit: int = 20
    ) -> ReviewPage:
        return paginate(self.apply(reviews, criteria, sort_key), page, limit)
