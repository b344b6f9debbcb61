"""
Unit tests for the Filter/Sort Pipeline.
"""

import pytest

from src.core.filtering import FilterSortPipeline, apply, helpfulness, paginate
from src.models.criteria import FilterCriteria, SortKey
from src.models.review import UserRef


@pytest.fixture
def reviews(make_review):
    """Four reviews in source order, created Jan 1-4."""
    return [
        make_review(id="a", rating=5, title="Lovely necklace", likes=3, dislikes=0,
                    images=["x.jpg"], verified=True, created_at="2024-01-01T00:00:00Z"),
        make_review(id="b", rating=3, comment="Decent SILVER finish", likes=1, dislikes=4,
                    verified=False, created_at="2024-01-02T00:00:00Z"),
        make_review(id="c", rating=5, user=UserRef(id="9", name="Emma Davis"),
                    likes=3, dislikes=0, verified=True, created_at="2024-01-03T00:00:00Z"),
        make_review(id="d", rating=1, likes=0, dislikes=0, images=["y.jpg"],
                    verified=True, created_at="2024-01-04T00:00:00Z"),
    ]


def ids(result):
    return [review.id for review in result]


def test_rating_filter_with_newest_sort(make_review):
    """Rating-5 reviews from Jan 1/2/3 with ratings [5,3,5], newest first."""
    reviews = [
        make_review(id="jan1", rating=5, created_at="2024-01-01T00:00:00Z"),
        make_review(id="jan2", rating=3, created_at="2024-01-02T00:00:00Z"),
        make_review(id="jan3", rating=5, created_at="2024-01-03T00:00:00Z"),
    ]

    result = apply(reviews, FilterCriteria(rating_filter=5), "newest")

    assert ids(result) == ["jan3", "jan1"]


def test_empty_input():
    assert apply([], FilterCriteria(), "newest") == []


def test_no_criteria_passes_everything(reviews):
    assert ids(apply(reviews, None, "oldest")) == ["a", "b", "c", "d"]


def test_search_is_case_insensitive_across_fields(reviews):
    assert ids(apply(reviews, FilterCriteria(search_text="NECKLACE"), "oldest")) == ["a"]
    assert ids(apply(reviews, FilterCriteria(search_text="silver"), "oldest")) == ["b"]
    assert ids(apply(reviews, FilterCriteria(search_text="emma"), "oldest")) == ["c"]
    assert apply(reviews, FilterCriteria(search_text="zzz"), "oldest") == []


def test_rating_filter_is_exact_match(reviews):
    result = apply(reviews, FilterCriteria(rating_filter="3"), "newest")

    assert ids(result) == ["b"]
    assert all(review.rating == 3 for review in result)


def test_require_images(reviews, make_review):
    assert ids(apply(reviews, FilterCriteria(require_images=True), "oldest")) == ["a", "d"]

    bare = make_review(images=[])
    assert apply([bare], FilterCriteria(require_images=True), "newest") == []
    assert apply([bare], FilterCriteria(require_images=False), "newest") == [bare]


def test_require_verified(reviews):
    result = apply(reviews, FilterCriteria(require_verified=True), "oldest")
    assert ids(result) == ["a", "c", "d"]


def test_predicates_are_and_combined(reviews):
    criteria = FilterCriteria(rating_filter=5, require_images=True, require_verified=True)
    assert ids(apply(reviews, criteria, "newest")) == ["a"]


def test_highest_is_stable_for_ties(reviews):
    """Equal ratings keep their source order."""
    result = apply(reviews, FilterCriteria(), SortKey.HIGHEST)

    assert ids(result) == ["a", "c", "b", "d"]
    ratings = [review.rating for review in result]
    assert ratings == sorted(ratings, reverse=True)


def test_lowest(reviews):
    assert ids(apply(reviews, FilterCriteria(), "lowest")) == ["d", "b", "a", "c"]


def test_most_helpful_handles_negative_scores(reviews):
    result = apply(reviews, FilterCriteria(), "most_helpful")

    assert ids(result) == ["a", "c", "d", "b"]
    assert helpfulness(result[-1]) == -3


def test_unknown_sort_key_keeps_order(reviews):
    shuffled = [reviews[2], reviews[0], reviews[3], reviews[1]]
    assert ids(apply(shuffled, FilterCriteria(), "random")) == ["c", "a", "d", "b"]


def test_input_is_not_mutated(reviews):
    original = list(reviews)
    snapshot = [review.to_dict() for review in reviews]

    result = apply(reviews, FilterCriteria(rating_filter=5), "highest")

    assert result is not reviews
    assert reviews == original
    assert [review.to_dict() for review in reviews] == snapshot
    assert len(result) <= len(reviews)


def test_paginate_metadata(make_review):
    reviews = [make_review() for _ in range(5)]

    first = paginate(reviews, page=1, limit=2)
    last = paginate(reviews, page=3, limit=2)

    assert len(first.items) == 2
    assert first.total_pages == 3
    assert first.total_reviews == 5
    assert first.has_next and not first.has_prev
    assert len(last.items) == 1
    assert not last.has_next and last.has_prev


def test_paginate_past_end_and_empty(make_review):
    beyond = paginate([make_review()], page=4, limit=10)
    assert beyond.items == []
    assert not beyond.has_next

    empty = paginate([], page=1, limit=10)
    assert empty.total_pages == 0


@pytest.mark.parametrize("page,limit", [(0, 10), (1, 0), (1, 51)])
def test_paginate_rejects_bad_ranges(page, limit):
    with pytest.raises(ValueError):
        paginate([], page=page, limit=limit)


def test_pipeline_default_sort(reviews):
    pipeline = FilterSortPipeline(default_sort="oldest")

    assert ids(pipeline.apply(reviews)) == ["a", "b", "c", "d"]
    page = pipeline.page(reviews, FilterCriteria(require_verified=True), "newest", limit=2)
    assert ids(page.items) == ["d", "c"]
    assert page.to_dict()["pagination"]["totalReviews"] == 3


# Run tests if executed directly
if __name__ == "__main__":
    pytest.main([__file__, "-v"])
