"""
Tests for the review service.
"""

import os
import tempfile
import threading

import pytest

from src.errors import DuplicateReviewError, InvariantViolation, ReviewNotFoundError
from src.models.criteria import FilterCriteria
from src.models.review import UserRef
from src.service import ReviewService
from src.utils.sample_data import sample_reviews
from src.utils.storage import ReviewStore


@pytest.fixture
def service():
    """Service over a temp store seeded with the demo product reviews."""
    with tempfile.TemporaryDirectory() as tmpdir:
        store = ReviewStore(os.path.join(tmpdir, "reviews.json"))
        for review in sample_reviews("product", "42"):
            store.add_review(review)
        store.save()
        yield ReviewService(store)


def test_summary(service):
    summary = service.summary("product", "42")

    assert summary.total_count == 4
    assert summary.average_rating == pytest.approx(4.25)
    assert summary.bucket(5).count == 2
    assert summary.recommend_count == 3


def test_summary_for_unknown_subject_is_empty(service):
    assert service.summary("vendor", "nobody").total_count == 0


def test_list_reviews_filters_sorts_and_pages(service):
    page = service.list_reviews(
        "product", "42",
        FilterCriteria(require_images=True),
        "most_helpful",
        page=1,
        limit=2
    )

    assert [r.user.name for r in page.items] == ["John Smith", "Sarah Johnson"]
    assert page.total_reviews == 3
    assert page.has_next


def test_list_reviews_default_sort_is_newest(service):
    page = service.list_reviews("product", "42")
    assert [r.id for r in page.items] == [f"product-42-{n}" for n in (1, 2, 3, 4)]


def test_like_is_persisted(service):
    updated = service.like("product-42-2")

    assert updated.liked and updated.likes == 9
    reloaded = ReviewStore(service.store.store_path)
    assert reloaded.get_review("product-42-2").likes == 9
    assert reloaded.get_review("product-42-2").liked


def test_like_then_dislike_switches(service):
    service.like("product-42-3")
    updated = service.dislike("product-42-3")

    assert (updated.liked, updated.disliked, updated.likes, updated.dislikes) == (False, True, 3, 3)


def test_toggle_missing_review(service):
    with pytest.raises(ReviewNotFoundError):
        service.like("nope")


def test_toggle_corrupted_review(service):
    review = service.store.get_review("product-42-1")
    review.liked = True
    review.disliked = True

    with pytest.raises(InvariantViolation):
        service.dislike("product-42-1")


def test_concurrent_toggles_are_serialized(service):
    """An even number of likes from many threads cancels out."""
    before = service.store.get_review("product-42-4")
    threads = [threading.Thread(target=service.like, args=("product-42-4",)) for _ in range(20)]

    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    after = service.store.get_review("product-42-4")
    assert after.likes == before.likes
    assert after.liked == before.liked


def test_submit_edit_delete(service):
    author = UserRef(id="99", name="New Buyer")
    review = service.submit_review(author, "product", "42", 2, "Broke fast", "Clasp snapped.")

    assert service.summary("product", "42").total_count == 5

    with pytest.raises(DuplicateReviewError):
        service.submit_review(author, "product", "42", 3, "Again", "Again")

    edited = service.edit_review(review.id, rating=4, comment="Vendor replaced it.")
    assert edited.rating == 4
    assert service.store.get_review(review.id).comment == "Vendor replaced it."

    service.delete_review(review.id)
    assert service.store.get_review(review.id) is None
    with pytest.raises(ReviewNotFoundError):
        service.delete_review(review.id)


# Run tests if executed directly
if __name__ == "__main__":
    pytest.main([__file__, "-v"])
