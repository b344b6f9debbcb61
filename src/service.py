"""
Review Service.

Coordinates the review store with the aggregation engine, the
filter/sort pipeline and the reaction ledger for one marketplace.
"""

import logging
import threading
from typing import Dict, List, Optional

from src.core.aggregation import AggregationEngine
from src.core.filtering import FilterSortPipeline
from src.core.lifecycle import apply_edit, create_review
from src.core.reactions import ReactionLedger, reaction_fields
from src.errors import ReviewNotFoundError
from src.models.criteria import FilterCriteria, ReviewPage
from src.models.review import Review, Subject, UserRef
from src.models.stats import ReviewStatsSummary
from src.utils.storage import ReviewStore
import config.settings as settings

logger = logging.getLogger(__name__)


class ReviewService:
    """
    Review operations for the storefront.

    Readers (summary, listings) compute on a snapshot of the store.
    Reaction toggles on the same review are serialized with a
    per-review lock, then written through to the store.
    """

    def __init__(self, store: ReviewStore, ledger: Optional[ReactionLedger] = None):
        """
        Initialize review service.

        Args:
            store: Review store supplying and persisting records
            ledger: Reaction ledger; a default one uses the UTC clock
        """
        self.store = store
        self.engine = AggregationEngine(recent_count=settings.RECENT_ACTIVITY_COUNT)
        self.pipeline = FilterSortPipeline(default_sort=settings.DEFAULT_SORT_KEY)
        self.ledger = ledger or ReactionLedger()

        self._locks: Dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()
        self._store_lock = threading.Lock()

    def _lock_for(self, review_id: str) -> threading.Lock:
        with self._locks_guard:
            lock = self._locks.get(review_id)
            if lock is None:
                lock = threading.Lock()
                self._locks[review_id] = lock
            return lock

    def _require(self, review_id: str) -> Review:
        review = self.store.get_review(review_id)
        if review is None:
            raise ReviewNotFoundError(f"Review not found: {review_id}")
        return review

    def _fetch(self, subject_type: str, subject_id: str) -> List[Review]:
        # Snapshot under the store lock; computing on it needs no lock
        with self._store_lock:
            return self.store.fetch_reviews(subject_type, subject_id)

    def summary(self, subject_type: str, subject_id: str) -> ReviewStatsSummary:
        """Stats panel for a product or vendor."""
        reviews = self._fetch(subject_type, subject_id)
        return self.engine.summarize(reviews)

    def recent_activity(self, subject_type: str, subject_id: str) -> List[Review]:
        reviews = self._fetch(subject_type, subject_id)
        return self.engine.recent(reviews)

    def list_reviews(
        self,
        subject_type: str,
        subject_id: str,
        criteria: Optional[FilterCriteria] = None,
        sort_key: Optional[str] = None,
        page: int = 1,
        limit: int = settings.DEFAULT_PAGE_SIZE
    ) -> ReviewPage:
        """
        One page of a subject's reviews after filtering and sorting.

        Raises:
            ValueError: On an invalid subject type, page or limit
        """
        reviews = self._fetch(subject_type, subject_id)
        result = self.pipeline.page(reviews, criteria, sort_key, page=page, limit=limit)
        logger.info(
            f"Listed {len(result.items)} of {result.total_reviews} matching reviews "
            f"for {subject_type} {subject_id} (page {page}/{max(result.total_pages, 1)})"
        )
        return result

    def like(self, review_id: str) -> Review:
        """Toggle the viewer's like on a review and persist it."""
        return self._toggle(review_id, self.ledger.toggle_like, "like")

    def dislike(self, review_id: str) -> Review:
        """Toggle the viewer's dislike on a review and persist it."""
        return self._toggle(review_id, self.ledger.toggle_dislike, "dislike")

    def _toggle(self, review_id: str, toggle, action: str) -> Review:
        with self._lock_for(review_id):
            review = self._require(review_id)
            updated = toggle(review)
            with self._store_lock:
                self.store.persist_reaction(review_id, reaction_fields(updated))
                self.store.save()

        logger.info(
            f"Review {review_id} {action} toggled: "
            f"likes={updated.likes}, dislikes={updated.dislikes}"
        )
        return updated

    def submit_review(
        self,
        user: UserRef,
        subject_type: str,
        subject_id: str,
        rating: int,
        title: str,
        comment: str,
        **details
    ) -> Review:
        """
        Create and store a new review.

        Raises:
            MalformedReviewError: If the content is invalid
            DuplicateReviewError: If the user already reviewed the subject
        """
        review = create_review(
            user=user,
            subject=Subject.of(subject_type, subject_id),
            rating=rating,
            title=title,
            comment=comment,
            **details
        )
        with self._store_lock:
            self.store.add_review(review)
            self.store.save()
        return review

    def edit_review(self, review_id: str, **changes) -> Review:
        """
        Apply an author edit (title, comment, rating, images).

        Raises:
            ReviewNotFoundError: If the review does not exist
            MalformedReviewError: If the edited content is invalid
        """
        with self._lock_for(review_id):
            updated = apply_edit(self._require(review_id), **changes)
            with self._store_lock:
                self.store.replace_review(updated)
                self.store.save()

        logger.info(f"Review {review_id} updated")
        return updated

    def delete_review(self, review_id: str) -> None:
        """
        Remove a review. No tombstone is kept.

        Raises:
            ReviewNotFoundError: If the review does not exist
        """
        with self._lock_for(review_id):
            with self._store_lock:
                if not self.store.delete_review(review_id):
                    raise ReviewNotFoundError(f"Review not found: {review_id}")
                self.store.save()

        with self._locks_guard:
            self._locks.pop(review_id, None)
