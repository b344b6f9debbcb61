"""
Review Store.

JSON-file persistence for review records. Plays the part of the
marketplace review API: fetch a subject's reviews, persist reaction
updates, add/replace/delete records.
"""

import json
import os
import shutil
import logging
from typing import Dict, List, Optional

from src.errors import DuplicateReviewError, MalformedReviewError, ReviewNotFoundError
from src.models.review import Review, SUBJECT_TYPES, format_timestamp, utcnow
from src.core.reactions import REACTION_FIELDS

logger = logging.getLogger(__name__)


def _timestamp() -> str:
    return format_timestamp(utcnow())


class ReviewStore:
    """
    All review records, keyed by review id, backed by one JSON file.

    Records keep insertion order so fetches follow source order.
    """

    def __init__(self, store_path: str, version: str = "1.0.0"):
        """
        Initialize store from disk or create a new empty store.

        Args:
            store_path: Path to reviews.json
            version: Format version written on save
        """
        self.store_path = store_path
        self.reviews: Dict[str, Review] = {}  # review_id -> Review
        self.version = version
        self.last_updated = _timestamp()

        directory = os.path.dirname(store_path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        if os.path.exists(store_path):
            self._load()
        else:
            logger.info(f"No existing review store at {store_path}, starting empty")

    def _load(self) -> None:
        """Load reviews from disk."""
        try:
            self._load_records()
        except (json.JSONDecodeError, MalformedReviewError) as e:
            logger.error(f"Failed to parse review store: {e}")
            self._try_restore_from_backup()

    def _load_records(self) -> None:
        with open(self.store_path, 'r') as f:
            data = json.load(f)

        # Bare list of records vs document with metadata
        if isinstance(data, list):
            records = data
        else:
            self.version = data.get("version", self.version)
            self.last_updated = data.get("last_updated", self.last_updated)
            records = data.get("reviews", [])

        reviews = {}
        for record in records:
            review = Review.from_dict(record)
            reviews[review.id] = review
        self.reviews = reviews

        logger.info(f"Loaded {len(self.reviews)} reviews from {self.store_path}")

    def _try_restore_from_backup(self) -> None:
        """Attempt to restore from backup file if the main store is corrupted."""
        backup_path = f"{self.store_path}.backup"
        if os.path.exists(backup_path):
            logger.warning(f"Attempting to restore from backup: {backup_path}")
            try:
                shutil.copy(backup_path, self.store_path)
                self._load_records()
                logger.info("Successfully restored from backup")
            except (OSError, json.JSONDecodeError, MalformedReviewError) as e:
                logger.error(f"Backup restoration failed: {e}. Starting with empty store.")
                self.reviews = {}
        else:
            logger.warning("No backup file found. Starting with empty store.")
            self.reviews = {}

    def fetch_reviews(self, subject_type: str, subject_id: str) -> List[Review]:
        """
        Fetch all reviews attached to one product or vendor.

        Args:
            subject_type: "product" or "vendor"
            subject_id: Product or vendor id

        Returns:
            List of Review objects in storage order

        Raises:
            ValueError: If subject_type is not product or vendor
        """
        if subject_type not in SUBJECT_TYPES:
            raise ValueError(
                f"Invalid subject type: {subject_type}. Must be 'product' or 'vendor'"
            )

        subject_id = str(subject_id)
        reviews = [
            review for review in self.reviews.values()
            if review.subject.type == subject_type and review.subject.ref == subject_id
        ]
        logger.debug(f"Fetched {len(reviews)} reviews for {subject_type} {subject_id}")
        return reviews

    def get_review(self, review_id: str) -> Optional[Review]:
        """Retrieve review by ID. Returns None if not found."""
        return self.reviews.get(str(review_id))

    def add_review(self, review: Review) -> None:
        """
        Add a new review.

        Raises:
            DuplicateReviewError: If the id exists, or the author already
                reviewed the same subject
        """
        if review.id in self.reviews:
            raise DuplicateReviewError(f"Review {review.id} already exists")

        for existing in self.reviews.values():
            if existing.subject == review.subject and existing.user.id == review.user.id:
                raise DuplicateReviewError(
                    f"You have already reviewed this {review.subject.type}"
                )

        self.reviews[review.id] = review
        logger.info(f"Added review {review.id} to {review.subject.type} {review.subject.ref}")

    def replace_review(self, review: Review) -> None:
        """
        Replace an existing record with an updated one.

        Raises:
            ReviewNotFoundError: If no review has this id
        """
        if review.id not in self.reviews:
            raise ReviewNotFoundError(f"Review not found: {review.id}")
        self.reviews[review.id] = review

    def delete_review(self, review_id: str) -> bool:
        """Remove a review entirely. Returns False if it did not exist."""
        removed = self.reviews.pop(str(review_id), None)
        if removed is None:
            logger.warning(f"Cannot delete missing review {review_id}")
            return False
        logger.info(f"Deleted review {review_id}")
        return True

    def persist_reaction(self, review_id: str, updated_fields: Dict) -> bool:
        """
        Write reaction fields through to a stored review.

        Args:
            review_id: Target review id
            updated_fields: Subset of likes/dislikes/liked/disliked/updatedAt

        Returns:
            True on success, False if the review does not exist

        Raises:
            ValueError: If a non-reaction field is given
        """
        unknown = set(updated_fields) - set(REACTION_FIELDS)
        if unknown:
            raise ValueError(f"Not reaction fields: {sorted(unknown)}")

        current = self.reviews.get(str(review_id))
        if current is None:
            logger.warning(f"Cannot persist reaction for missing review {review_id}")
            return False

        record = current.to_dict()
        record.update(updated_fields)
        self.reviews[current.id] = Review.from_dict(record)
        logger.debug(f"Persisted reaction for review {review_id}: {updated_fields}")
        return True

    def all_reviews(self) -> List[Review]:
        return list(self.reviews.values())

    def save(self) -> None:
        """
        Persist store to disk with atomic write pattern.
        Creates backup before write.
        """
        self.last_updated = _timestamp()

        if os.path.exists(self.store_path):
            backup_path = f"{self.store_path}.backup"
            shutil.copy(self.store_path, backup_path)
            logger.debug(f"Created backup: {backup_path}")

        data = {
            "version": self.version,
            "last_updated": self.last_updated,
            "reviews": [review.to_dict() for review in self.reviews.values()]
        }

        # Atomic write: write to temp file, then rename
        temp_path = f"{self.store_path}.tmp"
        try:
            with open(temp_path, 'w') as f:
                json.dump(data, f, indent=2)

            os.replace(temp_path, self.store_path)
            logger.info(f"Review store saved: {len(self.reviews)} reviews")

        except Exception as e:
            logger.error(f"Failed to save review store: {e}")
            if os.path.exists(temp_path):
                os.remove(temp_path)
            raise


# Design Rationale and Trade-offs:
#
# 1. Why one JSON file instead of a database?
#    - Review volume per deployment is small
#    - Human-readable, easy to seed and inspect
#    - Trade-off: Whole file rewritten on every save
#
# 2. Why temp file + rename with a .backup copy?
#    - A crash mid-write never leaves a half-written store
#    - A corrupt store falls back to the last good save
#    - Trade-off: Backup is one save behind
#
# 3. Why persist_reaction only touches reaction fields?
#    - Author edits and reaction toggles update disjoint fields
#    - Trade-off: Callers must go through replace_review for content changes
