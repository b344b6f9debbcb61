"""
Review lifecycle helpers.

Building new reviews and applying author edits. Reaction counters are
never touched here; see src.core.reactions.
"""

import dataclasses
import logging
import uuid
from datetime import datetime
from typing import Iterable, List, Optional

from src.errors import MalformedReviewError
from src.models.review import Review, Subject, UserRef, utcnow
import config.settings as settings

logger = logging.getLogger(__name__)


def validate_content(title: str, comment: str) -> None:
    """
    Check title and comment against the marketplace limits.

    Raises:
        MalformedReviewError: If either is blank or too long
    """
    if not title or not title.strip():
        raise MalformedReviewError("Please provide a title for your review")
    if len(title.strip()) > settings.TITLE_MAX_LENGTH:
        raise MalformedReviewError(
            f"Title must be between 1 and {settings.TITLE_MAX_LENGTH} characters"
        )
    if not comment or not comment.strip():
        raise MalformedReviewError("Please write a comment")
    if len(comment.strip()) > settings.COMMENT_MAX_LENGTH:
        raise MalformedReviewError(
            f"Comment must be between 1 and {settings.COMMENT_MAX_LENGTH} characters"
        )


def create_review(
    user: UserRef,
    subject: Subject,
    rating: int,
    title: str,
    comment: str,
    images: Iterable[str] = (),
    recommend: bool = False,
    verified: bool = True,
    delivery_rating: Optional[int] = None,
    communication_rating: Optional[int] = None,
    value_rating: Optional[int] = None,
    review_id: Optional[str] = None,
    now: Optional[datetime] = None
) -> Review:
    """
    Build a new review with no reactions.

    Args:
        user: Author
        subject: Product or vendor being reviewed
        rating: 1-5 stars
        title: 1-100 characters
        comment: 1-1000 characters
        images: Image URLs, in display order
        recommend: Whether the author recommends the subject
        verified: Provenance flag, fixed at creation
        delivery_rating, communication_rating, value_rating: Optional 1-5
        review_id: Explicit id; a UUID is generated when omitted
        now: Creation time; defaults to the current UTC time

    Returns:
        New Review with likes=dislikes=0 and no viewer reaction

    Raises:
        MalformedReviewError: If rating or content is invalid
    """
    validate_content(title, comment)
    created_at = now or utcnow()

    review = Review(
        id=review_id or str(uuid.uuid4()),
        user=user,
        rating=rating,
        subject=subject,
        title=title.strip(),
        comment=comment.strip(),
        images=list(images),
        recommend=recommend,
        verified=verified,
        delivery_rating=delivery_rating,
        communication_rating=communication_rating,
        value_rating=value_rating,
        created_at=created_at,
        updated_at=created_at
    )
    logger.debug(f"Created review {review.id} for {subject.type} {subject.ref}")
    return review


def apply_edit(
    review: Review,
    title: Optional[str] = None,
    comment: Optional[str] = None,
    rating: Optional[int] = None,
    images: Optional[List[str]] = None,
    now: Optional[datetime] = None
) -> Review:
    """
    Apply an author edit, returning a replacement record.

    Only the given fields change. Reaction counters, created_at and
    the verified flag are kept; updated_at is refreshed.

    Raises:
        MalformedReviewError: If the edited content is invalid
    """
    changes = {}
    if title is not None:
        changes["title"] = title.strip()
    if comment is not None:
        changes["comment"] = comment.strip()
    if rating is not None:
        changes["rating"] = rating
    if images is not None:
        changes["images"] = list(images)

    validate_content(changes.get("title", review.title), changes.get("comment", review.comment))

    updated = dataclasses.replace(review, updated_at=now or utcnow(), **changes)
    logger.debug(f"Edited review {review.id}: {sorted(changes)}")
    return updated
