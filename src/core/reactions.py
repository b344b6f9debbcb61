"""
Reaction Ledger.

Applies one viewer's like/dislike toggle to a single review.

Per review and viewer the reaction is one of neutral, liked, disliked:

    neutral  --like-->    liked     (likes +1)
    liked    --like-->    neutral   (likes -1)
    neutral  --dislike--> disliked  (dislikes +1)
    disliked --dislike--> neutral   (dislikes -1)
    liked    --dislike--> disliked  (likes -1, dislikes +1)
    disliked --like-->    liked     (dislikes -1, likes +1)

Every call flips state; repeated calls are not idempotent.
Records are replaced, never modified in place. Persisting the
replacement is the caller's job.
"""

import dataclasses
import logging
from datetime import datetime
from enum import Enum
from typing import Optional

from src.errors import InvariantViolation
from src.models.review import Review, utcnow

logger = logging.getLogger(__name__)

# Record keys written through to the store on a toggle
REACTION_FIELDS = ("likes", "dislikes", "liked", "disliked", "updatedAt")


class Reaction(str, Enum):
    NEUTRAL = "neutral"
    LIKED = "liked"
    DISLIKED = "disliked"


def _check_invariants(review: Review) -> None:
    if review.liked and review.disliked:
        raise InvariantViolation(
            f"Review {review.id} is both liked and disliked"
        )
    if review.liked and review.likes < 1:
        raise InvariantViolation(
            f"Review {review.id} is liked but has likes={review.likes}"
        )
    if review.disliked and review.dislikes < 1:
        raise InvariantViolation(
            f"Review {review.id} is disliked but has dislikes={review.dislikes}"
        )


def reaction_state(review: Review) -> Reaction:
    """Current viewer reaction. Raises InvariantViolation on corrupted state."""
    _check_invariants(review)
    if review.liked:
        return Reaction.LIKED
    if review.disliked:
        return Reaction.DISLIKED
    return Reaction.NEUTRAL


def toggle_like(review: Review, now: Optional[datetime] = None) -> Review:
    """
    Toggle the viewer's like.

    Liking a disliked review also withdraws the dislike.

    Raises:
        InvariantViolation: If the review is both liked and disliked,
            or a counter would drop below zero
    """
    _check_invariants(review)

    if review.liked:
        changes = {"liked": False, "likes": review.likes - 1}
    else:
        changes = {"liked": True, "likes": review.likes + 1}
        if review.disliked:
            changes.update(disliked=False, dislikes=review.dislikes - 1)

    updated = dataclasses.replace(review, updated_at=now or utcnow(), **changes)
    logger.debug(
        f"toggle_like on {review.id}: {reaction_state(review).value} -> "
        f"{reaction_state(updated).value}"
    )
    return updated


def toggle_dislike(review: Review, now: Optional[datetime] = None) -> Review:
    """
    Toggle the viewer's dislike. Mirror image of toggle_like.

    Raises:
        InvariantViolation: If the review is both liked and disliked,
            or a counter would drop below zero
    """
    _check_invariants(review)

    if review.disliked:
        changes = {"disliked": False, "dislikes": review.dislikes - 1}
    else:
        changes = {"disliked": True, "dislikes": review.dislikes + 1}
        if review.liked:
            changes.update(liked=False, likes=review.likes - 1)

    updated = dataclasses.replace(review, updated_at=now or utcnow(), **changes)
    logger.debug(
        f"toggle_dislike on {review.id}: {reaction_state(review).value} -> "
        f"{reaction_state(updated).value}"
    )
    return updated


def reaction_fields(review: Review) -> dict:
    """Reaction fields of a review in store record form."""
    record = review.to_dict()
    return {key: record[key] for key in REACTION_FIELDS}


class ReactionLedger:
    """
    Applies like/dislike toggles with an injectable clock.
    """

    def __init__(self, clock=utcnow):
        self.clock = clock

    def toggle_like(self, review: Review) -> Review:
        return toggle_like(review, now=self.clock())

    def toggle_dislike(self, review: Review) -> Review:
        return toggle_dislike(review, now=self.clock())
