"""
Unit tests for the Reaction Ledger.
"""

import itertools
import pytest
from datetime import datetime, timezone

from src.core.reactions import (
    Reaction,
    ReactionLedger,
    reaction_fields,
    reaction_state,
    toggle_dislike,
    toggle_like,
)
from src.errors import InvariantViolation

NOW = datetime(2024, 2, 1, 9, 0, tzinfo=timezone.utc)


def test_dislike_then_like(make_review):
    """neutral -> disliked -> liked."""
    review = make_review(liked=False, disliked=False, likes=0, dislikes=0)

    disliked = toggle_dislike(review, now=NOW)
    assert (disliked.liked, disliked.disliked, disliked.likes, disliked.dislikes) == (False, True, 0, 1)

    liked = toggle_like(disliked, now=NOW)
    assert (liked.liked, liked.disliked, liked.likes, liked.dislikes) == (True, False, 1, 0)


@pytest.mark.parametrize("start,toggle,expected", [
    ((False, False, 2, 2), toggle_like, (True, False, 3, 2)),
    ((True, False, 3, 2), toggle_like, (False, False, 2, 2)),
    ((False, False, 2, 2), toggle_dislike, (False, True, 2, 3)),
    ((False, True, 2, 3), toggle_dislike, (False, False, 2, 2)),
    ((True, False, 3, 2), toggle_dislike, (False, True, 2, 3)),
    ((False, True, 2, 3), toggle_like, (True, False, 3, 2)),
])
def test_all_six_transitions(make_review, start, toggle, expected):
    liked, disliked, likes, dislikes = start
    review = make_review(liked=liked, disliked=disliked, likes=likes, dislikes=dislikes)

    updated = toggle(review, now=NOW)

    assert (updated.liked, updated.disliked, updated.likes, updated.dislikes) == expected


def test_double_like_restores_original(make_review):
    review = make_review(likes=7, dislikes=1)

    restored = toggle_like(toggle_like(review, now=NOW), now=NOW)

    assert restored.liked == review.liked
    assert restored.likes == review.likes


def test_toggle_returns_new_record_and_bumps_updated_at(make_review):
    review = make_review(likes=1)
    before = review.to_dict()

    updated = toggle_like(review, now=NOW)

    assert updated is not review
    assert review.to_dict() == before
    assert updated.updated_at == NOW
    assert updated.created_at == review.created_at
    assert updated.title == review.title
    assert updated.rating == review.rating


def test_any_toggle_sequence_keeps_invariants(make_review):
    """Every sequence of up to six toggles from neutral stays valid."""
    for length in range(1, 7):
        for sequence in itertools.product((toggle_like, toggle_dislike), repeat=length):
            review = make_review(likes=0, dislikes=0)
            for toggle in sequence:
                review = toggle(review, now=NOW)
                assert not (review.liked and review.disliked)
                assert review.likes >= 0 and review.dislikes >= 0


def test_both_flags_set_is_invariant_violation(make_review):
    review = make_review(likes=1, dislikes=1)
    review.liked = True
    review.disliked = True

    with pytest.raises(InvariantViolation):
        toggle_like(review)
    with pytest.raises(InvariantViolation):
        toggle_dislike(review)


def test_liked_with_zero_likes_is_invariant_violation(make_review):
    review = make_review(liked=True, likes=0)

    with pytest.raises(InvariantViolation):
        toggle_like(review)


def test_reaction_state(make_review):
    assert reaction_state(make_review()) is Reaction.NEUTRAL
    assert reaction_state(make_review(liked=True, likes=1)) is Reaction.LIKED
    assert reaction_state(make_review(disliked=True, dislikes=1)) is Reaction.DISLIKED


def test_reaction_fields(make_review):
    review = toggle_dislike(make_review(dislikes=4), now=NOW)

    assert reaction_fields(review) == {
        "likes": 0,
        "dislikes": 5,
        "liked": False,
        "disliked": True,
        "updatedAt": "2024-02-01T09:00:00Z"
    }


def test_ledger_uses_clock(make_review):
    ledger = ReactionLedger(clock=lambda: NOW)

    updated = ledger.toggle_dislike(ledger.toggle_like(make_review()))

    assert updated.disliked and not updated.liked
    assert updated.updated_at == NOW


# Run tests if executed directly
if __name__ == "__main__":
    pytest.main([__file__, "-v"])
