"""
Shared fixtures for review tests.
"""

import pytest
from datetime import datetime, timedelta, timezone

from src.models.review import Review, Subject, UserRef

BASE_TIME = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def make_review():
    """Factory for reviews with sensible defaults, one hour apart."""
    counter = {"n": 0}

    def _make(**overrides):
        counter["n"] += 1
        n = counter["n"]
        fields = {
            "id": f"r{n}",
            "user": UserRef(id=f"u{n}", name=f"User {n}"),
            "rating": 5,
            "subject": Subject.for_product("p1"),
            "title": f"Review {n}",
            "comment": "Nice product",
            "created_at": BASE_TIME + timedelta(hours=n),
        }
        fields.update(overrides)
        return Review(**fields)

    return _make
