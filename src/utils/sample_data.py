"""
Demo reviews.

The storefront's sample review set, attachable to any product or vendor.
Used to seed a local store and in tests.
"""

import logging
from typing import List

from src.models.review import Review, Subject, UserRef

logger = logging.getLogger(__name__)

AVATAR = "https://images.unsplash.com/{}?w=40&h=40&fit=crop&crop=face"
IMAGE = "https://images.unsplash.com/{}?w=300&h=300&fit=crop"

# (user id, name, avatar photo, rating, title, comment, image photos,
#  likes, dislikes, recommend, (delivery, communication, value), created)
SAMPLE_TEMPLATES = [
    (
        "1", "Sarah Johnson", "photo-1494790108755-2616b612b786", 5,
        "Absolutely amazing product!",
        "This exceeded my expectations in every way. The quality is outstanding "
        "and the vendor was very responsive. Highly recommend!",
        ["photo-1515562141207-7a88fb7ce338", "photo-1586023492125-27b2c045efd7"],
        12, 0, True, (5, 5, 5), "2024-01-15T10:30:00Z"
    ),
    (
        "2", "Mike Wilson", "photo-1472099645785-5658abf4ff4e", 4,
        "Good quality, fast delivery",
        "The product arrived quickly and was well packaged. Quality is good for "
        "the price. Would order again.",
        [],
        8, 1, True, (4, 4, 4), "2024-01-14T15:45:00Z"
    ),
    (
        "3", "Emma Davis", "photo-1438761681033-6461ffad8d80", 3,
        "Decent but could be better",
        "The product is okay but not exactly what I expected. The vendor was "
        "helpful though. Average experience.",
        ["photo-1472851294608-062f824d29cc"],
        3, 2, False, (3, 4, 3), "2024-01-13T09:20:00Z"
    ),
    (
        "4", "John Smith", "photo-1507003211169-0a1dd7228f2d", 5,
        "Perfect! Will definitely order again",
        "Exceptional quality and service. The vendor went above and beyond to "
        "ensure I was satisfied. Highly recommend!",
        [
            "photo-1515562141207-7a88fb7ce338",
            "photo-1586023492125-27b2c045efd7",
            "photo-1472851294608-062f824d29cc",
        ],
        15, 0, True, (5, 5, 5), "2024-01-12T14:15:00Z"
    ),
]


def sample_reviews(subject_type: str, subject_id: str) -> List[Review]:
    """
    Build the demo review set for one subject.

    Review ids are derived from the subject so several subjects can be
    seeded into one store.
    """
    subject = Subject.of(subject_type, subject_id)
    reviews = []

    for (user_id, name, avatar, rating, title, comment, photos,
         likes, dislikes, recommend, sub_ratings, created) in SAMPLE_TEMPLATES:
        delivery, communication, value = sub_ratings
        reviews.append(Review(
            id=f"{subject_type}-{subject_id}-{user_id}",
            user=UserRef(id=user_id, name=name, avatar_url=AVATAR.format(avatar)),
            rating=rating,
            subject=subject,
            title=title,
            comment=comment,
            images=[IMAGE.format(photo) for photo in photos],
            likes=likes,
            dislikes=dislikes,
            recommend=recommend,
            verified=True,
            delivery_rating=delivery,
            communication_rating=communication,
            value_rating=value,
            created_at=created
        ))

    logger.info(f"Generated {len(reviews)} sample reviews for {subject_type} {subject_id}")
    return reviews
