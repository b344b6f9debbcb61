"""
Review data model.

Represents a single rating + comment attached to one product or one vendor.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional

from src.errors import MalformedReviewError

SUBJECT_TYPES = ("product", "vendor")


def utcnow() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def _is_int(value) -> bool:
    # bool is an int subclass but never a valid count or rating
    return isinstance(value, int) and not isinstance(value, bool)


def parse_timestamp(value) -> datetime:
    """
    Parse an ISO-8601 string or datetime into an aware UTC datetime.

    Naive values are taken as UTC. A trailing 'Z' is accepted.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            raise MalformedReviewError(f"Invalid timestamp: {value!r}")
    else:
        raise MalformedReviewError(f"Invalid timestamp: {value!r}")

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def format_timestamp(value: datetime) -> str:
    """Format an aware datetime with a trailing Z, as the marketplace API does."""
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


@dataclass
class UserRef:
    """Author identity. Owned externally, read-only here."""
    id: str
    name: str
    avatar_url: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict) -> "UserRef":
        if not isinstance(data, dict) or "name" not in data:
            raise MalformedReviewError(f"Invalid user reference: {data!r}")
        return cls(
            id=str(data.get("id", "")),
            name=data["name"],
            avatar_url=data.get("avatarUrl", data.get("avatar"))
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "avatarUrl": self.avatar_url
        }


@dataclass
class Subject:
    """
    The product or vendor a review is about.
    Exactly one of product_ref / vendor_ref is set.
    """
    product_ref: Optional[str] = None
    vendor_ref: Optional[str] = None

    def __post_init__(self):
        if (self.product_ref is None) == (self.vendor_ref is None):
            raise MalformedReviewError(
                "Subject must reference exactly one of product or vendor"
            )

    @classmethod
    def for_product(cls, product_id: str) -> "Subject":
        return cls(product_ref=str(product_id))

    @classmethod
    def for_vendor(cls, vendor_id: str) -> "Subject":
        return cls(vendor_ref=str(vendor_id))

    @classmethod
    def of(cls, subject_type: str, subject_id: str) -> "Subject":
        """Build a subject from a ('product' | 'vendor', id) pair."""
        if subject_type == "product":
            return cls.for_product(subject_id)
        if subject_type == "vendor":
            return cls.for_vendor(subject_id)
        raise ValueError(
            f"Invalid subject type: {subject_type}. Must be 'product' or 'vendor'"
        )

    @property
    def type(self) -> str:
        return "product" if self.product_ref is not None else "vendor"

    @property
    def ref(self) -> str:
        return self.product_ref if self.product_ref is not None else self.vendor_ref

    @classmethod
    def from_dict(cls, data: dict) -> "Subject":
        if not isinstance(data, dict):
            raise MalformedReviewError(f"Invalid subject: {data!r}")
        product_ref = data.get("productRef")
        vendor_ref = data.get("vendorRef")
        return cls(
            product_ref=str(product_ref) if product_ref is not None else None,
            vendor_ref=str(vendor_ref) if vendor_ref is not None else None
        )

    def to_dict(self) -> dict:
        if self.product_ref is not None:
            return {"productRef": self.product_ref}
        return {"vendorRef": self.vendor_ref}


@dataclass
class Review:
    """
    A review record.

    liked/disliked carry the current viewer's reaction. They are not
    cross-checked here; see src.core.reactions.
    """
    id: str
    user: UserRef
    rating: int  # 1-5 stars
    subject: Subject
    title: str = ""
    comment: str = ""
    images: List[str] = field(default_factory=list)
    likes: int = 0
    dislikes: int = 0
    liked: bool = False
    disliked: bool = False
    recommend: bool = False
    verified: bool = False
    delivery_rating: Optional[int] = None  # 0/None = not rated
    communication_rating: Optional[int] = None
    value_rating: Optional[int] = None
    created_at: datetime = field(default_factory=utcnow)
    updated_at: Optional[datetime] = None

    def __post_init__(self):
        if not _is_int(self.rating):
            raise MalformedReviewError(f"Invalid rating: {self.rating!r}. Must be an integer 1-5")
        if not (1 <= self.rating <= 5):
            raise MalformedReviewError(f"Invalid rating: {self.rating}. Must be 1-5")

        for name in ("likes", "dislikes"):
            if not _is_int(getattr(self, name)):
                raise MalformedReviewError(
                    f"Invalid {name} on review {self.id}: {getattr(self, name)!r}. "
                    f"Must be an integer"
                )
        if self.likes < 0 or self.dislikes < 0:
            raise MalformedReviewError(
                f"Negative reaction counters on review {self.id}: "
                f"likes={self.likes}, dislikes={self.dislikes}"
            )

        for name in ("delivery_rating", "communication_rating", "value_rating"):
            value = getattr(self, name)
            if value is None:
                continue
            if not _is_int(value) or not (0 <= value <= 5):
                raise MalformedReviewError(f"Invalid {name}: {value!r}. Must be 1-5 or 0/None")
            if value == 0:
                setattr(self, name, None)

        if not isinstance(self.images, (list, tuple)):
            raise MalformedReviewError(f"Invalid images on review {self.id}: {self.images!r}")
        self.images = list(self.images)
        self.created_at = parse_timestamp(self.created_at)
        if self.updated_at is None:
            self.updated_at = self.created_at
        else:
            self.updated_at = parse_timestamp(self.updated_at)

    @property
    def has_images(self) -> bool:
        return len(self.images) > 0

    @classmethod
    def from_dict(cls, data: dict) -> "Review":
        """Create Review from a JSON record. Raises MalformedReviewError."""
        if not isinstance(data, dict):
            raise MalformedReviewError(f"Review record must be an object, got {type(data).__name__}")
        for key in ("id", "user", "rating", "subject"):
            if key not in data:
                raise MalformedReviewError(f"Review record missing required field '{key}'")

        return cls(
            id=str(data["id"]),
            user=UserRef.from_dict(data["user"]),
            rating=data["rating"],
            subject=Subject.from_dict(data["subject"]),
            title=data.get("title") or "",
            comment=data.get("comment") or "",
            images=data.get("images") or [],
            likes=data.get("likes") or 0,
            dislikes=data.get("dislikes") or 0,
            liked=bool(data.get("liked", False)),
            disliked=bool(data.get("disliked", False)),
            recommend=bool(data.get("recommend", False)),
            verified=bool(data.get("verified", False)),
            delivery_rating=data.get("deliveryRating"),
            communication_rating=data.get("communicationRating"),
            value_rating=data.get("valueRating"),
            created_at=data.get("createdAt") or utcnow(),
            updated_at=data.get("updatedAt")
        )

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dict."""
        return {
            "id": self.id,
            "user": self.user.to_dict(),
            "rating": self.rating,
            "subject": self.subject.to_dict(),
            "title": self.title,
            "comment": self.comment,
            "images": list(self.images),
            "likes": self.likes,
            "dislikes": self.dislikes,
            "liked": self.liked,
            "disliked": self.disliked,
            "recommend": self.recommend,
            "verified": self.verified,
            "deliveryRating": self.delivery_rating,
            "communicationRating": self.communication_rating,
            "valueRating": self.value_rating,
            "createdAt": format_timestamp(self.created_at),
            "updatedAt": format_timestamp(self.updated_at)
        }


# Design Rationale and Trade-offs:
#
# 1. Why camelCase keys in from_dict/to_dict?
#    - Records are shared with the marketplace API and its frontend
#    - One JSON shape for the store, exports and API payloads
#    - Trade-off: Field names differ between Python and JSON
#
# 2. Why validate types in __post_init__?
#    - A bad record fails at load time with MalformedReviewError
#    - Aggregation and sorting never see strings where ints belong
#    - Trade-off: One corrupt record rejects the whole store file (restored from backup)
#
# 3. Why keep liked/disliked unchecked here?
#    - The exclusive-reaction rule belongs to the reaction ledger
#    - Loading a corrupt record still works, toggling it raises InvariantViolation
#    - Trade-off: Corrupt reaction state is only caught on the next toggle
#
# 4. Why 0 and None both mean "not rated" for sub-ratings?
#    - The review form submits 0 for untouched star pickers
#    - Normalized to None so averages skip them
