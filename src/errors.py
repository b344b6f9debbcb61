"""
Review error hierarchy.

All errors raised by the review core are local to a single record.
"""


class ReviewError(Exception):
    """Base exception for review-related errors"""
    pass


class MalformedReviewError(ReviewError, ValueError):
    """Raised when a review record violates the data contract"""
    pass


class InvariantViolation(ReviewError):
    """Raised when a review's reaction state is already corrupted"""
    pass


class ReviewNotFoundError(ReviewError):
    """Raised when a review cannot be found"""
    pass


class DuplicateReviewError(ReviewError):
    """Raised when a user has already reviewed a subject"""
    pass
