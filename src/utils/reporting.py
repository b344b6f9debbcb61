"""
Review report export.

Writes a subject's rating distribution to CSV with a JSON metadata
sidecar, and dumps review listings to CSV.
"""

import json
import logging
import os
from typing import List, Sequence

import pandas as pd

from src.core.aggregation import format_rating, rating_label
from src.models.review import Review, format_timestamp, utcnow
from src.models.stats import ReviewStatsSummary

logger = logging.getLogger(__name__)

SUMMARY_COLUMNS = ["Stars", "Count", "Percentage"]
REVIEW_COLUMNS = [
    "Id", "Author", "Rating", "Title", "Verified", "Recommend",
    "Images", "Likes", "Dislikes", "Helpfulness", "Created"
]


def summary_frame(summary: ReviewStatsSummary) -> pd.DataFrame:
    """Rating distribution as a DataFrame, one row per star value (5..1)."""
    rows = [
        {
            "Stars": bucket.stars,
            "Count": bucket.count,
            "Percentage": bucket.percentage
        }
        for bucket in summary.distribution
    ]
    return pd.DataFrame(rows, columns=SUMMARY_COLUMNS)


def reviews_frame(reviews: Sequence[Review]) -> pd.DataFrame:
    """One row per review, in the given order."""
    rows = [
        {
            "Id": review.id,
            "Author": review.user.name,
            "Rating": review.rating,
            "Title": review.title,
            "Verified": review.verified,
            "Recommend": review.recommend,
            "Images": len(review.images),
            "Likes": review.likes,
            "Dislikes": review.dislikes,
            "Helpfulness": review.likes - review.dislikes,
            "Created": format_timestamp(review.created_at)
        }
        for review in reviews
    ]
    return pd.DataFrame(rows, columns=REVIEW_COLUMNS)


def export_summary(
    summary: ReviewStatsSummary,
    subject_type: str,
    subject_id: str,
    output_dir: str = "output"
) -> str:
    """
    Export a stats summary for one subject.

    Args:
        summary: Output of summarize()
        subject_type: "product" or "vendor"
        subject_id: Product or vendor id
        output_dir: Directory to save CSV output

    Returns:
        Path to generated CSV file
    """
    os.makedirs(output_dir, exist_ok=True)
    stem = f"stats_{subject_type}_{subject_id}"

    df = summary_frame(summary)
    output_path = os.path.join(output_dir, f"{stem}.csv")
    df.to_csv(output_path, index=False)
    logger.info(f"Rating distribution saved to {output_path} ({summary.total_count} reviews)")

    metadata_path = os.path.join(output_dir, f"{stem}_metadata.json")
    metadata = {
        "subject": {"type": subject_type, "id": str(subject_id)},
        "total_reviews": summary.total_count,
        "average_rating": summary.average_rating,
        "average_rating_display": format_rating(summary.average_rating),
        "rating_label": rating_label(summary.average_rating),
        "recommend_count": summary.recommend_count,
        "recommend_percentage": summary.recommend_percentage,
        "verified_count": summary.verified_count,
        "sub_ratings": summary.sub_ratings.to_dict(),
        "generated_at": format_timestamp(utcnow())
    }
    with open(metadata_path, 'w') as f:
        json.dump(metadata, f, indent=2)

    logger.info(f"Metadata saved to {metadata_path}")
    return output_path


def export_reviews(reviews: List[Review], output_path: str) -> str:
    """Write a review listing to CSV. Returns the path written."""
    directory = os.path.dirname(output_path)
    if directory:
        os.makedirs(directory, exist_ok=True)

    df = reviews_frame(reviews)
    df.to_csv(output_path, index=False)
    logger.info(f"Exported {len(df)} reviews to {output_path}")
    return output_path
