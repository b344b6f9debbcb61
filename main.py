"""
SNAFLEShub Reviews

CLI entry point for review stats, listings and reactions.
"""

import argparse
import logging
import sys
from pathlib import Path

from src.core.aggregation import format_rating, rating_label
from src.core.filtering import helpfulness
from src.errors import ReviewError
from src.models.criteria import FilterCriteria, SortKey
from src.service import ReviewService
from src.utils.reporting import export_reviews, export_summary
from src.utils.sample_data import sample_reviews
from src.utils.storage import ReviewStore
import config.settings as settings


def setup_logging(log_level: str = "INFO", log_file: str = settings.LOG_FILE):
    """Configure logging for the entire application."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format=settings.LOG_FORMAT,
        handlers=[
            logging.StreamHandler(sys.stdout),
            logging.FileHandler(log_file)
        ]
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="SNAFLEShub Reviews - marketplace review stats and listings",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Load the demo reviews for a product
  python main.py seed --type product --id 42

  # Stats panel, exported to CSV
  python main.py summary --type product --id 42 --export

  # Five-star reviews with photos, most helpful first
  python main.py list --type product --id 42 --rating 5 --with-images --sort most_helpful

  # Toggle reactions
  python main.py like product-42-1
  python main.py dislike product-42-1
        """
    )

    parser.add_argument(
        "--data-root",
        default=str(settings.DATA_ROOT),
        help=f"Data directory (default: {settings.DATA_ROOT})"
    )

    parser.add_argument(
        "--log-level",
        default=settings.LOG_LEVEL,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help=f"Logging level (default: {settings.LOG_LEVEL})"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    def add_subject_arguments(sub):
        sub.add_argument("--type", required=True, choices=["product", "vendor"],
                         help="Review subject type")
        sub.add_argument("--id", required=True, help="Product or vendor id")

    seed = subparsers.add_parser("seed", help="Load demo reviews for a subject")
    add_subject_arguments(seed)

    summary = subparsers.add_parser("summary", help="Show review statistics")
    add_subject_arguments(summary)
    summary.add_argument(
        "--export",
        action="store_true",
        help=f"Write stats CSV and metadata to {settings.OUTPUT_ROOT}"
    )

    listing = subparsers.add_parser("list", help="List filtered, sorted reviews")
    add_subject_arguments(listing)
    listing.add_argument("--search", help="Match title, comment or author name")
    listing.add_argument("--rating", default="all",
                         choices=["all", "1", "2", "3", "4", "5"],
                         help="Only reviews with exactly this rating")
    listing.add_argument("--with-images", action="store_true",
                         help="Only reviews with photos")
    listing.add_argument("--verified-only", action="store_true",
                         help="Only verified reviews")
    listing.add_argument("--sort", default=settings.DEFAULT_SORT_KEY,
                         choices=[key.value for key in SortKey],
                         help=f"Ordering (default: {settings.DEFAULT_SORT_KEY})")
    listing.add_argument("--page", type=int, default=1, help="Page number (default: 1)")
    listing.add_argument("--limit", type=int, default=settings.DEFAULT_PAGE_SIZE,
                         help=f"Page size, max {settings.MAX_PAGE_SIZE} "
                              f"(default: {settings.DEFAULT_PAGE_SIZE})")
    listing.add_argument("--export", metavar="PATH", help="Also write the page to CSV")

    for action in ("like", "dislike", "delete"):
        sub = subparsers.add_parser(action, help=f"{action.capitalize()} a review")
        sub.add_argument("review_id", help="Review id")

    return parser


def print_summary(service: ReviewService, subject_type: str, subject_id: str, export: bool):
    summary = service.summary(subject_type, subject_id)

    print("=" * 60)
    print(f"{subject_type.capitalize()} Reviews: {subject_id}")
    print("=" * 60)
    if summary.total_count == 0:
        print(f"No Reviews Yet. Be the first to review this {subject_type}!")
        return

    print(
        f"Rating: {format_rating(summary.average_rating)} "
        f"({rating_label(summary.average_rating)}), "
        f"based on {summary.total_count} review{'s' if summary.total_count != 1 else ''}"
    )
    for bucket in summary.distribution:
        bar = "#" * round(bucket.percentage / 5)
        print(f"  {bucket.stars} star  {bar:<20} {bucket.count}")
    if summary.recommend_count:
        print(
            f"Recommendation rate: {summary.recommend_percentage:.0f}% "
            f"({summary.recommend_count} out of {summary.total_count})"
        )

    print("Recent activity:")
    for review in service.recent_activity(subject_type, subject_id):
        print(f"  {review.user.name} rated {review.rating} on {review.created_at.date()}")
    print("=" * 60)

    if export:
        output_path = export_summary(summary, subject_type, subject_id, str(settings.OUTPUT_ROOT))
        print(f"Stats table: {output_path}")


def print_listing(service: ReviewService, args):
    criteria = FilterCriteria(
        search_text=args.search,
        rating_filter=args.rating,
        require_images=args.with_images,
        require_verified=args.verified_only
    )
    page = service.list_reviews(
        args.type, args.id, criteria, args.sort, page=args.page, limit=args.limit
    )

    print("=" * 60)
    print(
        f"Page {page.current_page} of {max(page.total_pages, 1)} "
        f"({page.total_reviews} matching reviews)"
    )
    print("=" * 60)
    for review in page.items:
        badge = " [verified]" if review.verified else ""
        print(f"{review.id}: {review.rating}/5 {review.title}{badge}")
        print(f"  by {review.user.name}, {review.created_at.date()}, "
              f"{len(review.images)} photo(s), helpful {helpfulness(review):+d}")

    if args.export:
        print(f"Exported to {export_reviews(page.items, args.export)}")


def main(argv=None):
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    setup_logging(args.log_level)
    logger = logging.getLogger(__name__)

    try:
        store = ReviewStore(str(Path(args.data_root) / settings.REVIEWS_FILE))
        service = ReviewService(store)

        if args.command == "seed":
            for review in sample_reviews(args.type, args.id):
                store.add_review(review)
            store.save()
            print(f"Seeded demo reviews for {args.type} {args.id}")

        elif args.command == "summary":
            print_summary(service, args.type, args.id, args.export)

        elif args.command == "list":
            print_listing(service, args)

        elif args.command in ("like", "dislike"):
            toggle = service.like if args.command == "like" else service.dislike
            review = toggle(args.review_id)
            print(
                f"Review {review.id}: {review.likes} likes, {review.dislikes} dislikes "
                f"(liked={review.liked}, disliked={review.disliked})"
            )

        elif args.command == "delete":
            service.delete_review(args.review_id)
            print(f"Review {args.review_id} deleted")

        return 0

    except (ReviewError, ValueError) as e:
        logger.error(f"{args.command} failed: {e}")
        print(f"\n❌ {e}")
        return 1

    except Exception as e:
        logger.error(f"{args.command} failed: {e}", exc_info=True)
        print(f"\n❌ {args.command} failed: {e}")
        print(f"Check {settings.LOG_FILE} for details")
        return 1


if __name__ == "__main__":
    sys.exit(main())
