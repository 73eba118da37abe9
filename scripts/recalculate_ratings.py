#!/usr/bin/env python3
"""
Rating Recalculation Script

Recomputes average_rating and total_reviews for books from their reviews.
Run it after a failed rating refresh was logged, or after editing the
reviews table by hand.

Usage:
    # From project root with venv activated:
    python scripts/recalculate_ratings.py

    # Options:
    python scripts/recalculate_ratings.py --book-id 42   # A single book
"""

import argparse
import logging
import sys
from pathlib import Path

# Add project root to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from book_reviews.database import SessionLocal, dispose_engine, init_engine
from book_reviews.exceptions import PersistenceError
from book_reviews.services.ratings import (
    recalculate_all_book_ratings,
    recalculate_book_rating,
)

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def recalculate(book_id: int | None = None) -> int:
    """
    Recalculate rating aggregates.

    Args:
        book_id: Only refresh this book; all books when None

    Returns:
        Number of books updated
    """
    init_engine()
    db = SessionLocal()

    try:
        if book_id is not None:
            logger.info(f"Recalculating rating for book {book_id}...")
            try:
                updated = 1 if recalculate_book_rating(db, book_id) else 0
            except PersistenceError:
                logger.exception(f"Rating recalculation failed for book {book_id}")
                return 0
            if not updated:
                logger.warning(f"Book {book_id} not found")
        else:
            logger.info("Recalculating ratings for all books...")
            updated = recalculate_all_book_ratings(db)

        logger.info(f"Books updated: {updated}")
        return updated
    finally:
        db.close()
        dispose_engine()


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Recalculate book rating aggregates from reviews"
    )
    parser.add_argument(
        "--book-id",
        type=int,
        default=None,
        help="Only recalculate this book (default: all books)"
    )

    args = parser.parse_args()
    recalculate(book_id=args.book_id)


if __name__ == "__main__":
    main()
