"""
Ratings Service

Maintains the denormalized rating fields on the Book model:
- average_rating: The mean of all review ratings, rounded half-up to one decimal
- total_reviews: Total number of reviews

These fields are recomputed from the full review set whenever a review is
created, updated, or deleted. A full recompute (rather than adjusting a
running sum) means a redundant or out-of-order call can never leave the
book in a wrong state for longer than the next review mutation.
"""

import logging
from decimal import ROUND_HALF_UP, Decimal

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from book_reviews.exceptions import PersistenceError
from book_reviews.models import Book, Review

logger = logging.getLogger(__name__)

ONE_DECIMAL = Decimal("0.1")


def compute_average(total: int, count: int) -> Decimal:
    """
    Mean rating rounded half-up to one decimal place.

    Args:
        total: Sum of all ratings
        count: Number of ratings

    Returns:
        The rounded mean, or Decimal("0") when there are no ratings

    Example:
        >>> compute_average(8, 2)
        Decimal('4.0')
        >>> compute_average(13, 3)
        Decimal('4.3')
    """
    if count == 0:
        return Decimal("0")
    return (Decimal(total) / Decimal(count)).quantize(ONE_DECIMAL, rounding=ROUND_HALF_UP)


def recalculate_book_rating(db: Session, book_id: int) -> bool:
    """
    Recalculate and persist a book's rating aggregations.

    Called after any review create/update/delete operation, once the
    triggering write has been committed.

    Args:
        db: Database session
        book_id: ID of the book to update

    Returns:
        True if the book was updated, False if it no longer exists

    Raises:
        PersistenceError: If reading the reviews or writing the book fails

    Note:
        This function commits the changes to the database.
    """
    try:
        stmt = select(
            func.count(Review.id),
            func.coalesce(func.sum(Review.rating), 0),
        ).where(Review.book_id == book_id)
        count, total = db.execute(stmt).one()

        book = db.get(Book, book_id)
        if book is None:
            # Deleted concurrently; nothing to refresh
            logger.debug(f"Skipping rating refresh for missing book {book_id}")
            return False

        average = compute_average(int(total), int(count))
        book.average_rating = average
        book.total_reviews = int(count)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Rating refresh failed for book {book_id}: {e}")
        raise PersistenceError() from e

    logger.debug(
        f"Book {book_id} rating refreshed: "
        f"average={average} total={count}"
    )
    return True


def recalculate_all_book_ratings(db: Session) -> int:
    """
    Recalculate rating aggregations for all books.

    Useful for repairing aggregates left stale by a failed refresh. A
    book whose refresh fails is logged and skipped; the rest are still
    repaired.

    Args:
        db: Database session

    Returns:
        Number of books updated
    """
    book_ids = db.execute(select(Book.id)).scalars().all()

    updated = 0
    failed = []
    for book_id in book_ids:
        try:
            if recalculate_book_rating(db, book_id):
                updated += 1
        except PersistenceError:
            logger.exception(f"Rating recalculation failed for book {book_id}")
            failed.append(book_id)

    if failed:
        logger.warning(
            f"Rating recalculation failed for {len(failed)} book(s): "
            f"{', '.join(map(str, failed))}"
        )

    return updated
