"""
Review Lifecycle Service

Create, update and delete reviews while keeping the owning book's rating
aggregates in sync.

Every successful operation follows the same sequence:
1. Validate (existence, ownership, input)
2. Commit the review write
3. Recalculate the book's rating aggregates

Step 3 always runs last. If it fails, the review write stays committed
and the failure is logged: the review is the source of truth and the
aggregate is recomputed on the next change (or by
scripts/recalculate_ratings.py).

Uniqueness:
    Creation does not pre-check for an existing review. The
    uq_review_book_user constraint rejects the second insert, so two
    concurrent requests for the same (book, user) pair end with exactly
    one review and one DuplicateReviewError.
"""

import logging
from collections.abc import Mapping
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from book_reviews.exceptions import (
    DuplicateReviewError,
    ForbiddenError,
    NotFoundError,
    PersistenceError,
)
from book_reviews.models import Book, Review
from book_reviews.services.ratings import recalculate_book_rating
from book_reviews.validators import (
    validate_comment,
    validate_rating,
    validate_review_changes,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Helpers
# =============================================================================


def _review_exists(db: Session, book_id: int, user_id: int) -> bool:
    stmt = select(Review.id).where(
        Review.book_id == book_id,
        Review.user_id == user_id,
    )
    return db.execute(stmt).first() is not None


def _commit(db: Session, action: str) -> None:
    """Commit, turning storage failures into PersistenceError."""
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to {action}: {e}")
        raise PersistenceError() from e


def _refresh_book_rating(db: Session, book_id: int) -> None:
    try:
        recalculate_book_rating(db, book_id)
    except PersistenceError:
        logger.exception(
            f"Rating aggregates for book {book_id} are stale; "
            "they will be recomputed on the next review change"
        )


def get_review(db: Session, review_id: int) -> Review:
    """
    Get a review by ID with user and book loaded.

    Raises:
        NotFoundError: If the review does not exist
    """
    stmt = (
        select(Review)
        .options(selectinload(Review.user), selectinload(Review.book))
        .where(Review.id == review_id)
    )
    review = db.execute(stmt).scalar_one_or_none()

    if review is None:
        raise NotFoundError(f"Review with id {review_id} not found")
    return review


# =============================================================================
# Lifecycle Operations
# =============================================================================


def create_review(
    db: Session,
    book_id: int,
    user_id: int,
    rating: Any,
    comment: Any = None,
) -> Review:
    """
    Create a review and refresh the book's rating.

    Args:
        db: Database session
        book_id: ID of the book being reviewed
        user_id: ID of the authenticated user
        rating: Rating from 1 to 5
        comment: Optional review text

    Returns:
        The created review, with user and book loaded

    Raises:
        NotFoundError: If the book does not exist
        ValidationError: If the rating or comment is invalid
        DuplicateReviewError: If the user already reviewed this book
        PersistenceError: If the insert fails for any other reason
    """
    if db.get(Book, book_id) is None:
        raise NotFoundError(f"Book with id {book_id} not found")

    review = Review(
        book_id=book_id,
        user_id=user_id,
        rating=validate_rating(rating),
        comment=validate_comment(comment),
    )
    db.add(review)

    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        if _review_exists(db, book_id, user_id):
            logger.info(f"Duplicate review rejected: user {user_id}, book {book_id}")
            raise DuplicateReviewError() from e
        logger.error(f"Review insert failed for book {book_id}: {e}")
        raise PersistenceError() from e
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Review insert failed for book {book_id}: {e}")
        raise PersistenceError() from e

    review_id = review.id
    logger.info(f"Review {review_id} created: user {user_id}, book {book_id}")

    _refresh_book_rating(db, book_id)

    return get_review(db, review_id)


def update_review(
    db: Session,
    review_id: int,
    user_id: int,
    changes: Mapping[str, Any],
) -> Review:
    """
    Update the rating and/or comment of a review owned by the user.

    Args:
        db: Database session
        review_id: ID of the review to update
        user_id: ID of the acting user
        changes: Fields to change, any of "rating" and "comment"

    Returns:
        The updated review

    Raises:
        NotFoundError: If the review does not exist
        ForbiddenError: If the user does not own the review
        ValidationError: If a changed value is invalid
        PersistenceError: If the write fails
    """
    review = get_review(db, review_id)

    if review.user_id != user_id:
        raise ForbiddenError("You can only update your own reviews")

    cleaned = validate_review_changes(changes)
    for field, value in cleaned.items():
        setattr(review, field, value)

    book_id = review.book_id
    _commit(db, f"update review {review_id}")
    logger.info(f"Review {review_id} updated by user {user_id}")

    _refresh_book_rating(db, book_id)

    return get_review(db, review_id)


def delete_review(db: Session, review_id: int, user_id: int) -> None:
    """
    Delete a review owned by the user.

    Raises:
        NotFoundError: If the review does not exist
        ForbiddenError: If the user does not own the review
        PersistenceError: If the delete fails
    """
    review = get_review(db, review_id)

    if review.user_id != user_id:
        raise ForbiddenError("You can only delete your own reviews")

    book_id = review.book_id
    db.delete(review)
    _commit(db, f"delete review {review_id}")
    logger.info(f"Review {review_id} deleted by user {user_id}")

    _refresh_book_rating(db, book_id)
