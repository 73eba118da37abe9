"""
Reviews Router

Endpoints:
- GET /books/{book_id}/reviews - List reviews for a book
- POST /books/{book_id}/reviews - Create a review (authenticated)
- GET /reviews/{review_id} - Get a specific review
- PUT /reviews/{review_id} - Update a review (owner only)
- DELETE /reviews/{review_id} - Delete a review (owner only)
- GET /users/{user_id}/reviews - Get reviews by a user

Writes go through services.reviews, which enforces the business rules
and refreshes the book's rating aggregates. Its domain errors are turned
into HTTP responses by the handler registered in main.py.
"""

import logging
import math

from fastapi import APIRouter, status
from sqlalchemy import func, select
from sqlalchemy.orm import selectinload

from book_reviews.dependencies import (
    CurrentUser,
    DbSession,
    Pagination,
    get_book_or_404,
    get_user_or_404,
)
from book_reviews.models import Review
from book_reviews.schemas import (
    ReviewCreate,
    ReviewListResponse,
    ReviewResponse,
    ReviewUpdate,
)
from book_reviews.services import reviews as review_service

logger = logging.getLogger(__name__)

router = APIRouter(
    tags=["Reviews"],
    responses={
        404: {"description": "Review or book not found"},
    },
)


def _paginated_reviews(db: DbSession, where_clause, pagination: Pagination) -> ReviewListResponse:
    """Count and fetch one page of reviews matching where_clause, newest first."""
    total = db.execute(select(func.count(Review.id)).where(where_clause)).scalar() or 0
    pages = math.ceil(total / pagination.per_page) if total > 0 else 0

    stmt = (
        select(Review)
        .options(selectinload(Review.user), selectinload(Review.book))
        .where(where_clause)
        .order_by(Review.created_at.desc(), Review.id.desc())
        .offset(pagination.skip)
        .limit(pagination.per_page)
    )
    reviews = db.execute(stmt).scalars().all()

    return ReviewListResponse(
        items=[ReviewResponse.model_validate(r) for r in reviews],
        total=total,
        page=pagination.page,
        per_page=pagination.per_page,
        pages=pages,
    )


# =============================================================================
# Book Review Endpoints
# =============================================================================


@router.get(
    "/books/{book_id}/reviews",
    response_model=ReviewListResponse,
    summary="List reviews for a book",
    description="Get a paginated list of reviews for a specific book.",
)
def list_book_reviews(
    book_id: int,
    db: DbSession,
    pagination: Pagination,
) -> ReviewListResponse:
    """List all reviews for a specific book, newest first."""
    get_book_or_404(db, book_id)
    return _paginated_reviews(db, Review.book_id == book_id, pagination)


@router.post(
    "/books/{book_id}/reviews",
    response_model=ReviewResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a review",
    description="Create a new review for a book. Requires authentication. One review per book per user.",
)
def create_review(
    book_id: int,
    review_data: ReviewCreate,
    db: DbSession,
    current_user: CurrentUser,
) -> ReviewResponse:
    """
    Create a new review for a book.

    Raises:
        404 if book not found
        400 if user already reviewed this book
        422 if the rating is not between 1 and 5
    """
    review = review_service.create_review(
        db,
        book_id=book_id,
        user_id=current_user.id,
        rating=review_data.rating,
        comment=review_data.comment,
    )
    return ReviewResponse.model_validate(review)


# =============================================================================
# Individual Review Endpoints
# =============================================================================


@router.get(
    "/reviews/{review_id}",
    response_model=ReviewResponse,
    summary="Get a review by ID",
    description="Retrieve a specific review with user and book information.",
)
def get_review(
    review_id: int,
    db: DbSession,
) -> ReviewResponse:
    """Get a single review by ID."""
    return ReviewResponse.model_validate(review_service.get_review(db, review_id))


@router.put(
    "/reviews/{review_id}",
    response_model=ReviewResponse,
    summary="Update a review",
    description="Update your own review. Only the review author can update.",
)
def update_review(
    review_id: int,
    review_data: ReviewUpdate,
    db: DbSession,
    current_user: CurrentUser,
) -> ReviewResponse:
    """
    Update an existing review.

    Only fields present in the request body are changed.

    Raises:
        404 if review not found
        403 if user is not the review author
    """
    review = review_service.update_review(
        db,
        review_id=review_id,
        user_id=current_user.id,
        changes=review_data.model_dump(exclude_unset=True),
    )
    return ReviewResponse.model_validate(review)


@router.delete(
    "/reviews/{review_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a review",
    description="Delete your own review. Only the review author can delete.",
)
def delete_review(
    review_id: int,
    db: DbSession,
    current_user: CurrentUser,
) -> None:
    """
    Delete a review.

    Raises:
        404 if review not found
        403 if user is not the review author
    """
    review_service.delete_review(db, review_id=review_id, user_id=current_user.id)


# =============================================================================
# User Review Endpoints
# =============================================================================


@router.get(
    "/users/{user_id}/reviews",
    response_model=ReviewListResponse,
    summary="List reviews by a user",
    description="Get a paginated list of reviews written by a specific user.",
)
def list_user_reviews(
    user_id: int,
    db: DbSession,
    pagination: Pagination,
) -> ReviewListResponse:
    """List all reviews by a specific user, newest first."""
    get_user_or_404(db, user_id)
    return _paginated_reviews(db, Review.user_id == user_id, pagination)
