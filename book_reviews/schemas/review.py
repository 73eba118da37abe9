"""
Review Pydantic Schemas

Schemas:
- ReviewCreate: Create a new review
- ReviewUpdate: Update an existing review
- ReviewResponse: Full review data for API responses
- ReviewListResponse: Paginated list of reviews
- BookRatingStats: Aggregated rating statistics for a book

Request schemas only check types. Rating range and comment rules are
enforced by book_reviews.validators inside the review service, so every
caller gets the same ValidationError.
"""
# ruff: noqa: I001
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, StrictInt

from book_reviews.schemas.user import UserPublicResponse


class BookMinimal(BaseModel):
    """Minimal book info for embedding in review responses."""

    id: int = Field(..., description="Book ID")
    title: str = Field(..., description="Book title")
    author: str = Field(..., description="Author name")

    model_config = ConfigDict(from_attributes=True)


# =============================================================================
# Review Schemas
# =============================================================================


class ReviewCreate(BaseModel):
    """
    Schema for creating a new review.

    Example request body:
    {
        "rating": 5,
        "comment": "One of the best books I've ever read..."
    }
    """

    # Strict: JSON true or "5" must not coerce into a rating
    rating: StrictInt = Field(
        ...,
        description="Rating from 1 to 5 stars",
        examples=[4, 5],
    )

    comment: str | None = Field(
        default=None,
        description="Optional review text",
        examples=["This book changed my perspective on..."],
    )


class ReviewUpdate(BaseModel):
    """
    Schema for updating an existing review.

    Only fields present in the request body are changed.
    """

    rating: StrictInt | None = Field(
        default=None,
        description="Rating from 1 to 5 stars",
    )

    comment: str | None = Field(
        default=None,
        description="Review text (null clears it)",
    )


class ReviewResponse(BaseModel):
    """Review with the author's public profile and the reviewed book."""

    id: int = Field(..., description="Unique review identifier")
    book_id: int = Field(..., description="ID of the reviewed book")
    user_id: int = Field(..., description="ID of the user who wrote the review")
    rating: int = Field(..., ge=1, le=5, description="Rating from 1 to 5 stars")
    comment: str | None = Field(default=None, description="Review text")
    created_at: datetime = Field(..., description="When the review was created")
    updated_at: datetime = Field(..., description="When the review was last updated")

    user: UserPublicResponse = Field(..., description="User who wrote the review")
    book: BookMinimal = Field(..., description="Book being reviewed")

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": 1,
                "book_id": 42,
                "user_id": 7,
                "rating": 5,
                "comment": "This book completely changed my perspective on...",
                "created_at": "2024-01-15T10:30:00Z",
                "updated_at": "2024-01-15T10:30:00Z",
                "user": {"id": 7, "username": "booklover"},
                "book": {"id": 42, "title": "1984", "author": "George Orwell"},
            }
        },
    )


class ReviewListResponse(BaseModel):
    """Paginated list of reviews."""

    items: list[ReviewResponse] = Field(..., description="Reviews on this page")
    total: int = Field(..., ge=0, description="Total number of reviews")
    page: int = Field(..., ge=1, description="Current page number")
    per_page: int = Field(..., ge=1, le=100, description="Items per page")
    pages: int = Field(..., ge=0, description="Total number of pages")


# =============================================================================
# Aggregation Schemas
# =============================================================================


class BookRatingStats(BaseModel):
    """Aggregated rating statistics for a book."""

    book_id: int = Field(..., description="Book ID")
    average_rating: float = Field(
        ...,
        ge=0,
        le=5,
        description="Average rating (0-5, 0 means no reviews)"
    )
    total_reviews: int = Field(..., ge=0, description="Total number of reviews")
    rating_distribution: dict[int, int] = Field(
        default_factory=lambda: {1: 0, 2: 0, 3: 0, 4: 0, 5: 0},
        description="Count of each rating (1-5)"
    )
