"""
Pydantic Schemas Package

Request/response validation, kept separate from the SQLAlchemy models
so responses expose exactly the fields we choose (never password hashes)
and clients can never write derived fields such as average_rating.

Schema Naming Convention:
- XxxCreate: Fields required when creating a new record
- XxxUpdate: Fields allowed when updating (all optional)
- XxxResponse: Fields returned in API responses
"""

from book_reviews.schemas.book import (
    BookBase,
    BookCreate,
    BookListResponse,
    BookResponse,
)
from book_reviews.schemas.user import (
    TokenResponse,
    UserCreate,
    UserPublicResponse,
    UserResponse,
)
from book_reviews.schemas.review import (
    BookRatingStats,
    ReviewCreate,
    ReviewListResponse,
    ReviewResponse,
    ReviewUpdate,
)

__all__ = [
    # Book schemas
    "BookBase",
    "BookCreate",
    "BookResponse",
    "BookListResponse",
    # User schemas
    "UserCreate",
    "UserResponse",
    "UserPublicResponse",
    "TokenResponse",
    # Review schemas
    "ReviewCreate",
    "ReviewUpdate",
    "ReviewResponse",
    "ReviewListResponse",
    "BookRatingStats",
]
