"""
FastAPI Dependencies Module

Reusable components injected into route handlers with Depends():
- Database sessions (per-request)
- Authentication (current user from a JWT bearer token)
- Pagination and book filter parameters
- Lookup helpers that raise 404
"""

from typing import Annotated, Literal

from fastapi import Depends, HTTPException, Query, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy import select
from sqlalchemy.orm import Session

from book_reviews.config import get_settings
from book_reviews.database import get_db
from book_reviews.exceptions import NotFoundError
from book_reviews.models import Book, User
from book_reviews.services.security import verify_token_type

settings = get_settings()

DbSession = Annotated[Session, Depends(get_db)]


# =============================================================================
# Pagination Parameters
# =============================================================================
class PaginationParams:
    """
    Common pagination parameters for list endpoints.

    - page: Which page to return (1-indexed)
    - per_page: How many items per page
    - skip: Calculated offset for database query
    """

    def __init__(
        self,
        page: int = Query(
            default=1,
            ge=1,
            description="Page number (1-indexed)",
            examples=[1, 2, 3],
        ),
        per_page: int = Query(
            default=10,
            ge=1,
            le=100,
            description="Number of items per page (max 100)",
            examples=[10, 25, 50],
        ),
    ) -> None:
        self.page = page
        self.per_page = per_page

    @property
    def skip(self) -> int:
        """Number of records to skip: page 1 → 0, page 2 → per_page, ..."""
        return (self.page - 1) * self.per_page


Pagination = Annotated[PaginationParams, Depends()]


# =============================================================================
# Book Filters
# =============================================================================
BookSort = Literal["newest", "oldest", "rating", "title"]


class BookSearchParams:
    """
    Search, filter and sort parameters for the book list.

    All parameters are optional and can be combined.

    Usage:
        GET /api/v1/books/?q=orwell&genre=dystopian&min_year=1940&sort=rating
    """

    def __init__(
        self,
        q: str | None = Query(
            default=None,
            min_length=1,
            max_length=100,
            description="Search query (matches title or author)",
            examples=["orwell", "pride"],
        ),
        author: str | None = Query(
            default=None,
            min_length=1,
            max_length=100,
            description="Filter by author (partial match, case-insensitive)",
        ),
        genre: str | None = Query(
            default=None,
            min_length=1,
            max_length=100,
            description="Filter by genre (exact match, case-insensitive)",
        ),
        min_year: int | None = Query(
            default=None,
            ge=0,
            le=9999,
            description="Minimum publication year",
        ),
        max_year: int | None = Query(
            default=None,
            ge=0,
            le=9999,
            description="Maximum publication year",
        ),
        sort: BookSort = Query(
            default="newest",
            description="Sort order: newest, oldest, rating (highest first), title",
        ),
    ) -> None:
        self.q = q
        self.author = author
        self.genre = genre
        self.min_year = min_year
        self.max_year = max_year
        self.sort = sort


BookFilters = Annotated[BookSearchParams, Depends()]


# =============================================================================
# Lookup Helpers
# =============================================================================
def get_book_or_404(db: Session, book_id: int) -> Book:
    """Get a book by ID or raise NotFoundError (rendered as 404)."""
    book = db.get(Book, book_id)
    if book is None:
        raise NotFoundError(f"Book with id {book_id} not found")
    return book


def get_user_or_404(db: Session, user_id: int) -> User:
    """Get a user by ID or raise NotFoundError."""
    user = db.get(User, user_id)
    if user is None:
        raise NotFoundError(f"User with id {user_id} not found")
    return user


# =============================================================================
# JWT Authentication
# =============================================================================
# OAuth2PasswordBearer extracts the token from "Authorization: Bearer <token>"
# and returns 401 if the header is missing.

oauth2_scheme = OAuth2PasswordBearer(
    tokenUrl=f"/api/{settings.api_version}/auth/login",
    auto_error=True,
)


def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> User:
    """
    Extract and validate the current user from JWT token.

    Returns:
        User object for the authenticated user

    Raises:
        HTTPException: 401 if token is invalid or user not found
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    payload = verify_token_type(token, "access")
    if payload is None:
        raise credentials_exception

    user_id = payload.get("sub")
    if user_id is None:
        raise credentials_exception

    try:
        user_pk = int(user_id)
    except (TypeError, ValueError):
        raise credentials_exception

    user = db.execute(select(User).where(User.id == user_pk)).scalar_one_or_none()
    if user is None:
        raise credentials_exception

    return user


CurrentUser = Annotated[User, Depends(get_current_user)]
