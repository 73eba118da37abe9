"""
Books Router

Catalog endpoints:
- GET /books/ - List books with search, filters, sorting and pagination
- POST /books/ - Add a book (authenticated)
- GET /books/{book_id} - Get a book with its rating aggregates
- GET /books/{book_id}/rating - Rating statistics with distribution

Rating aggregates (average_rating, total_reviews) are read-only here;
they are maintained by the review service.
"""

import logging
import math

from fastapi import APIRouter, status
from sqlalchemy import func, or_, select

from book_reviews.dependencies import (
    BookFilters,
    CurrentUser,
    DbSession,
    Pagination,
    get_book_or_404,
)
from book_reviews.models import Book, Review
from book_reviews.schemas import (
    BookCreate,
    BookListResponse,
    BookRatingStats,
    BookResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/books",
    tags=["Books"],
    responses={
        404: {"description": "Book not found"},
    },
)

SORT_ORDERS = {
    "newest": (Book.created_at.desc(), Book.id.desc()),
    "oldest": (Book.created_at.asc(), Book.id.asc()),
    "rating": (Book.average_rating.desc(), Book.total_reviews.desc(), Book.id.asc()),
    "title": (Book.title.asc(), Book.id.asc()),
}


# =============================================================================
# Helper Functions
# =============================================================================
def apply_book_filters(stmt, filters: BookFilters):
    """
    Apply search and filter parameters to a book query.

    - q: Search across title and author (partial match)
    - author: Partial, case-insensitive match on author
    - genre: Case-insensitive match on genre
    - min_year/max_year: Publication year range

    Returns:
        Modified SQLAlchemy select statement with filters applied
    """
    if filters.q:
        search_term = f"%{filters.q.lower()}%"
        stmt = stmt.where(
            or_(
                func.lower(Book.title).like(search_term),
                func.lower(Book.author).like(search_term),
            )
        )

    if filters.author:
        stmt = stmt.where(func.lower(Book.author).like(f"%{filters.author.lower()}%"))

    if filters.genre:
        stmt = stmt.where(func.lower(Book.genre) == filters.genre.lower())

    if filters.min_year is not None:
        stmt = stmt.where(Book.published_year >= filters.min_year)
    if filters.max_year is not None:
        stmt = stmt.where(Book.published_year <= filters.max_year)

    return stmt


# =============================================================================
# Endpoints
# =============================================================================
@router.get(
    "/",
    response_model=BookListResponse,
    summary="List books",
    description="Get a paginated list of books with optional search, filters and sorting.",
)
def list_books(
    db: DbSession,
    pagination: Pagination,
    filters: BookFilters,
) -> BookListResponse:
    """
    List books with pagination.

    Examples:
        GET /api/v1/books/?q=orwell
        GET /api/v1/books/?genre=fantasy&min_year=1950&sort=rating
    """
    base_stmt = apply_book_filters(select(Book), filters)

    count_stmt = select(func.count()).select_from(base_stmt.subquery())
    total = db.execute(count_stmt).scalar() or 0

    pages = math.ceil(total / pagination.per_page) if total > 0 else 0

    stmt = (
        base_stmt
        .order_by(*SORT_ORDERS[filters.sort])
        .offset(pagination.skip)
        .limit(pagination.per_page)
    )
    books = db.execute(stmt).scalars().all()

    return BookListResponse(
        items=[BookResponse.model_validate(book) for book in books],
        total=total,
        page=pagination.page,
        per_page=pagination.per_page,
        pages=pages,
    )


@router.post(
    "/",
    response_model=BookResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add a book",
    description="Add a new book to the catalog. Requires authentication.",
)
def create_book(
    book_data: BookCreate,
    db: DbSession,
    current_user: CurrentUser,
) -> BookResponse:
    """
    Create a new book.

    New books start with average_rating 0 and total_reviews 0.
    """
    book = Book(**book_data.model_dump())

    db.add(book)
    db.commit()
    db.refresh(book)

    logger.info(f"Book {book.id} created by user {current_user.id}")

    return BookResponse.model_validate(book)


@router.get(
    "/{book_id}",
    response_model=BookResponse,
    summary="Get a book by ID",
    description="Retrieve a book with its rating aggregates.",
)
def get_book(
    book_id: int,
    db: DbSession,
) -> BookResponse:
    """Get a single book by its ID."""
    return BookResponse.model_validate(get_book_or_404(db, book_id))


@router.get(
    "/{book_id}/rating",
    response_model=BookRatingStats,
    summary="Get book rating statistics",
    description="Get aggregated rating statistics for a book.",
)
def get_book_rating_stats(
    book_id: int,
    db: DbSession,
) -> BookRatingStats:
    """
    Get rating statistics for a book.

    Returns:
        - Average rating and total review count (the stored aggregates)
        - Rating distribution (count of each rating 1-5)
    """
    book = get_book_or_404(db, book_id)

    distribution = {1: 0, 2: 0, 3: 0, 4: 0, 5: 0}
    if book.total_reviews > 0:
        dist_stmt = (
            select(Review.rating, func.count(Review.id))
            .where(Review.book_id == book_id)
            .group_by(Review.rating)
        )
        for rating, count in db.execute(dist_stmt).all():
            distribution[rating] = count

    return BookRatingStats(
        book_id=book_id,
        average_rating=float(book.average_rating),
        total_reviews=book.total_reviews,
        rating_distribution=distribution,
    )
