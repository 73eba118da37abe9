"""
Book Pydantic Schemas

- BookCreate: Fields a client may set when adding a book
- BookResponse: Book with its rating aggregates
- BookListResponse: Paginated list of books

average_rating and total_reviews appear only in responses. BookCreate
ignores them if a client sends them.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class BookBase(BaseModel):
    """Shared book fields with validation."""

    title: str = Field(
        ...,
        min_length=1,
        max_length=500,
        description="Book title",
        examples=["1984", "Pride and Prejudice"],
    )

    author: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Author name",
        examples=["George Orwell"],
    )

    genre: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Genre",
        examples=["Dystopian", "Romance"],
    )

    published_year: int | None = Field(
        default=None,
        ge=0,
        le=9999,
        description="Year of publication",
        examples=[1949],
    )

    description: str | None = Field(
        default=None,
        max_length=5000,
        description="Book description or summary",
        examples=["A dystopian novel set in a totalitarian society..."],
    )

    @field_validator("title", "author", "genre")
    @classmethod
    def must_not_be_blank(cls, v: str) -> str:
        """Reject whitespace-only values and strip the rest."""
        if not v.strip():
            raise ValueError("Value cannot be empty or whitespace")
        return v.strip()


class BookCreate(BookBase):
    """
    Schema for creating a new book.

    Example request body:
    {
        "title": "1984",
        "author": "George Orwell",
        "genre": "Dystopian",
        "published_year": 1949
    }
    """

    pass


class BookResponse(BookBase):
    """Book returned by the API, including rating aggregates."""

    id: int = Field(..., description="Unique book identifier")
    average_rating: float = Field(
        ...,
        ge=0,
        le=5,
        description="Average rating rounded to one decimal (0 means no reviews)",
    )
    total_reviews: int = Field(..., ge=0, description="Number of reviews")
    created_at: datetime = Field(..., description="When the book was added")

    @field_validator("average_rating", mode="before")
    @classmethod
    def decimal_to_float(cls, v: Any) -> Any:
        """Stored as Numeric; serialized as a JSON number."""
        if isinstance(v, Decimal):
            return float(v)
        return v

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": 1,
                "title": "1984",
                "author": "George Orwell",
                "genre": "Dystopian",
                "published_year": 1949,
                "description": "A dystopian novel...",
                "average_rating": 4.3,
                "total_reviews": 12,
                "created_at": "2024-01-15T10:30:00Z",
            }
        },
    )


class BookListResponse(BaseModel):
    """Paginated list of books."""

    items: list[BookResponse] = Field(..., description="Books on this page")
    total: int = Field(..., ge=0, description="Total number of matching books")
    page: int = Field(..., ge=1, description="Current page number")
    per_page: int = Field(..., ge=1, le=100, description="Items per page")
    pages: int = Field(..., ge=0, description="Total number of pages")
