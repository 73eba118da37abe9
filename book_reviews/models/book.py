"""
Book Model

The central record of the catalog.

Aggregate Fields
================
average_rating and total_reviews are denormalized from the reviews
table. They are written only by services.ratings.recalculate_book_rating
and never accepted from clients, which keeps book listings free of
COUNT/AVG subqueries.
"""

from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, Integer, Numeric, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from book_reviews.database import Base

if TYPE_CHECKING:
    from book_reviews.models.review import Review


class Book(Base):
    """
    Book model representing books in the catalog.

    Table: books

    Fields:
    - title, author, genre: Required descriptive fields
    - published_year: Optional year of publication
    - description: Optional summary
    - average_rating: Mean review rating rounded to one decimal (0 if none)
    - total_reviews: Number of reviews

    Relationships:
    - reviews: One-to-Many (deleted together with the book)

    Example:
        book = Book(
            title="1984",
            author="George Orwell",
            genre="Dystopian",
            published_year=1949,
        )
    """

    __tablename__ = "books"

    id: Mapped[int] = mapped_column(primary_key=True)

    # -------------------------------------------------------------------------
    # Basic Fields
    # -------------------------------------------------------------------------
    title: Mapped[str] = mapped_column(
        String(500),
        index=True,
        nullable=False,
        comment="Book title"
    )

    author: Mapped[str] = mapped_column(
        String(255),
        index=True,
        nullable=False,
        comment="Author name"
    )

    genre: Mapped[str] = mapped_column(
        String(100),
        index=True,
        nullable=False,
        comment="Genre name"
    )

    published_year: Mapped[int | None] = mapped_column(
        Integer,
        index=True,
        nullable=True,
        comment="Year of publication"
    )

    description: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
        comment="Book description or summary"
    )

    # -------------------------------------------------------------------------
    # Rating Aggregates
    # -------------------------------------------------------------------------
    # Numeric(2, 1): 0.0 - 5.0
    average_rating: Mapped[Decimal] = mapped_column(
        Numeric(2, 1),
        default=Decimal("0"),
        server_default="0",
        index=True,
        nullable=False,
        comment="Average review rating (0.0-5.0), 0 if no reviews"
    )

    total_reviews: Mapped[int] = mapped_column(
        Integer,
        default=0,
        server_default="0",
        nullable=False,
        comment="Number of reviews for this book"
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    # -------------------------------------------------------------------------
    # Relationships
    # -------------------------------------------------------------------------
    reviews: Mapped[list["Review"]] = relationship(
        "Review",
        back_populates="book",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"Book(id={self.id}, title='{self.title}', author='{self.author}')"
