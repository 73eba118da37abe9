"""
SQLAlchemy Models Package

Model Relationships:
- User -> Review: One-to-Many (a user writes many reviews)
- Book -> Review: One-to-Many (a book receives many reviews)

Import all models here to:
1. Make them available as: from book_reviews.models import Book, Review, User
2. Ensure Alembic discovers them for migrations
"""

from book_reviews.models.user import User
from book_reviews.models.book import Book
from book_reviews.models.review import Review

__all__ = [
    "User",
    "Book",
    "Review",
]
