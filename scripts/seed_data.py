#!/usr/bin/env python3
"""
Database Seed Script

Populates the database with sample data for development.

USAGE:
    # Make sure you're in the project root with venv activated
    python scripts/seed_data.py

This script:
1. Connects to the database using app settings
2. Clears existing data (optional)
3. Creates sample users and books
4. Writes reviews through the review service, so every book's
   rating aggregates are computed the same way the API computes them
"""

import sys
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from sqlalchemy import delete
from sqlalchemy.orm import Session

from book_reviews.database import SessionLocal, create_tables, init_engine
from book_reviews.models import Book, Review, User
from book_reviews.services.reviews import create_review
from book_reviews.services.security import hash_password

SEED_PASSWORD = "Password123"


def clear_data(db: Session) -> None:
    """Clear all existing data from the database."""
    print("Clearing existing data...")
    db.execute(delete(Review))
    db.execute(delete(Book))
    db.execute(delete(User))
    db.commit()
    print("Data cleared.")


def create_users(db: Session) -> dict[str, User]:
    """Create sample users, all sharing SEED_PASSWORD."""
    print("Creating users...")
    usernames = ["alice", "bob", "carol", "dave"]

    users = {}
    for username in usernames:
        user = User(
            username=username,
            email=f"{username}@example.com",
            hashed_password=hash_password(SEED_PASSWORD),
        )
        db.add(user)
        users[username] = user

    db.commit()
    print(f"Created {len(users)} users.")
    return users


def create_books(db: Session) -> dict[str, Book]:
    """Create sample books."""
    print("Creating books...")
    books_data = [
        {
            "title": "1984",
            "author": "George Orwell",
            "genre": "Dystopian",
            "published_year": 1949,
            "description": "A dystopian social science fiction novel "
                           "about totalitarianism and surveillance.",
        },
        {
            "title": "Pride and Prejudice",
            "author": "Jane Austen",
            "genre": "Romance",
            "published_year": 1813,
            "description": "A romantic novel of manners following Elizabeth Bennet.",
        },
        {
            "title": "The Old Man and the Sea",
            "author": "Ernest Hemingway",
            "genre": "Literary Fiction",
            "published_year": 1952,
        },
        {
            "title": "Murder on the Orient Express",
            "author": "Agatha Christie",
            "genre": "Mystery",
            "published_year": 1934,
            "description": "Hercule Poirot investigates a murder aboard a snowbound train.",
        },
        {
            "title": "Foundation",
            "author": "Isaac Asimov",
            "genre": "Science Fiction",
            "published_year": 1951,
        },
        {
            "title": "The Hobbit",
            "author": "J.R.R. Tolkien",
            "genre": "Fantasy",
            "published_year": 1937,
            "description": "Bilbo Baggins joins a quest to reclaim a dwarven kingdom.",
        },
    ]

    books = {}
    for book_data in books_data:
        book = Book(**book_data)
        db.add(book)
        books[book_data["title"]] = book

    db.commit()
    print(f"Created {len(books)} books.")
    return books


def create_reviews(
    db: Session,
    users: dict[str, User],
    books: dict[str, Book],
) -> int:
    """Create sample reviews through the review service."""
    print("Creating reviews...")
    reviews_data = [
        ("alice", "1984", 5, "Chilling and still relevant."),
        ("bob", "1984", 4, None),
        ("carol", "1984", 5, "A must read."),
        ("alice", "The Hobbit", 5, "Perfect adventure story."),
        ("dave", "The Hobbit", 4, None),
        ("bob", "Pride and Prejudice", 3, "Slow start, great ending."),
        ("carol", "Foundation", 4, None),
        ("dave", "Murder on the Orient Express", 5, "Did not see that coming."),
    ]

    for username, title, rating, comment in reviews_data:
        create_review(
            db,
            book_id=books[title].id,
            user_id=users[username].id,
            rating=rating,
            comment=comment,
        )

    print(f"Created {len(reviews_data)} reviews.")
    return len(reviews_data)


def seed_database(clear_existing: bool = True) -> None:
    """
    Main function to seed the database.

    Args:
        clear_existing: If True, clears existing data before seeding.
    """
    print("=" * 60)
    print("Starting database seed...")
    print("=" * 60)

    init_engine()
    # Create tables if they don't exist
    create_tables()

    db = SessionLocal()

    try:
        if clear_existing:
            clear_data(db)

        users = create_users(db)
        books = create_books(db)
        review_count = create_reviews(db, users, books)

        print("=" * 60)
        print("Database seeding completed successfully!")
        print("=" * 60)
        print("\nSummary:")
        print(f"  - Users: {len(users)} (password: {SEED_PASSWORD})")
        print(f"  - Books: {len(books)}")
        print(f"  - Reviews: {review_count}")
        print("\nAPI documentation at http://localhost:5000/docs")

    except Exception as e:
        print(f"Error seeding database: {e}")
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    seed_database()
