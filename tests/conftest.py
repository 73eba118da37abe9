"""
pytest Fixtures for Book Review API Tests

Shared fixtures used across all test files.

DATABASE ISOLATION:
===================
Each test gets its own SQLite in-memory database (function-scoped
engine). The review service commits and rolls back on its own, so tests
cannot share one outer transaction; a fresh database per test keeps them
independent instead.

The app's get_db dependency is overridden to hand out the test session,
so API calls and direct service calls in a test see the same data.
"""

# =============================================================================
# TEST ENVIRONMENT SETUP
# =============================================================================
# IMPORTANT: Set environment variables BEFORE importing the app
import os

os.environ["SECRET_KEY"] = "test-secret-key-for-unit-tests-at-least-32-characters-long"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["DATABASE_AUTO_CREATE"] = "false"

from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from book_reviews.database import Base, get_db
from book_reviews.main import app
from book_reviews.models import Book, Review, User
from book_reviews.services.security import create_access_token, hash_password


# =============================================================================
# DATABASE FIXTURES
# =============================================================================


@pytest.fixture
def engine():
    """
    Create a SQLite in-memory database engine with all tables.

    StaticPool keeps the single connection alive for the whole test.
    Without it, the in-memory database would disappear between connections.
    """
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)

    yield engine

    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(engine) -> Generator[Session, None, None]:
    """Create a database session for one test."""
    TestSessionLocal = sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=engine,
    )
    session = TestSessionLocal()

    yield session

    session.close()


@pytest.fixture
def client(db_session: Session) -> Generator[TestClient, None, None]:
    """
    Create a test client with the test database.

    We override the get_db dependency to use our test session.
    """

    def override_get_db():
        """Provide test database session instead of real one."""
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


# =============================================================================
# HELPERS
# =============================================================================


def get_auth_header(user: User) -> dict:
    """Create authorization header for a user."""
    token = create_access_token({"sub": str(user.id)})
    return {"Authorization": f"Bearer {token}"}


def make_user(db: Session, username: str, password: str = "SecurePass123") -> User:
    """Insert a user directly, bypassing the registration endpoint."""
    user = User(
        email=f"{username}@example.com",
        username=username,
        hashed_password=hash_password(password),
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def make_book(db: Session, title: str = "1984", **fields) -> Book:
    """Insert a book directly with sensible defaults."""
    fields.setdefault("author", "George Orwell")
    fields.setdefault("genre", "Dystopian")
    book = Book(title=title, **fields)
    db.add(book)
    db.commit()
    db.refresh(book)
    return book


# =============================================================================
# SAMPLE DATA FIXTURES
# =============================================================================


@pytest.fixture
def sample_user(db_session: Session) -> User:
    """Create a sample user for testing."""
    return make_user(db_session, "testuser")


@pytest.fixture
def second_user(db_session: Session) -> User:
    """Create a second user for testing ownership scenarios."""
    return make_user(db_session, "seconduser", "SecurePass456")


@pytest.fixture
def sample_book(db_session: Session) -> Book:
    """Create a sample book with no reviews."""
    return make_book(
        db_session,
        "1984",
        published_year=1949,
        description="A dystopian novel set in a totalitarian society.",
    )


@pytest.fixture
def auth_headers(sample_user: User) -> dict:
    """Authorization header for sample_user."""
    return get_auth_header(sample_user)


@pytest.fixture
def sample_review(
    db_session: Session,
    sample_book: Book,
    sample_user: User,
) -> Review:
    """
    Create a sample review through the review service.

    Going through the service keeps the book's aggregates in step
    (average_rating 4.0, total_reviews 1).
    """
    from book_reviews.services.reviews import create_review

    return create_review(
        db_session,
        book_id=sample_book.id,
        user_id=sample_user.id,
        rating=4,
        comment="I really enjoyed reading this book.",
    )
