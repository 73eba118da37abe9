"""
Tests for Books Endpoints

Tests the catalog:
- Listing with pagination, search, filters and sorting
- Creating books (authenticated)
- Getting a single book with its rating aggregates
- Rating statistics with distribution
"""

import pytest
from fastapi import status
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from book_reviews.dependencies import get_book_or_404
from book_reviews.exceptions import NotFoundError
from book_reviews.models import Book, User
from book_reviews.services.reviews import create_review
from tests.conftest import get_auth_header, make_book, make_user


# =============================================================================
# List Books
# =============================================================================


class TestListBooks:
    """Tests for GET /api/v1/books/"""

    def test_list_books_empty(self, client: TestClient):
        """Test listing books when the catalog is empty."""
        response = client.get("/api/v1/books/")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["items"] == []
        assert data["total"] == 0
        assert data["pages"] == 0

    def test_list_books_includes_aggregates(self, client: TestClient, sample_book: Book):
        """Test that list items carry average_rating and total_reviews."""
        response = client.get("/api/v1/books/")

        assert response.status_code == status.HTTP_200_OK
        book = response.json()["items"][0]
        assert book["title"] == "1984"
        assert book["average_rating"] == 0
        assert book["total_reviews"] == 0

    def test_list_books_pagination(self, client: TestClient, db_session: Session):
        """Test pagination metadata and page contents."""
        for i in range(15):
            make_book(db_session, f"Book {i:02d}")

        response = client.get("/api/v1/books/?page=2&per_page=10&sort=title")

        data = response.json()
        assert data["total"] == 15
        assert data["pages"] == 2
        assert data["page"] == 2
        assert [b["title"] for b in data["items"]] == [f"Book {i:02d}" for i in range(10, 15)]

    def test_list_books_per_page_limit(self, client: TestClient):
        """Test that per_page above 100 is rejected."""
        response = client.get("/api/v1/books/?per_page=101")

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    def test_search_matches_title_or_author(self, client: TestClient, db_session: Session):
        """Test the q parameter against title and author, case-insensitively."""
        make_book(db_session, "Animal Farm")
        make_book(db_session, "Emma", author="Jane Austen", genre="Romance")

        response = client.get("/api/v1/books/?q=ORWELL")
        assert {b["title"] for b in response.json()["items"]} == {"Animal Farm"}

        response = client.get("/api/v1/books/?q=emm")
        assert {b["title"] for b in response.json()["items"]} == {"Emma"}

    def test_filter_by_genre_and_author(self, client: TestClient, db_session: Session):
        """Test genre (exact) and author (partial) filters."""
        make_book(db_session, "1984")
        make_book(db_session, "Emma", author="Jane Austen", genre="Romance")
        make_book(db_session, "Persuasion", author="Jane Austen", genre="Romance")

        response = client.get("/api/v1/books/?genre=romance")
        assert response.json()["total"] == 2

        response = client.get("/api/v1/books/?author=austen&genre=dystopian")
        assert response.json()["total"] == 0

    def test_filter_by_year_range(self, client: TestClient, db_session: Session):
        """Test min_year and max_year."""
        make_book(db_session, "Old", published_year=1813)
        make_book(db_session, "Mid", published_year=1949)
        make_book(db_session, "New", published_year=2005)
        make_book(db_session, "Undated")

        response = client.get("/api/v1/books/?min_year=1900&max_year=2000")

        assert [b["title"] for b in response.json()["items"]] == ["Mid"]

    def test_sort_by_rating(
        self,
        client: TestClient,
        db_session: Session,
        sample_user: User,
    ):
        """Test that sort=rating puts the highest-rated book first."""
        low = make_book(db_session, "Low")
        high = make_book(db_session, "High")
        make_book(db_session, "Unrated")
        create_review(db_session, low.id, sample_user.id, 2)
        create_review(db_session, high.id, sample_user.id, 5)

        response = client.get("/api/v1/books/?sort=rating")

        titles = [b["title"] for b in response.json()["items"]]
        assert titles == ["High", "Low", "Unrated"]

    def test_invalid_sort(self, client: TestClient):
        """Test that an unknown sort value is rejected."""
        response = client.get("/api/v1/books/?sort=price")

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


# =============================================================================
# Create Book
# =============================================================================


class TestCreateBook:
    """Tests for POST /api/v1/books/"""

    def test_create_book(self, client: TestClient, sample_user: User):
        """Test creating a book."""
        response = client.post(
            "/api/v1/books/",
            json={
                "title": "Brave New World",
                "author": "Aldous Huxley",
                "genre": "Dystopian",
                "published_year": 1932,
            },
            headers=get_auth_header(sample_user),
        )

        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()
        assert data["title"] == "Brave New World"
        assert data["average_rating"] == 0
        assert data["total_reviews"] == 0
        assert data["description"] is None

    def test_create_book_ignores_client_aggregates(
        self, client: TestClient, sample_user: User
    ):
        """Test that clients cannot set rating aggregates."""
        response = client.post(
            "/api/v1/books/",
            json={
                "title": "Fake Bestseller",
                "author": "Someone",
                "genre": "Fiction",
                "average_rating": 5,
                "total_reviews": 1000,
            },
            headers=get_auth_header(sample_user),
        )

        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()
        assert data["average_rating"] == 0
        assert data["total_reviews"] == 0

    def test_create_book_requires_auth(self, client: TestClient):
        """Test that anonymous users cannot add books."""
        response = client.post(
            "/api/v1/books/",
            json={"title": "Anonymous", "author": "Nobody", "genre": "None"},
        )

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_create_book_blank_title(self, client: TestClient, sample_user: User):
        """Test that whitespace-only required fields are rejected."""
        response = client.post(
            "/api/v1/books/",
            json={"title": "   ", "author": "Someone", "genre": "Fiction"},
            headers=get_auth_header(sample_user),
        )

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    def test_create_book_missing_genre(self, client: TestClient, sample_user: User):
        """Test that genre is required."""
        response = client.post(
            "/api/v1/books/",
            json={"title": "No Genre", "author": "Someone"},
            headers=get_auth_header(sample_user),
        )

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


# =============================================================================
# Get Book
# =============================================================================


class TestGetBook:
    """Tests for GET /api/v1/books/{book_id}"""

    def test_get_book(self, client: TestClient, sample_book: Book):
        """Test getting a book by ID."""
        response = client.get(f"/api/v1/books/{sample_book.id}")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["id"] == sample_book.id
        assert data["published_year"] == 1949

    def test_get_book_not_found(self, client: TestClient):
        """Test getting a book that does not exist."""
        response = client.get("/api/v1/books/99999")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["detail"] == "Book with id 99999 not found"

    def test_get_book_reflects_reviews(
        self,
        client: TestClient,
        db_session: Session,
        sample_book: Book,
        sample_user: User,
        second_user: User,
    ):
        """Test that the book shows the current aggregates after reviews."""
        create_review(db_session, sample_book.id, sample_user.id, 5)
        create_review(db_session, sample_book.id, second_user.id, 4)

        data = client.get(f"/api/v1/books/{sample_book.id}").json()

        assert data["average_rating"] == 4.5
        assert data["total_reviews"] == 2


# =============================================================================
# Rating Statistics
# =============================================================================


class TestBookRatingStats:
    """Tests for GET /api/v1/books/{book_id}/rating"""

    def test_stats_no_reviews(self, client: TestClient, sample_book: Book):
        """Test statistics for a book without reviews."""
        response = client.get(f"/api/v1/books/{sample_book.id}/rating")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["average_rating"] == 0
        assert data["total_reviews"] == 0
        assert data["rating_distribution"] == {"1": 0, "2": 0, "3": 0, "4": 0, "5": 0}

    def test_stats_with_reviews(
        self,
        client: TestClient,
        db_session: Session,
        sample_book: Book,
    ):
        """Test distribution and average across several reviewers."""
        for i, rating in enumerate([5, 5, 3]):
            reviewer = make_user(db_session, f"reviewer{i}")
            create_review(db_session, sample_book.id, reviewer.id, rating)

        data = client.get(f"/api/v1/books/{sample_book.id}/rating").json()

        assert data["total_reviews"] == 3
        assert data["average_rating"] == 4.3
        assert data["rating_distribution"] == {"1": 0, "2": 0, "3": 1, "4": 0, "5": 2}

    def test_stats_book_not_found(self, client: TestClient):
        """Test statistics for a book that does not exist."""
        response = client.get("/api/v1/books/99999/rating")

        assert response.status_code == status.HTTP_404_NOT_FOUND


class TestLookupHelpers:
    """Tests for the 404 lookup dependencies."""

    def test_missing_book_raises_not_found(self, db_session: Session):
        with pytest.raises(NotFoundError) as exc_info:
            get_book_or_404(db_session, 99999)

        assert exc_info.value.status_code == status.HTTP_404_NOT_FOUND
        assert exc_info.value.detail == "Book with id 99999 not found"

    def test_existing_book_is_returned(self, db_session: Session, sample_book: Book):
        assert get_book_or_404(db_session, sample_book.id).id == sample_book.id
