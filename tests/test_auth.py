"""
Tests for User Authentication

Tests the JWT authentication flow:
- Registration with validation and duplicate detection
- Login with email or username
- Current user lookup from the bearer token
- Rejection of missing, malformed and expired tokens
"""

from datetime import timedelta

from fastapi import status
from fastapi.testclient import TestClient

from book_reviews.models import User
from book_reviews.services.security import (
    create_access_token,
    decode_token,
    hash_password,
    verify_password,
)
from tests.conftest import get_auth_header


# =============================================================================
# Registration
# =============================================================================


class TestRegister:
    """Tests for POST /api/v1/auth/register"""

    def test_register_success(self, client: TestClient):
        """Test registering a new user."""
        response = client.post(
            "/api/v1/auth/register",
            json={
                "email": "reader@example.com",
                "username": "Reader_One",
                "password": "SecurePass123",
            },
        )

        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()
        assert data["email"] == "reader@example.com"
        # Usernames are stored lowercase
        assert data["username"] == "reader_one"
        assert "id" in data
        assert "password" not in data
        assert "hashed_password" not in data

    def test_register_duplicate_email(self, client: TestClient, sample_user: User):
        """Test that a second account with the same email is rejected."""
        response = client.post(
            "/api/v1/auth/register",
            json={
                "email": sample_user.email,
                "username": "someoneelse",
                "password": "SecurePass123",
            },
        )

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.json()["detail"] == "Email already registered"

    def test_register_duplicate_username(self, client: TestClient, sample_user: User):
        """Test that a taken username is rejected."""
        response = client.post(
            "/api/v1/auth/register",
            json={
                "email": "new@example.com",
                "username": sample_user.username,
                "password": "SecurePass123",
            },
        )

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.json()["detail"] == "Username already taken"

    def test_register_weak_password(self, client: TestClient):
        """Test password strength rules."""
        response = client.post(
            "/api/v1/auth/register",
            json={
                "email": "weak@example.com",
                "username": "weakling",
                "password": "alllowercase1",
            },
        )

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    def test_register_invalid_username(self, client: TestClient):
        """Test that usernames must start with a letter."""
        response = client.post(
            "/api/v1/auth/register",
            json={
                "email": "digits@example.com",
                "username": "1reader",
                "password": "SecurePass123",
            },
        )

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    def test_register_invalid_email(self, client: TestClient):
        """Test email format validation."""
        response = client.post(
            "/api/v1/auth/register",
            json={
                "email": "not-an-email",
                "username": "reader",
                "password": "SecurePass123",
            },
        )

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


# =============================================================================
# Login
# =============================================================================


class TestLogin:
    """Tests for POST /api/v1/auth/login"""

    def test_login_with_email(self, client: TestClient, sample_user: User):
        """Test logging in with the email address."""
        response = client.post(
            "/api/v1/auth/login",
            data={"username": sample_user.email, "password": "SecurePass123"},
        )

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["token_type"] == "bearer"
        assert data["expires_in"] > 0

        payload = decode_token(data["access_token"])
        assert payload["sub"] == str(sample_user.id)
        assert payload["type"] == "access"

    def test_login_with_username(self, client: TestClient, sample_user: User):
        """Test logging in with the username, case-insensitively."""
        response = client.post(
            "/api/v1/auth/login",
            data={"username": "TestUser", "password": "SecurePass123"},
        )

        assert response.status_code == status.HTTP_200_OK
        assert "access_token" in response.json()

    def test_login_wrong_password(self, client: TestClient, sample_user: User):
        """Test that a wrong password is rejected."""
        response = client.post(
            "/api/v1/auth/login",
            data={"username": sample_user.email, "password": "WrongPass123"},
        )

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()["detail"] == "Incorrect email/username or password"

    def test_login_unknown_user(self, client: TestClient):
        """Test that an unknown user gets the same error as a wrong password."""
        response = client.post(
            "/api/v1/auth/login",
            data={"username": "nobody@example.com", "password": "SecurePass123"},
        )

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()["detail"] == "Incorrect email/username or password"

    def test_register_then_login(self, client: TestClient):
        """Test the full flow: register, login, call /me."""
        client.post(
            "/api/v1/auth/register",
            json={
                "email": "flow@example.com",
                "username": "flowuser",
                "password": "SecurePass123",
            },
        )
        login = client.post(
            "/api/v1/auth/login",
            data={"username": "flowuser", "password": "SecurePass123"},
        )
        token = login.json()["access_token"]

        response = client.get(
            "/api/v1/auth/me",
            headers={"Authorization": f"Bearer {token}"},
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["email"] == "flow@example.com"


# =============================================================================
# Current User
# =============================================================================


class TestCurrentUser:
    """Tests for GET /api/v1/auth/me and token validation."""

    def test_me(self, client: TestClient, sample_user: User):
        """Test getting the current user's profile."""
        response = client.get("/api/v1/auth/me", headers=get_auth_header(sample_user))

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["id"] == sample_user.id
        assert data["username"] == "testuser"

    def test_me_without_token(self, client: TestClient):
        """Test that a missing token is rejected."""
        response = client.get("/api/v1/auth/me")

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_me_with_invalid_token(self, client: TestClient):
        """Test that a garbage token is rejected."""
        response = client.get(
            "/api/v1/auth/me",
            headers={"Authorization": "Bearer not-a-jwt"},
        )

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()["detail"] == "Could not validate credentials"

    def test_me_with_expired_token(self, client: TestClient, sample_user: User):
        """Test that an expired token is rejected."""
        token = create_access_token(
            {"sub": str(sample_user.id)},
            expires_delta=timedelta(minutes=-1),
        )

        response = client.get(
            "/api/v1/auth/me",
            headers={"Authorization": f"Bearer {token}"},
        )

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_me_for_deleted_user(self, client: TestClient):
        """Test that a token for a user that no longer exists is rejected."""
        response = client.get(
            "/api/v1/auth/me",
            headers={"Authorization": f"Bearer {create_access_token({'sub': '99999'})}"},
        )

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


class TestPasswordHashing:
    """Tests for the bcrypt helpers."""

    def test_hash_is_not_plaintext(self):
        hashed = hash_password("SecurePass123")

        assert hashed != "SecurePass123"
        assert verify_password("SecurePass123", hashed)
        assert not verify_password("securepass123", hashed)
