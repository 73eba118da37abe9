"""
Domain Exceptions

Failure categories raised by the services layer. Each one carries the
HTTP status it maps to and a user-facing detail message; the handler in
main.py renders them as {"detail": ...}.

Routers never translate these by hand. Services raise, the application
exception handler responds.
"""

from fastapi import status


class ReviewCatalogError(Exception):
    """Base class for all domain errors."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail: str = "An internal error occurred."

    def __init__(self, detail: str | None = None) -> None:
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class ValidationError(ReviewCatalogError):
    """Malformed input, e.g. a rating outside 1-5."""

    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    default_detail = "Invalid input."


class NotFoundError(ReviewCatalogError):
    """A referenced book, review or user does not exist."""

    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Resource not found."


class ForbiddenError(ReviewCatalogError):
    """The acting user does not own the review."""

    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "You can only modify your own reviews."


class DuplicateReviewError(ReviewCatalogError):
    """The user already has a review for this book."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = (
        "You have already reviewed this book. "
        "You can update your existing review."
    )


class PersistenceError(ReviewCatalogError):
    """
    Underlying storage failure.

    The detail shown to clients is always the opaque default; the real
    cause is logged where the error is raised.
    """

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "A database error occurred. Please try again later."
