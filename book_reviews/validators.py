"""
Review Input Validators

Explicit validation for review payloads. The services layer calls these
before touching the database, so a rating outside 1-5 is rejected with
a ValidationError whether the call came from an HTTP handler, a script,
or a test.
"""

from collections.abc import Mapping
from typing import Any

from book_reviews.exceptions import ValidationError

MIN_RATING = 1
MAX_RATING = 5
MAX_COMMENT_LENGTH = 5000

REVIEW_FIELDS = frozenset({"rating", "comment"})


def validate_rating(value: Any) -> int:
    """
    Check that a rating is an integer from 1 to 5.

    Raises:
        ValidationError: If the value is missing, not an int, or out of range
    """
    # bool is a subclass of int
    if value is None or isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError("Rating must be an integer between 1 and 5")

    if not MIN_RATING <= value <= MAX_RATING:
        raise ValidationError(
            f"Rating must be between {MIN_RATING} and {MAX_RATING}, got {value}"
        )
    return value


def validate_comment(value: Any) -> str | None:
    """
    Normalize an optional comment.

    Whitespace-only comments become None.

    Raises:
        ValidationError: If the value is not a string or is too long
    """
    if value is None:
        return None

    if not isinstance(value, str):
        raise ValidationError("Comment must be a string")

    value = value.strip()
    if not value:
        return None

    if len(value) > MAX_COMMENT_LENGTH:
        raise ValidationError(
            f"Comment must be at most {MAX_COMMENT_LENGTH} characters"
        )
    return value


def validate_review_changes(changes: Mapping[str, Any]) -> dict[str, Any]:
    """
    Validate a partial review update.

    Args:
        changes: Fields the client sent, e.g. {"rating": 4}

    Returns:
        Normalized copy of the changes

    Raises:
        ValidationError: On unknown fields or invalid values
    """
    unknown = set(changes) - REVIEW_FIELDS
    if unknown:
        raise ValidationError(f"Unknown review fields: {', '.join(sorted(unknown))}")

    cleaned: dict[str, Any] = {}
    if "rating" in changes:
        cleaned["rating"] = validate_rating(changes["rating"])
    if "comment" in changes:
        cleaned["comment"] = validate_comment(changes["comment"])
    return cleaned
