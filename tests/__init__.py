"""
Test Suite for the Book Review API

Test Organization:
- conftest.py: Shared fixtures (test database, client, sample data)
- test_auth.py: Registration, login and token validation
- test_books.py: /api/v1/books endpoints
- test_reviews.py: Review endpoints
- test_review_service.py: Review lifecycle and aggregate consistency
- test_ratings.py: Rating aggregation
- test_validators.py: Review input validation

Running Tests:
    pip install -e ".[test]"
    pytest
"""
