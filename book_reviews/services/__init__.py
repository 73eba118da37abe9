"""
Services Package

Business logic kept separate from HTTP handling so it can be reused by
scripts and tested without a client.

- ratings.py: Book rating aggregation
- reviews.py: Review create/update/delete with aggregate refresh
- security.py: Password hashing and JWT utilities
"""
