"""
Book Review API Application Package

Users register, authenticate, add books to the catalog and post one
review per book. Each book keeps a denormalized average rating that is
recomputed whenever its reviews change.

Package Structure:
- config.py: Application configuration using Pydantic Settings
- database.py: SQLAlchemy engine lifecycle and session management
- main.py: FastAPI application factory and configuration
- dependencies.py: Dependency injection functions
- exceptions.py: Domain error taxonomy
- validators.py: Explicit input validation for review payloads
- models/: SQLAlchemy ORM models
- schemas/: Pydantic request/response schemas
- routers/: API route handlers
- services/: Business logic (rating aggregation, review lifecycle, security)
"""

__version__ = "0.1.0"
