"""
Storefront Backend: Application Package Initializer
=====================================================

What: Marks the `storefront` directory as a Python package.
Who:  Used implicitly by Python's import system and explicitly by Alembic, pytest, and uvicorn.

Architecture Note:
    This backend follows a layered architecture:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns, response envelope
    ├─────────────────────────────────────┤
    │    Services (Domain Assembly)       │  ← Existence checks, joins, fan-out
    ├─────────────────────────────────────┤
    │   Repositories (Data Access)        │  ← Parameterized queries
    ├─────────────────────────────────────┤
    │    Models & Schemas (Data)          │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

    Each layer receives the layer below it through its constructor; nothing
    is looked up from module-level singletons at request time.
"""

__version__ = "1.0.0"
