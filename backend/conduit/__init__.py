"""
Conduit Backend — Application Package Initializer
===================================================

What:  Marks the `conduit` directory as a Python package.
Who:   Used implicitly by Python's import system and explicitly by Alembic, pytest, and uvicorn.

Architecture Note:
    The backend follows a layered architecture:

    ┌─────────────────────────────────────┐
    │      Routes + Dependencies (API)    │  ← HTTP concerns, auth, request schemas
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← ownership, uniqueness, response shaping
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

    Routes never touch the ORM directly; services never see a Request object.
"""

__version__ = "1.0.0"
