"""
Notebook Backend — Application Package Initializer
===================================================

What: Marks the `notebook` directory as a Python package.
Who:  Imported by uvicorn (`notebook.main:app`), Alembic and pytest.

Architecture Note:
    Every request follows the same short path:

    ┌─────────────────────────────────────┐
    │     Routes (loader / action)        │  ← HTTP concerns, redirects, cookies
    ├─────────────────────────────────────┤
    │   Services (validation + queries)   │  ← submissions, uniqueness checks
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic forms
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

    A loader (GET) returns the data a form needs. An action (POST) parses the
    submitted form, returns field-level errors, or redirects on success.
"""

__version__ = "1.0.0"
