"""
Notes Service — Application Package
=====================================

A small CRUD API for notes behind HS256 bearer-token authentication.

    ┌─────────────────────────────────────┐
    │     Routes + Auth guard (API)       │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │        Services (Business Logic)    │  ← CRUD rules, error mapping
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

The token verifier (notes_service.auth.tokens) sits beside these layers: it is
pure and depends on none of them.
"""

__version__ = "1.0.0"
