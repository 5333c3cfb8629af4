"""
Notes Service — Custom Exception Hierarchy
============================================

What:  Application-specific exceptions for the different error scenarios.
Why:   Targeted error handling with the right HTTP status code and a message that
       is safe to show the client. Generic Python exceptions would leak internals.
How:   Each exception carries a message and an optional context dict.
       Global exception handlers (registered in main.py) turn them into
       `{"error": "<message>"}` JSON responses.
Who:   Raised by services and the bearer guard; caught by global handlers.

Exception Hierarchy:
    NotesServiceError (base)
    ├── ValidationError      → 400 Bad Request (client can fix)
    ├── AuthenticationError  → 401 Unauthorized
    ├── NotFoundError        → 404 Not Found
    ├── DatabaseError        → 500 Internal Server Error
    └── ConfigurationError   → raised at startup, never reaches a client

Note the token verifier itself never raises: it returns None on rejection and the
guard converts that into AuthenticationError.
"""

from typing import Any, Dict, Optional


class NotesServiceError(Exception):
    """
    Base exception for all Notes Service errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(NotesServiceError):
    """
    Raised when client input fails validation.

    When:    Empty PATCH body, malformed note ID, wrong field types.
    HTTP:    400 Bad Request
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class AuthenticationError(NotesServiceError):
    """
    Raised when a request to a protected route carries no usable bearer token.

    HTTP:    401 Unauthorized (with `WWW-Authenticate: Bearer`)

    The message is one of two fixed strings; which verification step failed is
    never exposed.
    """

    MISSING_HEADER = "Missing or invalid Authorization header"
    INVALID_TOKEN = "Invalid or expired token"

    def __init__(
        self,
        message: str = INVALID_TOKEN,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(NotesServiceError):
    """
    Raised when a requested resource does not exist.

    When:    GET/PATCH/DELETE /api/notes/{id} with an id that has no row.
    HTTP:    404 Not Found

    SQLAlchemy returns None for missing records; the service layer converts that
    into this exception so routes stay free of HTTP branching.
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"{resource.capitalize()} not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class DatabaseError(NotesServiceError):
    """
    Raised when database operations fail unexpectedly.

    HTTP:    500 Internal Server Error

    Security Note:
        The message returned to the client is always generic. Driver errors,
        SQL text and constraint names are logged server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class ConfigurationError(NotesServiceError):
    """
    Raised when the service cannot start safely with the given settings.

    When:    JWT_SECRET is unset and the insecure development default was not
             explicitly allowed.
    """

    def __init__(
        self,
        message: str = "Invalid configuration",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
