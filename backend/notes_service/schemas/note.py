"""
Notes Service — Pydantic Request/Response Schemas
===================================================

What:  Pydantic models defining the API contract.
Why:   Strict input validation, automatic serialization, and OpenAPI docs.
How:   FastAPI validates request bodies against these models and serializes
       responses through them.

Design Decision:
    Schemas are separate from SQLAlchemy models so the API contract can change
    independently of the table, and so nothing internal is exposed by accident.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, StrictStr, field_validator


# ══════════════════════════════════════════════════════════════════════════
# Request Models — What clients send
# ══════════════════════════════════════════════════════════════════════════


class NoteCreate(BaseModel):
    """
    Body of POST /api/notes.

    title is required and must be a non-empty string. content may be omitted
    or null; numbers and other JSON types are rejected rather than coerced.
    """
    title: StrictStr = Field(min_length=1, description="Note title")
    content: Optional[StrictStr] = Field(default=None, description="Note body")


class NoteUpdate(BaseModel):
    """
    Body of PATCH /api/notes/{id}.

    Only the fields present in the body are changed. A field that is present
    must be a string; explicit null is rejected. An update with no fields is
    rejected by the service ("No fields to update").
    """
    title: Optional[StrictStr] = Field(default=None, description="New title")
    content: Optional[StrictStr] = Field(default=None, description="New body")

    @field_validator("title", "content")
    @classmethod
    def reject_null(cls, v: Optional[str]) -> str:
        # Runs only for values the client actually sent
        if v is None:
            raise ValueError("must be a string")
        return v

    def changes(self) -> dict:
        """Fields explicitly provided by the client."""
        return self.model_dump(exclude_unset=True)


# ══════════════════════════════════════════════════════════════════════════
# Response Models — What the API returns
# ══════════════════════════════════════════════════════════════════════════


class NoteResponse(BaseModel):
    """Full representation of a note."""
    id: int = Field(description="Note identifier")
    title: str = Field(description="Note title")
    content: Optional[str] = Field(default=None, description="Note body, null if empty")
    created_at: datetime = Field(description="Creation time (ISO 8601)")
    updated_at: datetime = Field(description="Last modification time (ISO 8601)")

    model_config = {"from_attributes": True}


class DeleteResponse(BaseModel):
    """Returned by DELETE /api/notes/{id}."""
    success: bool = Field(default=True)


class ErrorResponse(BaseModel):
    """
    Error body shared by every endpoint.

    Example:
        {"error": "Invalid or expired token"}
    """
    error: str = Field(description="Human-readable error description")


class HealthResponse(BaseModel):
    """Returned by GET /health for monitoring and load balancer probes."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
