"""
Notes Service — Notes Route Handlers
======================================

What:  CRUD endpoints for /api/notes.
How:   Validates input through Pydantic schemas, delegates to NoteService,
       returns JSON. Errors are raised as app exceptions and rendered by the
       global handlers in main.py.
Who:   Every route requires a valid bearer token (router-level dependency).

    GET    /api/notes          list, newest first
    GET    /api/notes/{id}     single note
    POST   /api/notes          create (201)
    PATCH  /api/notes/{id}     partial update
    DELETE /api/notes/{id}     delete
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from notes_service.auth.dependencies import require_claims
from notes_service.database import get_db_session
from notes_service.schemas.note import (
    DeleteResponse,
    ErrorResponse,
    NoteCreate,
    NoteResponse,
    NoteUpdate,
)
from notes_service.services.note_service import note_service

logger = logging.getLogger(__name__)

# ── Router Configuration ──────────────────────────────────────────────────
router = APIRouter(
    prefix="/api",
    tags=["Notes"],
    dependencies=[Depends(require_claims)],
    responses={
        401: {"description": "Missing, invalid or expired token", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
)


@router.get(
    "/notes",
    response_model=List[NoteResponse],
    summary="List all notes",
)
async def list_notes(db: AsyncSession = Depends(get_db_session)) -> List[NoteResponse]:
    return await note_service.list_notes(db)


@router.get(
    "/notes/{note_id}",
    response_model=NoteResponse,
    responses={
        400: {"description": "Invalid note ID", "model": ErrorResponse},
        404: {"description": "Note not found", "model": ErrorResponse},
    },
    summary="Get a single note by ID",
)
async def get_note(
    note_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> NoteResponse:
    return await note_service.get_note(db, note_id)


@router.post(
    "/notes",
    response_model=NoteResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"description": "Invalid request body", "model": ErrorResponse}},
    summary="Create a note",
)
async def create_note(
    payload: NoteCreate,
    db: AsyncSession = Depends(get_db_session),
) -> NoteResponse:
    return await note_service.create_note(db, payload)


@router.patch(
    "/notes/{note_id}",
    response_model=NoteResponse,
    responses={
        400: {"description": "Invalid note ID or request body", "model": ErrorResponse},
        404: {"description": "Note not found", "model": ErrorResponse},
    },
    summary="Update a note's title and/or content",
)
async def update_note(
    note_id: int,
    payload: NoteUpdate,
    db: AsyncSession = Depends(get_db_session),
) -> NoteResponse:
    """
    Partial update. Only the fields present in the body change; updated_at is
    always bumped. An empty object is rejected with "No fields to update".
    """
    return await note_service.update_note(db, note_id, payload)


@router.delete(
    "/notes/{note_id}",
    response_model=DeleteResponse,
    responses={
        400: {"description": "Invalid note ID", "model": ErrorResponse},
        404: {"description": "Note not found", "model": ErrorResponse},
    },
    summary="Delete a note",
)
async def delete_note(
    note_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> DeleteResponse:
    await note_service.delete_note(db, note_id)
    return DeleteResponse(success=True)
