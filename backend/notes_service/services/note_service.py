"""
Notes Service — Note Service (Business Logic)
===============================================

What:  CRUD operations on notes, independent of HTTP concerns.
Why:   Keeps routes thin; business rules can be unit-tested with a mock session.
How:   Uses SQLAlchemy 2.0 select/delete constructs on the request's AsyncSession.
Who:   Called by the /api/notes route handlers.

Error Handling Strategy:
    - Missing rows become NotFoundError (→ 404)
    - Empty PATCH bodies become ValidationError (→ 400)
    - SQLAlchemyError is logged with detail and re-raised as DatabaseError
      (→ 500, generic message)

Transactions:
    The service only flushes. Commit/rollback belongs to get_db_session, so a
    request is one transaction.

Design Decision:
    NoteService is stateless; the session is passed to every call.
"""

import logging
from typing import List

from sqlalchemy import delete, desc, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from notes_service.exceptions import DatabaseError, NotFoundError, ValidationError
from notes_service.models.note import Note, utcnow
from notes_service.schemas.note import NoteCreate, NoteResponse, NoteUpdate

logger = logging.getLogger(__name__)


class NoteService:
    """
    Business logic layer for note operations.

    Responsibilities:
        - list_notes():  all notes, newest first
        - get_note():    single note with not-found handling
        - create_note(): insert and return the stored row
        - update_note(): partial update, bumps updated_at
        - delete_note(): remove a row
    """

    async def list_notes(self, db: AsyncSession) -> List[NoteResponse]:
        """
        Return every note ordered by created_at DESC (id DESC breaks ties).

        Query plan:
            SELECT ... FROM notes ORDER BY created_at DESC, id DESC
            → idx_notes_created_at
        """
        try:
            result = await db.execute(
                select(Note).order_by(desc(Note.created_at), desc(Note.id))
            )
            notes = result.scalars().all()
            return [NoteResponse.model_validate(note) for note in notes]
        except SQLAlchemyError as e:
            logger.error("Database error listing notes: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Failed to fetch notes",
                context={"error_type": type(e).__name__},
            ) from e

    async def get_note(self, db: AsyncSession, note_id: int) -> NoteResponse:
        """
        Retrieve a single note by ID.

        Raises:
            NotFoundError: no note with this id (→ 404)
            DatabaseError: query execution failed (→ 500)
        """
        note = await self._load(db, note_id, action="fetch")
        return NoteResponse.model_validate(note)

    async def create_note(self, db: AsyncSession, data: NoteCreate) -> NoteResponse:
        """
        Insert a new note.

        Timestamps are set here rather than left to the server default so the
        flushed instance carries them without a second round trip. Empty
        content is stored as NULL.
        """
        now = utcnow()
        note = Note(
            title=data.title,
            content=data.content or None,
            created_at=now,
            updated_at=now,
        )
        try:
            db.add(note)
            await db.flush()  # Assigns the id without committing
        except SQLAlchemyError as e:
            logger.error("Database error creating note: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Failed to create note",
                context={"error_type": type(e).__name__},
            ) from e

        logger.info("Note %s created", note.id)
        return NoteResponse.model_validate(note)

    async def update_note(
        self, db: AsyncSession, note_id: int, data: NoteUpdate
    ) -> NoteResponse:
        """
        Apply the fields present in `data` and bump updated_at.

        Raises:
            ValidationError: `data` carries no fields
            NotFoundError:   no note with this id
            DatabaseError:   query or flush failed
        """
        changes = data.changes()
        if not changes:
            raise ValidationError(message="No fields to update")

        note = await self._load(db, note_id, action="update")

        for field, value in changes.items():
            setattr(note, field, value)
        note.updated_at = utcnow()

        try:
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error updating note %s: %s", note_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Failed to update note",
                context={"note_id": note_id, "error_type": type(e).__name__},
            ) from e

        logger.info("Note %s updated (%s)", note_id, ", ".join(sorted(changes)))
        return NoteResponse.model_validate(note)

    async def delete_note(self, db: AsyncSession, note_id: int) -> None:
        """
        Delete a note.

        Raises:
            NotFoundError: no row was deleted
            DatabaseError: statement failed
        """
        try:
            result = await db.execute(delete(Note).where(Note.id == note_id))
        except SQLAlchemyError as e:
            logger.error("Database error deleting note %s: %s", note_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Failed to delete note",
                context={"note_id": note_id, "error_type": type(e).__name__},
            ) from e

        if not result.rowcount:
            raise NotFoundError(resource="note", resource_id=str(note_id))

        logger.info("Note %s deleted", note_id)

    async def _load(self, db: AsyncSession, note_id: int, action: str) -> Note:
        try:
            result = await db.execute(select(Note).where(Note.id == note_id))
            note = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error loading note %s: %s", note_id, str(e))
            raise DatabaseError(
                message=f"Failed to {action} note",
                context={"note_id": note_id, "error_type": type(e).__name__},
            ) from e

        if note is None:
            raise NotFoundError(resource="note", resource_id=str(note_id))
        return note


# ── Singleton Instance ────────────────────────────────────────────────────
note_service = NoteService()
