"""
Notes Service — Note Service Unit Tests
=========================================

What:  Tests for NoteService CRUD logic.
How:   Mock DB sessions only (no real DB).

What we test:
    ✅ Get: found / not found / driver failure
    ✅ List: empty and populated
    ✅ Create: flushes and returns the stored note
    ✅ Update: partial changes, empty update, missing note
    ✅ Delete: deleted / not found
"""

import pytest
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

from sqlalchemy.exc import OperationalError

from notes_service.exceptions import DatabaseError, NotFoundError, ValidationError
from notes_service.models.note import Note
from notes_service.schemas.note import NoteCreate, NoteUpdate
from notes_service.services.note_service import NoteService


def make_note(note_id: int = 1, title: str = "Groceries", content=None) -> Note:
    now = datetime.now(timezone.utc)
    return Note(id=note_id, title=title, content=content, created_at=now, updated_at=now)


def scalar_result(value):
    result = MagicMock()
    result.scalar_one_or_none.return_value = value
    return result


class TestNoteServiceGet:
    """Tests for get_note retrieval."""

    def setup_method(self):
        self.service = NoteService()

    @pytest.mark.asyncio
    async def test_get_note_found(self, mock_db_session):
        mock_db_session.execute.return_value = scalar_result(make_note(7, "Todo", "milk"))

        result = await self.service.get_note(mock_db_session, 7)

        assert result.id == 7
        assert result.title == "Todo"
        assert result.content == "milk"

    @pytest.mark.asyncio
    async def test_get_note_not_found(self, mock_db_session):
        mock_db_session.execute.return_value = scalar_result(None)

        with pytest.raises(NotFoundError) as exc_info:
            await self.service.get_note(mock_db_session, 404)
        assert exc_info.value.message == "Note not found"

    @pytest.mark.asyncio
    async def test_get_note_database_failure(self, mock_db_session):
        mock_db_session.execute.side_effect = OperationalError("SELECT", {}, Exception("down"))

        with pytest.raises(DatabaseError):
            await self.service.get_note(mock_db_session, 1)


class TestNoteServiceList:
    """Tests for list_notes."""

    def setup_method(self):
        self.service = NoteService()

    @pytest.mark.asyncio
    async def test_list_notes_empty(self, mock_db_session):
        mock_result = MagicMock()
        mock_result.scalars.return_value.all.return_value = []
        mock_db_session.execute.return_value = mock_result

        assert await self.service.list_notes(mock_db_session) == []

    @pytest.mark.asyncio
    async def test_list_notes_with_results(self, mock_db_session):
        notes = [make_note(i, f"Note {i}") for i in (3, 2, 1)]
        mock_result = MagicMock()
        mock_result.scalars.return_value.all.return_value = notes
        mock_db_session.execute.return_value = mock_result

        result = await self.service.list_notes(mock_db_session)

        assert [n.id for n in result] == [3, 2, 1]
        assert result[0].title == "Note 3"

    @pytest.mark.asyncio
    async def test_list_notes_database_failure(self, mock_db_session):
        mock_db_session.execute.side_effect = OperationalError("SELECT", {}, Exception("down"))

        with pytest.raises(DatabaseError) as exc_info:
            await self.service.list_notes(mock_db_session)
        assert exc_info.value.message == "Failed to fetch notes"


class TestNoteServiceCreate:
    """Tests for create_note."""

    def setup_method(self):
        self.service = NoteService()

    @pytest.mark.asyncio
    async def test_create_note(self, mock_db_session):
        added = []
        mock_db_session.add.side_effect = added.append

        async def assign_id():
            added[0].id = 42
        mock_db_session.flush = AsyncMock(side_effect=assign_id)

        result = await self.service.create_note(
            mock_db_session, NoteCreate(title="Hello", content="World")
        )

        assert result.id == 42
        assert result.title == "Hello"
        assert result.content == "World"
        assert result.created_at == result.updated_at
        mock_db_session.flush.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_create_note_without_content(self, mock_db_session):
        added = []
        mock_db_session.add.side_effect = added.append

        async def assign_id():
            added[0].id = 1
        mock_db_session.flush = AsyncMock(side_effect=assign_id)

        result = await self.service.create_note(mock_db_session, NoteCreate(title="Only title"))

        assert result.content is None

    @pytest.mark.asyncio
    async def test_create_note_empty_content_stored_as_null(self, mock_db_session):
        added = []
        mock_db_session.add.side_effect = added.append

        async def assign_id():
            added[0].id = 2
        mock_db_session.flush = AsyncMock(side_effect=assign_id)

        result = await self.service.create_note(
            mock_db_session, NoteCreate(title="Blank", content="")
        )

        assert added[0].content is None
        assert result.content is None


class TestNoteServiceUpdate:
    """Tests for update_note."""

    def setup_method(self):
        self.service = NoteService()

    @pytest.mark.asyncio
    async def test_update_title_only(self, mock_db_session):
        note = make_note(5, "Old", "body")
        before = note.updated_at
        mock_db_session.execute.return_value = scalar_result(note)

        result = await self.service.update_note(mock_db_session, 5, NoteUpdate(title="New"))

        assert result.title == "New"
        assert result.content == "body"
        assert result.updated_at >= before
        mock_db_session.flush.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_update_with_no_fields_rejected(self, mock_db_session):
        with pytest.raises(ValidationError, match="No fields to update"):
            await self.service.update_note(mock_db_session, 5, NoteUpdate())
        mock_db_session.execute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_update_missing_note(self, mock_db_session):
        mock_db_session.execute.return_value = scalar_result(None)

        with pytest.raises(NotFoundError):
            await self.service.update_note(mock_db_session, 99, NoteUpdate(content="x"))


class TestNoteServiceDelete:
    """Tests for delete_note."""

    def setup_method(self):
        self.service = NoteService()

    @pytest.mark.asyncio
    async def test_delete_existing(self, mock_db_session):
        mock_db_session.execute.return_value = MagicMock(rowcount=1)

        await self.service.delete_note(mock_db_session, 3)

        mock_db_session.execute.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_delete_missing(self, mock_db_session):
        mock_db_session.execute.return_value = MagicMock(rowcount=0)

        with pytest.raises(NotFoundError):
            await self.service.delete_note(mock_db_session, 3)
