"""
Notebook Backend — Note Service Unit Tests
===========================================

What:  Tests for NoteService business logic (editor action, loaders, delete).
How:   Uses mock DB sessions and a patched user_service (no real DB).

What we test:
    ✅ New note is created and redirects to its page
    ✅ Editing a note the user does not own reports "Note not found"
    ✅ Validate-only intents never write
    ✅ Editor loader and delete hide other users' notes as 404
"""

from unittest.mock import AsyncMock, MagicMock, patch
from uuid import uuid4

import pytest

from notebook.exceptions import NotFoundError
from notebook.schemas.note import NoteOwner
from notebook.services.note_service import NoteService
from tests.conftest import scalar_result


class TestNoteEditorAction:
    """Tests for the shared create/update editor action."""

    def setup_method(self):
        self.service = NoteService()
        self.user_id = uuid4()

    @pytest.mark.asyncio
    async def test_create_note_redirects_to_note(self, mock_db_session):
        note_id = uuid4()
        mock_db_session.add.side_effect = lambda obj: setattr(obj, "id", note_id)
        mock_db_session.execute = AsyncMock(return_value=scalar_result("kody"))

        result = await self.service.editor_action(
            mock_db_session, self.user_id, {"title": "Groceries", "content": "Milk"}
        )

        assert result.status == "success"
        assert result.redirect_to == f"/users/kody/notes/{note_id}"
        created = mock_db_session.add.call_args.args[0]
        assert created.title == "Groceries"
        assert created.content == "Milk"
        assert created.owner_id == self.user_id
        mock_db_session.flush.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_update_owned_note(self, mock_db_session):
        note = MagicMock()
        note.id = uuid4()
        mock_db_session.execute = AsyncMock(
            side_effect=[scalar_result(note), scalar_result("kody")]
        )

        result = await self.service.editor_action(
            mock_db_session,
            self.user_id,
            {"id": str(note.id), "title": "Updated", "content": "New body"},
        )

        assert result.status == "success"
        assert note.title == "Updated"
        assert note.content == "New body"
        assert result.redirect_to == f"/users/kody/notes/{note.id}"
        mock_db_session.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_unknown_note_id_is_form_error(self, mock_db_session):
        mock_db_session.execute = AsyncMock(return_value=scalar_result(None))

        result = await self.service.editor_action(
            mock_db_session,
            self.user_id,
            {"id": str(uuid4()), "title": "Title", "content": "Body"},
        )

        assert result.status == "error"
        assert result.submission.error == {"": ["Note not found"]}
        mock_db_session.flush.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_malformed_note_id_is_form_error(self, mock_db_session):
        result = await self.service.editor_action(
            mock_db_session,
            self.user_id,
            {"id": "not-a-uuid", "title": "Title", "content": "Body"},
        )

        assert result.status == "error"
        assert result.submission.error == {"": ["Note not found"]}
        assert result.submission.value is None
        mock_db_session.execute.assert_not_awaited()
        mock_db_session.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_invalid_fields_return_error(self, mock_db_session):
        result = await self.service.editor_action(
            mock_db_session, self.user_id, {"title": "", "content": "Body"}
        )

        assert result.status == "error"
        assert result.submission.error == {"title": ["Required"]}
        assert result.submission.payload == {"title": "", "content": "Body"}
        mock_db_session.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_validate_intent_is_idle(self, mock_db_session):
        result = await self.service.editor_action(
            mock_db_session,
            self.user_id,
            {"__intent__": "validate/title", "title": "Title", "content": "Body"},
        )

        assert result.status == "idle"
        mock_db_session.add.assert_not_called()
        mock_db_session.flush.assert_not_awaited()


class TestNoteLoaders:
    """Loaders that resolve /users/<username>/notes/<id>."""

    def setup_method(self):
        self.service = NoteService()
        self.owner = MagicMock()
        self.owner.id = uuid4()
        self.owner.username = "kody"
        self.note_owner = NoteOwner(username="kody", name="Kody", image_url="/img/user.png")

    @pytest.mark.asyncio
    async def test_missing_note_raises_not_found(self, mock_db_session):
        mock_db_session.execute = AsyncMock(return_value=scalar_result(None))

        with patch("notebook.services.note_service.user_service") as mock_users:
            mock_users.find_owner = AsyncMock(return_value=(self.owner, self.note_owner))
            with pytest.raises(NotFoundError):
                await self.service.get_note_detail(mock_db_session, "kody", uuid4())

    @pytest.mark.asyncio
    async def test_editor_loader_hides_other_users_note(self, mock_db_session):
        note = MagicMock()
        mock_db_session.execute = AsyncMock(return_value=scalar_result(note))

        with patch("notebook.services.note_service.user_service") as mock_users:
            mock_users.find_owner = AsyncMock(return_value=(self.owner, self.note_owner))
            with pytest.raises(NotFoundError):
                await self.service.get_editor_note(mock_db_session, "kody", uuid4(), uuid4())

    @pytest.mark.asyncio
    async def test_delete_by_owner(self, mock_db_session):
        note = MagicMock()
        mock_db_session.execute = AsyncMock(return_value=scalar_result(note))

        with patch("notebook.services.note_service.user_service") as mock_users:
            mock_users.find_owner = AsyncMock(return_value=(self.owner, self.note_owner))
            redirect_to = await self.service.delete_note(
                mock_db_session, "kody", uuid4(), self.owner.id
            )

        assert redirect_to == "/users/kody/notes"
        mock_db_session.delete.assert_awaited_once_with(note)

    @pytest.mark.asyncio
    async def test_delete_by_someone_else(self, mock_db_session):
        mock_db_session.execute = AsyncMock(return_value=scalar_result(MagicMock()))

        with patch("notebook.services.note_service.user_service") as mock_users:
            mock_users.find_owner = AsyncMock(return_value=(self.owner, self.note_owner))
            with pytest.raises(NotFoundError):
                await self.service.delete_note(mock_db_session, "kody", uuid4(), uuid4())

        mock_db_session.delete.assert_not_awaited()
