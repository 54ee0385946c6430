"""
Notebook Backend — Note Route Tests
====================================

What:  New note, edit note, note list, detail and delete through the app.
How:   HTTPX AsyncClient over ASGITransport against in-memory SQLite.
"""

from uuid import uuid4

import pytest
from sqlalchemy import select

from notebook.models.note import Note
from tests.conftest import create_user


async def add_note(db, owner, title="Groceries", content="Milk and eggs") -> Note:
    note = Note(owner_id=owner.id, title=title, content=content)
    db.add(note)
    await db.commit()
    return note


class TestNewNote:

    @pytest.mark.asyncio
    async def test_loader_requires_login(self, test_client):
        response = await test_client.get("/users/kody/notes/new")

        assert response.status_code == 302
        assert response.headers["location"] == "/login?redirectTo=%2Fusers%2Fkody%2Fnotes%2Fnew"

    @pytest.mark.asyncio
    async def test_loader_starts_empty(self, test_client, user, login):
        await login(user)

        response = await test_client.get("/users/kody/notes/new")

        assert response.status_code == 200
        assert response.json() == {}

    @pytest.mark.asyncio
    async def test_creates_note(self, test_client, user, login, session_factory):
        await login(user)

        response = await test_client.post(
            "/users/kody/notes/new", data={"title": "Groceries", "content": "Milk and eggs"}
        )

        assert response.status_code == 302
        async with session_factory() as db:
            result = await db.execute(select(Note).where(Note.owner_id == user.id))
            note = result.scalar_one()
        assert note.title == "Groceries"
        assert note.content == "Milk and eggs"
        assert response.headers["location"] == f"/users/kody/notes/{note.id}"

    @pytest.mark.asyncio
    async def test_missing_title(self, test_client, user, login):
        await login(user)

        response = await test_client.post(
            "/users/kody/notes/new", data={"title": "", "content": "Milk and eggs"}
        )

        assert response.status_code == 400
        submission = response.json()["submission"]
        assert submission["error"] == {"title": ["Required"]}
        assert submission["payload"] == {"title": "", "content": "Milk and eggs"}

    @pytest.mark.asyncio
    async def test_content_too_long(self, test_client, user, login):
        await login(user)

        response = await test_client.post(
            "/users/kody/notes/new", data={"title": "Essay", "content": "x" * 10001}
        )

        assert response.status_code == 400
        assert response.json()["submission"]["error"] == {
            "content": ["Content must be at most 10000 characters"]
        }


class TestEditNote:

    @pytest.mark.asyncio
    async def test_loader_returns_note(self, test_client, user, login, db_session):
        note = await add_note(db_session, user)
        await login(user)

        response = await test_client.get(f"/users/kody/notes/{note.id}/edit")

        assert response.status_code == 200
        assert response.json()["note"] == {
            "id": str(note.id),
            "title": "Groceries",
            "content": "Milk and eggs",
        }

    @pytest.mark.asyncio
    async def test_updates_note(self, test_client, user, login, db_session, session_factory):
        note = await add_note(db_session, user)
        await login(user)

        response = await test_client.post(
            f"/users/kody/notes/{note.id}/edit",
            data={"id": str(note.id), "title": "Shopping", "content": "Bread"},
        )

        assert response.status_code == 302
        assert response.headers["location"] == f"/users/kody/notes/{note.id}"
        async with session_factory() as db:
            saved = await db.get(Note, note.id)
        assert saved.title == "Shopping"
        assert saved.content == "Bread"

    @pytest.mark.asyncio
    async def test_cannot_edit_someone_elses_note(self, test_client, user, login, db_session):
        hannah = await create_user(db_session, username="hannah")
        note = await add_note(db_session, hannah)
        await login(user)

        response = await test_client.post(
            "/users/kody/notes/new",
            data={"id": str(note.id), "title": "Mine now", "content": "Not really"},
        )

        assert response.status_code == 400
        assert response.json()["submission"]["error"] == {"": ["Note not found"]}

    @pytest.mark.asyncio
    async def test_loader_hides_someone_elses_note(self, test_client, user, login, db_session):
        hannah = await create_user(db_session, username="hannah")
        note = await add_note(db_session, hannah)
        await login(user)

        response = await test_client.get(f"/users/hannah/notes/{note.id}/edit")

        assert response.status_code == 404


class TestNoteReads:

    @pytest.mark.asyncio
    async def test_list_notes(self, test_client, user, db_session):
        await add_note(db_session, user, title="First")
        await add_note(db_session, user, title="Second")

        response = await test_client.get("/users/kody/notes")

        assert response.status_code == 200
        assert response.headers["cache-control"] == "private, no-cache"
        body = response.json()
        assert body["owner"]["username"] == "kody"
        assert sorted(note["title"] for note in body["notes"]) == ["First", "Second"]

    @pytest.mark.asyncio
    async def test_unknown_user(self, test_client):
        response = await test_client.get("/users/nobody/notes")

        assert response.status_code == 404
        assert response.json()["error"] == "not_found"

    @pytest.mark.asyncio
    async def test_note_detail(self, test_client, user, login, db_session):
        note = await add_note(db_session, user)

        anonymous = await test_client.get(f"/users/kody/notes/{note.id}")
        await login(user)
        owner = await test_client.get(f"/users/kody/notes/{note.id}")

        assert anonymous.status_code == 200
        assert anonymous.json()["note"]["title"] == "Groceries"
        assert anonymous.json()["is_owner"] is False
        assert owner.json()["is_owner"] is True

    @pytest.mark.asyncio
    async def test_note_under_wrong_user(self, test_client, user, db_session):
        await create_user(db_session, username="hannah")
        note = await add_note(db_session, user)

        response = await test_client.get(f"/users/hannah/notes/{note.id}")

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_missing_note(self, test_client, user):
        response = await test_client.get(f"/users/kody/notes/{uuid4()}")

        assert response.status_code == 404


class TestDeleteNote:

    @pytest.mark.asyncio
    async def test_owner_deletes(self, test_client, user, login, db_session, session_factory):
        note = await add_note(db_session, user)
        await login(user)

        response = await test_client.post(
            f"/users/kody/notes/{note.id}", data={"intent": "delete-note"}
        )

        assert response.status_code == 302
        assert response.headers["location"] == "/users/kody/notes"
        async with session_factory() as db:
            assert await db.get(Note, note.id) is None

    @pytest.mark.asyncio
    async def test_unknown_intent(self, test_client, user, login, db_session):
        note = await add_note(db_session, user)
        await login(user)

        response = await test_client.post(
            f"/users/kody/notes/{note.id}", data={"intent": "archive"}
        )

        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"
