"""
Notebook Backend — Note Service
================================

What:  The shared note editor action (create and update) plus the note
       loaders: owner's note list, note detail, editor data, and delete.
Who:   Note route handlers.

Ownership:
    Notes are addressed as /users/<username>/notes/<note_id>. A note is only
    found when it belongs to the user named in the URL; editing or deleting
    additionally requires that user to be the one making the request.
"""

import logging
import uuid
from typing import Optional

from sqlalchemy import desc, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from notebook.exceptions import DatabaseError, NotFoundError
from notebook.models.note import Note
from notebook.models.user import User
from notebook.schemas.note import (
    NoteDetail,
    NoteDetailResponse,
    NoteEditorData,
    NoteEditorForm,
    NoteEditorLoaderResponse,
    NoteListItem,
    OwnerNotesResponse,
)
from notebook.schemas.submission import FORM_ERROR, ActionResult, parse_submission
from notebook.services.user_service import user_service

logger = logging.getLogger(__name__)


class NoteService:
    """
    Business logic layer for note operations.

    Responsibilities:
        - editor_action(): create or update a note from the editor form
        - list_owner_notes(): a user's notes, most recently edited first
        - get_note_detail() / get_editor_note(): single note loaders
        - delete_note(): owner-only delete
    """

    async def editor_action(
        self,
        db: AsyncSession,
        user_id: uuid.UUID,
        form: dict,
    ) -> ActionResult:
        """
        Handles one note editor submission.

        Workflow:
            1. Validate title/content (and id, when editing)
            2. When an id is given, it must name a note the user owns
            3. Validate-only intents stop here with an idle result
            4. Insert or update, then redirect to the note page

        Returns:
            ActionResult with redirect /users/<owner>/notes/<id> on success.
        """
        submission, data = parse_submission(form, NoteEditorForm)
        # an id that cannot name a note is reported like one that names no note
        if submission.error.pop("id", None):
            submission.add_error(FORM_ERROR, "Note not found")

        note: Optional[Note] = None
        if data is not None and data.id is not None:
            note = await self._get_owned_note(db, data.id, user_id)
            if note is None:
                submission.add_error(FORM_ERROR, "Note not found")

        if not submission.is_submit:
            return ActionResult(status="idle", submission=submission)
        if data is None or submission.value is None:
            return ActionResult(status="error", submission=submission)

        try:
            if note is None:
                note = Note(owner_id=user_id, title=data.title, content=data.content)
                db.add(note)
            else:
                note.title = data.title
                note.content = data.content
            await db.flush()

            result = await db.execute(select(User.username).where(User.id == user_id))
            username = result.scalar_one()
        except SQLAlchemyError as e:
            logger.error("Database error saving note for user %s: %s", user_id, str(e))
            raise DatabaseError(
                message="Could not save your note. Please try again.",
                context={"user_id": str(user_id), "error_type": type(e).__name__},
            )

        logger.info("Note %s saved for user %s", note.id, user_id)
        return ActionResult(
            status="success",
            submission=submission,
            redirect_to=f"/users/{username}/notes/{note.id}",
        )

    async def _get_owned_note(
        self, db: AsyncSession, note_id: uuid.UUID, owner_id: uuid.UUID
    ) -> Optional[Note]:
        try:
            result = await db.execute(
                select(Note).where(Note.id == note_id, Note.owner_id == owner_id)
            )
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error fetching note %s: %s", note_id, str(e))
            raise DatabaseError(context={"note_id": str(note_id)})

    async def _require_note(
        self, db: AsyncSession, username: str, note_id: uuid.UUID
    ):
        user, owner = await user_service.find_owner(db, username)
        note = await self._get_owned_note(db, note_id, user.id)
        if note is None:
            raise NotFoundError(resource="note", resource_id=str(note_id))
        return user, owner, note

    async def list_owner_notes(self, db: AsyncSession, username: str) -> OwnerNotesResponse:
        user, owner = await user_service.find_owner(db, username)
        try:
            result = await db.execute(
                select(Note)
                .where(Note.owner_id == user.id)
                .order_by(desc(Note.updated_at))
            )
            notes = list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Database error listing notes for %s: %s", username, str(e))
            raise DatabaseError(context={"username": username})

        return OwnerNotesResponse(
            owner=owner,
            notes=[NoteListItem(id=note.id, title=note.title) for note in notes],
        )

    async def get_note_detail(
        self,
        db: AsyncSession,
        username: str,
        note_id: uuid.UUID,
        viewer_id: Optional[uuid.UUID] = None,
    ) -> NoteDetailResponse:
        user, owner, note = await self._require_note(db, username, note_id)
        return NoteDetailResponse(
            note=NoteDetail.model_validate(note),
            owner=owner,
            is_owner=viewer_id == user.id,
        )

    async def get_editor_note(
        self,
        db: AsyncSession,
        username: str,
        note_id: uuid.UUID,
        user_id: uuid.UUID,
    ) -> NoteEditorLoaderResponse:
        """Editor loader; someone else's note is reported as not found."""
        user, _, note = await self._require_note(db, username, note_id)
        if user.id != user_id:
            raise NotFoundError(resource="note", resource_id=str(note_id))
        return NoteEditorLoaderResponse(
            note=NoteEditorData(id=note.id, title=note.title, content=note.content)
        )

    async def delete_note(
        self,
        db: AsyncSession,
        username: str,
        note_id: uuid.UUID,
        user_id: uuid.UUID,
    ) -> str:
        """Deletes an owned note and returns where to redirect afterwards."""
        user, _, note = await self._require_note(db, username, note_id)
        if user.id != user_id:
            raise NotFoundError(resource="note", resource_id=str(note_id))
        try:
            await db.delete(note)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error deleting note %s: %s", note_id, str(e))
            raise DatabaseError(context={"note_id": str(note_id)})
        logger.info("Note %s deleted by user %s", note_id, user_id)
        return f"/users/{user.username}/notes"


note_service = NoteService()
