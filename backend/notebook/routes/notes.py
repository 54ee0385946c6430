"""
Notebook Backend — Note Route Handlers
=======================================

What:  The new-note page, the edit-note page (both backed by the shared note
       editor action), a user's note list, and the note detail page.
Who:   The notes section under /users/<username>/notes.

Caching:
    Note pages carry `Cache-Control: private, no-cache`; notes are editable
    and may belong to the viewer, so shared caches must not keep them.
"""

import logging
import uuid
from typing import Dict, Optional

from fastapi import APIRouter, Depends, Response
from fastapi.responses import RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from notebook.database import get_db_session
from notebook.exceptions import ValidationError
from notebook.routes.deps import (
    action_response,
    get_optional_user_id,
    read_form,
    require_user_id,
)
from notebook.schemas.common import ErrorResponse
from notebook.schemas.note import (
    NoteDetailResponse,
    NoteEditorLoaderResponse,
    OwnerNotesResponse,
)
from notebook.schemas.submission import INTENT_FIELD, ActionResponse
from notebook.services.note_service import note_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users/{username}/notes", tags=["Notes"])

EDITOR_RESPONSES = {
    200: {"description": "Validate-only round trip", "model": ActionResponse},
    302: {"description": "Saved; redirects to the note page"},
    400: {"description": "Field errors", "model": ActionResponse},
    500: {"description": "Server error", "model": ErrorResponse},
}


# ── New note ──────────────────────────────────────────────────────────────

@router.get(
    "/new",
    response_model=NoteEditorLoaderResponse,
    response_model_exclude_none=True,
    summary="New note loader",
    description="Requires a logged-in user; the editor starts empty.",
)
async def new_note_loader(
    username: str,
    user_id: uuid.UUID = Depends(require_user_id),
) -> NoteEditorLoaderResponse:
    return NoteEditorLoaderResponse()


@router.post(
    "/new",
    responses=EDITOR_RESPONSES,
    summary="Note editor action (create)",
)
async def new_note_action(
    username: str,
    user_id: uuid.UUID = Depends(require_user_id),
    form: Dict[str, str] = Depends(read_form),
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    result = await note_service.editor_action(db, user_id, form)
    return action_response(result)


# ── Note list and detail ──────────────────────────────────────────────────

@router.get(
    "",
    response_model=OwnerNotesResponse,
    responses={404: {"description": "Unknown user", "model": ErrorResponse}},
    summary="List a user's notes",
    description="Note titles, most recently edited first.",
)
async def notes_loader(
    username: str,
    response: Response,
    db: AsyncSession = Depends(get_db_session),
) -> OwnerNotesResponse:
    result = await note_service.list_owner_notes(db, username)
    response.headers["Cache-Control"] = "private, no-cache"
    return result


@router.get(
    "/{note_id}",
    response_model=NoteDetailResponse,
    responses={404: {"description": "Note not found", "model": ErrorResponse}},
    summary="Note detail",
)
async def note_loader(
    username: str,
    note_id: uuid.UUID,
    response: Response,
    viewer_id: Optional[uuid.UUID] = Depends(get_optional_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> NoteDetailResponse:
    result = await note_service.get_note_detail(db, username, note_id, viewer_id)
    response.headers["Cache-Control"] = "private, no-cache"
    return result


@router.post(
    "/{note_id}",
    responses={
        302: {"description": "Deleted; redirects to the user's notes"},
        400: {"description": "Unknown intent", "model": ErrorResponse},
        404: {"description": "Note not found", "model": ErrorResponse},
    },
    summary="Note detail action",
    description="Supports a single intent, `delete-note`, available to the owner.",
)
async def note_action(
    username: str,
    note_id: uuid.UUID,
    user_id: uuid.UUID = Depends(require_user_id),
    form: Dict[str, str] = Depends(read_form),
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    intent = form.get("intent") or form.get(INTENT_FIELD)
    if intent != "delete-note":
        raise ValidationError(message=f"Invalid intent: {intent}", field="intent")
    redirect_to = await note_service.delete_note(db, username, note_id, user_id)
    return RedirectResponse(redirect_to, status_code=302)


# ── Edit note ─────────────────────────────────────────────────────────────

@router.get(
    "/{note_id}/edit",
    response_model=NoteEditorLoaderResponse,
    responses={404: {"description": "Note not found", "model": ErrorResponse}},
    summary="Edit note loader",
)
async def edit_note_loader(
    username: str,
    note_id: uuid.UUID,
    user_id: uuid.UUID = Depends(require_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> NoteEditorLoaderResponse:
    return await note_service.get_editor_note(db, username, note_id, user_id)


@router.post(
    "/{note_id}/edit",
    responses=EDITOR_RESPONSES,
    summary="Note editor action (update)",
)
async def edit_note_action(
    username: str,
    note_id: uuid.UUID,
    user_id: uuid.UUID = Depends(require_user_id),
    form: Dict[str, str] = Depends(read_form),
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    # the editor form posts the id as a hidden field; the URL is the fallback
    form.setdefault("id", str(note_id))
    result = await note_service.editor_action(db, user_id, form)
    return action_response(result)
